# ABOUTME: Pydantic models for elements, recipes, the dataset artifact and download outcomes
# ABOUTME: Frozen models serialize with camelCase keys for the UI consumer

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

# Ingredient id -> sorted ids of the elements whose recipes consume it
ReverseIndex = dict[str, list[str]]


class _DatasetModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Recipe(_DatasetModel):
    """Two ingredient names as authored on the wiki, not yet resolved to ids."""

    ingredients: tuple[str, str] = Field(..., description="Ingredient names; order carries no meaning")


class Element(_DatasetModel):
    """A single craftable (or starting) element."""

    id: str = Field(..., description="Canonical identifier derived from the name")
    name: str = Field(..., description="Display name as written on the wiki")
    tier: int = Field(..., ge=-1, description="-1 special, 0 starting, 1..N unlock tiers")
    recipes: tuple[Recipe, ...] = Field(default=(), description="Recipes producing this element")
    icon_ref: str | None = Field(default=None, description="Canonical URL of the element's icon")

    @property
    def is_base(self) -> bool:
        """Starting and special elements never have recipes."""
        return self.tier <= 0


class Dataset(_DatasetModel):
    """The complete artifact handed to the UI layer.

    The reverse index is a read-only view with tuple values, so a built
    dataset cannot be changed through it.
    """

    source_url: str
    element_count: int
    elements: tuple[Element, ...]
    used_in: Mapping[str, tuple[str, ...]] = Field(default_factory=dict, validate_default=True)

    @field_validator("used_in", mode="after")
    @classmethod
    def _freeze_used_in(cls, value: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType(dict(value))

    @field_serializer("used_in")
    def _dump_used_in(self, value: Mapping[str, tuple[str, ...]]) -> dict[str, list[str]]:
        return {ingredient_id: list(consumers) for ingredient_id, consumers in value.items()}


class TierSection(BaseModel):
    """A tier heading and the element rows found under it."""

    heading: str
    tier: int
    elements: list[Element] = Field(default_factory=list)
    has_table: bool = True
    discarded_recipes: int = 0


class DownloadStatus(Enum):
    """Outcome of a single icon download."""

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    FAILED = "failed"


class AssetOutcome(BaseModel):
    """Result of fetching one element's icon."""

    element_id: str
    status: DownloadStatus
    path: Path | None = None
    reason: str | None = None
    size_bytes: int | None = None


class DownloadSummary(BaseModel):
    """Aggregate result of the icon download stage."""

    outcomes: list[AssetOutcome] = Field(default_factory=list)

    def _count(self, status: DownloadStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def downloaded(self) -> int:
        return self._count(DownloadStatus.DOWNLOADED)

    @property
    def skipped(self) -> int:
        return self._count(DownloadStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(DownloadStatus.FAILED)

    @property
    def failures(self) -> list[AssetOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is DownloadStatus.FAILED]
