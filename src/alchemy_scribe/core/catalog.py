# ABOUTME: Read-only lookup API over a produced dataset, as consumed by the browsing UI
# ABOUTME: By-id lookup, list-all, used-in reverse lookups and tier grouping

from pathlib import Path

from alchemy_scribe.core.identifiers import normalize_identifier
from alchemy_scribe.core.models import Dataset, Element
from alchemy_scribe.persistence import load_dataset

TIER_NAMES = {0: "Starting Elements", -1: "Special Element"}


def tier_name(tier: int) -> str:
    return TIER_NAMES.get(tier, f"Tier {tier}")


def _display_order(tier: int) -> tuple[int, int]:
    # Starting elements first, the special element right after, then tiers 1..N
    if tier == -1:
        return (0, 1)
    if tier == 0:
        return (0, 0)
    return (1, tier)


class ElementCatalog:
    """Lookups over an immutable dataset."""

    def __init__(self, dataset: Dataset):
        self.dataset = dataset
        self._by_id = {element.id: element for element in dataset.elements}

    @classmethod
    def from_file(cls, path: Path) -> "ElementCatalog":
        return cls(load_dataset(path))

    def get_all(self) -> list[Element]:
        """Every element, in the persisted tier-then-name order."""
        return list(self.dataset.elements)

    def get_by_id(self, element_id: str) -> Element | None:
        return self._by_id.get(element_id)

    def find(self, name: str) -> Element | None:
        """Look an element up by display name or id."""
        return self._by_id.get(normalize_identifier(name))

    def used_in(self, element_id: str) -> list[str]:
        """Ids of elements whose recipes consume ``element_id``.

        Best effort: ids may refer to elements that are not in the dataset.
        """
        return list(self.dataset.used_in.get(element_id, []))

    def by_tier(self) -> dict[int, list[Element]]:
        grouped: dict[int, list[Element]] = {}
        for element in self.dataset.elements:
            grouped.setdefault(element.tier, []).append(element)
        return {tier: grouped[tier] for tier in sorted(grouped, key=_display_order)}

    def icon_path(self, element_id: str, icons_dir: Path, extension: str = "svg") -> Path | None:
        """Cached icon file for an element, if one has been downloaded."""
        path = Path(icons_dir) / f"{element_id}.{extension.lstrip('.')}"
        return path if path.exists() else None

    def __len__(self) -> int:
        return len(self.dataset.elements)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._by_id
