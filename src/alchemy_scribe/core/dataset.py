# ABOUTME: Builders for the primary element table, the used-in reverse index and the final dataset
# ABOUTME: Owned builder structures threaded through the pipeline instead of shared accumulators

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from alchemy_scribe.core.identifiers import normalize_identifier
from alchemy_scribe.core.models import Dataset, Element, ReverseIndex
from alchemy_scribe.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class IdentifierConflict:
    """A later row whose name normalized to an id that was already taken."""

    element_id: str
    kept_name: str
    dropped_name: str
    dropped_tier: int


@dataclass
class ElementTable:
    """Primary element table keyed by canonical id, in discovery order."""

    elements: dict[str, Element] = field(default_factory=dict)
    conflicts: list[IdentifierConflict] = field(default_factory=list)

    def add(self, element: Element) -> bool:
        """Add an element unless its id is taken; the first occurrence wins."""
        existing = self.elements.get(element.id)
        if existing is not None:
            conflict = IdentifierConflict(
                element_id=element.id,
                kept_name=existing.name,
                dropped_name=element.name,
                dropped_tier=element.tier,
            )
            self.conflicts.append(conflict)
            logger.warning(
                "Duplicate element identifier, keeping first occurrence",
                element_id=element.id,
                kept_name=existing.name,
                kept_tier=existing.tier,
                dropped_name=element.name,
                dropped_tier=element.tier,
            )
            return False

        self.elements[element.id] = element
        return True

    def extend(self, elements: Iterable[Element]) -> "ElementTable":
        for element in elements:
            self.add(element)
        return self

    def __len__(self) -> int:
        return len(self.elements)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self.elements

    def values(self) -> list[Element]:
        return list(self.elements.values())


def build_reverse_index(elements: Iterable[Element]) -> ReverseIndex:
    """Map each ingredient id to the sorted ids of the elements that consume it.

    Ingredients that match no known element are kept under their normalized id.
    """
    used_in: defaultdict[str, set[str]] = defaultdict(set)
    for element in elements:
        for recipe in element.recipes:
            for ingredient in recipe.ingredients:
                used_in[normalize_identifier(ingredient)].add(element.id)

    return {ingredient_id: sorted(used_in[ingredient_id]) for ingredient_id in sorted(used_in)}


def sort_elements(elements: Iterable[Element]) -> list[Element]:
    """Order elements by tier, then by name."""
    return sorted(elements, key=lambda element: (element.tier, element.name))


def build_dataset(elements: Iterable[Element], source_url: str) -> Dataset:
    ordered = sort_elements(elements)
    return Dataset(
        source_url=source_url,
        element_count=len(ordered),
        elements=tuple(ordered),
        used_in=build_reverse_index(ordered),
    )


def unresolved_ingredients(dataset: Dataset) -> list[str]:
    """Reverse index keys that do not name any element in the dataset."""
    known = {element.id for element in dataset.elements}
    return [ingredient_id for ingredient_id in dataset.used_in if ingredient_id not in known]
