# ABOUTME: Element and recipe extraction from the rows of a tier section's table
# ABOUTME: Reads names, icon references and two-ingredient recipes out of hand-authored wiki markup

import re

from bs4 import Tag

from alchemy_scribe.core.identifiers import normalize_identifier
from alchemy_scribe.core.models import Element, Recipe, TierSection
from alchemy_scribe.extraction.sections import SectionTable
from alchemy_scribe.utils.logging import get_logger

logger = get_logger(__name__)

START_MARKER = "available from the start"

_SCALE_SEGMENT = re.compile(r"/scale-to-width-down/\d+")
_REVISION_SEGMENT = "/revision/"


def canonical_icon_url(raw: str | None) -> str | None:
    """Rewrite a thumbnail URL to the un-scaled original asset.

    ``//static.../Fire.svg/revision/latest/scale-to-width-down/40?cb=1`` becomes
    ``https://static.../Fire.svg/revision/latest``. Inline ``data:`` placeholders
    yield ``None``.
    """
    if not raw or raw.startswith("data:"):
        return None

    url = f"https:{raw}" if raw.startswith("//") else raw
    if _REVISION_SEGMENT in url:
        return url.split(_REVISION_SEGMENT)[0] + _REVISION_SEGMENT + "latest"
    return _SCALE_SEGMENT.sub("", url)


def _anchor_name(anchor: Tag) -> str:
    return (anchor.get("title") or "").strip() or anchor.get_text(strip=True)


def extract_name(cell: Tag) -> str | None:
    """Element name from the first cell; the link title beats stylized link text."""
    anchor = cell.find("a", title=True) or cell.find("a")
    if not isinstance(anchor, Tag):
        return None
    return _anchor_name(anchor) or None


def extract_icon_ref(cell: Tag) -> str | None:
    image = cell.find("img")
    if not isinstance(image, Tag):
        return None
    # Lazy-loaded rows carry a placeholder in src and the real URL in data-src
    return canonical_icon_url(image.get("data-src") or image.get("src"))


def extract_recipes(cell: Tag) -> list[Recipe]:
    """Recipes from the second cell, one per list item with two named ingredients."""
    if START_MARKER in cell.get_text(" ", strip=True).lower():
        return []

    recipes = []
    for item in cell.find_all("li"):
        names = [name for name in (_anchor_name(anchor) for anchor in item.find_all("a", title=True)) if name]
        if len(names) < 2:
            continue
        recipes.append(Recipe(ingredients=(names[0], names[1])))
    return recipes


def extract_element(row: Tag, tier: int) -> tuple[Element | None, int]:
    """Build an element from one table row.

    Returns the element (``None`` for header or otherwise unusable rows) and the
    number of recipes dropped because the tier cannot have any.
    """
    cells = row.find_all("td", recursive=False)
    if len(cells) < 2:
        return None, 0

    name = extract_name(cells[0])
    if not name:
        return None, 0

    element_id = normalize_identifier(name)
    if not element_id:
        logger.warning("Skipping element whose name has no identifier characters", name=name, tier=tier)
        return None, 0

    element = Element(
        id=element_id,
        name=name,
        tier=tier,
        recipes=tuple(extract_recipes(cells[1])),
        icon_ref=extract_icon_ref(cells[0]),
    )

    discarded = 0
    if element.is_base and element.recipes:
        discarded = len(element.recipes)
        logger.warning("Dropping recipes listed for a base tier element", name=name, tier=tier, recipes=discarded)
        element = element.model_copy(update={"recipes": ()})
    return element, discarded


def extract_section(section: SectionTable) -> TierSection:
    """Extract every element row of a section's table, in document order."""
    result = TierSection(heading=section.heading, tier=section.tier, has_table=section.table is not None)
    if section.table is None:
        return result

    for row in section.table.find_all("tr"):
        element, discarded = extract_element(row, section.tier)
        result.discarded_recipes += discarded
        if element is not None:
            result.elements.append(element)

    logger.info(
        "Extracted tier section",
        heading=section.heading,
        tier=section.tier,
        element_count=len(result.elements),
        recipe_count=sum(len(element.recipes) for element in result.elements),
    )
    return result
