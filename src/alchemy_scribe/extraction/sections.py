# ABOUTME: Tier section parsing: classifies headings and pairs each one with the table that follows it
# ABOUTME: Two passes over the parsed page: collect ordered markers, then associate tables to headings

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Comment, Tag

from alchemy_scribe.utils.logging import get_logger

logger = get_logger(__name__)

STARTING_TIER = 0
SPECIAL_TIER = -1

_TIER_PATTERN = re.compile(r"tier\s*(\d+)", re.IGNORECASE)


def classify_tier(heading_text: str) -> int:
    """Map heading text to a tier number.

    Rules in precedence order: "starting" -> 0, "special" -> -1,
    "tier <n>" -> n. Anything else falls back to the starting tier.
    """
    lowered = heading_text.lower()
    if "starting" in lowered:
        return STARTING_TIER
    if "special" in lowered:
        return SPECIAL_TIER
    match = _TIER_PATTERN.search(lowered)
    if match:
        return int(match.group(1))

    logger.debug("Heading matched no tier rule, using starting tier", heading=heading_text)
    return STARTING_TIER


@dataclass
class HeadingMarker:
    text: str
    tier: int


@dataclass
class TableMarker:
    table: Tag


@dataclass
class SectionTable:
    """A classified heading and the table associated with it, if any."""

    heading: str
    tier: int
    table: Tag | None


Marker = HeadingMarker | TableMarker | None


def heading_text(heading: Tag) -> str:
    """Visible heading text, ignoring the wiki's "[edit]" links."""
    headline = heading.find(class_="mw-headline")
    if isinstance(headline, Tag):
        return headline.get_text(" ", strip=True)

    parts = [
        text.strip()
        for text in heading.find_all(string=True)
        if text.strip() and not isinstance(text, Comment) and text.find_parent(class_="mw-editsection") is None
    ]
    return " ".join(parts)


def _is_element_table(tag: Tag, table_class: str) -> bool:
    return tag.name == "table" and table_class in (tag.get("class") or [])


def collect_markers(soup: BeautifulSoup, heading_level: str = "h3", table_class: str = "list-table") -> list[Marker]:
    """First pass: headings and element tables as a flat list in document order.

    Headings with empty text become ``None`` markers so they still close the
    previous section without opening a new one.
    """
    markers: list[Marker] = []
    for tag in soup.find_all([heading_level, "table"]):
        if tag.name == heading_level:
            text = heading_text(tag)
            markers.append(HeadingMarker(text=text, tier=classify_tier(text)) if text else None)
        elif _is_element_table(tag, table_class):
            markers.append(TableMarker(table=tag))
    return markers


def associate_sections(markers: list[Marker]) -> list[SectionTable]:
    """Second pass: give each table to the nearest preceding unconsumed heading."""
    sections: list[SectionTable] = []
    open_section: SectionTable | None = None

    for marker in markers:
        if marker is None:
            open_section = None
        elif isinstance(marker, HeadingMarker):
            open_section = SectionTable(heading=marker.text, tier=marker.tier, table=None)
            sections.append(open_section)
        elif open_section is not None and open_section.table is None:
            open_section.table = marker.table
        else:
            logger.debug("Ignoring element table without an open heading")

    return sections


def parse_sections(html: str, heading_level: str = "h3", table_class: str = "list-table") -> list[SectionTable]:
    """Parse the page and return its tier sections in document order."""
    soup = BeautifulSoup(html, "html.parser")
    sections = associate_sections(collect_markers(soup, heading_level, table_class))

    for section in sections:
        if section.table is None:
            logger.warning("No element table found for section", heading=section.heading, tier=section.tier)
        else:
            logger.info("Found tier section", heading=section.heading, tier=section.tier)

    return sections
