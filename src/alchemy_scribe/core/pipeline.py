# ABOUTME: Dataset ingestion pipeline that coordinates fetch, parse, extract, download and serialize
# ABOUTME: Intermediate structures are owned by a single run and passed between stages explicitly

from dataclasses import dataclass, field
from pathlib import Path

import httpx

from alchemy_scribe.assets.downloader import IconDownloader, ProgressCallback
from alchemy_scribe.config import Config, get_config
from alchemy_scribe.core.dataset import ElementTable, IdentifierConflict, build_dataset, unresolved_ingredients
from alchemy_scribe.core.models import Dataset, DownloadSummary, TierSection
from alchemy_scribe.extraction.base import DocumentSource, EmptyDatasetError
from alchemy_scribe.extraction.elements import extract_section
from alchemy_scribe.extraction.fetcher import DocumentFetcher
from alchemy_scribe.extraction.sections import parse_sections
from alchemy_scribe.persistence import write_dataset
from alchemy_scribe.utils.logging import get_logger, log_pipeline_step
from alchemy_scribe.utils.retry import fetch_with_retry


@dataclass
class PipelineReport:
    """Everything a run produced, for the CLI summary."""

    dataset: Dataset
    output_path: Path
    sections: list[TierSection]
    downloads: DownloadSummary | None = None
    conflicts: list[IdentifierConflict] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)

    @property
    def element_count(self) -> int:
        return self.dataset.element_count

    @property
    def discarded_recipes(self) -> int:
        return sum(section.discarded_recipes for section in self.sections)

    @property
    def sections_without_table(self) -> list[str]:
        return [section.heading for section in self.sections if not section.has_table]


@log_pipeline_step("extract_sections")
def extract_sections(html: str, heading_level: str, table_class: str) -> list[TierSection]:
    return [extract_section(section) for section in parse_sections(html, heading_level, table_class)]


@log_pipeline_step("build_element_table")
def build_element_table(sections: list[TierSection]) -> ElementTable:
    table = ElementTable()
    for section in sections:
        table.extend(section.elements)
    return table


class DatasetPipeline:
    """Runs the full ingestion pipeline once.

    Stages:
    1. Fetch the source document (retried on transient failures)
    2. Parse tier sections and extract element rows in document order
    3. Build the primary element table, rejecting duplicate identifiers
    4. Download icons in document order (optional)
    5. Sort, index and write the dataset artifact
    """

    def __init__(
        self,
        config: Config | None = None,
        client: httpx.AsyncClient | None = None,
        fetcher: DocumentSource | None = None,
        downloader: IconDownloader | None = None,
    ):
        self.config = config or get_config()
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(
            headers={"User-Agent": self.config.user_agent}, timeout=self.config.request_timeout
        )
        self.fetcher = fetcher or DocumentFetcher(client=self.http_client, user_agent=self.config.user_agent)
        self.downloader = downloader or IconDownloader(
            icons_dir=self.config.icons_dir,
            client=self.http_client,
            extension=self.config.icon_extension,
            max_redirects=self.config.max_redirects,
            request_delay=self.config.request_delay,
            max_bytes=self.config.max_icon_bytes,
        )
        self.logger = get_logger(__name__)

    async def run(
        self, download_icons: bool = True, progress_callback: ProgressCallback | None = None
    ) -> PipelineReport:
        """Run every stage and write the artifact.

        Raises:
            FetchError: If the source document cannot be retrieved
            EmptyDatasetError: If the page yields no elements at all
        """
        source_url = self.config.source_url
        self.logger.info("Starting dataset pipeline", source_url=source_url, download_icons=download_icons)

        html = await fetch_with_retry(lambda: self.fetcher.fetch(source_url), max_attempts=self.config.fetch_attempts)

        sections = extract_sections(html, self.config.heading_level, self.config.table_class)
        table = build_element_table(sections)

        if len(table) == 0:
            self.logger.error("No elements found, the page structure may have changed", source_url=source_url)
            raise EmptyDatasetError(f"No elements found at {source_url}; the page structure may have changed")

        self.logger.info("Elements extracted", element_count=len(table), conflicts=len(table.conflicts))

        downloads = None
        if download_icons:
            downloads = await self.downloader.download_all(table.values(), progress_callback=progress_callback)
        else:
            self.logger.info("Skipping icon downloads")

        dataset = build_dataset(table.values(), source_url=source_url)
        output_path = write_dataset(dataset, self.config.output_path)

        report = PipelineReport(
            dataset=dataset,
            output_path=output_path,
            sections=sections,
            downloads=downloads,
            conflicts=table.conflicts,
            unresolved=unresolved_ingredients(dataset),
        )

        self.logger.info(
            "Pipeline complete",
            element_count=report.element_count,
            unresolved_ingredients=len(report.unresolved),
            discarded_recipes=report.discarded_recipes,
            output_path=str(output_path),
        )
        return report

    async def close(self) -> None:
        """Release the shared HTTP client if this pipeline created it."""
        if self._owns_client:
            await self.http_client.aclose()
