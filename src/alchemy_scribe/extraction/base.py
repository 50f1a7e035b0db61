# ABOUTME: Error hierarchy and source protocol for the dataset ingestion pipeline
# ABOUTME: Fatal conditions raise ScrapeError subclasses; everything else is absorbed and logged

from typing import Protocol


class ScrapeError(Exception):
    """Base class for conditions that abort a pipeline run."""

    pass


class FetchError(ScrapeError):
    """Raised when the source document cannot be retrieved."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None, transient: bool = False):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.transient = transient


class EmptyDatasetError(ScrapeError):
    """Raised when parsing yields no elements, meaning the page structure changed."""

    pass


class DocumentSource(Protocol):
    """Anything that can hand the pipeline the raw wiki page."""

    async def fetch(self, url: str) -> str:
        """Return the full response body for the given URL.

        Raises:
            FetchError: If the document cannot be retrieved
        """
        ...
