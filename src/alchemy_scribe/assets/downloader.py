# ABOUTME: Icon asset downloader with bounded redirect following and a resumable on-disk cache
# ABOUTME: Each element yields an AssetOutcome; failures are recorded and never abort the run

import asyncio
import os
from collections.abc import Callable, Iterable
from pathlib import Path

import httpx

from alchemy_scribe.core.models import AssetOutcome, DownloadStatus, DownloadSummary, Element
from alchemy_scribe.utils.logging import get_logger

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

ProgressCallback = Callable[[Element, AssetOutcome, int, int], None]


class IconDownloadError(Exception):
    """Raised internally when a single icon cannot be fetched."""

    pass


class IconDownloader:
    """Fetches one icon per element into ``icons_dir/<id>.<extension>``.

    A file already present at the target path is never fetched again, so an
    interrupted run can simply be restarted.
    """

    def __init__(
        self,
        icons_dir: Path,
        client: httpx.AsyncClient | None = None,
        extension: str = "svg",
        max_redirects: int = 5,
        request_delay: float = 0.1,
        max_bytes: int = 5 * 1024 * 1024,
        user_agent: str = "AlchemyScribe/1.0",
    ):
        """Initialize the downloader.

        Args:
            icons_dir: Directory holding the icon cache
            client: HTTP client to use (optional, one is created if missing)
            extension: File extension for persisted icons
            max_redirects: Redirect hops followed before giving up on an icon
            request_delay: Fixed pause in seconds after each icon that hit the network
            max_bytes: Largest accepted icon size
            user_agent: User-Agent header for a self-created client
        """
        self.icons_dir = Path(icons_dir)
        self.extension = extension.lstrip(".")
        self.max_redirects = max_redirects
        self.request_delay = request_delay
        self.max_bytes = max_bytes
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(headers={"User-Agent": user_agent}, timeout=30.0)
        self.logger = get_logger(__name__)

    def icon_path(self, element_id: str) -> Path:
        return self.icons_dir / f"{element_id}.{self.extension}"

    async def download(self, element: Element) -> AssetOutcome:
        """Fetch and persist a single element's icon."""
        if not element.icon_ref:
            return AssetOutcome(element_id=element.id, status=DownloadStatus.SKIPPED, reason="no icon reference")

        path = self.icon_path(element.id)
        if path.exists():
            return AssetOutcome(element_id=element.id, status=DownloadStatus.SKIPPED, path=path, reason="cached")

        try:
            data = await self._fetch_bytes(element.icon_ref)
        except IconDownloadError as e:
            return self._failed(element, str(e))
        except httpx.HTTPError as e:
            return self._failed(element, f"{type(e).__name__}: {e}")

        try:
            self._write_atomic(path, data)
        except OSError as e:
            return self._failed(element, f"write failed: {e}")

        self.logger.debug("Saved icon", element_id=element.id, path=str(path), size_bytes=len(data))
        return AssetOutcome(element_id=element.id, status=DownloadStatus.DOWNLOADED, path=path, size_bytes=len(data))

    async def download_all(
        self, elements: Iterable[Element], progress_callback: ProgressCallback | None = None
    ) -> DownloadSummary:
        """Download icons sequentially in the given order.

        Args:
            elements: Elements in discovery order
            progress_callback: Called with (element, outcome, index, total) after each element

        Returns:
            Summary holding one outcome per element
        """
        elements = list(elements)
        total = len(elements)
        summary = DownloadSummary()

        self.logger.info("Starting icon downloads", element_count=total, icons_dir=str(self.icons_dir))

        for index, element in enumerate(elements, start=1):
            outcome = await self.download(element)
            summary.outcomes.append(outcome)

            if progress_callback:
                progress_callback(element, outcome, index, total)

            hit_network = outcome.status is DownloadStatus.DOWNLOADED or (
                outcome.status is DownloadStatus.FAILED and element.icon_ref is not None
            )
            if hit_network and self.request_delay > 0:
                await asyncio.sleep(self.request_delay)

        self.logger.info(
            "Icon downloads completed",
            downloaded=summary.downloaded,
            failed=summary.failed,
            skipped=summary.skipped,
        )
        return summary

    async def _fetch_bytes(self, url: str) -> bytes:
        """Follow at most ``max_redirects`` hops and return the final body."""
        current = httpx.URL(url)

        for _ in range(self.max_redirects + 1):
            async with self.http_client.stream("GET", current, follow_redirects=False) as response:
                if response.status_code in REDIRECT_STATUSES:
                    location = response.headers.get("Location")
                    if not location:
                        raise IconDownloadError(f"HTTP {response.status_code} redirect without a Location header")
                    current = current.join(location)
                    self.logger.debug(
                        "Following icon redirect", status_code=response.status_code, location=str(current)
                    )
                    continue

                if not response.is_success:
                    raise IconDownloadError(f"HTTP {response.status_code} from {current}")

                return await self._read_limited(response)

        raise IconDownloadError(f"Too many redirects (limit {self.max_redirects})")

    async def _read_limited(self, response: httpx.Response) -> bytes:
        content_length = response.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_bytes:
            raise IconDownloadError(f"Icon too large: {content_length} bytes > {self.max_bytes}")

        data = bytearray()
        async for chunk in response.aiter_bytes():
            data.extend(chunk)
            if len(data) > self.max_bytes:
                raise IconDownloadError(f"Icon exceeded {self.max_bytes} bytes during download")
        return bytes(data)

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".part")
        try:
            tmp.write_bytes(data)
            os.replace(tmp, path)
        except OSError:
            if tmp.is_file():
                tmp.unlink()
            raise

    def _failed(self, element: Element, reason: str) -> AssetOutcome:
        self.logger.warning("Icon download failed", element_id=element.id, icon_ref=element.icon_ref, reason=reason)
        return AssetOutcome(element_id=element.id, status=DownloadStatus.FAILED, reason=reason)

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
