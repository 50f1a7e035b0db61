# ABOUTME: httpx-based fetcher returning the raw wiki page as text
# ABOUTME: No parsing and no retries; the pipeline decides whether to try again

import httpx

from alchemy_scribe.extraction.base import FetchError
from alchemy_scribe.utils.logging import get_logger, log_api_call


class DocumentFetcher:
    """Fetches the source document with an injectable httpx client."""

    def __init__(self, client: httpx.AsyncClient | None = None, user_agent: str = "AlchemyScribe/1.0"):
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            headers={"User-Agent": user_agent}, timeout=30.0
        )
        self.logger = get_logger(__name__)

    @log_api_call("wiki")
    async def fetch(self, url: str) -> str:
        """Return the body of ``url`` as text.

        Raises:
            FetchError: On transport failure, or on a non-2xx status with an empty body
        """
        try:
            response = await self.http_client.get(url, follow_redirects=True)
        except httpx.HTTPError as e:
            raise FetchError(f"Could not reach {url}: {e}", url=url, transient=True) from e

        body = response.text
        if response.is_success:
            self.logger.info(
                "Fetched source document",
                url=str(response.url),
                status_code=response.status_code,
                content_length=len(body),
                redirects=len(response.history),
            )
            return body

        if not body.strip():
            raise FetchError(
                f"{url} returned HTTP {response.status_code} with an empty body",
                url=url,
                status_code=response.status_code,
                transient=response.status_code >= 500,
            )

        self.logger.warning(
            "Source document returned an error status, using its body anyway",
            url=url,
            status_code=response.status_code,
            content_length=len(body),
        )
        return body

    async def close(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
