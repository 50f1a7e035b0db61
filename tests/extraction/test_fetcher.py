# ABOUTME: Tests for the source document fetcher using pytest-httpx
# ABOUTME: Validates redirects, error-status bodies and how failures map to FetchError

import httpx
import pytest
import pytest_asyncio

from alchemy_scribe.extraction.base import FetchError, ScrapeError
from alchemy_scribe.extraction.fetcher import DocumentFetcher

URL = "https://wiki.example/wiki/Elements"


@pytest_asyncio.fixture
async def fetcher():
    async with httpx.AsyncClient() as client:
        yield DocumentFetcher(client=client)


class TestDocumentFetcher:
    """Test fetching the raw wiki page."""

    @pytest.mark.asyncio
    async def test_returns_body(self, fetcher, httpx_mock):
        httpx_mock.add_response(url=URL, text="<html>elements</html>")
        assert await fetcher.fetch(URL) == "<html>elements</html>"

    @pytest.mark.asyncio
    async def test_follows_redirects(self, fetcher, httpx_mock):
        moved = "https://wiki.example/wiki/Elements_(Little_Alchemy_2)"
        httpx_mock.add_response(url=URL, status_code=301, headers={"Location": moved})
        httpx_mock.add_response(url=moved, text="<html>moved</html>")

        assert await fetcher.fetch(URL) == "<html>moved</html>"

    @pytest.mark.asyncio
    async def test_error_status_with_body_is_used(self, fetcher, httpx_mock):
        httpx_mock.add_response(url=URL, status_code=404, text="<html>soft 404</html>")
        assert await fetcher.fetch(URL) == "<html>soft 404</html>"

    @pytest.mark.asyncio
    async def test_client_error_with_empty_body(self, fetcher, httpx_mock):
        httpx_mock.add_response(url=URL, status_code=404, text="")

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(URL)

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == URL
        assert exc_info.value.transient is False

    @pytest.mark.asyncio
    async def test_server_error_with_empty_body_is_transient(self, fetcher, httpx_mock):
        httpx_mock.add_response(url=URL, status_code=503, text="  ")

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(URL)

        assert exc_info.value.transient is True

    @pytest.mark.asyncio
    async def test_transport_error(self, fetcher, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectError("connection refused"), url=URL)

        with pytest.raises(FetchError, match="Could not reach") as exc_info:
            await fetcher.fetch(URL)

        assert exc_info.value.transient is True
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_fetch_error_is_a_scrape_error(self):
        assert issubclass(FetchError, ScrapeError)

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        fetcher = DocumentFetcher(user_agent="test-agent")
        assert fetcher.http_client.headers["User-Agent"] == "test-agent"

        await fetcher.close()
        assert fetcher.http_client.is_closed
