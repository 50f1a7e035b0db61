# ABOUTME: Tests for the icon downloader's redirect handling, cache and failure isolation
# ABOUTME: Uses pytest-httpx so every hop of a redirect chain is an explicit mocked response

import httpx
import pytest
import pytest_asyncio

from alchemy_scribe.assets.downloader import IconDownloader
from alchemy_scribe.core.models import DownloadStatus, Element

ICON_URL = "https://cdn.example/images/Fire.svg/revision/latest"


def element(element_id: str = "fire", icon_ref: str | None = ICON_URL) -> Element:
    return Element(id=element_id, name=element_id.title(), tier=0, icon_ref=icon_ref)


@pytest_asyncio.fixture
async def client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def downloader(tmp_path, client):
    return IconDownloader(tmp_path / "icons", client=client, request_delay=0)


class TestIconDownloader:
    """Test single icon downloads."""

    @pytest.mark.asyncio
    async def test_downloads_icon(self, downloader, httpx_mock):
        httpx_mock.add_response(url=ICON_URL, content=b"<svg>fire</svg>")

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.DOWNLOADED
        assert outcome.path == downloader.icons_dir / "fire.svg"
        assert outcome.size_bytes == len(b"<svg>fire</svg>")
        assert outcome.path.read_bytes() == b"<svg>fire</svg>"
        assert not (downloader.icons_dir / "fire.svg.part").exists()

    @pytest.mark.asyncio
    async def test_follows_two_redirects(self, downloader, httpx_mock):
        httpx_mock.add_response(
            url=ICON_URL, status_code=302, headers={"Location": "https://mirror.example/a/Fire.svg"}
        )
        httpx_mock.add_response(
            url="https://mirror.example/a/Fire.svg", status_code=301, headers={"Location": "/final/Fire.svg"}
        )
        httpx_mock.add_response(url="https://mirror.example/final/Fire.svg", content=b"\x00\x01svg-bytes")

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.DOWNLOADED
        assert outcome.path.read_bytes() == b"\x00\x01svg-bytes"
        assert len(httpx_mock.get_requests()) == 3

    @pytest.mark.asyncio
    async def test_existing_file_is_not_fetched(self, downloader, httpx_mock):
        downloader.icons_dir.mkdir(parents=True)
        cached = downloader.icons_dir / "fire.svg"
        cached.write_bytes(b"old")

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.SKIPPED
        assert outcome.reason == "cached"
        assert cached.read_bytes() == b"old"
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_missing_icon_reference_is_skipped(self, downloader, httpx_mock):
        outcome = await downloader.download(element(icon_ref=None))

        assert outcome.status is DownloadStatus.SKIPPED
        assert outcome.reason == "no icon reference"
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_redirect_without_location_fails(self, downloader, httpx_mock):
        httpx_mock.add_response(url=ICON_URL, status_code=302)

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.FAILED
        assert "Location" in outcome.reason
        assert not (downloader.icons_dir / "fire.svg").exists()

    @pytest.mark.asyncio
    async def test_redirect_limit(self, tmp_path, client, httpx_mock):
        downloader = IconDownloader(tmp_path / "icons", client=client, max_redirects=1, request_delay=0)
        httpx_mock.add_response(url=ICON_URL, status_code=302, headers={"Location": "https://cdn.example/hop1"})
        httpx_mock.add_response(
            url="https://cdn.example/hop1", status_code=302, headers={"Location": "https://cdn.example/hop2"}
        )

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.FAILED
        assert "Too many redirects" in outcome.reason

    @pytest.mark.asyncio
    async def test_error_status_fails(self, downloader, httpx_mock):
        httpx_mock.add_response(url=ICON_URL, status_code=404, text="not found")

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.FAILED
        assert "HTTP 404" in outcome.reason
        assert not downloader.icons_dir.exists()

    @pytest.mark.asyncio
    async def test_transport_error_fails(self, downloader, httpx_mock):
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url=ICON_URL)

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.FAILED
        assert "ReadTimeout" in outcome.reason

    @pytest.mark.asyncio
    async def test_oversized_icon_fails(self, tmp_path, client, httpx_mock):
        downloader = IconDownloader(tmp_path / "icons", client=client, max_bytes=8, request_delay=0)
        httpx_mock.add_response(url=ICON_URL, content=b"x" * 64)

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.FAILED
        assert not (tmp_path / "icons" / "fire.svg").exists()

    @pytest.mark.asyncio
    async def test_icon_path_uses_extension(self, tmp_path, client):
        downloader = IconDownloader(tmp_path, client=client, extension=".png")
        assert downloader.icon_path("lava") == tmp_path / "lava.png"


class TestDownloadAll:
    """Test batch downloads."""

    @pytest.mark.asyncio
    async def test_failures_do_not_stop_the_batch(self, downloader, httpx_mock):
        httpx_mock.add_response(url="https://cdn.example/air.svg", status_code=500)
        httpx_mock.add_response(url="https://cdn.example/earth.svg", content=b"<svg>earth</svg>")

        elements = [
            element("air", "https://cdn.example/air.svg"),
            element("earth", "https://cdn.example/earth.svg"),
            element("time", None),
        ]
        seen = []

        summary = await downloader.download_all(
            elements, progress_callback=lambda el, outcome, index, total: seen.append((el.id, index, total))
        )

        assert [outcome.status for outcome in summary.outcomes] == [
            DownloadStatus.FAILED,
            DownloadStatus.DOWNLOADED,
            DownloadStatus.SKIPPED,
        ]
        assert summary.downloaded == 1
        assert summary.failed == 1
        assert summary.skipped == 1
        assert seen == [("air", 1, 3), ("earth", 2, 3), ("time", 3, 3)]

    @pytest.mark.asyncio
    async def test_second_run_skips_everything(self, downloader, httpx_mock):
        httpx_mock.add_response(url=ICON_URL, content=b"<svg/>")

        first = await downloader.download_all([element()])
        second = await downloader.download_all([element()])

        assert first.downloaded == 1
        assert second.skipped == 1
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self, tmp_path):
        downloader = IconDownloader(tmp_path)
        await downloader.close()
        assert downloader.http_client.is_closed

    @pytest.mark.asyncio
    async def test_write_failure_does_not_stop_the_batch(self, downloader, httpx_mock):
        httpx_mock.add_response(url="https://cdn.example/brick.svg", content=b"<svg>brick</svg>")
        httpx_mock.add_response(url="https://cdn.example/clay.svg", content=b"<svg>clay</svg>")
        (downloader.icons_dir / "brick.svg.part").mkdir(parents=True)

        summary = await downloader.download_all(
            [element("brick", "https://cdn.example/brick.svg"), element("clay", "https://cdn.example/clay.svg")]
        )

        brick, clay = summary.outcomes
        assert brick.status is DownloadStatus.FAILED
        assert brick.reason.startswith("write failed")
        assert not (downloader.icons_dir / "brick.svg").exists()
        assert clay.status is DownloadStatus.DOWNLOADED
        assert (downloader.icons_dir / "clay.svg").read_bytes() == b"<svg>clay</svg>"

    @pytest.mark.asyncio
    async def test_partial_file_is_removed_when_replace_fails(self, downloader, httpx_mock, monkeypatch):
        httpx_mock.add_response(url=ICON_URL, content=b"<svg>fire</svg>")

        def refuse_replace(src, dst):
            raise PermissionError("read-only target")

        monkeypatch.setattr("alchemy_scribe.assets.downloader.os.replace", refuse_replace)

        outcome = await downloader.download(element())

        assert outcome.status is DownloadStatus.FAILED
        assert "read-only target" in outcome.reason
        assert not (downloader.icons_dir / "fire.svg.part").exists()
        assert not (downloader.icons_dir / "fire.svg").exists()

    @pytest.mark.asyncio
    async def test_pause_only_after_network_requests(self, tmp_path, client, httpx_mock, monkeypatch):
        downloader = IconDownloader(tmp_path / "icons", client=client, request_delay=0.25)
        httpx_mock.add_response(url="https://cdn.example/air.svg", content=b"<svg>air</svg>")
        httpx_mock.add_response(url="https://cdn.example/brick.svg", content=b"<svg>brick</svg>")
        httpx_mock.add_response(url="https://cdn.example/mud.svg", status_code=500)
        (downloader.icons_dir / "brick.svg.part").mkdir(parents=True)
        (downloader.icons_dir / "earth.svg").write_bytes(b"<svg>earth</svg>")

        pauses = []

        async def record_sleep(delay):
            pauses.append(delay)

        monkeypatch.setattr("alchemy_scribe.assets.downloader.asyncio.sleep", record_sleep)

        summary = await downloader.download_all(
            [
                element("air", "https://cdn.example/air.svg"),
                element("brick", "https://cdn.example/brick.svg"),
                element("earth", "https://cdn.example/earth.svg"),
                element("time", None),
                element("mud", "https://cdn.example/mud.svg"),
            ]
        )

        assert [outcome.status for outcome in summary.outcomes] == [
            DownloadStatus.DOWNLOADED,
            DownloadStatus.FAILED,
            DownloadStatus.SKIPPED,
            DownloadStatus.SKIPPED,
            DownloadStatus.FAILED,
        ]
        assert pauses == [0.25, 0.25, 0.25]

    @pytest.mark.asyncio
    async def test_zero_delay_never_pauses(self, downloader, httpx_mock, monkeypatch):
        httpx_mock.add_response(url=ICON_URL, content=b"<svg/>")
        pauses = []

        async def record_sleep(delay):
            pauses.append(delay)

        monkeypatch.setattr("alchemy_scribe.assets.downloader.asyncio.sleep", record_sleep)

        await downloader.download_all([element()])

        assert pauses == []
