"""Tests for image downloads."""

import asyncio

import pytest

from headshot_studio.domain.errors import DownloadError
from headshot_studio.services.downloads import (
    DownloadService,
    gallery_filename,
    result_filename,
)
from tests.conftest import FakeImageFetcher


def test_download_returns_named_attachment() -> None:
    fetcher = FakeImageFetcher()
    service = DownloadService(fetcher)

    download = asyncio.run(service.download("https://x/1.png", result_filename(0)))

    assert download.filename == "headshot-1.jpg"
    assert download.content == fetcher.content
    assert download.content_type == "image/jpeg"
    assert fetcher.fetched == ["https://x/1.png"]


def test_gallery_filename_includes_generation_id() -> None:
    assert gallery_filename("gen-7", 2) == "headshot-gen-7-3.jpg"


def test_fetch_failure_is_a_download_error() -> None:
    class BrokenFetcher(FakeImageFetcher):
        async def fetch(self, url: str) -> tuple[bytes, str]:
            raise ConnectionError("gone")

    with pytest.raises(DownloadError):
        asyncio.run(DownloadService(BrokenFetcher()).download("https://x", "a.jpg"))
