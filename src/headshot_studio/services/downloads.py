"""Image downloads for wizard results and the gallery."""

from dataclasses import dataclass
from typing import Protocol

from headshot_studio.domain.errors import DownloadError


class ImageFetcher(Protocol):
    """Interface for fetching image bytes by URL."""

    async def fetch(self, url: str) -> tuple[bytes, str]:
        """Return the image bytes and content type."""


@dataclass(frozen=True)
class ImageDownload:
    """Image bytes ready to be served as an attachment."""

    filename: str
    content: bytes
    content_type: str


@dataclass
class DownloadService:
    """Fetches images and names them for download."""

    fetcher: ImageFetcher

    async def download(self, url: str, filename: str) -> ImageDownload:
        """Fetch an image for download under filename."""
        try:
            content, content_type = await self.fetcher.fetch(url)
        except Exception as exc:
            raise DownloadError(f"Could not fetch {url}") from exc
        return ImageDownload(
            filename=filename, content=content, content_type=content_type
        )


def result_filename(index: int) -> str:
    """Filename for the index-th (0-based) wizard result."""
    return f"headshot-{index + 1}.jpg"


def gallery_filename(generation_id: str, index: int) -> str:
    """Filename for the index-th (0-based) image of a stored generation."""
    return f"headshot-{generation_id}-{index + 1}.jpg"
