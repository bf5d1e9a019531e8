"""HTTP image fetcher."""

from dataclasses import dataclass

import httpx

from headshot_studio.services.downloads import ImageFetcher


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image fetcher using httpx."""

    http_client: httpx.AsyncClient
    timeout_seconds: float = 20

    @classmethod
    def create(cls, timeout_seconds: float = 20) -> "HttpxImageFetcher":
        """Create a fetcher with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout_seconds=timeout_seconds,
        )

    async def fetch(self, url: str) -> tuple[bytes, str]:
        """Download an image and return its bytes and content type."""
        response = await self.http_client.get(url, timeout=self.timeout_seconds)
        response.raise_for_status()
        content_type = response.headers.get("content-type", "image/jpeg")
        return response.content, content_type.split(";", 1)[0].strip()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
