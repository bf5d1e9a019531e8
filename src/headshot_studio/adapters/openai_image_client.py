"""OpenAI Images API client for headshot generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from headshot_studio.services.downloads import ImageFetcher
from headshot_studio.services.generation import ImageGenerationClient

_EXTENSIONS = {"image/png": "png", "image/webp": "webp", "image/jpeg": "jpg"}


@dataclass
class OpenAIImageClient(ImageGenerationClient):
    """Image generation client backed by the OpenAI image edit endpoint."""

    client: AsyncOpenAI
    fetcher: ImageFetcher
    model: str = "gpt-image-1"

    @classmethod
    def create(
        cls, api_key: str, fetcher: ImageFetcher, model: str
    ) -> "OpenAIImageClient":
        """Create an OpenAI image client."""
        return cls(client=AsyncOpenAI(api_key=api_key), fetcher=fetcher, model=model)

    async def modify_image(
        self, *, images: list[str], prompt: str, quality: str, n: int
    ) -> dict[str, object]:
        """Edit the reference images into headshots.

        Reference URLs are downloaded first because the endpoint takes file
        uploads. Results come back as ``{"data": [{"url": ...}]}``; base64
        results are returned as data URLs.
        """
        files = []
        for index, url in enumerate(images, start=1):
            content, content_type = await self.fetcher.fetch(url)
            extension = _EXTENSIONS.get(content_type, "jpg")
            files.append((f"reference-{index}.{extension}", content, content_type))

        response = await self.client.images.edit(
            model=self.model,
            image=files,
            prompt=prompt,
            quality=quality,
            n=n,
        )
        return {"data": [{"url": _item_url(item)} for item in response.data or []]}


def _item_url(item: object) -> str | None:
    url = getattr(item, "url", None)
    if url:
        return url
    b64 = getattr(item, "b64_json", None)
    if b64:
        return f"data:image/png;base64,{b64}"
    return None
