"""Generation orchestration: upload, generate, validate, persist."""

import asyncio
import base64
import binascii
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from headshot_studio.domain.errors import (
    EmptyResultError,
    PersistenceError,
    RemoteGenerationError,
)
from headshot_studio.domain.headshots import (
    GenerationOutcome,
    GenerationRequest,
    GenerationResult,
    NewHeadshotGeneration,
    ReferenceImage,
    WizardSelection,
)
from headshot_studio.services.normalization import encode_url_list
from headshot_studio.services.uploads import ProgressTracker, ReferenceUploader

_logger = logging.getLogger(__name__)

GENERATED_PROGRESS = 80.0
COMPLETE_PROGRESS = 100.0


class ImageGenerationClient(Protocol):
    """Interface for the remote image generation capability."""

    async def modify_image(
        self, *, images: list[str], prompt: str, quality: str, n: int
    ) -> object:
        """Generate images from references; returns the raw provider payload."""


class GenerationRepository(Protocol):
    """Persistence interface for generation records."""

    def create_generation(self, record: NewHeadshotGeneration) -> dict[str, object]:
        """Create a record and return the stored row."""

    def list_generations(self, user_id: str) -> list[dict[str, object]]:
        """Return raw rows for a user, newest first."""


@dataclass(frozen=True)
class GenerationTimeouts:
    """Per-step timeouts in seconds; ``None`` waits indefinitely."""

    generation: float | None = None
    persist: float | None = None


@dataclass
class GenerationService:
    """Runs one generation attempt end to end."""

    uploader: ReferenceUploader
    client: ImageGenerationClient
    repository: GenerationRepository
    quality: str = "high"
    count: int = 4
    timeouts: GenerationTimeouts = field(default_factory=GenerationTimeouts)

    async def generate(
        self,
        images: Sequence[ReferenceImage],
        selection: WizardSelection,
        user_id: str,
        progress: ProgressTracker,
    ) -> GenerationOutcome:
        """Upload references, generate headshots and persist the record."""
        reference_urls = await self.uploader.upload_all(images, user_id, progress)
        request = self.build_request(reference_urls, selection)
        payload = await self._call_generation(request)
        progress.set(GENERATED_PROGRESS)
        result = GenerationResult(generated_urls=extract_image_urls(payload))
        if not result.generated_urls:
            raise EmptyResultError("No images were generated")
        generated_urls = await self._publish_inline_images(
            result.generated_urls, user_id
        )
        record = NewHeadshotGeneration(
            user_id=user_id,
            style=str(selection.style),
            background=str(selection.background),
            reference_images=encode_url_list(reference_urls),
            generated_images=encode_url_list(generated_urls),
            created_at=datetime.now(tz=UTC),
        )
        row = await self._persist(record)
        progress.set(COMPLETE_PROGRESS)
        generation_id = str(row.get("id", ""))
        _logger.info(
            "Generation saved: id=%s user_id=%s images=%s",
            generation_id,
            user_id,
            len(generated_urls),
        )
        return GenerationOutcome(
            generation_id=generation_id, generated_urls=generated_urls
        )

    def build_request(
        self, reference_urls: list[str], selection: WizardSelection
    ) -> GenerationRequest:
        """Build the generation request for the selection."""
        return GenerationRequest(
            reference_urls=list(reference_urls),
            prompt=build_prompt(selection),
            quality=self.quality,
            count=self.count,
        )

    async def _call_generation(self, request: GenerationRequest) -> object:
        try:
            return await asyncio.wait_for(
                self.client.modify_image(
                    images=request.reference_urls,
                    prompt=request.prompt,
                    quality=request.quality,
                    n=request.count,
                ),
                timeout=self.timeouts.generation,
            )
        except TimeoutError as exc:
            raise RemoteGenerationError("Image generation timed out") from exc
        except Exception as exc:
            raise RemoteGenerationError("Image generation failed") from exc

    async def _publish_inline_images(self, urls: list[str], user_id: str) -> list[str]:
        published: list[str] = []
        for index, url in enumerate(urls, start=1):
            if not url.startswith("data:"):
                published.append(url)
                continue
            content, content_type = _decode_data_url(url)
            extension = content_type.rsplit("/", 1)[-1]
            key = self.uploader.build_key(
                f"{user_id}/generated", f"headshot-{index}.{extension}"
            )
            try:
                stored = await self.uploader.store(content, key, content_type)
            except Exception as exc:
                raise PersistenceError("Storing a generated image failed") from exc
            published.append(stored)
        return published

    async def _persist(self, record: NewHeadshotGeneration) -> dict[str, object]:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.repository.create_generation, record),
                timeout=self.timeouts.persist,
            )
        except TimeoutError as exc:
            raise PersistenceError("Saving the generation timed out") from exc
        except Exception as exc:
            raise PersistenceError("Saving the generation failed") from exc


def build_prompt(selection: WizardSelection) -> str:
    """Return the generation prompt for a style and background."""
    return (
        f"Generate a professional {selection.style} headshot with "
        f"{selection.background} background. High quality, studio lighting, "
        "professional appearance."
    )


def extract_image_urls(payload: object) -> list[str]:
    """Pull image URLs out of a provider payload of uncertain shape."""
    if isinstance(payload, Mapping):
        data = payload.get("data")
    elif isinstance(payload, list | tuple):
        data = payload
    else:
        data = getattr(payload, "data", None)
    if not isinstance(data, list | tuple):
        return []
    urls: list[str] = []
    for item in data:
        if isinstance(item, Mapping):
            url = item.get("url")
        else:
            url = getattr(item, "url", None)
        if url and isinstance(url, str):
            urls.append(url)
    return urls


def _decode_data_url(url: str) -> tuple[bytes, str]:
    header, _, encoded = url.partition(",")
    content_type = header.removeprefix("data:").split(";", 1)[0] or "image/png"
    try:
        return base64.b64decode(encoded, validate=True), content_type
    except binascii.Error as exc:
        raise RemoteGenerationError("Generated image payload is malformed") from exc
