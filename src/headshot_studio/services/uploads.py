"""Sequential upload of reference images to object storage."""

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Protocol

from headshot_studio.domain.errors import UploadError
from headshot_studio.domain.headshots import ReferenceImage

_logger = logging.getLogger(__name__)

UPLOAD_PROGRESS_SHARE = 30.0


class StorageClient(Protocol):
    """Interface for durable object storage."""

    async def upload(
        self, content: bytes, key: str, *, content_type: str, upsert: bool
    ) -> str:
        """Store content under key and return its public URL."""


@dataclass
class ProgressTracker:
    """Progress of one generation attempt, from 0 to 100.

    Values never decrease within an attempt; ``reset`` starts a new one.
    """

    value: float = 0.0

    def reset(self) -> None:
        """Start a new attempt at zero."""
        self.value = 0.0

    def set(self, value: float) -> None:
        """Move progress forward to value, clamped to [0, 100]."""
        self.value = max(self.value, min(100.0, max(0.0, value)))


@dataclass
class MonotonicMillisClock:
    """Millisecond timestamps that strictly increase across calls."""

    _last: int = 0

    def now(self) -> int:
        """Return the current time in ms, bumped past the previous value."""
        current = time.time_ns() // 1_000_000
        self._last = max(current, self._last + 1)
        return self._last


@dataclass
class ReferenceUploader:
    """Uploads reference images one at a time and reports progress."""

    storage: StorageClient
    timeout_seconds: float | None = None
    clock: MonotonicMillisClock = field(default_factory=MonotonicMillisClock)

    async def upload_all(
        self,
        images: Sequence[ReferenceImage],
        user_id: str,
        progress: ProgressTracker,
    ) -> list[str]:
        """Upload images in order and return their URLs in the same order."""
        total = len(images)
        urls: list[str] = []
        for index, image in enumerate(images, start=1):
            key = self.build_key(user_id, image.filename)
            try:
                url = await self.store(image.content, key, image.content_type)
            except TimeoutError as exc:
                raise UploadError(f"Upload of {image.filename} timed out") from exc
            except Exception as exc:
                raise UploadError(f"Upload of {image.filename} failed") from exc
            urls.append(url)
            progress.set(UPLOAD_PROGRESS_SHARE * index / total)
            _logger.info("Uploaded reference image %s/%s: key=%s", index, total, key)
        return urls

    async def store(self, content: bytes, key: str, content_type: str) -> str:
        """Upsert content under key within the upload timeout; returns its URL."""
        return await asyncio.wait_for(
            self.storage.upload(content, key, content_type=content_type, upsert=True),
            timeout=self.timeout_seconds,
        )

    def build_key(self, user_id: str, filename: str) -> str:
        """Return the storage key for a user's reference image."""
        name = PurePosixPath(filename.replace("\\", "/")).name or "image"
        return f"headshots/{user_id}/{self.clock.now()}-{name}"
