"""Read path for a user's past generations."""

import asyncio
import logging
from dataclasses import dataclass

from headshot_studio.domain.headshots import HeadshotGeneration
from headshot_studio.services.generation import GenerationRepository
from headshot_studio.services.normalization import normalize_generation

_logger = logging.getLogger(__name__)


@dataclass
class GalleryService:
    """Lists generation records in display shape, newest first."""

    repository: GenerationRepository

    async def list_generations(self, user_id: str) -> list[HeadshotGeneration]:
        """Return a user's generations with image lists normalized."""
        rows = await asyncio.to_thread(self.repository.list_generations, user_id)
        _logger.info("Gallery loaded: user_id=%s records=%s", user_id, len(rows))
        return [normalize_generation(row) for row in rows]

    async def get_generation(
        self, user_id: str, generation_id: str
    ) -> HeadshotGeneration | None:
        """Return one of a user's generations by id."""
        for generation in await self.list_generations(user_id):
            if generation.id == generation_id:
                return generation
        return None
