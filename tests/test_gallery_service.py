"""Tests for the gallery read path."""

import asyncio
import time

from headshot_studio.services.gallery import GalleryService
from tests.conftest import InMemoryGenerationRepository


def _repository() -> InMemoryGenerationRepository:
    return InMemoryGenerationRepository(
        rows=[
            {
                "id": "old",
                "user_id": "u1",
                "style": "casual",
                "background": "office",
                "generated_images": "https://x/1.png,https://x/2.png",
                "created_at": "2026-01-02T10:00:00+00:00",
            },
            {
                "id": "new",
                "userId": "u1",
                "user_id": "u1",
                "style": "business",
                "background": "studio",
                "generatedImages": ["https://x/3.png"],
                "referenceImages": '["https://r/1.jpg"]',
                "created_at": "2026-03-04T10:00:00+00:00",
            },
            {
                "id": "other",
                "user_id": "u2",
                "style": "business",
                "background": "studio",
                "generated_images": "[]",
                "created_at": "2026-05-01T10:00:00+00:00",
            },
        ]
    )


class SlowRepository(InMemoryGenerationRepository):
    def list_generations(self, user_id: str) -> list[dict[str, object]]:
        time.sleep(0.3)
        return super().list_generations(user_id)


def test_list_generations_normalizes_newest_first() -> None:
    service = GalleryService(_repository())

    generations = asyncio.run(service.list_generations("u1"))

    assert [g.id for g in generations] == ["new", "old"]
    assert generations[0].generated_images == ["https://x/3.png"]
    assert generations[0].reference_images == ["https://r/1.jpg"]
    assert generations[1].generated_images == ["https://x/1.png", "https://x/2.png"]


def test_list_generations_is_empty_for_new_users() -> None:
    service = GalleryService(_repository())

    assert asyncio.run(service.list_generations("nobody")) == []


def test_get_generation_is_scoped_to_the_user() -> None:
    service = GalleryService(_repository())

    old = asyncio.run(service.get_generation("u1", "old"))

    assert old is not None
    assert old.style == "casual"
    assert asyncio.run(service.get_generation("u1", "other")) is None


def test_slow_repository_does_not_stall_the_event_loop() -> None:
    service = GalleryService(SlowRepository(rows=_repository().rows))

    async def scenario() -> list[float]:
        ticks: list[float] = []

        async def ticker() -> None:
            while True:
                ticks.append(time.monotonic())
                await asyncio.sleep(0.02)

        task = asyncio.create_task(ticker())
        await asyncio.sleep(0)
        generations = await service.list_generations("u1")
        task.cancel()
        assert len(generations) == 2
        return ticks

    ticks = asyncio.run(scenario())

    gaps = [later - earlier for earlier, later in zip(ticks, ticks[1:])]
    assert len(ticks) >= 5
    assert max(gaps) < 0.2
