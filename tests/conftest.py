"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from headshot_studio.config import Settings
from headshot_studio.containers import AppContainer
from headshot_studio.domain.auth import AuthUser
from headshot_studio.domain.headshots import NewHeadshotGeneration, ReferenceImage
from headshot_studio.services.auth import AuthClient, AuthService
from headshot_studio.services.downloads import DownloadService, ImageFetcher
from headshot_studio.services.gallery import GalleryService
from headshot_studio.services.generation import (
    GenerationRepository,
    GenerationService,
    ImageGenerationClient,
)
from headshot_studio.services.uploads import ReferenceUploader, StorageClient
from headshot_studio.services.wizard import WizardService

USER_TOKEN = "user-token"
USER_ID = "user-123"


@dataclass
class InMemoryStorageClient(StorageClient):
    """In-memory storage that records uploads in order."""

    objects: dict[str, bytes] = field(default_factory=dict)
    uploads: list[tuple[str, bool]] = field(default_factory=list)
    fail_on_call: int | None = None

    async def upload(
        self, content: bytes, key: str, *, content_type: str, upsert: bool
    ) -> str:
        if self.fail_on_call is not None and len(self.uploads) + 1 == self.fail_on_call:
            raise OSError("storage unavailable")
        self.uploads.append((key, upsert))
        self.objects[key] = content
        return f"https://cdn.example.com/{key}"


@dataclass
class FakeImageGenerationClient(ImageGenerationClient):
    """Image generation client returning a fixed payload."""

    payload: object = field(
        default_factory=lambda: {
            "data": [{"url": f"https://ai.example.com/out-{i}.png"} for i in range(4)]
        }
    )
    error: Exception | None = None
    delay_seconds: float = 0
    calls: list[dict[str, object]] = field(default_factory=list)

    async def modify_image(
        self, *, images: list[str], prompt: str, quality: str, n: int
    ) -> object:
        self.calls.append(
            {"images": images, "prompt": prompt, "quality": quality, "n": n}
        )
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class InMemoryGenerationRepository(GenerationRepository):
    """In-memory generation store for tests."""

    rows: list[dict[str, object]] = field(default_factory=list)
    fail_writes: bool = False

    def create_generation(self, record: NewHeadshotGeneration) -> dict[str, object]:
        if self.fail_writes:
            raise RuntimeError("Failed to create headshot generation")
        row = {
            "id": str(uuid4()),
            "user_id": record.user_id,
            "style": record.style,
            "background": record.background,
            "reference_images": record.reference_images,
            "generated_images": record.generated_images,
            "created_at": record.created_at.isoformat(),
        }
        self.rows.append(row)
        return row

    def list_generations(self, user_id: str) -> list[dict[str, object]]:
        rows = [row for row in self.rows if row.get("user_id") == user_id]
        return sorted(rows, key=lambda row: str(row["created_at"]), reverse=True)


@dataclass
class FakeAuthClient(AuthClient):
    """Auth client backed by a token map."""

    users: dict[str, AuthUser] = field(
        default_factory=lambda: {USER_TOKEN: AuthUser(id=USER_ID, email="a@b.c")}
    )
    signed_out: list[str] = field(default_factory=list)

    def get_user(self, access_token: str) -> AuthUser | None:
        return self.users.get(access_token)

    def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)


@dataclass
class FakeImageFetcher(ImageFetcher):
    """Fetcher returning static bytes."""

    content: bytes = b"\xff\xd8\xffjpeg-bytes"
    content_type: str = "image/jpeg"
    fetched: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> tuple[bytes, str]:
        self.fetched.append(url)
        return self.content, self.content_type


def make_images(count: int) -> list[ReferenceImage]:
    return [
        ReferenceImage(filename=f"photo-{i}.jpg", content=f"img-{i}".encode())
        for i in range(count)
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
        environment="test",
    )


@pytest.fixture
def storage() -> InMemoryStorageClient:
    return InMemoryStorageClient()


@pytest.fixture
def image_client() -> FakeImageGenerationClient:
    return FakeImageGenerationClient()


@pytest.fixture
def generation_repository() -> InMemoryGenerationRepository:
    return InMemoryGenerationRepository()


@pytest.fixture
def auth_client() -> FakeAuthClient:
    return FakeAuthClient()


@pytest.fixture
def image_fetcher() -> FakeImageFetcher:
    return FakeImageFetcher()


@pytest.fixture
def generation_service(
    storage: InMemoryStorageClient,
    image_client: FakeImageGenerationClient,
    generation_repository: InMemoryGenerationRepository,
) -> GenerationService:
    return GenerationService(
        uploader=ReferenceUploader(storage),
        client=image_client,
        repository=generation_repository,
    )


@pytest.fixture
def container(
    settings: Settings,
    generation_service: GenerationService,
    generation_repository: InMemoryGenerationRepository,
    auth_client: FakeAuthClient,
    image_fetcher: FakeImageFetcher,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(auth_client),
        wizard_service=WizardService(generation_service),
        gallery_service=GalleryService(generation_repository),
        download_service=DownloadService(image_fetcher),
        close_resources=close_resources,
    )
