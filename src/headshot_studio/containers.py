"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from headshot_studio.adapters.httpx_image_fetcher import HttpxImageFetcher
from headshot_studio.adapters.openai_image_client import OpenAIImageClient
from headshot_studio.adapters.supabase_auth_client import SupabaseAuthClient
from headshot_studio.adapters.supabase_generation_repository import (
    SupabaseGenerationRepository,
)
from headshot_studio.adapters.supabase_storage_client import SupabaseStorageClient
from headshot_studio.config import Settings
from headshot_studio.services.auth import AuthService
from headshot_studio.services.downloads import DownloadService
from headshot_studio.services.gallery import GalleryService
from headshot_studio.services.generation import GenerationService, GenerationTimeouts
from headshot_studio.services.uploads import ReferenceUploader
from headshot_studio.services.wizard import WizardService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    wizard_service: WizardService
    gallery_service: GalleryService
    download_service: DownloadService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    storage_client = SupabaseStorageClient(
        supabase_client, bucket=resolved_settings.supabase_bucket
    )
    generation_repository = SupabaseGenerationRepository(
        supabase_client, table=resolved_settings.supabase_generations_table
    )
    image_fetcher = HttpxImageFetcher.create(
        timeout_seconds=resolved_settings.download_timeout_seconds
    )
    image_client = OpenAIImageClient.create(
        resolved_settings.openai_api_key,
        fetcher=image_fetcher,
        model=resolved_settings.openai_image_model,
    )
    generation_service = GenerationService(
        uploader=ReferenceUploader(
            storage_client,
            timeout_seconds=resolved_settings.upload_timeout_seconds,
        ),
        client=image_client,
        repository=generation_repository,
        quality=resolved_settings.openai_image_quality,
        count=resolved_settings.generation_count,
        timeouts=GenerationTimeouts(
            generation=resolved_settings.generation_timeout_seconds,
            persist=resolved_settings.persist_timeout_seconds,
        ),
    )

    async def close_resources() -> None:
        await image_fetcher.close()
        await image_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(SupabaseAuthClient(supabase_client)),
        wizard_service=WizardService(generation_service),
        gallery_service=GalleryService(generation_repository),
        download_service=DownloadService(image_fetcher),
        close_resources=close_resources,
    )
