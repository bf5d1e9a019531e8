"""Supabase-backed headshot generation repository."""

from dataclasses import dataclass

from supabase import Client

from headshot_studio.domain.headshots import NewHeadshotGeneration
from headshot_studio.services.generation import GenerationRepository


@dataclass
class SupabaseGenerationRepository(GenerationRepository):
    """Supabase implementation for generation records."""

    client: Client
    table: str = "headshot_generations"

    def create_generation(self, record: NewHeadshotGeneration) -> dict[str, object]:
        """Insert a generation row and return it."""
        response = (
            self.client.table(self.table)
            .insert(
                {
                    "user_id": record.user_id,
                    "style": record.style,
                    "background": record.background,
                    "reference_images": record.reference_images,
                    "generated_images": record.generated_images,
                    "created_at": record.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create headshot generation")
        return response.data[0]

    def list_generations(self, user_id: str) -> list[dict[str, object]]:
        """Return a user's generation rows, newest first."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return list(response.data or [])
