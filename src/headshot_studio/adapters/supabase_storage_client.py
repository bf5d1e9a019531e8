"""Supabase Storage adapter for reference and generated images."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from headshot_studio.services.uploads import StorageClient


@dataclass
class SupabaseStorageClient(StorageClient):
    """Stores images in a public Supabase Storage bucket."""

    client: Client
    bucket: str

    async def upload(
        self, content: bytes, key: str, *, content_type: str, upsert: bool
    ) -> str:
        """Upload content to the bucket and return its public URL."""
        return await asyncio.to_thread(
            self._upload_sync, content, key, content_type, upsert
        )

    def _upload_sync(
        self, content: bytes, key: str, content_type: str, upsert: bool
    ) -> str:
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(
            path=key,
            file=content,
            file_options={
                "content-type": content_type,
                "upsert": "true" if upsert else "false",
            },
        )
        public_url = bucket.get_public_url(key)
        if not public_url:
            raise RuntimeError(f"Supabase returned no public URL for {key}")
        return public_url
