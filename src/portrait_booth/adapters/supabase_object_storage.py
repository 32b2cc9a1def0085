"""Supabase Storage bucket used as durable object storage."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from portrait_booth.domain.composition import StoredObject
from portrait_booth.domain.errors import UploadError
from portrait_booth.services.composition import ObjectStorage


@dataclass
class SupabaseObjectStorage(ObjectStorage):
    """Stores composed JPEGs in a public Supabase bucket.

    The object path doubles as the storage id handed back for retakes.
    """

    client: Client
    bucket: str

    async def upload(self, data: bytes, folder: str, key: str) -> StoredObject:
        """Upload bytes as ``<folder>/<key>.jpg`` and return its public URL."""
        path = f"{folder.strip('/')}/{key}.jpg"
        try:
            await asyncio.to_thread(self._upload_sync, path, data)
            url = await asyncio.to_thread(
                self.client.storage.from_(self.bucket).get_public_url, path
            )
        except Exception as exc:
            raise UploadError(f"Upload to {self.bucket}/{path} failed: {exc}") from exc
        return StoredObject(url=url, id=path)

    async def destroy(self, storage_id: str) -> bool:
        """Remove an object; a missing object is reported as False."""
        removed = await asyncio.to_thread(
            self.client.storage.from_(self.bucket).remove, [storage_id]
        )
        return bool(removed)

    def _upload_sync(self, path: str, data: bytes) -> None:
        self.client.storage.from_(self.bucket).upload(
            path=path,
            file=data,
            file_options={"content-type": "image/jpeg"},
        )
