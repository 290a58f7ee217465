"""
Document store backed by Supabase storage and the ``documents`` table.

The Supabase SDK is synchronous, so every call is pushed onto the default
executor. Any SDK failure surfaces as ``StorageError``.
"""

import asyncio
import logging
from typing import Any

from supabase import Client, create_client

from shared.errors import ConfigurationError, StorageError

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Storage bucket + database table for uploaded documents.

    Rows are addressed by ``(file_path, user_id)``; blobs by their storage path.
    """

    def __init__(self, client: Client, bucket: str = "documents", table: str = "documents"):
        self.client = client
        self.bucket = bucket
        self.table = table

    @classmethod
    def from_credentials(
        cls,
        url: str,
        key: str,
        bucket: str = "documents",
        table: str = "documents",
    ) -> "DocumentStore":
        if not url or not key:
            raise ConfigurationError("Supabase credentials not configured")
        return cls(create_client(url, key), bucket=bucket, table=table)

    async def _run(self, func, *args):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, func, *args)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    async def download(self, path: str) -> bytes:
        """Download a blob from the bucket."""
        try:
            data = await self._run(self.client.storage.from_(self.bucket).download, path)
        except Exception as e:
            raise StorageError(f"Failed to download file: {e}") from e
        if not data:
            raise StorageError("Failed to download file: empty response")
        return data

    async def upload(self, path: str, data: bytes, content_type: str | None = None) -> None:
        """Upload a blob to the bucket."""
        file_options = {"content-type": content_type} if content_type else None

        def _upload():
            bucket = self.client.storage.from_(self.bucket)
            if file_options:
                return bucket.upload(path, data, file_options)
            return bucket.upload(path, data)

        try:
            await self._run(_upload)
        except Exception as e:
            raise StorageError(f"Failed to upload file: {e}") from e
        logger.info("Uploaded %d bytes to %s/%s", len(data), self.bucket, path)

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------

    async def insert_document(self, record: dict[str, Any]) -> list[dict[str, Any]]:
        """Insert a document row and return the inserted rows."""

        def _insert():
            return self.client.table(self.table).insert(record).execute()

        try:
            result = await self._run(_insert)
        except Exception as e:
            raise StorageError(f"Failed to save document: {e}") from e
        return list(getattr(result, "data", None) or [])

    async def update_content(self, file_path: str, user_id: str, content: str) -> None:
        """Set ``content`` on the row owned by ``user_id`` at ``file_path``."""

        def _update():
            return (
                self.client.table(self.table)
                .update({"content": content})
                .eq("file_path", file_path)
                .eq("user_id", user_id)
                .execute()
            )

        try:
            await self._run(_update)
        except Exception as e:
            raise StorageError(f"Failed to save transcript: {e}") from e
