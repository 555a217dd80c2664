"""Supabase Storage implementation of the artifact object store."""

import logging
import posixpath
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

from supabase import Client

from borobudur_capture.adapters.supabase_client import SupabaseClientProvider
from borobudur_capture.services.artifacts import ObjectStore

logger = logging.getLogger(__name__)

_PLACEHOLDER = ".emptyFolderPlaceholder"


@dataclass
class SupabaseObjectStore(ObjectStore):
    """Stores artifacts as objects in a single Supabase Storage bucket.

    Listing treats the prefix as a folder: ``session_001/images/`` lists the
    objects directly inside that folder.
    """

    provider: SupabaseClientProvider
    bucket: str
    page_size: int = 100

    async def ensure_bucket(self) -> None:
        """Create the bucket when it is missing."""

        def ensure(client: Client) -> bool:
            existing = {bucket.id for bucket in client.storage.list_buckets()}
            if self.bucket in existing:
                return False
            client.storage.create_bucket(self.bucket, options={"public": False})
            return True

        created = await self.provider.run(ensure, "Bucket initialisation")
        if created:
            logger.info("Bucket created", extra={"bucket": self.bucket})
        else:
            logger.info("Bucket already exists", extra={"bucket": self.bucket})

    async def put_object(self, key: str, data: bytes, content_type: str) -> None:
        """Upload bytes to key, replacing any existing object."""

        def upload(client: Client) -> None:
            client.storage.from_(self.bucket).upload(
                key,
                data,
                {"content-type": content_type, "upsert": "true"},
            )

        await self.provider.run(upload, f"Upload of {key}")

    async def object_exists(self, key: str) -> bool:
        """Return true when key names a stored object."""
        folder, name = posixpath.split(key)

        def search(client: Client) -> list[dict[str, object]]:
            return client.storage.from_(self.bucket).list(
                folder, {"limit": self.page_size, "offset": 0, "search": name}
            )

        entries = await self.provider.run(search, f"Lookup of {key}")
        return any(entry.get("name") == name for entry in entries)

    async def list_objects(self, prefix: str) -> AsyncIterator[str]:
        """Yield object keys under prefix, one page per remote call."""
        folder = prefix.rstrip("/")
        offset = 0
        while True:
            page = await self._list_page(folder, offset)
            for entry in page:
                name = entry.get("name")
                # folders come back without an id
                if not name or name == _PLACEHOLDER or entry.get("id") is None:
                    continue
                yield f"{folder}/{name}"
            if len(page) < self.page_size:
                return
            offset += self.page_size

    async def fetch_object_to_path(self, key: str, local_path: Path) -> None:
        """Download key and write it to local_path."""

        def download(client: Client) -> None:
            local_path.write_bytes(client.storage.from_(self.bucket).download(key))

        await self.provider.run(download, f"Download of {key}")

    async def _list_page(self, folder: str, offset: int) -> list[dict[str, object]]:
        def list_page(client: Client) -> list[dict[str, object]]:
            return client.storage.from_(self.bucket).list(
                folder,
                {
                    "limit": self.page_size,
                    "offset": offset,
                    "sortBy": {"column": "name", "order": "asc"},
                },
            )

        return await self.provider.run(list_page, f"Listing of {folder}/")
