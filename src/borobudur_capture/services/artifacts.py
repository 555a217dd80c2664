"""Routing of session artifacts to object-store keys."""

import json
import logging
import posixpath
import re
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from borobudur_capture.domain.artifacts import ArtifactClass, StorageKey
from borobudur_capture.domain.errors import (
    InvalidIdentifierError,
    MissingFieldError,
)

logger = logging.getLogger(__name__)

_IMAGE_SUFFIX = re.compile(r"\.(jpg|jpeg)$", re.IGNORECASE)
_METADATA_SUFFIX = ".json"
_UNSAFE_ITEM_FRAGMENTS = ("/", "\\", "..", ":")


class ObjectStore(Protocol):
    """Interface for the object store holding artifact bytes."""

    async def ensure_bucket(self) -> None:
        """Create the backing bucket if it does not exist yet."""

    async def put_object(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes at key, overwriting any previous object."""

    async def object_exists(self, key: str) -> bool:
        """Return true when an object is stored at key."""

    def list_objects(self, prefix: str) -> AsyncIterator[str]:
        """Yield the full keys of all objects under prefix."""

    async def fetch_object_to_path(self, key: str, local_path: Path) -> None:
        """Download the object at key into local_path."""


def session_prefix(session_id: str, artifact_class: ArtifactClass) -> str:
    """Return the key prefix holding one artifact class of a session."""
    return f"{session_id}/{artifact_class}/"


def item_id_from_key(key: str, artifact_class: ArtifactClass) -> str:
    """Strip directory and extension from a stored key."""
    name = posixpath.basename(key)
    if artifact_class is ArtifactClass.IMAGES:
        return _IMAGE_SUFFIX.sub("", name)
    return name.removesuffix(_METADATA_SUFFIX)


def _require(value: object, field_name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError(
            f"Missing required field: {field_name}",
            details={"field": field_name},
        )


def _require_item_id(item_id: str) -> None:
    _require(item_id, "photo_id")
    if any(part in item_id for part in _UNSAFE_ITEM_FRAGMENTS):
        raise InvalidIdentifierError(
            f"Invalid photo_id {item_id!r}: must be a single path segment",
            details={"photo_id": item_id},
        )


@dataclass
class ArtifactRouter:
    """Maps (session, class, item) to storage keys and stores artifacts."""

    store: ObjectStore

    def route(
        self, session_id: str, artifact_class: ArtifactClass, item_id: str
    ) -> StorageKey:
        """Return the canonical storage key for an artifact."""
        return StorageKey(
            session_id=session_id, artifact_class=artifact_class, item_id=item_id
        )

    async def store_image(
        self, session_id: str, item_id: str, data: bytes | None
    ) -> StorageKey:
        """Store JPEG bytes for an item; re-uploads overwrite."""
        _require(session_id, "session_id")
        _require_item_id(item_id)
        if not data:
            raise MissingFieldError(
                "Missing required field: file", details={"field": "file"}
            )
        key = self.route(session_id, ArtifactClass.IMAGES, item_id)
        await self.store.put_object(
            key.path, data, ArtifactClass.IMAGES.content_type
        )
        logger.info("Stored image", extra={"key": key.path, "size": len(data)})
        return key

    async def store_metadata(
        self, session_id: str, item_id: str, document: dict[str, object] | None
    ) -> StorageKey:
        """Store a metadata document for an item as JSON; re-uploads overwrite."""
        _require(session_id, "session_id")
        _require_item_id(item_id)
        if document is None:
            raise MissingFieldError(
                "Missing required field: metadata", details={"field": "metadata"}
            )
        key = self.route(session_id, ArtifactClass.METADATA, item_id)
        payload = json.dumps(document).encode("utf-8")
        await self.store.put_object(
            key.path, payload, ArtifactClass.METADATA.content_type
        )
        logger.info("Stored metadata", extra={"key": key.path})
        return key

    def list_keys(
        self, session_id: str, artifact_class: ArtifactClass
    ) -> AsyncIterator[str]:
        """Yield stored keys of one artifact class within a session."""
        return self.store.list_objects(session_prefix(session_id, artifact_class))

    async def fetch(self, key: str, local_path: Path) -> None:
        """Download a stored artifact to a local file."""
        await self.store.fetch_object_to_path(key, local_path)
