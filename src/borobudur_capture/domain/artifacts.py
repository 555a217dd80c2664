"""Domain models for session artifacts."""

from dataclasses import dataclass
from enum import StrEnum


class ArtifactClass(StrEnum):
    """Artifact classes stored under a session prefix."""

    IMAGES = "images"
    METADATA = "metadata"

    @property
    def extension(self) -> str:
        return ".jpg" if self is ArtifactClass.IMAGES else ".json"

    @property
    def content_type(self) -> str:
        return "image/jpeg" if self is ArtifactClass.IMAGES else "application/json"


@dataclass(frozen=True)
class StorageKey:
    """Canonical object-store location of an artifact."""

    session_id: str
    artifact_class: ArtifactClass
    item_id: str

    @property
    def path(self) -> str:
        return (
            f"{self.session_id}/{self.artifact_class}/"
            f"{self.item_id}{self.artifact_class.extension}"
        )


@dataclass(frozen=True)
class ReconciliationReport:
    """Image/metadata consistency for a single session."""

    session_id: str
    image_ids: list[str]
    metadata_ids: list[str]
    missing_metadata: list[str]
    missing_images: list[str]

    @property
    def image_count(self) -> int:
        return len(self.image_ids)

    @property
    def metadata_count(self) -> int:
        return len(self.metadata_ids)

    @property
    def is_consistent(self) -> bool:
        return not self.missing_metadata and not self.missing_images
