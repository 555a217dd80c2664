"""Image/metadata consistency checks for a session."""

from dataclasses import dataclass

from borobudur_capture.domain.artifacts import ArtifactClass, ReconciliationReport
from borobudur_capture.services.artifacts import ArtifactRouter, item_id_from_key


@dataclass
class ConsistencyReconciler:
    """Reports images without metadata and metadata without images."""

    router: ArtifactRouter

    async def check_session(self, session_id: str) -> ReconciliationReport:
        """List both artifact classes of a session and compare their item ids."""
        image_ids = await self._item_ids(session_id, ArtifactClass.IMAGES)
        metadata_ids = await self._item_ids(session_id, ArtifactClass.METADATA)
        image_set = set(image_ids)
        metadata_set = set(metadata_ids)
        return ReconciliationReport(
            session_id=session_id,
            image_ids=image_ids,
            metadata_ids=metadata_ids,
            missing_metadata=[i for i in image_ids if i not in metadata_set],
            missing_images=[i for i in metadata_ids if i not in image_set],
        )

    async def _item_ids(
        self, session_id: str, artifact_class: ArtifactClass
    ) -> list[str]:
        return [
            item_id_from_key(key, artifact_class)
            async for key in self.router.list_keys(session_id, artifact_class)
        ]
