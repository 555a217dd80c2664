"""Artifact upload endpoints for the capture device."""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from borobudur_capture.api.dependencies import clean_session_id, get_container
from borobudur_capture.containers import AppContainer
from borobudur_capture.domain.errors import MissingFieldError
from borobudur_capture.domain.metadata import CaptureMetadata

router = APIRouter(prefix="/upload", tags=["upload"])


async def _resolve_session_id(container: AppContainer, requested: str | None) -> str:
    if requested and requested.strip():
        return clean_session_id(requested)
    return await container.session_allocator.current_session_id()


@router.post("/image")
async def upload_image(
    file: UploadFile | None = File(default=None),
    photo_id: str | None = Form(default=None),
    session_id: str | None = Form(default=None),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Store a JPEG for the given photo id in the requested or current session."""
    if not photo_id or file is None:
        raise MissingFieldError("Missing required fields: photo_id or file")
    data = await file.read()
    resolved = await _resolve_session_id(container, session_id)
    key = await container.artifact_router.store_image(resolved, photo_id, data)
    return {
        "status": "success",
        "photo_id": photo_id,
        "session_id": resolved,
        "path": key.path,
    }


@router.post("/meta")
async def upload_metadata(
    metadata: CaptureMetadata,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Store a metadata document for the given photo id."""
    resolved = await _resolve_session_id(container, metadata.session_id)
    key = await container.artifact_router.store_metadata(
        resolved, metadata.photo_id, metadata.to_document(resolved)
    )
    return {
        "status": "success",
        "photo_id": metadata.photo_id,
        "session_id": resolved,
        "path": key.path,
    }
