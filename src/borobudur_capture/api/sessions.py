"""Session lifecycle endpoints used by the capture device and operators."""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from starlette.types import Receive, Scope, Send

from borobudur_capture.api.dependencies import clean_session_id, get_container
from borobudur_capture.containers import AppContainer
from borobudur_capture.services.archives import PackagedArchive

router = APIRouter(prefix="/session", tags=["session"])


class ArchiveResponse(FileResponse):
    """Sends a packaged archive and removes it once sending ends, however it ends."""

    def __init__(self, archive: PackagedArchive) -> None:
        super().__init__(
            archive.archive_path,
            media_type="application/zip",
            filename=archive.filename,
        )
        self.archive = archive

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.archive.cleanup()


@router.get("/current")
async def current_session(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the last completed session and the id the device should use next."""
    state = await container.session_allocator.next_session_id()
    if state.is_first_session:
        message = "No previous sessions found - this is the first session"
    else:
        message = "Last completed session retrieved successfully"
    return {
        "status": "success",
        "message": message,
        "data": {
            "last_completed_session": state.last_completed_session_id,
            "completed_at": state.last_completed_at,
            "next_session_id": state.next_session_id,
            "is_first_session": state.is_first_session,
        },
    }


@router.post("/end")
async def end_session(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Record the current session as completed."""
    entry = await container.session_allocator.complete_session()
    return {
        "status": "success",
        "message": "Session completed and recorded successfully",
        "data": {
            "completed_session_id": entry.session_id,
            "completed_at": entry.completed_at,
            "status": entry.status,
        },
    }


@router.get("/status/{session_id}")
async def session_status(
    session_id: str,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Report images lacking metadata and metadata lacking images."""
    report = await container.reconciler.check_session(clean_session_id(session_id))
    return {
        "status": "success",
        "session_id": report.session_id,
        "image_count": report.image_count,
        "metadata_count": report.metadata_count,
        "is_consistent": report.is_consistent,
        "missing_metadata": report.missing_metadata,
        "missing_images": report.missing_images,
    }


@router.get("/download/{session_id}")
async def download_session(
    session_id: str,
    container: AppContainer = Depends(get_container),
) -> ArchiveResponse:
    """Stream a ZIP of the session's images and metadata."""
    archive = await container.archive_packager.package_session(
        clean_session_id(session_id)
    )
    return ArchiveResponse(archive)
