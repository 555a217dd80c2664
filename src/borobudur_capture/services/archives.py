"""Packaging of a session's stored artifacts into a single ZIP archive."""

import asyncio
import logging
import posixpath
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path

from borobudur_capture.domain.artifacts import ArtifactClass
from borobudur_capture.services.artifacts import ArtifactRouter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackagedArchive:
    """A finished archive and the per-request directory holding it."""

    session_id: str
    archive_path: Path
    work_dir: Path

    @property
    def filename(self) -> str:
        return f"{self.session_id}.zip"

    def cleanup(self) -> bool:
        """Remove the staged copies and the archive file.

        Returns false, and logs a warning, when the work directory survives
        removal (for example a late download landed in it mid-delete).
        """
        shutil.rmtree(self.work_dir, ignore_errors=True)
        context = {"session_id": self.session_id, "work_dir": str(self.work_dir)}
        if self.work_dir.exists():
            logger.warning("Archive staging area was not removed", extra=context)
            return False
        logger.info("Removed archive staging area", extra=context)
        return True


def _write_zip(tree: Path, archive_path: Path, root_name: str) -> None:
    """Write every file and folder under tree into archive_path below root_name."""
    with zipfile.ZipFile(
        archive_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
    ) as zf:
        zf.write(tree, arcname=root_name)
        for path in sorted(tree.rglob("*")):
            arcname = Path(root_name) / path.relative_to(tree)
            zf.write(path, arcname=arcname.as_posix())


@dataclass
class ArchivePackager:
    """Downloads a session into a scoped staging area and zips it.

    Every call gets its own work directory, so concurrent downloads of the same
    session never share files. The staging area is removed on any failure or
    cancellation; on success the caller owns the result and must call
    ``PackagedArchive.cleanup`` once the archive has been sent.
    """

    router: ArtifactRouter
    staging_root: Path

    async def package_session(self, session_id: str) -> PackagedArchive:
        """Build ``<session_id>.zip`` holding the session's images and metadata."""
        work_dir = await asyncio.to_thread(self._create_work_dir, session_id)
        archive = PackagedArchive(
            session_id=session_id,
            archive_path=work_dir / f"{session_id}.zip",
            work_dir=work_dir,
        )
        try:
            tree = work_dir / session_id
            fetched = 0
            for artifact_class in ArtifactClass:
                target_dir = tree / artifact_class
                target_dir.mkdir(parents=True, exist_ok=True)
                async for key in self.router.list_keys(session_id, artifact_class):
                    await self.router.fetch(key, target_dir / posixpath.basename(key))
                    fetched += 1
            await asyncio.to_thread(_write_zip, tree, archive.archive_path, session_id)
        except BaseException:
            archive.cleanup()
            raise
        logger.info(
            "Packaged session archive",
            extra={"session_id": session_id, "objects": fetched},
        )
        return archive

    def _create_work_dir(self, session_id: str) -> Path:
        self.staging_root.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=f"{session_id}-", dir=self.staging_root))
