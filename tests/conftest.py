"""Shared test fixtures."""

from pathlib import Path

import pytest

from borobudur_capture.config import Settings
from borobudur_capture.containers import AppContainer
from borobudur_capture.services.archives import ArchivePackager
from borobudur_capture.services.artifacts import ArtifactRouter
from borobudur_capture.services.reconciliation import ConsistencyReconciler
from borobudur_capture.services.sessions import SessionAllocator
from tests.fakes import InMemoryObjectStore, InMemorySessionLedger


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    return tmp_path / "staging"


@pytest.fixture
def settings(staging_dir: Path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        staging_dir=staging_dir,
        environment="test",
    )


@pytest.fixture
def ledger() -> InMemorySessionLedger:
    return InMemorySessionLedger()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def container(
    settings: Settings,
    ledger: InMemorySessionLedger,
    object_store: InMemoryObjectStore,
) -> AppContainer:
    router = ArtifactRouter(object_store)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        ledger=ledger,
        object_store=object_store,
        session_allocator=SessionAllocator(ledger),
        artifact_router=router,
        reconciler=ConsistencyReconciler(router),
        archive_packager=ArchivePackager(router, staging_root=settings.staging_dir),
        close_resources=close_resources,
    )
