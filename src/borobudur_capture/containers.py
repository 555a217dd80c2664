"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from borobudur_capture.adapters.supabase_client import SupabaseClientProvider
from borobudur_capture.adapters.supabase_object_store import SupabaseObjectStore
from borobudur_capture.adapters.supabase_session_ledger import (
    SupabaseSessionLedger,
)
from borobudur_capture.config import Settings
from borobudur_capture.services.archives import ArchivePackager
from borobudur_capture.services.artifacts import ArtifactRouter, ObjectStore
from borobudur_capture.services.reconciliation import ConsistencyReconciler
from borobudur_capture.services.sessions import SessionAllocator, SessionLedger


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ledger: SessionLedger
    object_store: ObjectStore
    session_allocator: SessionAllocator
    artifact_router: ArtifactRouter
    reconciler: ConsistencyReconciler
    archive_packager: ArchivePackager
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    No remote connection is made here; the Supabase client is created on the
    first store call.
    """
    resolved_settings = settings or Settings()
    provider = SupabaseClientProvider(
        url=resolved_settings.supabase_url,
        service_key=resolved_settings.supabase_service_key,
        timeout_seconds=resolved_settings.remote_timeout_seconds,
    )
    ledger = SupabaseSessionLedger(provider, table=resolved_settings.ledger_table)
    object_store = SupabaseObjectStore(
        provider,
        bucket=resolved_settings.storage_bucket,
        page_size=resolved_settings.list_page_size,
    )
    artifact_router = ArtifactRouter(object_store)

    async def close_resources() -> None:
        provider.reset()

    return AppContainer(
        settings=resolved_settings,
        ledger=ledger,
        object_store=object_store,
        session_allocator=SessionAllocator(ledger),
        artifact_router=artifact_router,
        reconciler=ConsistencyReconciler(artifact_router),
        archive_packager=ArchivePackager(
            artifact_router, staging_root=resolved_settings.staging_dir
        ),
        close_resources=close_resources,
    )
