"""Supabase-backed ledger of completed capture sessions."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client, PostgrestAPIError

from borobudur_capture.adapters.supabase_client import SupabaseClientProvider
from borobudur_capture.domain.errors import DuplicateSessionError
from borobudur_capture.domain.sessions import LedgerEntry
from borobudur_capture.services.sessions import SessionLedger

_UNIQUE_VIOLATION = "23505"


def _to_entry(row: dict[str, object]) -> LedgerEntry:
    return LedgerEntry(
        session_id=str(row["session_id"]),
        completed_at=datetime.fromisoformat(str(row["completed_at"])),
        status=str(row["status"]),
    )


@dataclass
class SupabaseSessionLedger(SessionLedger):
    """Supabase implementation of the session ledger.

    The table carries a unique index on ``session_id`` and an identity ``id``
    column that orders rows completed at the same instant.
    """

    provider: SupabaseClientProvider
    table: str = "capture_sessions"

    async def find_most_recent(self) -> LedgerEntry | None:
        """Return the most recently completed session, if any."""

        def query(client: Client) -> list[dict[str, object]]:
            response = (
                client.table(self.table)
                .select("session_id, completed_at, status")
                .order("completed_at", desc=True)
                .order("id", desc=True)
                .limit(1)
                .execute()
            )
            return response.data

        rows = await self.provider.run(query, "Ledger lookup")
        if not rows:
            return None
        return _to_entry(rows[0])

    async def insert_if_absent(self, entry: LedgerEntry) -> LedgerEntry:
        """Insert a ledger row; a duplicate session id is an error."""

        def insert(client: Client) -> list[dict[str, object]]:
            try:
                response = (
                    client.table(self.table)
                    .insert(
                        {
                            "session_id": entry.session_id,
                            "completed_at": entry.completed_at.isoformat(),
                            "status": entry.status,
                        }
                    )
                    .execute()
                )
            except PostgrestAPIError as exc:
                if exc.code == _UNIQUE_VIOLATION:
                    raise DuplicateSessionError(
                        f"Session {entry.session_id} is already completed; "
                        "read the current session and retry",
                        details={"session_id": entry.session_id},
                    ) from exc
                raise
            return response.data

        rows = await self.provider.run(insert, "Ledger insert")
        if not rows:
            return entry
        return _to_entry(rows[0])
