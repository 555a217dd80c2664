"""Domain models for capture sessions."""

from dataclasses import dataclass
from datetime import datetime

COMPLETED_STATUS = "completed"


@dataclass(frozen=True)
class LedgerEntry:
    """Represents a completed capture session recorded in the ledger."""

    session_id: str
    completed_at: datetime
    status: str = COMPLETED_STATUS


@dataclass(frozen=True)
class SessionState:
    """Allocator view of the ledger: last completed and next session."""

    last_completed_session_id: str | None
    last_completed_at: datetime | None
    next_session_id: str
    is_first_session: bool
