"""Session numbering derived from the ledger of completed sessions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from borobudur_capture.domain.errors import MalformedIdentifierError
from borobudur_capture.domain.sessions import LedgerEntry, SessionState

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session_"
FIRST_SESSION_NUMBER = 1


class SessionLedger(Protocol):
    """Persistence interface for the append-only ledger of completed sessions."""

    async def find_most_recent(self) -> LedgerEntry | None:
        """Return the latest entry by completion time, ties broken by insertion."""

    async def insert_if_absent(self, entry: LedgerEntry) -> LedgerEntry:
        """Append an entry, raising DuplicateSessionError if its id exists."""


def format_session_id(number: int) -> str:
    """Render a session number as ``session_NNN`` (at least three digits)."""
    return f"{SESSION_PREFIX}{number:03d}"


def parse_session_number(session_id: str) -> int:
    """Return the numeric suffix of a session id."""
    suffix = session_id.removeprefix(SESSION_PREFIX)
    if (
        suffix == session_id
        or not suffix
        or not suffix.isascii()
        or not suffix.isdigit()
    ):
        raise MalformedIdentifierError(
            f"Ledger contains a malformed session id: {session_id!r}",
            details={"session_id": session_id},
        )
    return int(suffix)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionAllocator:
    """Derives session identifiers from the ledger and records completions."""

    ledger: SessionLedger
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def next_session_id(self) -> SessionState:
        """Return the last completed session and the id of the next one."""
        last = await self.ledger.find_most_recent()
        if last is None:
            return SessionState(
                last_completed_session_id=None,
                last_completed_at=None,
                next_session_id=format_session_id(FIRST_SESSION_NUMBER),
                is_first_session=True,
            )
        return SessionState(
            last_completed_session_id=last.session_id,
            last_completed_at=last.completed_at,
            next_session_id=format_session_id(
                parse_session_number(last.session_id) + 1
            ),
            is_first_session=False,
        )

    async def current_session_id(self) -> str:
        """Return the id uploads are tagged with when none is given."""
        state = await self.next_session_id()
        return state.next_session_id

    async def complete_session(self) -> LedgerEntry:
        """Record the current session as completed and return the new entry."""
        state = await self.next_session_id()
        entry = LedgerEntry(session_id=state.next_session_id, completed_at=self.clock())
        created = await self.ledger.insert_if_absent(entry)
        logger.info(
            "Session completed",
            extra={"session_id": created.session_id},
        )
        return created
