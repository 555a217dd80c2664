"""Request-scoped dependencies shared by the routers."""

from urllib.parse import unquote

from fastapi import Request

from borobudur_capture.containers import AppContainer
from borobudur_capture.domain.errors import InvalidIdentifierError

_UNSAFE_FRAGMENTS = (":", "/", "\\", "..")


def get_container(request: Request) -> AppContainer:
    """Return the dependency container attached to the app."""
    return request.app.state.container


def clean_session_id(raw: str) -> str:
    """Decode and validate a caller-supplied session id.

    Rejects empty values, route placeholders such as ``:session_id`` and
    anything that could escape the session prefix in the object store.
    """
    session_id = unquote(str(raw)).strip()
    if not session_id or any(part in session_id for part in _UNSAFE_FRAGMENTS):
        raise InvalidIdentifierError(
            "Invalid session_id. Use the actual value, "
            "e.g., GET /session/status/session_003",
            details={"session_id": session_id},
        )
    return session_id
