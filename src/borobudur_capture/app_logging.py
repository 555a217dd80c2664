"""Logging configuration helpers."""

import logging

_CONTEXT_FIELDS = (
    "session_id",
    "key",
    "bucket",
    "objects",
    "size",
    "work_dir",
    "duration_ms",
)


class ContextFormatter(logging.Formatter):
    """Formatter that appends the request context passed via ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{name}={getattr(record, name)}"
            for name in _CONTEXT_FIELDS
            if hasattr(record, name)
        ]
        if context:
            return f"{message} [{' '.join(context)}]"
        return message


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure the service logger with a single stream handler."""
    logger = logging.getLogger("borobudur_capture")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
