"""ASGI entrypoint for the capture API."""

from borobudur_capture.api.app import create_app
from borobudur_capture.containers import build_container

app = create_app(build_container())
