"""ASGI entrypoint for the Taakip API."""

from taakip.api.app import create_app
from taakip.containers import build_container

app = create_app(build_container())
