"""ASGI entrypoint for the portrait booth API."""

from portrait_booth.api.app import create_app
from portrait_booth.containers import build_container

app = create_app(build_container())
