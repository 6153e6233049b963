"""ASGI entrypoint for the surplus match API."""

from surplus_match.api.app import create_app
from surplus_match.containers import build_container

app = create_app(build_container())
