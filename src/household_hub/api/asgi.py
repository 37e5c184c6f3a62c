"""ASGI entrypoint for the household hub API."""

from household_hub.api.app import create_app
from household_hub.containers import build_container

app = create_app(build_container())
