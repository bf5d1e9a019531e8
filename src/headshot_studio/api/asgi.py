"""ASGI entrypoint for the headshot studio API."""

from headshot_studio.api.app import create_app
from headshot_studio.containers import build_container

app = create_app(build_container())
