"""ASGI entrypoint for the nutrition estimation API."""

from adaptive_nutrition.api.app import create_app
from adaptive_nutrition.containers import build_container

app = create_app(build_container())
