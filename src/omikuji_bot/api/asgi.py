"""ASGI entrypoint for the omikuji bot webhook."""

from omikuji_bot.api.app import create_app
from omikuji_bot.containers import build_container

app = create_app(build_container())
