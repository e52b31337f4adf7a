"""ASGI entrypoint serving the status API of one registrator."""

from camera_registrator.api.app import create_app
from camera_registrator.config import Settings
from camera_registrator.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
