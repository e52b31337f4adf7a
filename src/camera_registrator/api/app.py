"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from camera_registrator.api.models import (
    CameraList,
    CameraStatusResponse,
    RegistratorInfo,
)
from camera_registrator.app_logging import configure_logging
from camera_registrator.containers import AppContainer
from camera_registrator.registrator_commands import registrator_commands


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app exposing the registrator's state."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        registrator = app.state.container.registrator
        registrator.start()
        logger.info(
            "Polling registrator %s at %s:%s",
            registrator.name,
            registrator.ip,
            registrator.status_port,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/registrator")
    async def registrator_info(request: Request) -> RegistratorInfo:
        """Return identity, ports and state of the registrator session."""
        registrator = request.app.state.container.registrator
        return RegistratorInfo(
            name=registrator.name,
            ip=registrator.ip,
            mac=registrator.mac,
            wol=registrator.wol(),
            status_port=registrator.status_port,
            motion_client_port=registrator.motion_client_port,
            connection_state=registrator.connection_state.value,
            poll_state=registrator.poll_state.value,
            cameras=len(registrator.cameras_serials()),
        )

    @app.get("/cameras")
    async def cameras(request: Request) -> CameraList:
        """Return the serials of currently known cameras."""
        registrator = request.app.state.container.registrator
        return CameraList(serials=sorted(registrator.cameras_serials()))

    @app.get("/cameras/{serial}")
    async def camera_status(serial: str, request: Request) -> CameraStatusResponse:
        """Return the last status reported for a camera."""
        registrator = request.app.state.container.registrator
        if serial not in registrator.cameras_serials():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return CameraStatusResponse.from_status(registrator.status(serial))

    @app.get("/commands")
    async def commands() -> dict[str, list[dict[str, str]]]:
        """Return the registrator command table."""
        return {"commands": registrator_commands()}

    return app
