"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from camera_registrator.adapters.network_interfaces import PsutilInterfaceLister
from camera_registrator.adapters.status_record_parser import JsonStatusRecordParser
from camera_registrator.config import Settings
from camera_registrator.services.registrator import Registrator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    registrator: Registrator
    close_resources: Callable[[], Awaitable[None]]


def build_registrator(settings: Settings) -> Registrator:
    """Create a registrator session from settings."""
    return Registrator(
        name=settings.name,
        ip=settings.ip,
        mac=settings.mac,
        status_port=settings.status_port,
        motion_client_port=settings.motion_client_port,
        poll_interval_ms=settings.poll_interval_ms,
        poll_timeout_ms=settings.poll_timeout_ms,
        parser=JsonStatusRecordParser(),
        interfaces=PsutilInterfaceLister(),
        reconnect_delay_ms=settings.reconnect_delay_ms,
        read_chunk_size=settings.read_chunk_size,
        carry_partial_records=settings.carry_partial_records,
        sweep_on_poll=settings.sweep_on_poll,
        reply_cancels_timeout=settings.reply_cancels_timeout,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    registrator = build_registrator(resolved_settings)

    async def close_resources() -> None:
        await registrator.close()

    return AppContainer(
        settings=resolved_settings,
        registrator=registrator,
        close_resources=close_resources,
    )
