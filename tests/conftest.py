"""Shared test fixtures."""

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from camera_registrator.adapters.network_interfaces import InterfaceLister
from camera_registrator.adapters.status_record_parser import JsonStatusRecordParser
from camera_registrator.adapters.tcp_connection import Connection, ConnectionState
from camera_registrator.config import Settings
from camera_registrator.containers import AppContainer
from camera_registrator.domain.cameras import CameraStatus
from camera_registrator.services.registrator import Registrator


def record(serial: object, **fields: object) -> bytes:
    """Encode a single status record the way the registrator sends it."""
    return json.dumps({"serial": serial, **fields}).encode()


async def wait_until(
    predicate: Callable[[], object], timeout: float = 2.0, step: float = 0.01
) -> None:
    """Poll a condition on the running loop until it holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(step)


@dataclass
class FakeConnection(Connection):
    """Fake status connection that records writes."""

    on_data: Callable[[bytes], None]
    on_state_changed: Callable[[ConnectionState], None]
    connected: bool = True
    sent: list[bytes] = field(default_factory=list)
    connect_calls: int = 0
    closed: bool = False

    @property
    def state(self) -> ConnectionState:
        if self.connected:
            return ConnectionState.CONNECTED
        return ConnectionState.DISCONNECTED

    def connect(self) -> None:
        self.connect_calls += 1

    def send(self, data: bytes) -> bool:
        if not self.connected:
            return False
        self.sent.append(data)
        return True

    async def close(self) -> None:
        self.closed = True

    def deliver(self, data: bytes) -> None:
        self.on_data(data)

    def drop(self) -> None:
        self.connected = False
        self.on_state_changed(ConnectionState.DISCONNECTED)


@dataclass
class FakeConnectionFactory:
    """Builds fake connections and remembers the last one."""

    connection: FakeConnection | None = None

    def __call__(
        self,
        on_data: Callable[[bytes], None],
        on_state_changed: Callable[[ConnectionState], None],
    ) -> FakeConnection:
        self.connection = FakeConnection(
            on_data=on_data, on_state_changed=on_state_changed
        )
        return self.connection


@dataclass
class StaticInterfaceLister(InterfaceLister):
    """Interface lister returning a fixed address list."""

    values: list[str] = field(
        default_factory=lambda: ["127.0.0.1", "192.168.1.20", "10.0.0.7"]
    )

    def addresses(self) -> list[str]:
        return list(self.values)


@dataclass
class RegistratorEvents:
    """Collects registrator notifications."""

    updates: int = 0
    statuses: list[tuple[str, CameraStatus]] = field(default_factory=list)

    def cameras_updated(self) -> None:
        self.updates += 1

    def status_received(self, serial: str, status: CameraStatus) -> None:
        self.statuses.append((serial, status))


def build_registrator(
    events: RegistratorEvents,
    factory: FakeConnectionFactory,
    **overrides: object,
) -> Registrator:
    params: dict[str, object] = {
        "name": "front-gate",
        "ip": "192.168.1.50",
        "mac": "00:11:22:33:44:55",
        "status_port": 8081,
        "motion_client_port": 8082,
        "poll_interval_ms": 5000,
        "poll_timeout_ms": 2000,
        "parser": JsonStatusRecordParser(),
        "interfaces": StaticInterfaceLister(),
        "on_cameras_updated": events.cameras_updated,
        "on_status_received": events.status_received,
        "connection_factory": factory,
    }
    params.update(overrides)
    return Registrator(**params)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        name="front-gate",
        ip="192.168.1.50",
        mac="00:11:22:33:44:55",
        status_port=8081,
        motion_client_port=8082,
    )


@pytest.fixture
def events() -> RegistratorEvents:
    return RegistratorEvents()


@pytest.fixture
def connection_factory() -> FakeConnectionFactory:
    return FakeConnectionFactory()


@pytest.fixture
def registrator(
    events: RegistratorEvents, connection_factory: FakeConnectionFactory
) -> Registrator:
    return build_registrator(events, connection_factory)


@pytest.fixture
def connection(
    registrator: Registrator, connection_factory: FakeConnectionFactory
) -> FakeConnection:
    assert connection_factory.connection is not None
    return connection_factory.connection


@pytest.fixture
def container(settings: Settings, registrator: Registrator) -> AppContainer:
    return AppContainer(
        settings=settings,
        registrator=registrator,
        close_resources=registrator.close,
    )
