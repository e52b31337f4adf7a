"""Registrator session: connection, polling and camera presence."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from camera_registrator.adapters.network_interfaces import (
    InterfaceLister,
    first_usable_ipv4,
)
from camera_registrator.adapters.status_record_parser import RecordParser
from camera_registrator.adapters.tcp_connection import (
    Connection,
    ConnectionState,
    TcpConnection,
)
from camera_registrator.config import milliseconds
from camera_registrator.domain.cameras import CameraStatus
from camera_registrator.registrator_commands import RegistratorCommand, build_request
from camera_registrator.services.presence import PresenceReconciler
from camera_registrator.services.replies import ReplyProcessor
from camera_registrator.services.scheduler import PollScheduler, PollState

_logger = logging.getLogger(__name__)

ConnectionFactory = Callable[
    [Callable[[bytes], None], Callable[[ConnectionState], None]], Connection
]


class RegistratorError(Exception):
    """Raised when a registrator session is used incorrectly."""


@dataclass
class Registrator:  # noqa: PLR0902
    """Tracks the cameras reachable behind one registrator endpoint.

    All callbacks run on the event loop that called ``start``. Notifications:
    ``on_cameras_updated`` when the set of known serials changes and
    ``on_status_received`` for every valid status record.
    """

    name: str
    ip: str
    mac: str
    status_port: int
    motion_client_port: int
    poll_interval_ms: int
    poll_timeout_ms: int
    parser: RecordParser
    interfaces: InterfaceLister
    on_cameras_updated: Callable[[], None] | None = None
    on_status_received: Callable[[str, CameraStatus], None] | None = None
    reconnect_delay_ms: int = 1000
    read_chunk_size: int = 65536
    carry_partial_records: bool = False
    sweep_on_poll: bool = False
    reply_cancels_timeout: bool = False
    connection_factory: ConnectionFactory | None = None
    presence: PresenceReconciler = field(default_factory=PresenceReconciler, init=False)
    scheduler: PollScheduler = field(init=False)
    _replies: ReplyProcessor = field(init=False)
    _connection: Connection = field(init=False)
    _closed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self._replies = ReplyProcessor(
            parser=self.parser,
            on_record=self._handle_status,
            carry_partial_records=self.carry_partial_records,
        )
        self.scheduler = PollScheduler(
            interval=milliseconds(self.poll_interval_ms),
            timeout=milliseconds(self.poll_timeout_ms),
            on_poll=self._poll,
            on_timeout=self._expire,
        )
        if self.connection_factory is not None:
            self._connection = self.connection_factory(
                self._handle_data, self._handle_connection_state
            )
        else:
            self._connection = TcpConnection(
                host=self.ip,
                port=self.status_port,
                on_data=self._handle_data,
                on_state_changed=self._handle_connection_state,
                reconnect_delay=milliseconds(self.reconnect_delay_ms),
                read_chunk_size=self.read_chunk_size,
            )

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection.state

    @property
    def poll_state(self) -> PollState:
        return self.scheduler.state

    def start(self) -> None:
        """Connect and arm the poll timer on the running event loop."""
        if self._closed:
            raise RegistratorError(f"Registrator {self.name} is closed")
        self._connection.connect()
        self.scheduler.start()

    async def close(self) -> None:
        """Stop both timers and tear down the connection."""
        self._closed = True
        self.scheduler.stop()
        await self._connection.close()
        self._replies.reset()

    def wol(self) -> str:
        """Best-effort local IPv4 address for wake-on-LAN replies."""
        return first_usable_ipv4(self.interfaces.addresses())

    def cameras_serials(self) -> list[str]:
        return self.presence.serials()

    def status(self, serial: str = "") -> CameraStatus:
        return self.presence.status(serial)

    def send_command(self, command: str, params: str = "") -> bool:
        """Send a registrator command over the status connection."""
        return self._connection.send(build_request(command, params))

    def sweep(self) -> bool:
        """Drop cameras not reported since the last poll."""
        removed = self.presence.sweep()
        if removed:
            self._emit_cameras_updated()
        return bool(removed)

    def _poll(self) -> bool:
        if self.sweep_on_poll:
            self.sweep()
        self.presence.unmark_all()
        sent = self.send_command(RegistratorCommand.GET_STATUS.command)
        if not sent:
            _logger.debug("Registrator %s not connected, poll skipped", self.name)
        return sent

    def _expire(self) -> None:
        _logger.warning("Registrator %s status poll timed out", self.name)
        if self.presence.clear():
            self._emit_cameras_updated()

    def _handle_data(self, data: bytes) -> None:
        if self._closed:
            return
        dispatched = self._replies.feed(data)
        if dispatched and self.reply_cancels_timeout:
            self.scheduler.reply_received()

    def _handle_status(self, serial: str, status: CameraStatus) -> None:
        if self.presence.record(serial, status):
            self._emit_cameras_updated()
        if self.on_status_received is not None and not self._closed:
            try:
                self.on_status_received(serial, status)
            except Exception:
                _logger.exception("Status subscriber failed for camera %s", serial)

    def _handle_connection_state(self, state: ConnectionState) -> None:
        if state is ConnectionState.DISCONNECTED:
            self._replies.reset()

    def _emit_cameras_updated(self) -> None:
        if self._closed or self.on_cameras_updated is None:
            return
        try:
            self.on_cameras_updated()
        except Exception:
            _logger.exception("Camera list subscriber failed on %s", self.name)
