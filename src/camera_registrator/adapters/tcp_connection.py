"""TCP connection to the registrator status port."""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

_logger = logging.getLogger(__name__)

StreamPair = tuple[asyncio.StreamReader, asyncio.StreamWriter]


class ConnectionState(Enum):
    """Transport state of the status connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class Connection(Protocol):
    """Interface for a best-effort byte channel to the registrator."""

    @property
    def state(self) -> ConnectionState:
        """Return the current transport state."""

    def connect(self) -> None:
        """Start connecting in the background."""

    def send(self, data: bytes) -> bool:
        """Write bytes if connected and report whether they were written."""

    async def close(self) -> None:
        """Tear down the connection and stop reconnecting."""


@dataclass
class TcpConnection(Connection):
    """Asyncio stream connection that reconnects forever after a fixed delay."""

    host: str
    port: int
    on_data: Callable[[bytes], None]
    on_state_changed: Callable[[ConnectionState], None] | None = None
    reconnect_delay: float = 1.0
    connect_timeout: float = 5.0
    read_chunk_size: int = 65536
    opener: Callable[[str, int], Awaitable[StreamPair]] = asyncio.open_connection
    _state: ConnectionState = field(default=ConnectionState.DISCONNECTED, init=False)
    _writer: asyncio.StreamWriter | None = field(default=None, init=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False)
    _closed: bool = field(default=False, init=False)

    @property
    def state(self) -> ConnectionState:
        return self._state

    def connect(self) -> None:
        """Start the connect/reconnect loop if it is not already running."""
        if self._closed:
            return
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._run())

    def send(self, data: bytes) -> bool:
        """Write bytes without buffering when disconnected."""
        writer = self._writer
        if self._state is not ConnectionState.CONNECTED or writer is None:
            return False
        if writer.is_closing():
            return False
        try:
            writer.write(data)
        except (OSError, RuntimeError) as exc:
            _logger.warning("Write to %s:%s failed: %s", self.host, self.port, exc)
            return False
        return True

    async def close(self) -> None:
        """Cancel the reconnect loop and close the socket."""
        self._closed = True
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._writer = None
        self._state = ConnectionState.DISCONNECTED

    async def _run(self) -> None:
        while True:
            try:
                await self._serve_once()
            except Exception:
                _logger.exception(
                    "Status connection to %s:%s failed", self.host, self.port
                )
            _logger.info(
                "Reconnecting to %s:%s in %.1fs",
                self.host,
                self.port,
                self.reconnect_delay,
            )
            await asyncio.sleep(self.reconnect_delay)

    async def _serve_once(self) -> None:
        self._set_state(ConnectionState.CONNECTING)
        try:
            reader, writer = await asyncio.wait_for(
                self.opener(self.host, self.port), timeout=self.connect_timeout
            )
        except (OSError, asyncio.TimeoutError) as exc:
            _logger.warning("Connect to %s:%s failed: %s", self.host, self.port, exc)
            self._set_state(ConnectionState.DISCONNECTED)
            return

        self._writer = writer
        self._set_state(ConnectionState.CONNECTED)
        try:
            while chunk := await reader.read(self.read_chunk_size):
                self.on_data(chunk)
        except OSError as exc:
            _logger.warning("Connection to %s:%s lost: %s", self.host, self.port, exc)
        finally:
            self._writer = None
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()
            self._set_state(ConnectionState.DISCONNECTED)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        _logger.info(
            "Registrator %s:%s %s -> %s",
            self.host,
            self.port,
            self._state.value,
            state.value,
        )
        self._state = state
        if self.on_state_changed is not None and not self._closed:
            self.on_state_changed(state)
