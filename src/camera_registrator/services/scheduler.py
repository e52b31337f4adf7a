"""Poll and timeout state machine."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

_logger = logging.getLogger(__name__)


class PollState(Enum):
    """Whether a status request is outstanding."""

    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


@dataclass
class PollScheduler:
    """Two-timer state machine driving status polls.

    A repeating poll timer calls ``on_poll``, which returns whether a request
    was sent. A sent request arms a single-shot timeout; if it fires while
    awaiting a reply, ``on_timeout`` runs and the machine returns to idle.
    Replies do not cancel the timeout unless ``reply_received`` is called.
    """

    interval: float
    timeout: float
    on_poll: Callable[[], bool]
    on_timeout: Callable[[], None]
    state: PollState = field(default=PollState.IDLE, init=False)
    _poll_task: asyncio.Task[None] | None = field(default=None, init=False)
    _timeout_handle: asyncio.TimerHandle | None = field(default=None, init=False)

    @property
    def running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def start(self) -> None:
        """Arm the repeating poll timer."""
        if self.running:
            return
        self._poll_task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Cancel both timers and return to idle."""
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        self._cancel_timeout()
        self.state = PollState.IDLE

    def poll(self) -> PollState:
        """Poll timer transition."""
        if self.on_poll():
            self._arm_timeout()
            self.state = PollState.AWAITING_REPLY
        else:
            _logger.debug("Status request not sent, staying %s", self.state.value)
        return self.state

    def expire(self) -> PollState:
        """Timeout timer transition."""
        self._timeout_handle = None
        if self.state is not PollState.AWAITING_REPLY:
            return self.state
        self.state = PollState.IDLE
        self.on_timeout()
        return self.state

    def reply_received(self) -> PollState:
        """Settle an outstanding request early."""
        if self.state is PollState.AWAITING_REPLY:
            self._cancel_timeout()
            self.state = PollState.IDLE
        return self.state

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.poll()
            except Exception:
                _logger.exception("Status poll failed")

    def _arm_timeout(self) -> None:
        self._cancel_timeout()
        loop = asyncio.get_running_loop()
        self._timeout_handle = loop.call_later(self.timeout, self.expire)

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
