"""Splitting registrator replies into status records."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from camera_registrator.adapters.status_record_parser import RecordParser
from camera_registrator.domain.cameras import CameraStatus

_logger = logging.getLogger(__name__)


@dataclass
class ReplyProcessor:
    """Dispatch every valid record found in an inbound byte buffer.

    By default a record split across two deliveries is lost. With
    ``carry_partial_records`` the unfinished tail is kept and prepended to
    the next delivery, up to ``max_pending_bytes``. A carried tail is
    abandoned once a delivery carries a complete record of its own that the
    tail would otherwise absorb.
    """

    parser: RecordParser
    on_record: Callable[[str, CameraStatus], None]
    carry_partial_records: bool = False
    max_pending_bytes: int = 1 << 20
    _pending: bytes = field(default=b"", init=False)

    @property
    def pending(self) -> bytes:
        return self._pending

    def feed(self, data: bytes) -> int:
        """Process one delivery and return the number of dispatched records."""
        carried = len(self._pending)
        buffer = self._pending + data
        self._pending = b""
        dispatched = 0

        span = self.parser.find(buffer)
        if carried and span.is_partial and span.start < carried:
            # a carried tail that never closes must not swallow fresh records
            fresh = self.parser.find(data)
            if fresh.is_complete:
                _logger.debug("Discarding %s unterminated carried bytes", carried)
                buffer = data
                span = fresh
        while span.is_complete:
            status = self.parser.decode(buffer, span)
            if status.serial > 0:
                self.on_record(str(status.serial), status)
                dispatched += 1
            else:
                _logger.debug("Ignoring record with serial %s", status.serial)
            buffer = buffer[span.end :]
            span = self.parser.find(buffer)

        if self.carry_partial_records and span.is_partial:
            tail = buffer[span.start :]
            if len(tail) <= self.max_pending_bytes:
                self._pending = tail
            else:
                _logger.warning("Dropping %s byte partial record", len(tail))
        elif buffer.strip():
            _logger.debug("Dropping %s trailing reply bytes", len(buffer))
        return dispatched

    def reset(self) -> None:
        """Forget any carried-over partial record."""
        self._pending = b""
