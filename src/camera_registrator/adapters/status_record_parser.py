"""Status record parser for registrator replies."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from camera_registrator.domain.cameras import CameraStatus, RecordSpan

_logger = logging.getLogger(__name__)

_OPEN = ord("{")
_CLOSE = ord("}")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")


class RecordParser(Protocol):
    """Interface for locating and decoding status records."""

    def find(self, buffer: bytes) -> RecordSpan:
        """Return the span of the first record in the buffer."""

    def decode(self, buffer: bytes, span: RecordSpan) -> CameraStatus:
        """Decode the record delimited by a complete span."""


class StatusRecordModel(BaseModel):
    """Wire model of a single status record."""

    model_config = ConfigDict(extra="allow")

    serial: int = 0


@dataclass
class JsonStatusRecordParser(RecordParser):
    """Parser for concatenated JSON status objects.

    Anything outside a top-level ``{...}`` object is noise. Braces inside
    JSON strings do not count towards nesting.
    """

    def find(self, buffer: bytes) -> RecordSpan:
        """Locate the first top-level JSON object in the buffer."""
        start = buffer.find(b"{")
        if start < 0:
            return RecordSpan()
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(buffer)):
            byte = buffer[index]
            if in_string:
                if escaped:
                    escaped = False
                elif byte == _BACKSLASH:
                    escaped = True
                elif byte == _QUOTE:
                    in_string = False
                continue
            if byte == _QUOTE:
                in_string = True
            elif byte == _OPEN:
                depth += 1
            elif byte == _CLOSE:
                depth -= 1
                if depth == 0:
                    return RecordSpan(start=start, end=index + 1)
        return RecordSpan(start=start, end=-1)

    def decode(self, buffer: bytes, span: RecordSpan) -> CameraStatus:
        """Decode a record, falling back to an empty status on bad data."""
        if not span.is_complete:
            return CameraStatus()
        try:
            record = StatusRecordModel.model_validate_json(
                buffer[span.start : span.end]
            )
        except ValidationError as exc:
            _logger.debug("Dropping malformed status record: %s", exc.errors()[:1])
            return CameraStatus()
        return CameraStatus(serial=record.serial, fields=dict(record.model_extra or {}))
