"""Domain models for registrator cameras."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RecordSpan:
    """Offsets of the next record found in a reply buffer."""

    start: int = -1
    end: int = -1

    @property
    def is_complete(self) -> bool:
        return self.start >= 0 and self.end > self.start

    @property
    def is_partial(self) -> bool:
        return self.start >= 0 and self.end <= self.start


@dataclass(frozen=True)
class CameraStatus:
    """Decoded status payload for a single camera."""

    serial: int = 0
    fields: dict[str, object] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.serial == 0 and not self.fields


@dataclass
class CameraEntry:
    """Last known status of a camera and whether it was seen this cycle."""

    status: CameraStatus
    seen: bool = False
