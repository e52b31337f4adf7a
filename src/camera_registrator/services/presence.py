"""Mark and sweep tracking of cameras behind a registrator."""

import logging
from dataclasses import dataclass, field

from camera_registrator.domain.cameras import CameraEntry, CameraStatus

_logger = logging.getLogger(__name__)


@dataclass
class PresenceReconciler:
    """Owns the serial to camera entry map."""

    entries: dict[str, CameraEntry] = field(default_factory=dict)

    def unmark_all(self) -> None:
        """Start a new cycle's mark phase."""
        for entry in self.entries.values():
            entry.seen = False

    def record(self, serial: str, status: CameraStatus) -> bool:
        """Store a status sighting and return True if the camera is new."""
        entry = self.entries.get(serial)
        if entry is not None:
            entry.status = status
            entry.seen = True
            return False
        self.entries[serial] = CameraEntry(status=status, seen=False)
        _logger.info("Camera %s appeared", serial)
        return True

    def sweep(self) -> list[str]:
        """Remove cameras not seen since the last unmark."""
        absent = [serial for serial, entry in self.entries.items() if not entry.seen]
        for serial in absent:
            del self.entries[serial]
            _logger.info("Camera %s disappeared", serial)
        return absent

    def clear(self) -> bool:
        """Forget every camera and return True if any were known."""
        had_entries = bool(self.entries)
        self.entries.clear()
        return had_entries

    def serials(self) -> list[str]:
        return list(self.entries)

    def status(self, serial: str = "") -> CameraStatus:
        """Return a camera's status, any status for an empty key, or a default."""
        if not serial:
            first = next(iter(self.entries.values()), None)
            return first.status if first is not None else CameraStatus()
        entry = self.entries.get(serial)
        return entry.status if entry is not None else CameraStatus()
