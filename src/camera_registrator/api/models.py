"""Pydantic response models for the status API."""

from pydantic import BaseModel

from camera_registrator.domain.cameras import CameraStatus


class RegistratorInfo(BaseModel):
    """Identity and runtime state of the registrator session."""

    name: str
    ip: str
    mac: str
    wol: str
    status_port: int
    motion_client_port: int
    connection_state: str
    poll_state: str
    cameras: int


class CameraList(BaseModel):
    """Currently known camera serials."""

    serials: list[str]


class CameraStatusResponse(BaseModel):
    """Last status reported for a camera."""

    serial: str
    fields: dict[str, object]

    @classmethod
    def from_status(cls, status: CameraStatus) -> "CameraStatusResponse":
        return cls(serial=str(status.serial), fields=status.fields)
