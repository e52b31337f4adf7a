"""Registrator command table."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class RegistratorCommandSpec:
    """Declarative registrator command definition."""

    command: str
    description: str


class RegistratorCommand(Enum):
    """Enum of registrator commands (single source of truth)."""

    GET_STATUS = RegistratorCommandSpec("getstatus", "Report status of all cameras")
    REBOOT = RegistratorCommandSpec("reboot", "Restart the registrator")
    SET_MOTION_CLIENT = RegistratorCommandSpec(
        "setmotionclient", "Point motion events at a client address"
    )
    WAKE_ON_LAN = RegistratorCommandSpec("wol", "Wake cameras behind the registrator")

    @property
    def command(self) -> str:
        return self.value.command


def build_request(command: str, params: str = "") -> bytes:
    """Build a raw GET request line for a registrator command."""
    if params:
        request = f"GET /{command}?{params} HTTP/1.1"
    else:
        request = f"GET /{command} HTTP/1.1"
    return request.encode("utf-8")


def registrator_commands() -> list[dict[str, str]]:
    """Return the command table formatted for API responses."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in RegistratorCommand
    ]
