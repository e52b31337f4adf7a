"""Local network interface enumeration."""

import ipaddress
import socket
from dataclasses import dataclass
from typing import Protocol

import psutil


class InterfaceLister(Protocol):
    """Interface for listing local network addresses."""

    def addresses(self) -> list[str]:
        """Return local addresses in interface order."""


@dataclass
class PsutilInterfaceLister(InterfaceLister):
    """Interface lister backed by psutil."""

    def addresses(self) -> list[str]:
        """Return every IPv4 address bound to a local interface."""
        result: list[str] = []
        for entries in psutil.net_if_addrs().values():
            result.extend(
                entry.address for entry in entries if entry.family == socket.AF_INET
            )
        return result


def first_usable_ipv4(addresses: list[str]) -> str:
    """Return the first non-loopback IPv4 address, or an empty string."""
    # TODO: prefer the interface on the registrator's subnet over the first one.
    for raw in addresses:
        try:
            address = ipaddress.ip_address(raw)
        except ValueError:
            continue
        if address.version == 4 and not address.is_loopback:
            return str(address)
    return ""
