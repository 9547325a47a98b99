"""Host identity lookup for alert reports."""

from __future__ import annotations

import getpass
import socket

from hostwatch.core.types import HostMetadata


def local_ipv4(hostname: str) -> str:
    """First IPv4 address the hostname resolves to."""
    try:
        infos = socket.getaddrinfo(hostname, None, family=socket.AF_INET)
    except OSError:
        return "Unknown"
    for info in infos:
        addr = info[4][0]
        if addr:
            return str(addr)
    return "No IPv4 found"


def collect_host_metadata() -> HostMetadata:
    hostname = socket.gethostname()
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "Unknown"
    return HostMetadata(
        hostname=hostname,
        user=user,
        ip_address=local_ipv4(hostname),
    )
