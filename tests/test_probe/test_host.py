"""Tests for host metadata lookup."""

from __future__ import annotations

import socket
from unittest.mock import patch

from hostwatch.probe.host import collect_host_metadata, local_ipv4


class TestLocalIpv4:
    def test_first_ipv4_returned(self) -> None:
        infos = [
            (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("10.0.0.5", 0)),
            (socket.AF_INET, socket.SOCK_DGRAM, 17, "", ("10.0.0.6", 0)),
        ]
        with patch("hostwatch.probe.host.socket.getaddrinfo", return_value=infos):
            assert local_ipv4("box") == "10.0.0.5"

    def test_no_addresses(self) -> None:
        with patch("hostwatch.probe.host.socket.getaddrinfo", return_value=[]):
            assert local_ipv4("box") == "No IPv4 found"

    def test_resolution_error(self) -> None:
        with patch(
            "hostwatch.probe.host.socket.getaddrinfo",
            side_effect=socket.gaierror("nope"),
        ):
            assert local_ipv4("box") == "Unknown"


class TestCollectHostMetadata:
    def test_fields_populated(self) -> None:
        with (
            patch("hostwatch.probe.host.socket.gethostname", return_value="web-01"),
            patch("hostwatch.probe.host.getpass.getuser", return_value="svc"),
            patch("hostwatch.probe.host.local_ipv4", return_value="192.168.1.5"),
        ):
            meta = collect_host_metadata()
        assert meta.hostname == "web-01"
        assert meta.user == "svc"
        assert meta.ip_address == "192.168.1.5"

    def test_unknown_user(self) -> None:
        with (
            patch("hostwatch.probe.host.socket.gethostname", return_value="web-01"),
            patch("hostwatch.probe.host.getpass.getuser", side_effect=OSError("no user")),
            patch("hostwatch.probe.host.local_ipv4", return_value="192.168.1.5"),
        ):
            meta = collect_host_metadata()
        assert meta.user == "Unknown"
