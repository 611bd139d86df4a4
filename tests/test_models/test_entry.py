"""Tests for config entry models."""

import dataclasses

import pytest

from ssh_ogm.models import ProbeResult, ProbeStatus, ProxyEntry, ProxyType, ServerEntry


def test_server_target_with_user():
    """ServerEntry should build user@host when a user is set."""
    server = ServerEntry(alias="web", host="10.0.0.1", user="root")
    assert server.target == "root@10.0.0.1"


def test_server_target_without_user():
    server = ServerEntry(alias="web", host="10.0.0.1")
    assert server.target == "10.0.0.1"
    assert server.port is None
    assert server.proxy is None


def test_proxy_defaults_to_socks5():
    """ProxyEntry should report SOCKS5 when no type is configured."""
    proxy = ProxyEntry(alias="gw", host="proxy.local", port=1080)
    assert proxy.type is None
    assert proxy.proxy_type is ProxyType.SOCKS5
    assert proxy.address == "proxy.local:1080"


def test_proxy_address_without_port():
    proxy = ProxyEntry(alias="gw", host="proxy.local", type=ProxyType.HTTP)
    assert proxy.address == "proxy.local"
    assert proxy.proxy_type is ProxyType.HTTP


def test_entries_are_immutable():
    server = ServerEntry(alias="web", host="10.0.0.1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        server.host = "10.0.0.2"  # type: ignore[misc]


def test_probe_result_default_generation():
    result = ProbeResult(alias="web", status=ProbeStatus.ONLINE)
    assert result.generation == 0
