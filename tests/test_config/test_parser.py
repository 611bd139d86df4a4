"""Tests for the block config parser."""

from pathlib import Path

import pytest

from ssh_ogm.config.parser import (
    load_proxies,
    load_servers,
    parse_proxies,
    parse_servers,
)
from ssh_ogm.errors import ConfigError, ConfigParseError
from ssh_ogm.models import ProxyEntry, ProxyType, ServerEntry


@pytest.fixture
def sample_config(tmp_path: Path) -> Path:
    """Create sample server config file."""
    config = tmp_path / "config"
    config.write_text("""
# SSH OGM Server Configuration
server1 {
    host: 192.168.1.1
    user: root
    port: 22
    identity: ~/.ssh/id_rsa
}

server2 {
    # behind the office proxy
    host: 10.0.0.1
    proxy: proxy1
}
""")
    return config


def test_parse_server_config(sample_config: Path) -> None:
    """Parser extracts every field of a server block."""
    servers = load_servers(sample_config)

    assert servers[0] == ServerEntry(
        alias="server1",
        host="192.168.1.1",
        user="root",
        port=22,
        identity_file="~/.ssh/id_rsa",
    )
    assert servers[1] == ServerEntry(alias="server2", host="10.0.0.1", proxy="proxy1")


def test_parse_proxy_config() -> None:
    """Parser extracts every field of a proxy block."""
    proxies = parse_proxies("""
proxy1 {
    host: proxy.example.com
    port: 1080
    type: socks5
    user: bob
    password: s3cret:with:colons
}
""")

    assert proxies == [
        ProxyEntry(
            alias="proxy1",
            host="proxy.example.com",
            port=1080,
            type=ProxyType.SOCKS5,
            user="bob",
            password="s3cret:with:colons",
        )
    ]


def test_single_line_blocks_in_input_order() -> None:
    """One-line blocks yield entries in order with only host set."""
    servers = parse_servers("s1 { host: 1.1.1.1 }\ns2 { host: 2.2.2.2 }")

    assert servers == [
        ServerEntry(alias="s1", host="1.1.1.1"),
        ServerEntry(alias="s2", host="2.2.2.2"),
    ]
    assert servers[0].user == ""
    assert servers[0].port is None
    assert servers[0].proxy is None


def test_unknown_key_is_error() -> None:
    """Unknown keys inside a block are rejected."""
    with pytest.raises(ConfigParseError, match="unknown key 'foo'") as exc_info:
        parse_servers("a { foo: bar }")

    assert exc_info.value.line == 1


def test_unterminated_block_is_error() -> None:
    """A block still open at end of input is rejected."""
    with pytest.raises(ConfigParseError, match="unterminated block"):
        parse_servers("a { host: x")


def test_proxy_keys_rejected_in_server_file() -> None:
    """Server and proxy files accept different keys."""
    with pytest.raises(ConfigParseError, match="unknown key 'type'"):
        parse_servers("a {\n    type: socks5\n}")
    with pytest.raises(ConfigParseError, match="unknown key 'identity'"):
        parse_proxies("p {\n    identity: ~/.ssh/id\n}")


@pytest.mark.parametrize(
    ("text", "line", "reason"),
    [
        ("a {\n  b {\n}", 2, "nested"),
        ("}", 1, "unexpected closing brace"),
        ("\n\nhost: 1.2.3.4", 3, "outside block"),
        ("{\n}", 1, "missing alias"),
        ("a {\n  host\n}", 2, "expected 'key: value'"),
        ("a {\n  port: ssh\n}", 2, "invalid port"),
        ("a {\n  port: 70000\n}", 2, "out of range"),
        ("a { host: x }\na { host: y }", 2, "duplicate alias"),
    ],
)
def test_parse_errors_carry_line_numbers(text: str, line: int, reason: str) -> None:
    """Grammar violations report the offending line."""
    with pytest.raises(ConfigParseError, match=reason) as exc_info:
        parse_servers(text)

    assert exc_info.value.line == line
    assert str(exc_info.value).startswith(f"line {line}:")


def test_unknown_proxy_type_is_error() -> None:
    """Proxy type must be socks5 or http."""
    with pytest.raises(ConfigParseError, match="unknown proxy type"):
        parse_proxies("p {\n  host: x\n  type: socks4\n}")


def test_proxy_type_defaults_to_socks5() -> None:
    """Proxies without a type tunnel over SOCKS5."""
    proxy = parse_proxies("p { host: gw }")[0]

    assert proxy.type is None
    assert proxy.proxy_type is ProxyType.SOCKS5


def test_closing_brace_on_value_line() -> None:
    """A block can be closed at the end of its last key line."""
    servers = parse_servers("a {\n  host: 1.2.3.4\n  user: admin }")

    assert servers == [ServerEntry(alias="a", host="1.2.3.4", user="admin")]


def test_comments_and_blank_lines_ignored() -> None:
    """Comments and blank lines are skipped inside and outside blocks."""
    servers = parse_servers("# header\n\na {\n\n  # note\n  host: h\n}\n# trailer\n")

    assert [s.alias for s in servers] == ["a"]


def test_empty_input_returns_empty() -> None:
    """Empty config files parse to no entries."""
    assert parse_servers("") == []
    assert parse_proxies("# only comments\n") == []


def test_load_missing_file_raises_config_error(tmp_path: Path) -> None:
    """Unreadable files raise ConfigError rather than OSError."""
    with pytest.raises(ConfigError, match="Cannot read"):
        load_proxies(tmp_path / "nonexistent")
