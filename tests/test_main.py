"""Tests for main entry point."""

import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ssh_ogm.__main__ import configure_logging, main
from ssh_ogm.config import Settings
from ssh_ogm.config.manager import SERVER_CONFIG_HEADER
from ssh_ogm.errors import LaunchError
from ssh_ogm.models import ProxyEntry, ServerEntry
from ssh_ogm.services.editor import EditorMode
from ssh_ogm.tui.app import DashboardResult
from ssh_ogm.tui.state import LaunchEditor, Outcome


@pytest.fixture(autouse=True)
def isolated_logging():
    """Restore the package logger after each test."""
    pkg_logger = logging.getLogger("ssh_ogm")
    handlers = list(pkg_logger.handlers)
    propagate = pkg_logger.propagate
    level = pkg_logger.level
    pkg_logger.handlers.clear()
    yield
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers[:] = handlers
    pkg_logger.propagate = propagate
    pkg_logger.setLevel(level)


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("SSH_OGM_HOME", str(tmp_path / "ogm"))
    monkeypatch.setenv("SSH_OGM_LOG_FILE", str(tmp_path / "ogm.log"))
    return tmp_path / "ogm"


@pytest.fixture
def tty():
    with patch("ssh_ogm.__main__.sys.stdin") as stdin, patch(
        "ssh_ogm.__main__.TerminalKeySource"
    ):
        stdin.isatty.return_value = True
        yield stdin


def write_config(home: Path, servers: str, proxies: str = "") -> None:
    home.mkdir(parents=True, exist_ok=True)
    (home / "config").write_text(SERVER_CONFIG_HEADER + servers)
    (home / "proxies.conf").write_text(proxies)


def dashboard_returning(result: DashboardResult) -> MagicMock:
    app_cls = MagicMock()
    app_cls.return_value.run = AsyncMock(return_value=result)
    return app_cls


class TestConfigureLogging:
    def test_logs_to_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "ogm.log"
        configure_logging(Settings(home=tmp_path, log_file=str(log_file), log_level="DEBUG"))

        logging.getLogger("ssh_ogm.services.prober").debug("probe a -> online")
        for handler in logging.getLogger("ssh_ogm").handlers:
            handler.flush()

        content = log_file.read_text()
        assert "probe a -> online" in content
        assert "services.prober" in content
        assert "\033[" not in content

    def test_stderr_when_dash(self, tmp_path: Path) -> None:
        configure_logging(Settings(home=tmp_path, log_file="-"))

        handler = logging.getLogger("ssh_ogm").handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert not isinstance(handler, logging.FileHandler)
        assert not (tmp_path / "ssh-ogm.log").exists()

    def test_quiets_library_loggers(self, tmp_path: Path) -> None:
        configure_logging(Settings(home=tmp_path, log_file="-"))
        assert logging.getLogger("asyncssh").level == logging.WARNING


class TestMain:
    def test_requires_terminal(self, home: Path) -> None:
        with patch("ssh_ogm.__main__.sys.stdin") as stdin:
            stdin.isatty.return_value = False
            assert main() == 1

    def test_first_run_creates_config(self, home: Path, tty) -> None:
        with patch(
            "ssh_ogm.__main__.run_first_run", new_callable=AsyncMock, return_value=None
        ) as first_run, patch("ssh_ogm.__main__.DashboardApp") as app_cls:
            assert main() == 0

        first_run.assert_awaited_once()
        app_cls.assert_not_called()
        assert (home / "config").read_text() == SERVER_CONFIG_HEADER
        assert (home / "proxies.conf").exists()

    def test_first_run_opens_chosen_editor(self, home: Path, tty) -> None:
        with patch(
            "ssh_ogm.__main__.run_first_run",
            new_callable=AsyncMock,
            return_value=EditorMode.TERMINAL,
        ), patch("ssh_ogm.__main__.open_editor") as open_editor:
            assert main() == 0

        open_editor.assert_called_once_with(home / "config", EditorMode.TERMINAL)

    def test_parse_error_exits_with_failure(self, home: Path, tty) -> None:
        write_config(home, "web {\n    colour: blue\n}\n")

        with patch("ssh_ogm.__main__.DashboardApp") as app_cls:
            assert main() == 1

        app_cls.assert_not_called()

    def test_quit_without_selection(self, home: Path, tty) -> None:
        write_config(home, "web { host: 10.0.0.1 }\n")
        app_cls = dashboard_returning(DashboardResult(outcome=Outcome.QUIT))

        with patch("ssh_ogm.__main__.DashboardApp", app_cls), patch(
            "ssh_ogm.__main__.connect"
        ) as connect:
            assert main() == 0

        connect.assert_not_called()
        controller = app_cls.call_args.args[0]
        assert [s.alias for s in controller.servers] == ["web"]

    def test_selected_server_is_launched_with_proxy(self, home: Path, tty) -> None:
        write_config(
            home,
            "web {\n    host: 10.0.0.1\n    proxy: gw\n}\n",
            "gw {\n    host: proxy.local\n    port: 1080\n}\n",
        )
        selected = ServerEntry(alias="web", host="10.0.0.1", proxy="gw")
        app_cls = dashboard_returning(
            DashboardResult(outcome=Outcome.SELECTED, selected=selected)
        )

        with patch("ssh_ogm.__main__.DashboardApp", app_cls), patch(
            "ssh_ogm.__main__.connect"
        ) as connect:
            assert main() == 0

        entry, proxy = connect.call_args.args
        assert entry == selected
        assert isinstance(proxy, ProxyEntry)
        assert proxy.alias == "gw"

    def test_missing_proxy_aborts(self, home: Path, tty) -> None:
        write_config(home, "web {\n    host: 10.0.0.1\n    proxy: nope\n}\n")
        selected = ServerEntry(alias="web", host="10.0.0.1", proxy="nope")
        app_cls = dashboard_returning(
            DashboardResult(outcome=Outcome.SELECTED, selected=selected)
        )

        with patch("ssh_ogm.__main__.DashboardApp", app_cls), patch(
            "ssh_ogm.__main__.connect"
        ) as connect:
            assert main() == 1

        connect.assert_not_called()

    def test_launch_failure(self, home: Path, tty) -> None:
        write_config(home, "web { host: 10.0.0.1 }\n")
        selected = ServerEntry(alias="web", host="10.0.0.1")
        app_cls = dashboard_returning(
            DashboardResult(outcome=Outcome.SELECTED, selected=selected)
        )

        with patch("ssh_ogm.__main__.DashboardApp", app_cls), patch(
            "ssh_ogm.__main__.connect", side_effect=LaunchError("ssh not found")
        ):
            assert main() == 1

    def test_editor_runs_after_dashboard(self, home: Path, tty) -> None:
        write_config(home, "web { host: 10.0.0.1 }\n")
        editor = LaunchEditor(path=home / "config", mode=EditorMode.SYSTEM)
        app_cls = dashboard_returning(
            DashboardResult(outcome=Outcome.QUIT, message="restart", editor=editor)
        )

        with patch("ssh_ogm.__main__.DashboardApp", app_cls), patch(
            "ssh_ogm.__main__.open_editor"
        ) as open_editor:
            assert main() == 0

        open_editor.assert_called_once_with(home / "config", EditorMode.SYSTEM)
