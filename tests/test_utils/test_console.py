"""Tests for the colorful log formatter."""

import logging
import sys

from ssh_ogm.utils.console import ColorfulFormatter


def make_record(name: str, msg: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_plain_format_has_no_escape_codes() -> None:
    formatter = ColorfulFormatter(use_colors=False)
    line = formatter.format(make_record("ssh_ogm.services.prober", "probe a -> online"))

    assert "\033[" not in line
    assert "INFO" in line
    assert "services.prober" in line
    assert line.endswith("probe a -> online")


def test_colors_highlight_status_and_address() -> None:
    formatter = ColorfulFormatter(use_colors=True)
    line = formatter.format(
        make_record("ssh_ogm.services.prober", "10.0.0.1:22 -> offline", logging.WARNING)
    )

    assert "\033[91moffline\033[0m" in line
    assert "\033[95m10.0.0.1:22\033[0m" in line


def test_exception_is_included() -> None:
    formatter = ColorfulFormatter(use_colors=False)
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord(
            "ssh_ogm", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    line = formatter.format(record)
    assert "ValueError: boom" in line
