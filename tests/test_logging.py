"""
Tests for the logging module.

Tests verify:
- Quiet suppresses info but not warnings or errors
- Debug needs Verbose
- JSON output goes to stderr
"""

import json

import pytest
import structlog

from buildversion.logging import (
    _make_level_filter,
    configure_logging,
    get_logger,
    is_configured,
    reset_logging,
)


def passes(quiet: bool, verbose: bool, level: str) -> bool:
    level_filter = _make_level_filter(quiet, verbose)
    try:
        level_filter(None, level, {"event": "x"})
    except structlog.DropEvent:
        return False
    return True


class TestLevelFilter:
    @pytest.mark.parametrize("quiet,verbose,level,expected", [
        (False, False, "debug", False),
        (False, False, "info", True),
        (False, False, "warning", True),
        (True, False, "info", False),
        (True, False, "warning", True),
        (True, False, "error", True),
        (False, True, "debug", True),
        (True, True, "debug", True),
        (True, True, "info", False),
    ])
    def test_filter(self, quiet, verbose, level, expected):
        assert passes(quiet, verbose, level) is expected


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def unconfigured(self, configured_logging):
        reset_logging()

    def test_configured_flag(self):
        assert not is_configured()
        configure_logging()
        assert is_configured()

    def test_second_call_is_noop_without_force(self, capsys):
        configure_logging(log_format="json")
        configure_logging(quiet=True)
        get_logger("t").info("still_shown")
        assert "still_shown" in capsys.readouterr().err

    def test_json_to_stderr(self, capsys):
        configure_logging(log_format="json", force=True)
        get_logger("buildversion.test").info("hello", count=2)
        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "hello"
        assert record["count"] == 2
        assert record["level"] == "info"
        assert record["logger_name"] == "buildversion.test"

    def test_quiet_drops_info(self, capsys):
        configure_logging(quiet=True, log_format="json", force=True)
        log = get_logger("t")
        log.info("hidden")
        log.error("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err
