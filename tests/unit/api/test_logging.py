import json
import logging

import pytest
from pythonjsonlogger import jsonlogger

from vortex_auth.api.app import build_log_formatter


def make_record() -> logging.LogRecord:
    return logging.LogRecord(
        name="vortex_auth.api.app",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Client error on %s",
        args=("/api/auth/login",),
        exc_info=None,
    )


def test_development_logs_readable_lines():
    formatter = build_log_formatter("development")

    assert not isinstance(formatter, jsonlogger.JsonFormatter)
    line = formatter.format(make_record())
    assert " - vortex_auth.api.app - WARNING - Client error on /api/auth/login" in line


@pytest.mark.parametrize("environment", ["staging", "production"])
def test_other_environments_log_json(environment):
    formatter = build_log_formatter(environment)

    assert isinstance(formatter, jsonlogger.JsonFormatter)
    entry = json.loads(formatter.format(make_record()))
    assert entry["level"] == "WARNING"
    assert entry["name"] == "vortex_auth.api.app"
    assert entry["message"] == "Client error on /api/auth/login"
    assert "timestamp" in entry
