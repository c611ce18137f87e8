"""Tests for atlas_auth/core/logging.py - logging configuration."""

import json
import logging

import pytest

from atlas_auth.core.logging import JsonFormatter, configure_logging, env_bool


@pytest.mark.parametrize(
    "raw,expected",
    [("1", True), ("true", True), (" Yes ", True), ("off", False), ("0", False)],
)
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool):
    """Test truthy and falsy environment values."""
    monkeypatch.setenv("ATLAS_FLAG", raw)

    assert env_bool("ATLAS_FLAG", default=not expected) is expected


def test_env_bool_default(monkeypatch: pytest.MonkeyPatch):
    """Test the default applies when the variable is unset."""
    monkeypatch.delenv("ATLAS_FLAG", raising=False)

    assert env_bool("ATLAS_FLAG", default=True) is True


def test_json_formatter_includes_extras():
    """Test known extras are copied into the JSON line."""
    record = logging.LogRecord(
        name="atlas_auth.request",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="GET %s",
        args=("/auth",),
        exc_info=None,
    )
    record.status_code = 200
    record.user_id = "42"
    record.password = "never-logged"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "GET /auth"
    assert payload["level"] == "INFO"
    assert payload["status_code"] == 200
    assert payload["user_id"] == "42"
    assert "password" not in payload


def test_configure_logging_respects_level(monkeypatch: pytest.MonkeyPatch):
    """Test LOG_LEVEL sets the root level."""
    monkeypatch.setenv("LOG_LEVEL", "warning")

    configure_logging()
    try:
        assert logging.getLogger().level == logging.WARNING
    finally:
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        configure_logging()
