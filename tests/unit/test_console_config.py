"""Tests for console configuration."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from rosterdesk.config import DEFAULT_API_URL, ConsoleConfig

pytestmark = pytest.mark.unit


def _env(**values):
    env = {k: v for k, v in os.environ.items() if not k.startswith("ROSTER_")}
    env.update(values)
    return patch.dict(os.environ, env, clear=True)


class TestConsoleConfig:
    """Tests for ConsoleConfig.from_env."""

    def test_defaults(self):
        with _env():
            config = ConsoleConfig.from_env()

        assert config.api_url == DEFAULT_API_URL
        assert config.session_file == Path("~/.rosterdesk/session.json").expanduser()
        assert config.verify_token is False
        assert config.http_timeout is None

    def test_api_url_trailing_slash_removed(self):
        with _env(ROSTER_API_URL="https://roster.example.com/"):
            assert ConsoleConfig.from_env().api_url == "https://roster.example.com"

    def test_api_url_must_be_http(self):
        with _env(ROSTER_API_URL="roster.example.com"):
            with pytest.raises(ValueError, match="ROSTER_API_URL"):
                ConsoleConfig.from_env()

    def test_session_file(self, tmp_path):
        with _env(ROSTER_SESSION_FILE=str(tmp_path / "s.json")):
            assert ConsoleConfig.from_env().session_file == tmp_path / "s.json"

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("YES", True), ("no", False)])
    def test_verify_token(self, value, expected):
        with _env(ROSTER_VERIFY_TOKEN=value):
            assert ConsoleConfig.from_env().verify_token is expected

    def test_timeout(self):
        with _env(ROSTER_HTTP_TIMEOUT="2.5"):
            assert ConsoleConfig.from_env().http_timeout == 2.5

    def test_timeout_not_a_number(self):
        with _env(ROSTER_HTTP_TIMEOUT="soon"):
            with pytest.raises(ValueError, match="number of seconds"):
                ConsoleConfig.from_env()

    @pytest.mark.parametrize("value", ["0", "-3"])
    def test_timeout_must_be_positive(self, value):
        with _env(ROSTER_HTTP_TIMEOUT=value):
            with pytest.raises(ValueError, match="positive"):
                ConsoleConfig.from_env()
