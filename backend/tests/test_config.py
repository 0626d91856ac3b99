"""Tests for application settings validation."""

import pytest
from pydantic import ValidationError

from bookmyenv.core.config import Settings


class TestDisplayTimezone:
    def test_default_is_utc(self):
        assert Settings(_env_file=None).DISPLAY_TIMEZONE == "UTC"

    def test_accepts_iana_name(self):
        config = Settings(_env_file=None, DISPLAY_TIMEZONE="Australia/Sydney")
        assert config.DISPLAY_TIMEZONE == "Australia/Sydney"

    @pytest.mark.parametrize("name", ["Mars/Base", "", "../etc/passwd"])
    def test_rejects_unknown_timezone(self, name):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            Settings(_env_file=None, DISPLAY_TIMEZONE=name)

    def test_rejects_unknown_timezone_from_environment(self, monkeypatch):
        monkeypatch.setenv("DISPLAY_TIMEZONE", "Mars/Base")
        with pytest.raises(ValidationError, match="Unknown timezone"):
            Settings(_env_file=None)


class TestDispatchMode:
    @pytest.mark.parametrize("mode", ["inline", "worker"])
    def test_accepts_known_modes(self, mode):
        config = Settings(_env_file=None, NOTIFICATION_DISPATCH_MODE=mode)
        assert config.NOTIFICATION_DISPATCH_MODE == mode

    @pytest.mark.parametrize("mode", ["Worker", "queue", ""])
    def test_rejects_unknown_mode(self, mode):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, NOTIFICATION_DISPATCH_MODE=mode)


class TestCorsOrigins:
    def test_splits_and_strips(self):
        config = Settings(
            _env_file=None, CORS_ORIGINS=" https://a.example.com , ,https://b.example.com"
        )
        assert config.cors_origin_list == ["https://a.example.com", "https://b.example.com"]
