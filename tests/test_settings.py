"""Tests for environment settings."""

import pytest

from hubot_signal.errors import ConfigurationError
from hubot_signal.infra.settings import SignalSettings, load_settings

BASE_ENV = {
    "HUBOT_SIGNAL_NUMBER": "+15550001111",
    "HUBOT_SIGNAL_PASSWORD": "pw",
}


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_required_values(self):
        settings = load_settings(BASE_ENV)

        assert settings.number == "+15550001111"
        assert settings.password == "pw"
        assert settings.verification_code is None
        assert settings.device_id == 1

    def test_reads_os_environ_by_default(self, monkeypatch):
        for key, value in BASE_ENV.items():
            monkeypatch.setenv(key, value)
        monkeypatch.setenv("HUBOT_SIGNAL_CODE", "123-456")

        settings = load_settings()

        assert settings.verification_code == "123-456"

    def test_blank_code_is_unset(self):
        settings = load_settings({**BASE_ENV, "HUBOT_SIGNAL_CODE": "  "})
        assert settings.verification_code is None

    def test_device_id(self):
        settings = load_settings({**BASE_ENV, "HUBOT_SIGNAL_DEVICE_ID": "2"})
        assert settings.device_id == 2
        assert settings.device_address == "+15550001111.2"

    @pytest.mark.parametrize("missing", ["HUBOT_SIGNAL_NUMBER", "HUBOT_SIGNAL_PASSWORD"])
    def test_missing_identity_raises(self, missing):
        env = {k: v for k, v in BASE_ENV.items() if k != missing}

        with pytest.raises(ConfigurationError, match=missing):
            load_settings(env)

    @pytest.mark.parametrize("value", ["abc", "0", "-1"])
    def test_invalid_device_id_raises(self, value):
        with pytest.raises(ConfigurationError, match="HUBOT_SIGNAL_DEVICE_ID"):
            load_settings({**BASE_ENV, "HUBOT_SIGNAL_DEVICE_ID": value})


class TestSignalSettings:
    def test_default_device_address(self):
        settings = SignalSettings(number="+15550001111", password="pw")
        assert settings.device_address == "+15550001111.1"

    def test_repr_hides_secrets(self):
        settings = SignalSettings(number="+15550001111", password="pw", verification_code="999")
        text = repr(settings)
        assert "+15550001111" not in text
        assert "pw" not in text
        assert "999" not in text
