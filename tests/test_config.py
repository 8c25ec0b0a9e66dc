"""Tests for environment-driven settings and bridge wiring."""
from __future__ import annotations

import pytest

from configs.settings import DEFAULT_CHANNEL_NAME, Settings
from core.sdk.local_sdk import LocalReplaySDK
from exceptions.exceptions import ConfigurationError
from runtime.bridge import build_dispatcher


ENV_VARS = [
    "REPLAY_BRIDGE_TOKEN",
    "REPLAY_BRIDGE_ANALYTICS_TOKEN",
    "REPLAY_BRIDGE_DISTINCT_ID",
    "REPLAY_BRIDGE_RECORD_PERCENT",
    "REPLAY_BRIDGE_WIFI_ONLY",
    "REPLAY_BRIDGE_CAPTURE_ON_START",
    "REPLAY_BRIDGE_SDK_LOGGING",
    "REPLAY_BRIDGE_FORWARD_USER_ID",
    "REPLAY_BRIDGE_CHANNEL",
    "REPLAY_BRIDGE_RUNTIME_DATA_DIR",
    "REPLAY_BRIDGE_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:

    def test_defaults(self):
        s = Settings()
        assert s.token is None
        assert s.analytics_token is None
        assert s.distinct_id
        assert s.record_sessions_percent == 100.0
        assert s.wifi_only is False
        assert s.capture_on_start is False
        assert s.sdk_logging is True
        assert s.forward_user_identifier is False
        assert s.channel_name == DEFAULT_CHANNEL_NAME
        assert s.log_level == "INFO"

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("REPLAY_BRIDGE_TOKEN", "tok")
        monkeypatch.setenv("REPLAY_BRIDGE_DISTINCT_ID", "user-1")
        monkeypatch.setenv("REPLAY_BRIDGE_RECORD_PERCENT", "25")
        monkeypatch.setenv("REPLAY_BRIDGE_WIFI_ONLY", "yes")
        monkeypatch.setenv("REPLAY_BRIDGE_CAPTURE_ON_START", "1")
        monkeypatch.setenv("REPLAY_BRIDGE_RUNTIME_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("REPLAY_BRIDGE_LOG_LEVEL", "debug")

        s = Settings()
        assert s.token == "tok"
        assert s.distinct_id == "user-1"
        assert s.record_sessions_percent == 25.0
        assert s.wifi_only is True
        assert s.capture_on_start is True
        assert s.runtime_data_dir == tmp_path
        assert s.log_level == "DEBUG"

    def test_invalid_bool(self, monkeypatch):
        monkeypatch.setenv("REPLAY_BRIDGE_WIFI_ONLY", "maybe")
        with pytest.raises(ConfigurationError) as exc_info:
            Settings()
        assert exc_info.value.variable == "REPLAY_BRIDGE_WIFI_ONLY"

    def test_invalid_float(self, monkeypatch):
        monkeypatch.setenv("REPLAY_BRIDGE_RECORD_PERCENT", "all")
        with pytest.raises(ConfigurationError):
            Settings()


class TestBuildDispatcher:

    def test_settings_flow_into_sdk_config(self, monkeypatch, tmp_path):
        monkeypatch.setenv("REPLAY_BRIDGE_TOKEN", "configured")
        monkeypatch.setenv("REPLAY_BRIDGE_DISTINCT_ID", "user-9")
        monkeypatch.setenv("REPLAY_BRIDGE_RECORD_PERCENT", "50")
        monkeypatch.setenv("REPLAY_BRIDGE_RUNTIME_DATA_DIR", str(tmp_path))

        sdk = LocalReplaySDK()
        dispatcher = build_dispatcher(Settings(), sdk=sdk)
        dispatcher.invoke("initializeSessionReplay")

        name, payload = sdk.calls[0]
        assert name == "initialize"
        assert payload["token"] == "configured"
        assert payload["distinct_id"] == "user-9"
        assert payload["record_sessions_percent"] == 50.0
        assert (tmp_path / "logs").is_dir()


class TestLogLevel:

    def test_log_level_is_normalised(self, monkeypatch):
        monkeypatch.setenv("REPLAY_BRIDGE_LOG_LEVEL", " warning ")
        assert Settings().log_level == "WARNING"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("REPLAY_BRIDGE_LOG_LEVEL", "LOUD")
        with pytest.raises(ConfigurationError) as exc_info:
            Settings()
        assert exc_info.value.variable == "REPLAY_BRIDGE_LOG_LEVEL"
