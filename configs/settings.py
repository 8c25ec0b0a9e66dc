from __future__ import annotations

import os
from pathlib import Path
from typing import Optional
from uuid import uuid4

from dotenv import load_dotenv

from exceptions.exceptions import ConfigurationError


load_dotenv()


DEFAULT_CHANNEL_NAME = "com.miniaturepaintfinder/session_replay"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(name, raw, "a boolean such as true/false")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(name, raw, "a number") from None


def _env_choice(name: str, default: str, choices: tuple) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().upper()
    if value not in choices:
        raise ConfigurationError(name, raw, "one of " + ", ".join(choices))
    return value


class Settings:
    """
    Central configuration for the session replay bridge.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties. A .env file in the working
    directory is honoured through python-dotenv.
    """

    def __init__(self) -> None:
        # SDK credentials / identity
        self._token = os.getenv("REPLAY_BRIDGE_TOKEN") or None
        self._analytics_token = os.getenv("REPLAY_BRIDGE_ANALYTICS_TOKEN") or None
        self._distinct_id = os.getenv("REPLAY_BRIDGE_DISTINCT_ID") or str(uuid4())

        # Recording configuration
        self._record_sessions_percent = _env_float("REPLAY_BRIDGE_RECORD_PERCENT", 100.0)
        self._wifi_only = _env_bool("REPLAY_BRIDGE_WIFI_ONLY", False)
        self._capture_on_start = _env_bool("REPLAY_BRIDGE_CAPTURE_ON_START", False)
        self._sdk_logging = _env_bool("REPLAY_BRIDGE_SDK_LOGGING", True)
        self._forward_user_identifier = _env_bool("REPLAY_BRIDGE_FORWARD_USER_ID", False)

        # Channel + runtime paths
        self._channel_name = os.getenv("REPLAY_BRIDGE_CHANNEL", DEFAULT_CHANNEL_NAME)
        self._runtime_data_dir = Path(
            os.getenv("REPLAY_BRIDGE_RUNTIME_DATA_DIR", "runtime/data")
        )
        self._log_level = _env_choice("REPLAY_BRIDGE_LOG_LEVEL", "INFO", LOG_LEVELS)

    # ------------------------------------------------------------------
    # SDK credentials / identity
    # ------------------------------------------------------------------

    @property
    def token(self) -> Optional[str]:
        """Configured SDK token; None means "ask the analytics client"."""
        return self._token

    @property
    def analytics_token(self) -> Optional[str]:
        return self._analytics_token

    @property
    def distinct_id(self) -> str:
        return self._distinct_id

    # ------------------------------------------------------------------
    # Recording configuration
    # ------------------------------------------------------------------

    @property
    def record_sessions_percent(self) -> float:
        return self._record_sessions_percent

    @property
    def wifi_only(self) -> bool:
        return self._wifi_only

    @property
    def capture_on_start(self) -> bool:
        return self._capture_on_start

    @property
    def sdk_logging(self) -> bool:
        return self._sdk_logging

    @property
    def forward_user_identifier(self) -> bool:
        return self._forward_user_identifier

    # ------------------------------------------------------------------
    # Channel + paths
    # ------------------------------------------------------------------

    @property
    def channel_name(self) -> str:
        return self._channel_name

    @property
    def runtime_data_dir(self) -> Path:
        return self._runtime_data_dir

    @property
    def log_level(self) -> str:
        return self._log_level


settings = Settings()
