"""
In-process session replay SDK used when no vendor binding is installed.

LocalReplaySDK satisfies the ReplaySDK protocol but captures nothing: every
call it receives is appended to `calls` as a (name, payload) tuple so the
bridge can be served, scripted from the CLI, and tested end to end.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .replay_sdk import ReplayConfig


logger = logging.getLogger(__name__)

SDKCall = Tuple[str, Dict[str, Any]]


class LocalReplayInstance:
    """Replay handle that tracks recording state and screenshot count."""

    def __init__(self, sdk: "LocalReplaySDK", token: str, distinct_id: str, config: ReplayConfig) -> None:
        self._sdk = sdk
        self.token = token
        self.distinct_id = distinct_id
        self.config = config
        self.logging_enabled = False
        self.is_recording = False
        self.screenshot_count = 0

    def start_recording(self) -> None:
        self._sdk._record("start_recording")
        self.is_recording = True

    def stop_recording(self) -> None:
        self._sdk._record("stop_recording")
        self.is_recording = False

    def capture_screenshot(self) -> None:
        self._sdk._record("capture_screenshot")
        self.screenshot_count += 1

    def set_user_identifier(self, user_id: str) -> None:
        self._sdk._record("set_user_identifier", user_id=user_id)
        self.distinct_id = user_id


class LocalReplaySDK:
    """Local ReplaySDK implementation.

    Parameters
    ----------
    fail_initialize:
        When True, initialize() returns None, mimicking an SDK that refuses
        to start (e.g. a rejected token).
    """

    def __init__(self, fail_initialize: bool = False) -> None:
        self.fail_initialize = fail_initialize
        self.calls: List[SDKCall] = []
        self._instance: Optional[LocalReplayInstance] = None

    def _record(self, name: str, **payload: Any) -> None:
        self.calls.append((name, payload))
        if self._instance is not None and self._instance.logging_enabled:
            logger.debug("[LOCAL-SDK] %s %s", name, payload)

    def initialize(self, token: str, distinct_id: str, config: ReplayConfig) -> Optional[LocalReplayInstance]:
        self._record(
            "initialize",
            token=token,
            distinct_id=distinct_id,
            record_sessions_percent=config.record_sessions_percent,
            wifi_only=config.wifi_only,
        )
        if self.fail_initialize:
            return None
        self._instance = LocalReplayInstance(self, token, distinct_id, config)
        return self._instance

    def get_instance(self) -> Optional[LocalReplayInstance]:
        return self._instance

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


@dataclass
class LocalAnalyticsClient:
    """Analytics client stand-in holding a token and a distinct id."""

    distinct_id: str
    api_token: Optional[str] = None
