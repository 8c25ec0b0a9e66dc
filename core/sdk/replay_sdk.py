# sdk/replay_sdk.py
"""
Interfaces to the external session replay SDK and analytics client.

The bridge never talks to a vendor SDK directly. It depends on three small
protocols instead:

1. ReplaySDK
   - initialize(token, distinct_id, config) -> ReplayInstance | None
   - get_instance() -> ReplayInstance | None   (the SDK's shared handle)

2. ReplayInstance
   - start_recording(), stop_recording(), capture_screenshot()
   - logging_enabled attribute
   - optionally set_user_identifier / mark_view_sensitive / mark_view_safe

3. AnalyticsClient
   - api_token and distinct_id, used to seed the replay session

Anything that satisfies these shapes (the vendor binding, the local SDK in
core/sdk/local_sdk.py, a test double) can be handed to the adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from exceptions.exceptions import InvalidReplayConfigError


@dataclass(frozen=True)
class ReplayConfig:
    """Recording configuration passed to ReplaySDK.initialize."""

    record_sessions_percent: float = 100.0
    wifi_only: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.record_sessions_percent <= 100.0:
            raise InvalidReplayConfigError(self.record_sessions_percent)


class ReplayInstance(Protocol):
    """A live replay session handle returned by the SDK."""

    logging_enabled: bool

    def start_recording(self) -> None:
        ...

    def stop_recording(self) -> None:
        ...

    def capture_screenshot(self) -> None:
        ...


class ReplaySDK(Protocol):
    """Entry points of the session replay SDK."""

    def initialize(
        self,
        token: str,
        distinct_id: str,
        config: ReplayConfig,
    ) -> Optional[ReplayInstance]:
        ...

    def get_instance(self) -> Optional[ReplayInstance]:
        ...


class AnalyticsClient(Protocol):
    """The host analytics client that owns the token and user identity."""

    @property
    def api_token(self) -> Optional[str]:
        ...

    @property
    def distinct_id(self) -> str:
        ...
