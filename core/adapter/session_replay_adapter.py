"""SessionReplayAdapter implementation.

Responsible for:
- owning at most one session replay handle for the life of the process
- translating typed operations into SDK invocations
- reporting what actually happened as an OperationResult

Failure semantics:
- a missing handle or analytics client never raises; the operation is
  reported as SKIPPED and a warning is logged
- exceptions raised by the SDK or the analytics client are logged with a
  traceback and reported as FAILED; a screenshot that fails right after a
  successful start only adds a reason to the APPLIED start result
- nothing here surfaces as a channel error; the dispatcher always answers
  the host with a success value for these operations
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Tuple

from core.sdk.replay_sdk import AnalyticsClient, ReplayConfig, ReplayInstance, ReplaySDK
from .models import OperationResult, OperationStatus, ReplaySession


logger = logging.getLogger(__name__)

NO_HANDLE_REASON = "session replay is not initialized"
NO_ANALYTICS_REASON = "analytics client unavailable"
NO_TOKEN_REASON = "no SDK token configured and the analytics client has none"
IDENTITY_REASON = "identity is derived from the analytics client's distinct id"
VIEW_MASKING_REASON = "view masking requires the host view hierarchy"
REPLAY_ID_REASON = "replay id is not available in this SDK version"


class SessionReplayAdapter:
    """Adapter between the method channel and the session replay SDK.

    Parameters
    ----------
    sdk:
        The ReplaySDK to drive.
    analytics_client:
        Source of the distinct id (and, when no token is configured, of the
        SDK token). If None, initialize() is skipped.
    token:
        Explicit SDK token. Takes precedence over the analytics client's.
    config:
        Sampling / network configuration handed to the SDK.
    capture_on_start:
        Capture one screenshot right after a successful start_recording().
    sdk_logging:
        Turn on the handle's own logging after initialization.
    forward_user_identifier:
        Forward set_user_identifier() to the SDK instead of relying on the
        analytics client's distinct id.
    """

    def __init__(
        self,
        sdk: ReplaySDK,
        analytics_client: Optional[AnalyticsClient] = None,
        token: Optional[str] = None,
        config: Optional[ReplayConfig] = None,
        capture_on_start: bool = False,
        sdk_logging: bool = True,
        forward_user_identifier: bool = False,
    ) -> None:
        self.sdk = sdk
        self.analytics_client = analytics_client
        self.token = token
        self.config = config or ReplayConfig()
        self.capture_on_start = capture_on_start
        self.sdk_logging = sdk_logging
        self.forward_user_identifier = forward_user_identifier

        self._instance: Optional[ReplayInstance] = None
        self._session = ReplaySession()
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, sdk: ReplaySDK, analytics_client: Optional[AnalyticsClient], settings) -> "SessionReplayAdapter":
        """Build an adapter using the values exposed by configs.settings.Settings."""
        return cls(
            sdk=sdk,
            analytics_client=analytics_client,
            token=settings.token,
            config=ReplayConfig(
                record_sessions_percent=settings.record_sessions_percent,
                wifi_only=settings.wifi_only,
            ),
            capture_on_start=settings.capture_on_start,
            sdk_logging=settings.sdk_logging,
            forward_user_identifier=settings.forward_user_identifier,
        )

    @property
    def session(self) -> ReplaySession:
        with self._lock:
            return self._session.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _failed(operation: str, exc: Exception) -> OperationResult:
        return OperationResult(
            operation=operation,
            status=OperationStatus.FAILED,
            reason=str(exc) or exc.__class__.__name__,
        )

    @staticmethod
    def _skipped(operation: str, reason: str) -> OperationResult:
        return OperationResult(operation=operation, status=OperationStatus.SKIPPED, reason=reason)

    def _resolve_instance(self, operation: str) -> Tuple[Optional[ReplayInstance], Optional[OperationResult]]:
        """Return the held handle, falling back to the SDK's shared one.

        The second element is a FAILED result when the SDK lookup raised.
        """
        if self._instance is not None:
            return self._instance, None
        try:
            instance = self.sdk.get_instance()
        except Exception as exc:
            logger.exception("[REPLAY] SDK instance lookup failed during %s", operation)
            return None, self._failed(operation, exc)
        if instance is not None:
            self._instance = instance
            self._session.initialized = True
        return instance, None

    def _call_sdk(self, operation: str, fn: Callable[[], Any]) -> OperationResult:
        try:
            fn()
        except Exception as exc:
            logger.exception("[REPLAY] SDK call failed during %s", operation)
            return self._failed(operation, exc)
        return OperationResult(operation=operation, status=OperationStatus.APPLIED)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def initialize(self) -> OperationResult:
        operation = "initialize"
        client = self.analytics_client
        if client is None:
            logger.warning("[REPLAY] %s; skipping initialization", NO_ANALYTICS_REASON)
            return self._skipped(operation, NO_ANALYTICS_REASON)

        try:
            token = self.token or client.api_token
            distinct_id = client.distinct_id
        except Exception as exc:
            logger.exception("[REPLAY] Analytics client could not provide token or identity")
            return self._failed(operation, exc)

        if not token:
            logger.warning("[REPLAY] %s; skipping initialization", NO_TOKEN_REASON)
            return self._skipped(operation, NO_TOKEN_REASON)

        logger.info(
            "[REPLAY] Initializing: record_percent=%s wifi_only=%s distinct_id=%s",
            self.config.record_sessions_percent,
            self.config.wifi_only,
            distinct_id,
        )

        with self._lock:
            try:
                instance = self.sdk.initialize(
                    token=token,
                    distinct_id=distinct_id,
                    config=self.config,
                )
            except Exception as exc:
                logger.exception("[REPLAY] SDK initialize raised")
                return self._failed(operation, exc)

            if instance is None:
                logger.error("[REPLAY] SDK returned no session handle")
                return OperationResult(
                    operation=operation,
                    status=OperationStatus.FAILED,
                    reason="SDK returned no session handle",
                )

            reason = None
            if self.sdk_logging:
                try:
                    instance.logging_enabled = True
                except Exception as exc:
                    # The handle is live; only its own logging stays off.
                    logger.exception("[REPLAY] Could not enable SDK logging")
                    reason = f"SDK logging not enabled: {exc}"

            # Re-initializing replaces the handle and resets the snapshot.
            self._instance = instance
            self._session = ReplaySession(
                initialized=True,
                distinct_id=distinct_id,
                initialized_at=datetime.now(timezone.utc).isoformat(),
            )

        logger.info("[REPLAY] Session replay initialized")
        return OperationResult(operation=operation, status=OperationStatus.APPLIED, reason=reason)

    def start_recording(self) -> OperationResult:
        operation = "start_recording"
        with self._lock:
            instance, failure = self._resolve_instance(operation)
            if failure is not None:
                return failure
            if instance is None:
                logger.warning("[REPLAY] No instance found when trying to start recording")
                return self._skipped(operation, NO_HANDLE_REASON)

            result = self._call_sdk(operation, instance.start_recording)
            if not result.applied:
                return result
            self._session.recording_requested = True

            if self.capture_on_start:
                try:
                    instance.capture_screenshot()
                except Exception as exc:
                    # Recording is running; report the missed screenshot only.
                    logger.exception("[REPLAY] Screenshot after start failed")
                    result.reason = f"screenshot after start failed: {exc}"
                else:
                    self._session.screenshots_requested += 1
            return result

    def stop_recording(self) -> OperationResult:
        operation = "stop_recording"
        with self._lock:
            instance, failure = self._resolve_instance(operation)
            if failure is not None:
                return failure
            if instance is None:
                logger.warning("[REPLAY] No instance found when trying to stop recording")
                return self._skipped(operation, NO_HANDLE_REASON)

            result = self._call_sdk(operation, instance.stop_recording)
            if result.applied:
                self._session.recording_requested = False
            return result

    def set_user_identifier(self, user_id: str) -> OperationResult:
        operation = "set_user_identifier"
        logger.info("[REPLAY] Setting user identifier: %s", user_id)
        with self._lock:
            self._session.user_identifier = user_id
            if not self.forward_user_identifier:
                return self._skipped(operation, IDENTITY_REASON)

            instance, failure = self._resolve_instance(operation)
            if failure is not None:
                return failure
            if instance is None:
                return self._skipped(operation, NO_HANDLE_REASON)

            forward = getattr(instance, "set_user_identifier", None)
            if forward is None:
                return OperationResult(
                    operation=operation,
                    status=OperationStatus.UNSUPPORTED,
                    reason="SDK handle cannot set a user identifier",
                )
            return self._call_sdk(operation, lambda: forward(user_id))

    def _mark_view(self, operation: str, view_id: str, sensitive: bool) -> OperationResult:
        with self._lock:
            target, other = (
                (self._session.sensitive_views, self._session.safe_views)
                if sensitive
                else (self._session.safe_views, self._session.sensitive_views)
            )
            if view_id in other:
                other.remove(view_id)
            if view_id not in target:
                target.append(view_id)

            instance, failure = self._resolve_instance(operation)
            if failure is not None:
                return failure
            hook_name = "mark_view_sensitive" if sensitive else "mark_view_safe"
            hook = getattr(instance, hook_name, None) if instance is not None else None
            if hook is None:
                return self._skipped(operation, VIEW_MASKING_REASON)
            return self._call_sdk(operation, lambda: hook(view_id))

    def mark_view_as_sensitive(self, view_id: str) -> OperationResult:
        logger.info("[REPLAY] Marking view as sensitive: %s", view_id)
        return self._mark_view("mark_view_as_sensitive", view_id, sensitive=True)

    def mark_view_as_safe(self, view_id: str) -> OperationResult:
        logger.info("[REPLAY] Marking view as safe: %s", view_id)
        return self._mark_view("mark_view_as_safe", view_id, sensitive=False)

    def get_replay_id(self) -> OperationResult:
        logger.debug("[REPLAY] getReplayId not available in this SDK version")
        return OperationResult(
            operation="get_replay_id",
            status=OperationStatus.UNSUPPORTED,
            reason=REPLAY_ID_REASON,
            value=None,
        )

    def capture_screenshot(self) -> OperationResult:
        operation = "capture_screenshot"
        with self._lock:
            instance, failure = self._resolve_instance(operation)
            if failure is not None:
                return failure
            if instance is None:
                logger.warning("[REPLAY] No instance found when trying to capture screenshot")
                return self._skipped(operation, NO_HANDLE_REASON)

            result = self._call_sdk(operation, instance.capture_screenshot)
            if result.applied:
                self._session.screenshots_requested += 1
            return result
