"""MethodDispatcher: decodes method channel calls and drives the adapter.

Each call is handled on its own:

1. look the method name up in CHANNEL_METHODS (unknown -> not implemented)
2. if the method needs a string argument (userId / viewId), check that the
   payload is a mapping holding a str under that key; otherwise answer
   INVALID_ARGUMENTS without touching the adapter
3. call the adapter operation and wrap its OperationResult in a success

The only state the dispatcher relies on is the adapter it was given, which
is created once at startup and shared by every call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.adapter.models import OperationResult, ReplaySession
from core.adapter.session_replay_adapter import SessionReplayAdapter
from ..models.channel_models import INVALID_ARGUMENTS, CallResult, MethodCall


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChannelMethod:
    """Binding of a channel method name to an adapter operation."""

    name: str
    operation: str
    required_argument: Optional[str] = None
    returns_value: bool = False


CHANNEL_METHODS: Dict[str, ChannelMethod] = {
    m.name: m
    for m in (
        ChannelMethod("initializeSessionReplay", "initialize"),
        ChannelMethod("startRecording", "start_recording"),
        ChannelMethod("stopRecording", "stop_recording"),
        ChannelMethod("setUserIdentifier", "set_user_identifier", required_argument="userId"),
        ChannelMethod("markViewAsSensitive", "mark_view_as_sensitive", required_argument="viewId"),
        ChannelMethod("markViewAsSafe", "mark_view_as_safe", required_argument="viewId"),
        ChannelMethod("getReplayId", "get_replay_id", returns_value=True),
        ChannelMethod("captureScreenshot", "capture_screenshot"),
    )
}


def _extract_string_argument(arguments: Any, key: str) -> Optional[str]:
    if not isinstance(arguments, Mapping):
        return None
    value = arguments.get(key)
    return value if isinstance(value, str) else None


class MethodDispatcher:
    """Routes MethodCalls to a SessionReplayAdapter.

    Parameters
    ----------
    adapter:
        Long-lived adapter owning the session handle.
    call_log:
        Optional store exposing log_event(event_type, payload); every
        dispatched call is reported to it.
    """

    def __init__(self, adapter: SessionReplayAdapter, call_log=None) -> None:
        self.adapter = adapter
        self.call_log = call_log

    @property
    def methods(self) -> List[str]:
        return sorted(CHANNEL_METHODS)

    @property
    def session(self) -> ReplaySession:
        return self.adapter.session

    def invoke(self, method: str, arguments: Any = None) -> CallResult:
        return self.handle(MethodCall(method=method, arguments=arguments))

    def handle(self, call: MethodCall) -> CallResult:
        result = self._dispatch(call)
        self._log_call(call, result)
        return result

    def _dispatch(self, call: MethodCall) -> CallResult:
        binding = CHANNEL_METHODS.get(call.method)
        if binding is None:
            logger.warning("[CHANNEL] Method not implemented: %s", call.method)
            return CallResult.not_implemented()

        operation = getattr(self.adapter, binding.operation)

        if binding.required_argument is not None:
            value = _extract_string_argument(call.arguments, binding.required_argument)
            if value is None:
                logger.warning(
                    "[CHANNEL] Rejected %s: missing or non-string %r",
                    call.method,
                    binding.required_argument,
                )
                return CallResult.failure(
                    INVALID_ARGUMENTS,
                    f"Invalid arguments for {call.method}",
                )
            outcome: OperationResult = operation(value)
        else:
            outcome = operation()

        value = outcome.value if binding.returns_value else None
        return CallResult.success(value=value, outcome=outcome)

    def _log_call(self, call: MethodCall, result: CallResult) -> None:
        if self.call_log is None:
            return
        argument_keys = (
            sorted(str(k) for k in call.arguments)
            if isinstance(call.arguments, Mapping)
            else []
        )
        payload = {
            "method": call.method,
            "argument_keys": argument_keys,
            "kind": result.kind.value,
            "error_code": result.error.code if result.error else None,
            "outcome_status": result.outcome.status.value if result.outcome else None,
        }
        try:
            self.call_log.log_event("method_call", payload)
        except OSError:
            logger.exception("[CHANNEL] Failed to write call log for %s", call.method)
