"""Tests for MethodDispatcher."""
from __future__ import annotations

import pytest
from unittest.mock import MagicMock

from core.adapter.models import OperationResult, OperationStatus
from core.adapter.session_replay_adapter import SessionReplayAdapter
from runtime.dispatcher.method_dispatcher import CHANNEL_METHODS, MethodDispatcher
from runtime.models.channel_models import INVALID_ARGUMENTS, MethodCall, ResultKind


ARGUMENT_METHODS = [
    ("setUserIdentifier", "userId", "set_user_identifier"),
    ("markViewAsSensitive", "viewId", "mark_view_as_sensitive"),
    ("markViewAsSafe", "viewId", "mark_view_as_safe"),
]


@pytest.fixture
def mock_adapter() -> MagicMock:
    adapter = MagicMock()
    for binding in CHANNEL_METHODS.values():
        getattr(adapter, binding.operation).return_value = OperationResult(
            operation=binding.operation, status=OperationStatus.APPLIED
        )
    return adapter


class TestValidation:
    """Argument validation for methods with a required string key."""

    @pytest.mark.parametrize("method,key,operation", ARGUMENT_METHODS)
    @pytest.mark.parametrize(
        "arguments",
        [None, {}, {"other": "x"}, {"userId": 7, "viewId": 7}, ["abc"], "abc"],
    )
    def test_invalid_arguments_rejected(self, mock_adapter, method, key, operation, arguments):
        """Missing, mistyped or non-mapping payloads never reach the adapter."""
        dispatcher = MethodDispatcher(adapter=mock_adapter)
        result = dispatcher.invoke(method, arguments)

        assert result.kind == ResultKind.ERROR
        assert result.error.code == INVALID_ARGUMENTS
        assert result.error.message == f"Invalid arguments for {method}"
        assert result.error.details is None
        getattr(mock_adapter, operation).assert_not_called()

    @pytest.mark.parametrize("method,key,operation", ARGUMENT_METHODS)
    def test_valid_string_argument(self, mock_adapter, method, key, operation):
        dispatcher = MethodDispatcher(adapter=mock_adapter)
        result = dispatcher.invoke(method, {key: "abc123"})

        assert result.kind == ResultKind.SUCCESS
        assert result.value is None
        getattr(mock_adapter, operation).assert_called_once_with("abc123")

    def test_set_user_identifier_examples(self, dispatcher):
        assert dispatcher.invoke("setUserIdentifier", {}).error.code == INVALID_ARGUMENTS
        ok = dispatcher.invoke("setUserIdentifier", {"userId": "abc123"})
        assert ok.is_success
        assert ok.value is None


class TestRouting:
    """Method name routing."""

    @pytest.mark.parametrize("arguments", [None, {}, {"userId": "abc"}])
    def test_unknown_method_not_implemented(self, mock_adapter, arguments):
        dispatcher = MethodDispatcher(adapter=mock_adapter)
        result = dispatcher.invoke("unknownMethod", arguments)

        assert result.kind == ResultKind.NOT_IMPLEMENTED
        assert result.error is None
        assert result.outcome is None
        assert mock_adapter.mock_calls == []

    @pytest.mark.parametrize(
        "method",
        ["initializeSessionReplay", "startRecording", "stopRecording", "captureScreenshot"],
    )
    def test_no_argument_methods_succeed(self, mock_adapter, method):
        dispatcher = MethodDispatcher(adapter=mock_adapter)
        result = dispatcher.invoke(method, {"ignored": True})

        assert result.is_success
        assert result.value is None
        getattr(mock_adapter, CHANNEL_METHODS[method].operation).assert_called_once_with()

    def test_methods_listing(self, dispatcher):
        assert dispatcher.methods == sorted(
            [
                "captureScreenshot",
                "getReplayId",
                "initializeSessionReplay",
                "markViewAsSafe",
                "markViewAsSensitive",
                "setUserIdentifier",
                "startRecording",
                "stopRecording",
            ]
        )

    def test_handle_accepts_method_call(self, dispatcher):
        result = dispatcher.handle(MethodCall(method="getReplayId"))
        assert result.is_success
        assert result.value is None


class TestWithLocalSDK:
    """End-to-end behavior through the real adapter and the local SDK."""

    @pytest.mark.parametrize("method", ["startRecording", "stopRecording", "captureScreenshot"])
    def test_before_initialize_succeeds_without_sdk_call(self, dispatcher, sdk, method):
        result = dispatcher.invoke(method)
        assert result.is_success
        assert result.outcome.status == OperationStatus.SKIPPED
        assert sdk.calls == []

    def test_handle_persists_across_calls(self, dispatcher, sdk):
        """One adapter serves every call, so the handle survives."""
        dispatcher.invoke("initializeSessionReplay")
        dispatcher.invoke("startRecording")
        dispatcher.invoke("captureScreenshot")
        dispatcher.invoke("stopRecording")
        assert sdk.call_names() == [
            "initialize",
            "start_recording",
            "capture_screenshot",
            "stop_recording",
        ]

    def test_get_replay_id_always_null(self, dispatcher):
        assert dispatcher.invoke("getReplayId").value is None
        dispatcher.invoke("initializeSessionReplay")
        dispatcher.invoke("startRecording")
        result = dispatcher.invoke("getReplayId")
        assert result.value is None
        assert result.outcome.status == OperationStatus.UNSUPPORTED


class TestCallLog:
    def test_calls_are_logged_without_values(self, dispatcher, call_log):
        dispatcher.invoke("setUserIdentifier", {"userId": "secret-user"})
        dispatcher.invoke("setUserIdentifier", {})
        dispatcher.invoke("nope")

        events = call_log.read_events()
        assert [e["kind"] for e in events] == ["SUCCESS", "ERROR", "NOT_IMPLEMENTED"]
        assert events[0]["argument_keys"] == ["userId"]
        assert events[0]["outcome_status"] == "SKIPPED"
        assert events[1]["error_code"] == INVALID_ARGUMENTS
        assert all("secret-user" not in str(e) for e in events)

    def test_log_write_failure_does_not_break_dispatch(self, adapter):
        broken_log = MagicMock()
        broken_log.log_event.side_effect = OSError("disk full")
        dispatcher = MethodDispatcher(adapter=adapter, call_log=broken_log)
        assert dispatcher.invoke("getReplayId").is_success


class TestCollaboratorErrors:
    """SDK and analytics errors never escape the dispatcher."""

    def test_initialize_with_failing_analytics(self, sdk):
        class FlakyAnalytics:
            distinct_id = "device-7"

            @property
            def api_token(self):
                raise RuntimeError("analytics not ready")

        dispatcher = MethodDispatcher(
            adapter=SessionReplayAdapter(sdk=sdk, analytics_client=FlakyAnalytics())
        )
        result = dispatcher.invoke("initializeSessionReplay")
        assert result.is_success
        assert result.outcome.status == OperationStatus.FAILED

    def test_start_with_failing_instance_lookup(self, analytics):
        sdk = MagicMock()
        sdk.get_instance.side_effect = RuntimeError("sdk not linked")
        dispatcher = MethodDispatcher(
            adapter=SessionReplayAdapter(sdk=sdk, analytics_client=analytics)
        )
        result = dispatcher.invoke("startRecording")
        assert result.is_success
        assert result.outcome.status == OperationStatus.FAILED
