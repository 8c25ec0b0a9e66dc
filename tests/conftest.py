"""Shared pytest fixtures."""
from __future__ import annotations

import pytest
from pathlib import Path

from core.adapter.session_replay_adapter import SessionReplayAdapter
from core.sdk.local_sdk import LocalAnalyticsClient, LocalReplaySDK
from runtime.dispatcher.method_dispatcher import MethodDispatcher
from runtime.store.call_log_store import CallLogStore


@pytest.fixture
def sdk() -> LocalReplaySDK:
    return LocalReplaySDK()


@pytest.fixture
def analytics() -> LocalAnalyticsClient:
    return LocalAnalyticsClient(distinct_id="device-42", api_token="analytics-token")


@pytest.fixture
def adapter(sdk: LocalReplaySDK, analytics: LocalAnalyticsClient) -> SessionReplayAdapter:
    return SessionReplayAdapter(sdk=sdk, analytics_client=analytics)


@pytest.fixture
def call_log(tmp_path: Path) -> CallLogStore:
    return CallLogStore(data_dir=str(tmp_path / "data"))


@pytest.fixture
def dispatcher(adapter: SessionReplayAdapter, call_log: CallLogStore) -> MethodDispatcher:
    return MethodDispatcher(adapter=adapter, call_log=call_log)
