"""
Construction of the shared bridge objects.

Both the FastAPI server and the CLI build their dispatcher here so that
the adapter (and therefore the session handle) is created exactly once per
process and passed by reference into the dispatcher.
"""

from typing import Optional

from configs.settings import Settings
from core.adapter.session_replay_adapter import SessionReplayAdapter
from core.sdk.local_sdk import LocalAnalyticsClient, LocalReplaySDK
from core.sdk.replay_sdk import AnalyticsClient, ReplaySDK
from runtime.dispatcher.method_dispatcher import MethodDispatcher
from runtime.store.call_log_store import CallLogStore


def build_dispatcher(
    settings: Settings,
    sdk: Optional[ReplaySDK] = None,
    analytics_client: Optional[AnalyticsClient] = None,
    call_log: Optional[CallLogStore] = None,
) -> MethodDispatcher:
    """Wire SDK -> adapter -> dispatcher from settings.

    When no SDK / analytics client is supplied, the local implementations
    from core.sdk.local_sdk are used.
    """
    if sdk is None:
        sdk = LocalReplaySDK()
    if analytics_client is None:
        analytics_client = LocalAnalyticsClient(
            distinct_id=settings.distinct_id,
            api_token=settings.analytics_token,
        )
    if call_log is None:
        call_log = CallLogStore(data_dir=str(settings.runtime_data_dir))

    adapter = SessionReplayAdapter.from_settings(sdk, analytics_client, settings)
    return MethodDispatcher(adapter=adapter, call_log=call_log)
