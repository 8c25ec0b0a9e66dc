"""HTTP routes exposing the session replay method channel.

Exposes endpoints like:

- POST /channels/{channel_name}/invoke  -> dispatch one method call
- GET  /channels/{channel_name}/methods -> supported method names
- GET  /channels/{channel_name}/session -> snapshot of the replay session
- GET  /healthz

Channel-level errors (INVALID_ARGUMENTS, not implemented) are part of the
response body and come back with HTTP 200; HTTP errors are reserved for an
unknown channel or a server that was never configured.
"""

import logging

from fastapi import APIRouter, HTTPException
from typing import Optional

from core.adapter.models import ReplaySession
from exceptions.exceptions import UnknownChannelError
from ..dispatcher.method_dispatcher import MethodDispatcher
from ..models.channel_models import (
    ChannelMethodsResponse,
    ChannelResponse,
    MethodCall,
)


logger = logging.getLogger(__name__)

# Router for all channel-related endpoints
router = APIRouter()


# Module-level references, to be initialized by the server.
_DISPATCHER: Optional[MethodDispatcher] = None
_CHANNEL_NAME: Optional[str] = None


def init_routes(dispatcher: MethodDispatcher, channel_name: str) -> None:
    """Initialize module-level references used by the route handlers."""
    global _DISPATCHER, _CHANNEL_NAME
    _DISPATCHER = dispatcher
    _CHANNEL_NAME = channel_name


def _require_dispatcher(channel_name: str) -> MethodDispatcher:
    if _DISPATCHER is None:
        raise HTTPException(
            status_code=500,
            detail="MethodDispatcher is not configured on the server.",
        )
    if channel_name != _CHANNEL_NAME:
        error = UnknownChannelError(channel_name)
        logger.warning("[CHANNEL] HTTP 404 reason=%r", str(error))
        raise HTTPException(status_code=404, detail=str(error))
    return _DISPATCHER


@router.post("/channels/{channel_name:path}/invoke", response_model=ChannelResponse)
def invoke(channel_name: str, call: MethodCall) -> ChannelResponse:
    """Dispatch a single method call on the channel."""
    dispatcher = _require_dispatcher(channel_name)
    try:
        result = dispatcher.handle(call)
    except Exception:
        logger.exception(
            "[CHANNEL] Unexpected error for channel=%s method=%s",
            channel_name,
            call.method,
        )
        raise
    return ChannelResponse.from_result(call.method, result)


@router.get("/channels/{channel_name:path}/methods", response_model=ChannelMethodsResponse)
def list_methods(channel_name: str) -> ChannelMethodsResponse:
    dispatcher = _require_dispatcher(channel_name)
    return ChannelMethodsResponse(channel=channel_name, methods=dispatcher.methods)


@router.get("/channels/{channel_name:path}/session", response_model=ReplaySession)
def get_session(channel_name: str) -> ReplaySession:
    dispatcher = _require_dispatcher(channel_name)
    return dispatcher.session


# --------------------------------------------------------
# Endpoint: GET /healthz
# --------------------------------------------------------
@router.get("/healthz")
def health_check():
    """
    Simple health check endpoint for uptime monitoring.
    """
    return {"status": "ok"}
