"""
FastAPI application entry point for the session replay bridge.

Responsibilities:
- create the FastAPI app
- construct the shared dispatcher (SDK -> adapter -> dispatcher) once
- include the channel routes

Run with:

    uvicorn runtime.api.server:app --reload
"""

import logging

from fastapi import FastAPI

from configs.settings import settings
from runtime.bridge import build_dispatcher
from . import channel_routes


logging.basicConfig(level=settings.log_level)

# ---------------------------------------------------------------------------
# Shared singletons
# ---------------------------------------------------------------------------

# One dispatcher (and one adapter / session handle) for the whole process.
dispatcher = build_dispatcher(settings)

# ---------------------------------------------------------------------------
# FastAPI app + route registration
# ---------------------------------------------------------------------------

app = FastAPI(title="Session Replay Bridge")

channel_routes.init_routes(
    dispatcher=dispatcher,
    channel_name=settings.channel_name,
)
app.include_router(channel_routes.router)
