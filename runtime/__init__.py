"""
Runtime package for the session replay bridge.

This package contains:
- API layer (FastAPI server + channel routes)
- Dispatcher (method channel decoding + argument validation)
- Stores (call log)
- Models (Pydantic request/response schemas for the channel)
"""
