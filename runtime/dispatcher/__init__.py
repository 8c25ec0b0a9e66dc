"""
Method channel dispatch.

MethodDispatcher maps channel method names to SessionReplayAdapter
operations and turns argument problems into INVALID_ARGUMENTS results.
"""
