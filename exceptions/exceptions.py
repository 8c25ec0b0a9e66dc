"""
Custom exceptions for the session replay bridge.

These exceptions are intentionally simple and descriptive.
They are used across:

  - configs/settings.py
  - core/sdk/
  - runtime/api/
  - cli/

Placing them at the project root (exceptions/) avoids circular imports
and keeps exception types consistent across modules.

Note that channel-level failures (INVALID_ARGUMENTS, not implemented) are
*not* exceptions: the dispatcher returns them as CallResult values.
"""


class ConfigurationError(Exception):
    """
    Raised when an environment variable holds a value that cannot be
    parsed into the expected type (e.g. REPLAY_BRIDGE_WIFI_ONLY=maybe).
    """

    def __init__(self, variable, value, expected):
        self.variable = variable
        self.value = value
        self.expected = expected
        msg = f"Invalid value for {variable}: {value!r} (expected {expected})"
        super().__init__(msg)


class InvalidReplayConfigError(Exception):
    """
    Raised when a ReplayConfig is built with a sampling percentage
    outside of the 0..100 range.
    """

    def __init__(self, record_sessions_percent):
        self.record_sessions_percent = record_sessions_percent
        msg = (
            "record_sessions_percent must be between 0 and 100, "
            f"got {record_sessions_percent}"
        )
        super().__init__(msg)


class ScriptFormatError(Exception):
    """
    Raised when a call script given to the CLI cannot be parsed.

    Example:
        [{"method": "startRecording"}]   ← expected
        {"method": "startRecording"}     ← raises this exception
    """

    def __init__(self, path, details=None):
        self.path = path
        self.details = details or "Expected a JSON list of call objects."
        msg = f"Invalid call script: {path}\nDetails: {self.details}"
        super().__init__(msg)


class UnknownChannelError(Exception):
    """Raised when a call targets a channel name the bridge does not serve."""

    def __init__(self, channel_name):
        self.channel_name = channel_name
        super().__init__(f"Unknown method channel: {channel_name}")
