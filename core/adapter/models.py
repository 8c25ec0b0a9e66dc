from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class OperationStatus(str, Enum):
    APPLIED = "APPLIED"          # the SDK call was made
    SKIPPED = "SKIPPED"          # prerequisite missing, nothing happened
    UNSUPPORTED = "UNSUPPORTED"  # the SDK has no such feature
    FAILED = "FAILED"            # the SDK raised or refused


class OperationResult(BaseModel):
    """
    Outcome of a single adapter operation.

    Lets callers tell "recording started" apart from "nothing happened"
    without turning either into a channel error.
    """
    operation: str
    status: OperationStatus
    reason: Optional[str] = None
    value: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.status == OperationStatus.APPLIED


class ReplaySession(BaseModel):
    """
    Snapshot of the session handle held by the adapter.

    recording_requested mirrors the last start/stop the bridge forwarded;
    the authoritative recording state lives inside the SDK.
    """
    initialized: bool = False
    distinct_id: Optional[str] = None
    initialized_at: Optional[str] = None
    recording_requested: bool = False
    user_identifier: Optional[str] = None
    sensitive_views: List[str] = Field(default_factory=list)
    safe_views: List[str] = Field(default_factory=list)
    screenshots_requested: int = 0
