"""
Method channel request/response models.

These describe:
- MethodCall: a named call plus its argument payload
- ChannelError: the structured error returned to the host
- CallResult: success / error / not-implemented, plus the adapter outcome
- ChannelResponse: the HTTP envelope wrapped around a CallResult
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel

from core.adapter.models import OperationResult


INVALID_ARGUMENTS = "INVALID_ARGUMENTS"


class ResultKind(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


class MethodCall(BaseModel):
    method: str
    # Left untyped on purpose: a non-mapping payload must reach the
    # dispatcher and come back as INVALID_ARGUMENTS, not a 422.
    arguments: Optional[Any] = None


class ChannelError(BaseModel):
    code: str
    message: Optional[str] = None
    details: Optional[Any] = None


class CallResult(BaseModel):
    """
    Result of dispatching one MethodCall.

    kind:
      - SUCCESS: value holds the payload (null or a string)
      - ERROR: error holds the ChannelError
      - NOT_IMPLEMENTED: the method name is not part of the channel

    outcome is set whenever the adapter was invoked.
    """
    kind: ResultKind
    value: Optional[Any] = None
    error: Optional[ChannelError] = None
    outcome: Optional[OperationResult] = None

    @classmethod
    def success(cls, value: Any = None, outcome: Optional[OperationResult] = None) -> "CallResult":
        return cls(kind=ResultKind.SUCCESS, value=value, outcome=outcome)

    @classmethod
    def failure(cls, code: str, message: Optional[str] = None, details: Any = None) -> "CallResult":
        return cls(
            kind=ResultKind.ERROR,
            error=ChannelError(code=code, message=message, details=details),
        )

    @classmethod
    def not_implemented(cls) -> "CallResult":
        return cls(kind=ResultKind.NOT_IMPLEMENTED)

    @property
    def is_success(self) -> bool:
        return self.kind == ResultKind.SUCCESS


class ChannelResponse(BaseModel):
    method: str
    kind: ResultKind
    result: Optional[Any] = None
    error: Optional[ChannelError] = None
    outcome: Optional[OperationResult] = None

    @classmethod
    def from_result(cls, method: str, result: CallResult) -> "ChannelResponse":
        return cls(
            method=method,
            kind=result.kind,
            result=result.value,
            error=result.error,
            outcome=result.outcome,
        )


class ChannelMethodsResponse(BaseModel):
    channel: str
    methods: List[str]
