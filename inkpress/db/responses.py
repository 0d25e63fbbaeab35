"""Result envelopes returned by every emulator call.

Errors are never raised by the emulator: callers check ``error`` before
touching ``data``.
"""

from __future__ import annotations

import enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorCode(str, enum.Enum):
    NOT_FOUND = "not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE_ACCOUNT = "duplicate_account"
    INVALID_QUERY_STATE = "invalid_query_state"
    UNIMPLEMENTED = "unimplemented"


class ErrorDetail(BaseModel):
    code: ErrorCode
    message: str


class QueryResponse(BaseModel):
    """``{data, error, count}`` for table and rpc calls.

    ``data`` is a row, a list of rows or ``None``. ``count`` is the number of
    rows matching the filters before pagination (affected rows for writes).
    """

    data: Any = None
    error: Optional[ErrorDetail] = None
    count: Optional[int] = None

    @classmethod
    def failure(cls, code: ErrorCode, message: str) -> "QueryResponse":
        return cls(data=None, error=ErrorDetail(code=code, message=message), count=None)


class AuthUser(BaseModel):
    id: str
    email: str
    display_name: str
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class Session(BaseModel):
    user: AuthUser


class AuthResponse(BaseModel):
    """Envelope for auth calls. ``user``/``session`` are ``None`` when anonymous."""

    user: Optional[AuthUser] = None
    session: Optional[Session] = None
    error: Optional[ErrorDetail] = None

    @classmethod
    def failure(cls, code: ErrorCode, message: str) -> "AuthResponse":
        return cls(user=None, session=None, error=ErrorDetail(code=code, message=message))
