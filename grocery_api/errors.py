"""Error taxonomy for the sync engine and the API error envelope."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class ErrorCode(str, Enum):
    OWNERSHIP_VIOLATION = "OWNERSHIP_VIOLATION"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    TRANSIENT_STORE_ERROR = "TRANSIENT_STORE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None
    trace_id: str | None = None


class APIError(BaseModel):
    error: ErrorResponse


class SyncError(Exception):
    """Base class for failures raised while reconciling a single entity."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, *, sync_id: str | None = None) -> None:
        self.message = message
        self.sync_id = sync_id
        super().__init__(message)


class OwnershipViolation(SyncError):
    """Target or parent exists but belongs to another user."""

    code = ErrorCode.OWNERSHIP_VIOLATION


class NotFound(SyncError):
    """Referenced parent or target does not exist."""

    code = ErrorCode.NOT_FOUND


class DuplicateKeyConflict(SyncError):
    """A concurrent writer inserted the same sync id first."""

    code = ErrorCode.DUPLICATE_KEY


class TransientStoreError(SyncError):
    """Any other storage failure inside a sync stage."""

    code = ErrorCode.TRANSIENT_STORE_ERROR
