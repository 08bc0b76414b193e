"""
Callable error types.

Each error maps to a Firebase callable status string and an HTTP status code,
so clients using the callable protocol see the same codes they would get from
a Cloud Function.
"""
from typing import Any, Dict

from fastapi import HTTPException, status


class CallableError(HTTPException):
    """Base class for errors surfaced to callable clients."""

    callable_status = "INTERNAL"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(status_code=self.http_status, detail=message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        """Render the error in the callable response envelope."""
        return {"error": {"status": self.callable_status, "message": self.message}}


class Unauthenticated(CallableError):
    callable_status = "UNAUTHENTICATED"
    http_status = status.HTTP_401_UNAUTHORIZED


class InvalidArgument(CallableError):
    callable_status = "INVALID_ARGUMENT"
    http_status = status.HTTP_400_BAD_REQUEST


class FailedPrecondition(CallableError):
    callable_status = "FAILED_PRECONDITION"
    http_status = status.HTTP_400_BAD_REQUEST


class PermissionDenied(CallableError):
    callable_status = "PERMISSION_DENIED"
    http_status = status.HTTP_403_FORBIDDEN


class NotFound(CallableError):
    callable_status = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class Internal(CallableError):
    callable_status = "INTERNAL"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
