"""
AppError - Base envelope for every failure that can reach a Discord user.

Carries a safe user-facing message and an optional internal diagnostic
message. The internal message is for server-side logs only.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of error kinds."""

    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVICE_UNAVAILABLE = "service_unavailable"
    NETWORK = "network"
    UNKNOWN = "unknown"


class AppError(Exception):
    """Application error with a sanitized user message."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        user_message: str,
        internal_message: Optional[str] = None,
        status_code: Optional[int] = None,
        kind: Optional[ErrorKind] = None,
    ):
        super().__init__(internal_message or user_message)
        if kind is not None:
            self.kind = kind
        self.user_message = user_message
        self.internal_message = internal_message
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"user_message={self.user_message!r}, status_code={self.status_code!r})"
        )
