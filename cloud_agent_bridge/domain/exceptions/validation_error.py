"""
ValidationError - Raised when caller input violates a field rule.
Maps to: HTTP 400 Bad Request (upstream) / always safe to echo to the user.
"""

from typing import Optional

from cloud_agent_bridge.domain.exceptions.app_error import AppError, ErrorKind


class ValidationError(AppError):
    """Exception raised for invalid user-supplied fields."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        internal_message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, internal_message, status_code)
        self.message = message
