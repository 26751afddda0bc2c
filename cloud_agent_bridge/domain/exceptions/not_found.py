"""
NotFoundError - Raised when a requested agent does not exist.
Maps to: HTTP 404 Not Found
"""

from cloud_agent_bridge.domain.exceptions.app_error import AppError, ErrorKind


class NotFoundError(AppError):
    """Exception raised when a requested remote entity is not found."""

    kind = ErrorKind.NOT_FOUND
