"""
Upstream failures observed while talking to the cloud agent API.

RateLimitedError  - HTTP 429, retried by the API client
ServiceError      - HTTP 5xx, retried by the API client
TransportError    - connection / timeout failure raised by the networking layer, retried
UnknownError      - anything the status table does not cover
"""

from typing import Optional

from cloud_agent_bridge.domain.exceptions.app_error import AppError, ErrorKind


class RateLimitedError(AppError):
    kind = ErrorKind.RATE_LIMITED


class ServiceError(AppError):
    kind = ErrorKind.SERVICE_UNAVAILABLE


class TransportError(AppError):
    """Raised when the request never produced an HTTP response."""

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        user_message: str,
        internal_message: Optional[str] = None,
        timed_out: bool = False,
    ):
        super().__init__(user_message, internal_message)
        self.timed_out = timed_out


class UnknownError(AppError):
    kind = ErrorKind.UNKNOWN
