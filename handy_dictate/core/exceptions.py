"""
Dictation exception hierarchy.

All application-specific exceptions inherit from DictateError, so the
toggle controller can turn any of them into a single user notice and the
bridge middleware can render them as a JSON envelope.
"""

from datetime import UTC, datetime


class DictateError(Exception):
    """Base exception for all dictation errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "DICTATE_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class ServiceUnreachableError(DictateError):
    """Raised when the Handy API cannot be reached at the transport level."""

    def __init__(self, detail: str = "Handy API is unreachable") -> None:
        super().__init__(
            detail=detail,
            code="SERVICE_UNREACHABLE",
            status_code=503,
        )


class ServiceRequestError(DictateError):
    """Raised on a non-2xx status or an ``ok: false`` response envelope."""

    def __init__(self, detail: str = "Handy API request failed") -> None:
        super().__init__(
            detail=detail,
            code="SERVICE_REQUEST_FAILED",
            status_code=502,
        )


class PollTimeoutError(DictateError):
    """Raised when no new history entry appears before the deadline."""

    def __init__(self, detail: str = "Timed out waiting for transcription") -> None:
        super().__init__(
            detail=detail,
            code="POLL_TIMEOUT",
            status_code=504,
        )


class HostError(DictateError):
    """Raised when a call into the host application fails."""

    def __init__(self, detail: str = "Host request failed") -> None:
        super().__init__(detail=detail, code="HOST_ERROR", status_code=502)
