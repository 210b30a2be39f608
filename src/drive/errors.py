"""Errors raised by the GitHub drive and its transports."""

from typing import Optional


class DriveError(Exception):
    """Base class for every error raised by the drive."""

    pass


class UserNotSetError(DriveError):
    def __init__(self, message: str = "GitHub: no active organization"):
        super().__init__(message)


class PathEmptyError(DriveError):
    def __init__(self, message: str = "GitHub: No file selected"):
        super().__init__(message)


class NotFoundError(DriveError):
    pass


class ReadOnlyError(DriveError):
    def __init__(self, message: str = "Repository is read only"):
        super().__init__(message)


class TransportUnavailableError(DriveError):
    """Raised when a transport cannot reach its endpoint at all."""

    pass


class ApiRequestError(DriveError):
    """Raised by a transport when the API answers with a non-2xx status.

    Attributes:
        status: HTTP status code of the response
        body: Raw response body, searched for rate-limit and blob markers
    """

    def __init__(self, status: int, body: str = "", message: Optional[str] = None):
        self.status = status
        self.body = body
        self.message = message or f"GitHub API request failed with status code: {status}"
        super().__init__(self.message)


class RateLimitedError(ApiRequestError):
    @classmethod
    def from_error(cls, error: ApiRequestError) -> "RateLimitedError":
        return cls(error.status, error.body, error.message)
