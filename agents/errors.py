"""Exceptions shared by the OpenScript services.

Services raise these; the HTTP layer maps them to status codes and the agent
turns them into chat replies.
"""

from typing import Optional


class APIError(Exception):
    """Generic upstream API error wrapper.

    `status_code` carries the upstream HTTP status when one is known so the
    routes can pass it through.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class QuotaExceeded(APIError):
    """Raised when an upstream quota / rate limit is exceeded and caller should retry later."""

    def __init__(
        self, retry_after: Optional[float] = None, message: Optional[str] = None
    ):
        self.retry_after = retry_after
        super().__init__(
            message or f"Quota exceeded; retry after {retry_after}", status_code=429
        )


class NoResults(APIError):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class MissingAPIKey(RuntimeError):
    """Raised when a live call needs an API key that is not configured."""

    def __init__(self, service: str, env_var: str):
        self.service = service
        self.env_var = env_var
        super().__init__(
            f"{service} API key not configured. "
            f"Please add {env_var} to your environment variables."
        )


class InvalidVideoURL(ValueError):
    pass


class DownloadFailed(RuntimeError):
    pass


class TranscriptionFailed(RuntimeError):
    pass


__all__ = [
    "APIError",
    "QuotaExceeded",
    "NoResults",
    "MissingAPIKey",
    "InvalidVideoURL",
    "DownloadFailed",
    "TranscriptionFailed",
]
