from __future__ import annotations

from typing import Any, Dict, Optional


class DoorayClientError(Exception):
    """Base error for client failures."""


class DoorayHTTPError(DoorayClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_json: Optional[Dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(f"{status_code} {method} {url}: {message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.message = message
        self.response_json = response_json
        self.response_text = response_text


class DoorayParseError(DoorayClientError):
    pass


class DoorayAPIError(DoorayClientError):
    """The API answered 2xx but its envelope reported isSuccessful=false."""

    def __init__(self, message: str, *, result_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.result_code = result_code


class DoorayUploadError(DoorayAPIError):
    pass


class UnexpectedStatusError(DoorayClientError):
    def __init__(self, status_code: int):
        super().__init__(f"Unexpected HTTP status: {status_code}")
        self.status_code = status_code


class LocalFileNotFoundError(DoorayClientError):
    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


class MissingApiTokenError(ValueError):
    """Raised when DOORAY_API_TOKEN is required but missing."""


def format_error(exc: BaseException) -> str:
    """Render an exception for the text payload of an error envelope."""
    if isinstance(exc, DoorayHTTPError):
        return f"HTTP {exc.status_code}: {exc.message}"
    if isinstance(exc, DoorayAPIError) and exc.result_code is not None:
        return f"{exc.message} (resultCode={exc.result_code})"
    message = str(exc)
    return message or exc.__class__.__name__


__all__ = [
    "DoorayClientError",
    "DoorayHTTPError",
    "DoorayParseError",
    "DoorayAPIError",
    "DoorayUploadError",
    "UnexpectedStatusError",
    "LocalFileNotFoundError",
    "MissingApiTokenError",
    "format_error",
]
