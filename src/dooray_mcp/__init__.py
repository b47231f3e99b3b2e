"""dooray_mcp package exports."""

from .client import DoorayClient, RetryConfig
from .errors import (
    DoorayAPIError,
    DoorayClientError,
    DoorayHTTPError,
    DoorayParseError,
    DoorayUploadError,
    LocalFileNotFoundError,
    MissingApiTokenError,
    UnexpectedStatusError,
)
from .registry import discover_tool_modules, register_discovered_tools

__all__ = [
    # Client
    "DoorayClient",
    "RetryConfig",
    # Exceptions
    "DoorayClientError",
    "DoorayHTTPError",
    "DoorayParseError",
    "DoorayAPIError",
    "DoorayUploadError",
    "UnexpectedStatusError",
    "LocalFileNotFoundError",
    "MissingApiTokenError",
    # Server utilities
    "discover_tool_modules",
    "register_discovered_tools",
]
