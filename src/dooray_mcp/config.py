from __future__ import annotations

import os
from typing import Optional, Tuple

from dotenv import load_dotenv

from .client import DoorayClient
from .errors import MissingApiTokenError

DEFAULT_BASE_URL = "https://api.dooray.com"


def load_env_config(*, use_dotenv: bool = True) -> Tuple[str, str]:
    """Load Dooray base URL and API token from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    base_url = os.getenv("DOORAY_API_BASE_URL", "").strip() or DEFAULT_BASE_URL
    api_token = os.getenv("DOORAY_API_TOKEN", "").strip()
    return base_url, api_token


def create_client_from_env(**kwargs) -> DoorayClient:
    """Create a DoorayClient from environment variables."""
    base_url, api_token = load_env_config()
    if not api_token:
        raise MissingApiTokenError("DOORAY_API_TOKEN environment variable is required")
    return DoorayClient(base_url=base_url, api_token=api_token, **kwargs)


class EnvClientProvider:
    """
    Client provider for the tool registry that reads the environment on each
    call until a client has been built. Without DOORAY_API_TOKEN every call
    raises MissingApiTokenError, so the server can start and report the
    problem per tool call. The first successful client is reused.
    """

    def __init__(self, **client_kwargs) -> None:
        self._client_kwargs = client_kwargs
        self._client: Optional[DoorayClient] = None

    def __call__(self) -> DoorayClient:
        if self._client is None:
            self._client = create_client_from_env(**self._client_kwargs)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = [
    "DEFAULT_BASE_URL",
    "EnvClientProvider",
    "load_env_config",
    "create_client_from_env",
]
