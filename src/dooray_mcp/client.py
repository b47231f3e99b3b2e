import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .errors import (
    DoorayAPIError,
    DoorayClientError,
    DoorayHTTPError,
    DoorayParseError,
)
from .observability import log_event

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 2  # total extra attempts
    backoff_base_seconds: float = 0.3  # 0.3, 0.6, 1.2...
    retry_statuses: frozenset[int] = frozenset({502, 503, 504})
    retry_on_429: bool = False


def envelope_header(payload: Any) -> Dict[str, Any]:
    if isinstance(payload, dict) and isinstance(payload.get("header"), dict):
        return payload["header"]
    return {}


class DoorayClient:
    """
    Shared HTTP client for the Dooray REST API.
    - Handles auth, base URL, timeouts, retries
    - Unwraps the {header, result} envelope
    - No business logic; tools own domain decisions
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_token: str,
        timeout_seconds: float = 10.0,
        retry: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
        request_id: Optional[str] = None,
    ):
        base_url = (base_url or "").rstrip("/")
        api_token = api_token or ""

        if not base_url:
            raise ValueError("base_url must be provided.")
        if not api_token:
            raise ValueError("api_token must be provided.")

        self.base_url = base_url
        self.api_token = api_token
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.log = logger or logging.getLogger("dooray_mcp.client")
        self.request_id = request_id or uuid.uuid4().hex

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"dooray-api {api_token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
            follow_redirects=False,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "DoorayClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _log_call(
        self,
        *,
        tool: Optional[str],
        method: str,
        url: str,
        status: Any,
        start: float,
        attempt: int,
        error_type: Optional[str] = None,
    ) -> None:
        log_event(
            "op_call",
            request_id=self.request_id,
            tool=tool,
            method=method,
            endpoint=httpx.URL(url).path,
            status=status,
            duration_ms=int((time.perf_counter() - start) * 1000),
            attempt=attempt,
            error_type=error_type,
        )

    async def request_envelope(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Core request method; returns the whole response envelope.
        - Retries on transient failures (network/timeouts + 502/503/504; optionally 429)
        - Raises DoorayHTTPError on non-2xx HTTP responses
        - Raises DoorayAPIError when header.isSuccessful is false
        - Raises DoorayClientError on network/timeout errors after retries
        - Raises DoorayParseError if response isn't a JSON object
        """
        method = method.upper()
        start = time.perf_counter()
        attempt = 0

        while True:
            try:
                resp = await self.http.request(method, url, params=params, json=json)
            except (httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout) as exc:
                if attempt < self.retry.max_retries:
                    await asyncio.sleep(self.retry.backoff_base_seconds * (2**attempt))
                    attempt += 1
                    continue
                self._log_call(
                    tool=tool,
                    method=method,
                    url=url,
                    status="exception",
                    start=start,
                    attempt=attempt,
                    error_type=type(exc).__name__,
                )
                raise DoorayClientError(
                    f"Network/timeout error calling {method} {url}: {exc}"
                ) from exc
            except httpx.HTTPError as exc:
                self._log_call(
                    tool=tool,
                    method=method,
                    url=url,
                    status="exception",
                    start=start,
                    attempt=attempt,
                    error_type=type(exc).__name__,
                )
                raise DoorayClientError(
                    f"HTTPX error calling {method} {url}: {exc}"
                ) from exc

            if resp.status_code in self.retry.retry_statuses or (
                self.retry.retry_on_429 and resp.status_code == 429
            ):
                if attempt < self.retry.max_retries:
                    await asyncio.sleep(self.retry.backoff_base_seconds * (2**attempt))
                    attempt += 1
                    continue

            self._log_call(
                tool=tool,
                method=method,
                url=str(resp.request.url),
                status=resp.status_code,
                start=start,
                attempt=attempt,
            )

            if resp.status_code < 200 or resp.status_code >= 300:
                raise self._to_http_error(resp, method=method)

            payload = self._safe_json(resp)
            self.raise_for_envelope(payload)
            return payload

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        tool: Optional[str] = None,
    ) -> Any:
        """Like request_envelope, but returns only the envelope's result."""
        payload = await self.request_envelope(
            method, url, params=params, json=json, tool=tool
        )
        if "header" in payload:
            return payload.get("result")
        return payload

    @staticmethod
    def raise_for_envelope(payload: Dict[str, Any], *, error_cls=DoorayAPIError):
        header = envelope_header(payload)
        if header and not header.get("isSuccessful"):
            raise error_cls(
                header.get("resultMessage") or "Request failed",
                result_code=header.get("resultCode"),
            )

    def _safe_json(self, resp: httpx.Response) -> Dict[str, Any]:
        # Handle empty responses (204 No Content, etc.)
        if not resp.content:
            return {}

        try:
            data = resp.json()
        except Exception as exc:
            snippet = (resp.text or "")[:500]
            raise DoorayParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

        if not isinstance(data, dict):
            raise DoorayParseError(
                f"Expected top-level JSON object from "
                f"{resp.request.method} {resp.request.url}, "
                f"got {type(data).__name__}"
            )
        return data

    def _to_http_error(self, resp: httpx.Response, *, method: str) -> DoorayHTTPError:
        url = str(resp.request.url)
        response_json: Optional[Dict[str, Any]] = None
        response_text: Optional[str] = None
        message = "request failed"

        try:
            parsed = resp.json()
            if isinstance(parsed, dict):
                response_json = parsed
                header = envelope_header(parsed)
                message = (
                    header.get("resultMessage")
                    or parsed.get("message")
                    or parsed.get("error")
                    or message
                )
        except Exception:
            response_text = (resp.text or "")[:500]

        return DoorayHTTPError(
            status_code=resp.status_code,
            method=method,
            url=url,
            message=message,
            response_json=response_json,
            response_text=response_text,
        )

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.request("GET", url, params=params, tool=tool)

    async def post(
        self, url: str, *, json: Dict[str, Any], tool: Optional[str] = None
    ) -> Any:
        return await self.request("POST", url, json=json, tool=tool)

    async def put(
        self, url: str, *, json: Dict[str, Any], tool: Optional[str] = None
    ) -> Any:
        return await self.request("PUT", url, json=json, tool=tool)

    async def delete(self, url: str, *, tool: Optional[str] = None) -> Any:
        return await self.request("DELETE", url, tool=tool)

    async def get_paginated(
        self,
        url: str,
        *,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Fetch one page of a list endpoint.

        Returns:
            {
                "items": [...],
                "page": int,
                "size": int,
                "total": int | None,
                "next_page": int | None,
            }
        """
        if page < 0:
            raise ValueError("page must be >= 0")
        size = max(1, min(size, MAX_PAGE_SIZE))

        payload = await self.request_envelope(
            "GET", url, params={**(params or {}), "page": page, "size": size}, tool=tool
        )
        items = payload.get("result")
        if not isinstance(items, list):
            items = []
        total = payload.get("totalCount")
        total = total if isinstance(total, int) else None

        next_page: Optional[int] = None
        if total is not None and (page + 1) * size < total:
            next_page = page + 1

        return {
            "items": items,
            "page": page,
            "size": size,
            "total": total,
            "next_page": next_page,
        }
