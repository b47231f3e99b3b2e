"""
Attachment transfer for Dooray wiki files.

Uploads go through a redirecting gateway: the API endpoint answers the first
multipart POST with 307 and a Location on the file-storage tier, and the
upload must be sent again, with its own auth header, to that target. Both
POSTs are issued explicitly; the client never follows redirects on its own.
"""

from __future__ import annotations

import base64
import logging
import mimetypes
import os
import re
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Optional
from urllib.parse import unquote

import httpx

from .client import DoorayClient, envelope_header
from .errors import (
    DoorayClientError,
    DoorayUploadError,
    LocalFileNotFoundError,
    MissingApiTokenError,
    UnexpectedStatusError,
)
from .models import UploadedFile

log = logging.getLogger("dooray_mcp.transfer")

UPLOAD_FILE_TYPE = "general"
DIRECT_UPLOAD_STATUSES = frozenset({200, 201})

_FILENAME_RE = re.compile(r"""filename[^;=\n]*=((['"]).*?\2|[^;\n]*)""")
_EXT_VALUE_PREFIX_RE = re.compile(r"^[A-Za-z0-9!#$&+^`{}~_-]+'[A-Za-z-]*'")


@dataclass(frozen=True)
class DownloadedFile:
    data: bytes
    content_type: Optional[str]
    content_length: int
    content_disposition: Optional[str]

    @property
    def filename(self) -> Optional[str]:
        return extract_filename(self.content_disposition)


# --- Upload --------------------------------------------------------------- #


def _multipart_headers(client: DoorayClient) -> Dict[str, str]:
    # httpx takes the boundary from an explicit multipart Content-Type, which
    # also overrides the session's JSON default for this request only.
    return {
        "Content-Type": f"multipart/form-data; boundary={uuid.uuid4().hex}",
        "Authorization": f"dooray-api {client.api_token}",
        "Accept": client.http.headers.get("Accept", "application/json"),
    }


async def _post_multipart(
    client: DoorayClient, url: str, path: Path, *, read_body: bool
) -> httpx.Response:
    """
    POST the file once. With read_body=False the response body is left
    unread and only status and headers are meaningful.
    """
    ctype = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    try:
        with path.open("rb") as fh:
            request = client.http.build_request(
                "POST",
                url,
                data={"type": UPLOAD_FILE_TYPE},
                files={"file": (path.name, fh, ctype)},
                headers=_multipart_headers(client),
            )
            resp = await client.http.send(
                request, stream=not read_body, follow_redirects=False
            )
            if read_body:
                return resp
            await resp.aclose()
            return resp
    except httpx.HTTPError as exc:
        raise DoorayClientError(f"Upload request to {url} failed: {exc}") from exc


def _redirect_target(resp: httpx.Response) -> Optional[str]:
    location = (resp.headers.get("Location") or "").strip()
    if not location:
        return None
    return str(resp.request.url.join(location))


def _parse_upload_envelope(client: DoorayClient, resp: httpx.Response) -> UploadedFile:
    if resp.status_code < 200 or resp.status_code >= 300:
        raise client._to_http_error(resp, method="POST")
    payload = client._safe_json(resp)
    header = envelope_header(payload)
    if not header.get("isSuccessful"):
        raise DoorayUploadError(
            header.get("resultMessage") or "Upload failed",
            result_code=header.get("resultCode"),
        )
    result = payload.get("result")
    if not isinstance(result, dict):
        raise DoorayUploadError("Upload response carried no result.")
    return UploadedFile.model_validate(result)


async def upload_file(client: DoorayClient, url: str, file_path: str) -> UploadedFile:
    """
    Upload a local file to a wiki-level or page-level files endpoint.

    1. POST to the endpoint without reading the body.
    2. 307 with a Location: POST again to the redirect target.
       200/201: POST again to the endpoint itself.
       Anything else (including 307 without Location): UnexpectedStatusError.
    3. The second response is a {header, result} envelope.
    """
    if not client.api_token:
        raise MissingApiTokenError("DOORAY_API_TOKEN environment variable is required")

    path = Path(file_path)
    if not path.is_file():
        raise LocalFileNotFoundError(file_path)

    log.debug("upload.step1", extra={"step": 1, "endpoint": url})
    first = await _post_multipart(client, url, path, read_body=False)
    redirect = _redirect_target(first) if first.status_code == 307 else None
    log.debug(
        "upload.step1.response",
        extra={"step": 1, "status": first.status_code, "redirect": redirect},
    )

    if first.status_code == 307 and redirect:
        target = redirect
    elif first.status_code in DIRECT_UPLOAD_STATUSES:
        target = url
    else:
        raise UnexpectedStatusError(first.status_code)

    log.debug("upload.step2", extra={"step": 2, "endpoint": target})
    second = await _post_multipart(client, target, path, read_body=True)
    return _parse_upload_envelope(client, second)


# --- Download ------------------------------------------------------------- #


def extract_filename(content_disposition: Optional[str]) -> Optional[str]:
    """
    Recover the original filename from a Content-Disposition header.
    Accepts quoted and unquoted values; falls back to the raw capture when
    percent-decoding fails.
    """
    if not content_disposition:
        return None
    match = _FILENAME_RE.search(content_disposition)
    if not match:
        return None

    raw = match.group(1).strip()
    if not raw.startswith(("'", '"')):
        # RFC 5987 ext-value: charset'lang'value
        raw = _EXT_VALUE_PREFIX_RE.sub("", raw, count=1)
    raw = raw.replace('"', "").replace("'", "")
    try:
        return unquote(raw, errors="strict")
    except UnicodeDecodeError:
        return raw


async def download_file(client: DoorayClient, url: str) -> DownloadedFile:
    try:
        resp = await client.http.get(
            url,
            params={"media": "raw"},
            headers={"Accept": "*/*"},
            follow_redirects=True,
        )
    except httpx.HTTPError as exc:
        raise DoorayClientError(f"Failed to download {url}: {exc}") from exc

    if resp.status_code < 200 or resp.status_code >= 300:
        raise client._to_http_error(resp, method="GET")

    data = resp.content or b""
    return DownloadedFile(
        data=data,
        content_type=resp.headers.get("Content-Type"),
        content_length=len(data),
        content_disposition=resp.headers.get("Content-Disposition"),
    )


def _is_directory_target(save_path: str) -> bool:
    if save_path.endswith(("/", os.sep)):
        return True
    return Path(save_path).is_dir()


def _safe_basename(name: Optional[str], fallback_name: str) -> str:
    """Last path component of a server-supplied name; never absolute or '..'."""
    base = PurePosixPath((name or "").replace("\\", "/")).name
    if base in ("", ".", ".."):
        return fallback_name
    return base


def save_download(download: DownloadedFile, save_path: str, fallback_name: str) -> Path:
    """
    Write the download to save_path. A directory-style target (existing dir
    or trailing separator) gets the recovered filename, or fallback_name when
    the header carried none. The recovered name is reduced to its last path
    component so the file always lands inside the directory.
    """
    if _is_directory_target(save_path):
        directory = Path(save_path)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / _safe_basename(download.filename, fallback_name)
        if target.resolve().parent != directory.resolve():
            raise DoorayClientError(
                f"Refusing to write {target}: outside {directory}"
            )
    else:
        target = Path(save_path)
        target.parent.mkdir(parents=True, exist_ok=True)

    target.write_bytes(download.data)
    return target


def download_result(
    download: DownloadedFile,
    *,
    id_key: str,
    id_value: str,
    save_path: Optional[str],
    fallback_name: str,
) -> Dict[str, Any]:
    """Shape a download for the tool response: saved path or base64 content."""
    result: Dict[str, Any] = {
        "success": True,
        id_key: id_value,
        "filename": download.filename,
        "content_type": download.content_type,
        "content_length": download.content_length,
    }
    if save_path:
        target = save_download(download, save_path, fallback_name)
        result["saved_to"] = str(target)
        result["message"] = (
            f'File saved to "{target}" ({download.content_length} bytes)'
        )
    else:
        result["base64_data"] = base64.b64encode(download.data).decode("ascii")
    return result
