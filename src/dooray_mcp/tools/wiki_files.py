from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from dooray_mcp import transfer
from dooray_mcp.api import wiki as wiki_api
from dooray_mcp.client import DoorayClient
from dooray_mcp.models import UploadedFile


def _upload_summary(
    uploaded: UploadedFile, file_path: str, where: str
) -> Dict[str, Any]:
    name = uploaded.name or Path(file_path).name
    return {
        "success": True,
        "file_id": uploaded.id,
        "attach_file_id": uploaded.attach_file_id,
        "file_name": name,
        "mime_type": uploaded.mime_type,
        "size": uploaded.size,
        "message": f'File "{name}" successfully uploaded to {where}.',
    }


async def upload_wiki_file(
    client: DoorayClient, wiki_id: str, file_path: str
) -> Dict[str, Any]:
    """
    Upload a local file to a wiki (not page-specific).
    Pass the returned attach_file_id in create-wiki-page's attachFileIds.
    filePath must be an absolute path to an existing file.
    """
    uploaded = await transfer.upload_file(
        client, wiki_api.wiki_files_url(wiki_id), file_path
    )
    summary = _upload_summary(uploaded, file_path, "wiki")
    summary["message"] += (
        " Pass attach_file_id in attachFileIds to attach it to a new wiki page."
    )
    return summary


async def upload_wiki_page_file(
    client: DoorayClient, wiki_id: str, page_id: str, file_path: str
) -> Dict[str, Any]:
    """
    Upload a local file as an attachment of an existing wiki page.
    filePath must be an absolute path to an existing file.
    """
    uploaded = await transfer.upload_file(
        client, wiki_api.page_files_url(wiki_id, page_id), file_path
    )
    return _upload_summary(uploaded, file_path, "wiki page")


async def download_wiki_page_file(
    client: DoorayClient,
    wiki_id: str,
    page_id: str,
    file_id: str,
    *,
    save_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Download a file attached to a wiki page (fileId from the page's
    files[].id or images[].id).

    savePath may be a directory (filename taken from the response) or a full
    file path, and is recommended for large files. Without it the content is
    returned as base64_data.
    """
    download = await transfer.download_file(
        client, wiki_api.page_file_url(wiki_id, page_id, file_id)
    )
    return transfer.download_result(
        download,
        id_key="file_id",
        id_value=file_id,
        save_path=save_path,
        fallback_name=f"wiki-file-{file_id}",
    )


async def download_wiki_attach_file(
    client: DoorayClient,
    wiki_id: str,
    attach_file_id: str,
    *,
    save_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Download a wiki file by attach file id (files[].attachFileId or
    images[].attachFileId in the page detail; not the same as the file id).

    savePath may be a directory or a full file path; without it the content
    is returned as base64_data.
    """
    download = await transfer.download_file(
        client, wiki_api.wiki_attach_file_url(wiki_id, attach_file_id)
    )
    return transfer.download_result(
        download,
        id_key="attach_file_id",
        id_value=attach_file_id,
        save_path=save_path,
        fallback_name=f"wiki-attach-{attach_file_id}",
    )


async def delete_wiki_page_file(
    client: DoorayClient, wiki_id: str, page_id: str, file_id: str
) -> Dict[str, Any]:
    """Permanently remove a file from a wiki page."""
    await wiki_api.delete_page_file(client, wiki_id, page_id, file_id)
    return {
        "success": True,
        "message": f"File {file_id} successfully deleted from wiki page.",
    }
