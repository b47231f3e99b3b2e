import base64
from pathlib import Path

import pytest
import respx
from dooray_mcp.client import DoorayClient
from dooray_mcp.tools.wiki_files import (
    delete_wiki_page_file,
    download_wiki_attach_file,
    download_wiki_page_file,
    upload_wiki_file,
    upload_wiki_page_file,
)
from httpx import Response

BASE = "https://mock-dooray.com"
STORAGE = "https://file-api.mock-dooray.com"

UPLOADED = {
    "header": {"isSuccessful": True, "resultCode": 0, "resultMessage": ""},
    "result": {"id": "f1", "attachFileId": "a-1", "name": "diagram.png"},
}


@pytest.fixture
def client(tmp_path: Path):
    f = tmp_path / "diagram.png"
    f.write_bytes(b"\x89PNG")
    return DoorayClient(base_url=BASE, api_token="mock-token"), f


@pytest.mark.asyncio
@respx.mock
async def test_upload_wiki_file_returns_attach_file_id(client):
    cl, f = client
    respx.post(f"{BASE}/wiki/v1/wikis/w1/files").mock(
        return_value=Response(
            307, headers={"Location": f"{STORAGE}/wiki/v1/wikis/w1/files"}
        )
    )
    respx.post(f"{STORAGE}/wiki/v1/wikis/w1/files").mock(
        return_value=Response(200, json=UPLOADED)
    )

    async with cl:
        result = await upload_wiki_file(cl, "w1", str(f))

    assert result["success"] is True
    assert result["file_id"] == "f1"
    assert result["attach_file_id"] == "a-1"
    assert result["file_name"] == "diagram.png"
    assert "attach_file_id" in result["message"]


@pytest.mark.asyncio
@respx.mock
async def test_upload_wiki_page_file(client):
    cl, f = client
    page_files = "/wiki/v1/wikis/w1/pages/p1/files"
    respx.post(f"{BASE}{page_files}").mock(
        return_value=Response(307, headers={"Location": f"{STORAGE}{page_files}"})
    )
    respx.post(f"{STORAGE}{page_files}").mock(
        return_value=Response(
            200,
            json={
                "header": {"isSuccessful": True, "resultCode": 0},
                "result": {"id": "f2"},
            },
        )
    )

    async with cl:
        result = await upload_wiki_page_file(cl, "w1", "p1", str(f))

    assert result["file_id"] == "f2"
    # name falls back to the local file name
    assert result["file_name"] == "diagram.png"
    assert result["message"] == 'File "diagram.png" successfully uploaded to wiki page.'


@pytest.mark.asyncio
@respx.mock
async def test_download_wiki_page_file_saves_with_fallback_name(client, tmp_path):
    cl, _ = client
    respx.get(f"{BASE}/wiki/v1/wikis/w1/pages/p1/files/f1").mock(
        return_value=Response(200, content=b"data")
    )

    async with cl:
        result = await download_wiki_page_file(
            cl, "w1", "p1", "f1", save_path=str(tmp_path / "dl") + "/"
        )

    saved = Path(result["saved_to"])
    assert saved.name == "wiki-file-f1"
    assert saved.read_bytes() == b"data"
    assert result["file_id"] == "f1"
    assert result["content_length"] == 4


@pytest.mark.asyncio
@respx.mock
async def test_download_wiki_attach_file_base64(client):
    cl, _ = client
    respx.get(f"{BASE}/wiki/v1/wikis/w1/files/a-1").mock(
        return_value=Response(
            200,
            content=b"\x89PNG",
            headers={
                "Content-Type": "image/png",
                "Content-Disposition": 'inline; filename="diagram.png"',
            },
        )
    )

    async with cl:
        result = await download_wiki_attach_file(cl, "w1", "a-1")

    assert result["attach_file_id"] == "a-1"
    assert result["filename"] == "diagram.png"
    assert result["content_type"] == "image/png"
    assert base64.b64decode(result["base64_data"]) == b"\x89PNG"


@pytest.mark.asyncio
@respx.mock
async def test_delete_wiki_page_file(client):
    cl, _ = client
    route = respx.delete(f"{BASE}/wiki/v1/wikis/w1/pages/p1/files/f1").mock(
        return_value=Response(
            200, json={"header": {"isSuccessful": True, "resultCode": 0}}
        )
    )

    async with cl:
        result = await delete_wiki_page_file(cl, "w1", "p1", "f1")

    assert route.called
    assert result["success"] is True
