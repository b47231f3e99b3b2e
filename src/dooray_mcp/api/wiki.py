from __future__ import annotations

from typing import Any, Dict, List, Optional

from dooray_mcp.client import DEFAULT_PAGE_SIZE, DoorayClient
from dooray_mcp.models import markdown_body

WIKI_BASE = "/wiki/v1"
TOOL = "wiki"


# --- Route builders ------------------------------------------------------- #


def page_url(wiki_id: str, page_id: str) -> str:
    return f"{WIKI_BASE}/wikis/{wiki_id}/pages/{page_id}"


def comments_url(wiki_id: str, page_id: str) -> str:
    return f"{page_url(wiki_id, page_id)}/comments"


def wiki_files_url(wiki_id: str) -> str:
    return f"{WIKI_BASE}/wikis/{wiki_id}/files"


def wiki_attach_file_url(wiki_id: str, attach_file_id: str) -> str:
    return f"{wiki_files_url(wiki_id)}/{attach_file_id}"


def page_files_url(wiki_id: str, page_id: str) -> str:
    return f"{page_url(wiki_id, page_id)}/files"


def page_file_url(wiki_id: str, page_id: str, file_id: str) -> str:
    return f"{page_files_url(wiki_id, page_id)}/{file_id}"


# --- Wikis and pages ------------------------------------------------------ #


async def get_wikis(
    client: DoorayClient, *, page: int = 0, size: int = DEFAULT_PAGE_SIZE
) -> Dict[str, Any]:
    return await client.get_paginated(
        f"{WIKI_BASE}/wikis", page=page, size=size, tool=TOOL
    )


async def get_page(client: DoorayClient, page_id: str) -> Dict[str, Any]:
    return await client.get(f"{WIKI_BASE}/pages/{page_id}", tool=TOOL)


async def get_page_in_wiki(
    client: DoorayClient, wiki_id: str, page_id: str
) -> Dict[str, Any]:
    return await client.get(page_url(wiki_id, page_id), tool=TOOL)


async def get_pages(
    client: DoorayClient, wiki_id: str, *, parent_page_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    params: Dict[str, Any] = {}
    if parent_page_id:
        params["parentPageId"] = parent_page_id
    return await client.get(
        f"{WIKI_BASE}/wikis/{wiki_id}/pages", params=params, tool=TOOL
    )


async def create_page(
    client: DoorayClient, wiki_id: str, payload: Dict[str, Any]
) -> Dict[str, Any]:
    return await client.post(
        f"{WIKI_BASE}/wikis/{wiki_id}/pages", json=payload, tool=TOOL
    )


async def update_page(
    client: DoorayClient, wiki_id: str, page_id: str, payload: Dict[str, Any]
) -> None:
    await client.put(page_url(wiki_id, page_id), json=payload, tool=TOOL)


async def update_page_title(
    client: DoorayClient, wiki_id: str, page_id: str, subject: str
) -> None:
    await client.put(
        f"{page_url(wiki_id, page_id)}/title", json={"subject": subject}, tool=TOOL
    )


async def update_page_content(
    client: DoorayClient, wiki_id: str, page_id: str, content: str
) -> None:
    await client.put(
        f"{page_url(wiki_id, page_id)}/content",
        json={"body": markdown_body(content)},
        tool=TOOL,
    )


async def update_page_referrers(
    client: DoorayClient,
    wiki_id: str,
    page_id: str,
    referrers: List[Dict[str, Any]],
) -> None:
    await client.put(
        f"{page_url(wiki_id, page_id)}/referrers",
        json={"referrers": referrers},
        tool=TOOL,
    )


async def delete_page_file(
    client: DoorayClient, wiki_id: str, page_id: str, file_id: str
) -> None:
    await client.delete(page_file_url(wiki_id, page_id, file_id), tool=TOOL)


# --- Comments ------------------------------------------------------------- #


async def list_comments(
    client: DoorayClient,
    wiki_id: str,
    page_id: str,
    *,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
) -> Dict[str, Any]:
    return await client.get_paginated(
        comments_url(wiki_id, page_id), page=page, size=size, tool=TOOL
    )


async def get_comment(
    client: DoorayClient, wiki_id: str, page_id: str, comment_id: str
) -> Dict[str, Any]:
    return await client.get(f"{comments_url(wiki_id, page_id)}/{comment_id}", tool=TOOL)


async def create_comment(
    client: DoorayClient, wiki_id: str, page_id: str, content: str
) -> Dict[str, Any]:
    return await client.post(
        comments_url(wiki_id, page_id), json={"body": {"content": content}}, tool=TOOL
    )


async def update_comment(
    client: DoorayClient, wiki_id: str, page_id: str, comment_id: str, content: str
) -> None:
    await client.put(
        f"{comments_url(wiki_id, page_id)}/{comment_id}",
        json={"body": {"content": content}},
        tool=TOOL,
    )


async def delete_comment(
    client: DoorayClient, wiki_id: str, page_id: str, comment_id: str
) -> None:
    await client.delete(f"{comments_url(wiki_id, page_id)}/{comment_id}", tool=TOOL)
