from __future__ import annotations

from typing import Any, Dict

from dooray_mcp.api import wiki as wiki_api
from dooray_mcp.client import DEFAULT_PAGE_SIZE, DoorayClient


async def get_wiki_comment_list(
    client: DoorayClient,
    wiki_id: str,
    page_id: str,
    *,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
) -> Dict[str, Any]:
    """
    Get comments on a wiki page, newest first (page is 0-based, size max 100).
    Each comment has: id, page, createdAt, modifiedAt, creator, body.
    """
    return await wiki_api.list_comments(client, wiki_id, page_id, page=page, size=size)


async def get_wiki_comment(
    client: DoorayClient, wiki_id: str, page_id: str, comment_id: str
) -> Dict[str, Any]:
    """Get a single wiki comment."""
    return await wiki_api.get_comment(client, wiki_id, page_id, comment_id)


async def create_wiki_comment(
    client: DoorayClient, wiki_id: str, page_id: str, content: str
) -> Dict[str, Any]:
    """Create a markdown comment on a wiki page. Returns: id."""
    return await wiki_api.create_comment(client, wiki_id, page_id, content)


async def update_wiki_comment(
    client: DoorayClient, wiki_id: str, page_id: str, comment_id: str, content: str
) -> Dict[str, Any]:
    """Replace the content of a wiki comment."""
    await wiki_api.update_comment(client, wiki_id, page_id, comment_id, content)
    return {"success": True, "message": "Comment updated successfully"}


async def delete_wiki_comment(
    client: DoorayClient, wiki_id: str, page_id: str, comment_id: str
) -> Dict[str, Any]:
    """Delete a wiki comment."""
    await wiki_api.delete_comment(client, wiki_id, page_id, comment_id)
    return {"success": True, "message": "Comment deleted successfully"}
