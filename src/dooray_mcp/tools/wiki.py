from __future__ import annotations

from typing import Any, Dict, List, Optional

from dooray_mcp.api import wiki as wiki_api
from dooray_mcp.client import DEFAULT_PAGE_SIZE, DoorayClient
from dooray_mcp.models import (
    Referrer,
    WikiPageCreateInput,
    WikiPageUpdateInput,
    markdown_body,
    to_dooray_referrers,
)


async def get_wiki_list(
    client: DoorayClient, *, page: int = 0, size: int = DEFAULT_PAGE_SIZE
) -> Dict[str, Any]:
    """
    List wikis the member can access, with page/size pagination.

    Returns:
        {"items": [...], "page": int, "size": int, "total": int | None,
         "next_page": int | None}
    """
    return await wiki_api.get_wikis(client, page=page, size=size)


async def get_wiki_page_list(
    client: DoorayClient, wiki_id: str, *, parent_page_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Get wiki pages at one depth level. Omit parentPageId for root pages."""
    return await wiki_api.get_pages(client, wiki_id, parent_page_id=parent_page_id)


async def get_wiki_page(
    client: DoorayClient, page_id: str, *, wiki_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Get wiki page details including body content, creator, referrers, files
    and images. wikiId is optional; the page id alone is enough.
    """
    if wiki_id:
        return await wiki_api.get_page_in_wiki(client, wiki_id, page_id)
    return await wiki_api.get_page(client, page_id)


async def create_wiki_page(
    client: DoorayClient, data: WikiPageCreateInput
) -> Dict[str, Any]:
    """
    Create a wiki page with markdown content.
    Find the parent (usually the wiki's Home page) with get-wiki-page-list
    first; the API returns 400 for pages without parentPageId.
    Returns: id, wikiId, parentPageId, version.
    """
    payload: Dict[str, Any] = {
        "subject": data.subject,
        "body": markdown_body(data.content),
    }
    if data.parent_page_id:
        payload["parentPageId"] = data.parent_page_id
    if data.attach_file_ids:
        payload["attachFileIds"] = data.attach_file_ids
    if data.referrers:
        payload["referrers"] = to_dooray_referrers(data.referrers)

    return await wiki_api.create_page(client, data.wiki_id, payload)


async def update_wiki_page(
    client: DoorayClient, data: WikiPageUpdateInput
) -> Dict[str, Any]:
    """
    Update wiki page title, content and/or referrers in one call.
    The API requires subject even for content-only updates; fetch the page
    first to keep the existing title. referrers=null clears all referrers.
    """
    payload: Dict[str, Any] = {}
    if data.subject is not None:
        payload["subject"] = data.subject
    if data.content is not None:
        payload["body"] = markdown_body(data.content)
    if "referrers" in data.model_fields_set:
        payload["referrers"] = to_dooray_referrers(data.referrers)

    await wiki_api.update_page(client, data.wiki_id, data.page_id, payload)
    return {"success": True, "message": "Wiki page updated successfully"}


async def update_wiki_page_title(
    client: DoorayClient, wiki_id: str, page_id: str, subject: str
) -> Dict[str, Any]:
    """Change only the title of a wiki page."""
    await wiki_api.update_page_title(client, wiki_id, page_id, subject)
    return {"success": True, "message": "Wiki page title updated successfully"}


async def update_wiki_page_content(
    client: DoorayClient, wiki_id: str, page_id: str, content: str
) -> Dict[str, Any]:
    """Replace only the markdown content of a wiki page."""
    await wiki_api.update_page_content(client, wiki_id, page_id, content)
    return {"success": True, "message": "Wiki page content updated successfully"}


async def update_wiki_page_referrers(
    client: DoorayClient, wiki_id: str, page_id: str, referrers: List[Referrer]
) -> Dict[str, Any]:
    """Replace the referrers (watchers) of a wiki page. An empty list clears them."""
    await wiki_api.update_page_referrers(
        client, wiki_id, page_id, to_dooray_referrers(referrers) or []
    )
    return {"success": True, "message": "Wiki page referrers updated successfully"}
