"""
Tool namespace for Dooray MCP.

Every public coroutine in these modules whose first parameter is ``client``
is discovered by dooray_mcp.registry and exposed as a tool.
"""

from .system import system_ping
from .tasks import create_task, get_task, update_task
from .wiki import (
    create_wiki_page,
    get_wiki_list,
    get_wiki_page,
    get_wiki_page_list,
    update_wiki_page,
    update_wiki_page_content,
    update_wiki_page_referrers,
    update_wiki_page_title,
)
from .wiki_comments import (
    create_wiki_comment,
    delete_wiki_comment,
    get_wiki_comment,
    get_wiki_comment_list,
    update_wiki_comment,
)
from .wiki_files import (
    delete_wiki_page_file,
    download_wiki_attach_file,
    download_wiki_page_file,
    upload_wiki_file,
    upload_wiki_page_file,
)

__all__ = [
    "system_ping",
    "get_task",
    "create_task",
    "update_task",
    "get_wiki_list",
    "get_wiki_page_list",
    "get_wiki_page",
    "create_wiki_page",
    "update_wiki_page",
    "update_wiki_page_title",
    "update_wiki_page_content",
    "update_wiki_page_referrers",
    "get_wiki_comment_list",
    "get_wiki_comment",
    "create_wiki_comment",
    "update_wiki_comment",
    "delete_wiki_comment",
    "upload_wiki_file",
    "upload_wiki_page_file",
    "download_wiki_page_file",
    "download_wiki_attach_file",
    "delete_wiki_page_file",
]
