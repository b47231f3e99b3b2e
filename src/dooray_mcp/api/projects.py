from __future__ import annotations

from typing import Any, Dict

from dooray_mcp.client import DoorayClient

PROJECT_BASE = "/project/v1"
TOOL = "tasks"


def task_url(project_id: str, task_id: str) -> str:
    return f"{PROJECT_BASE}/projects/{project_id}/posts/{task_id}"


async def get_task(
    client: DoorayClient, project_id: str, task_id: str
) -> Dict[str, Any]:
    return await client.get(task_url(project_id, task_id), tool=TOOL)


async def create_task(
    client: DoorayClient, project_id: str, payload: Dict[str, Any]
) -> Dict[str, Any]:
    return await client.post(
        f"{PROJECT_BASE}/projects/{project_id}/posts", json=payload, tool=TOOL
    )


async def create_draft_task(
    client: DoorayClient, project_id: str, payload: Dict[str, Any]
) -> Dict[str, Any]:
    """Create a draft task; the result carries {id, url} for the browser."""
    return await client.post(
        f"{PROJECT_BASE}/projects/{project_id}/drafts", json=payload, tool=TOOL
    )


async def update_task(
    client: DoorayClient, project_id: str, task_id: str, payload: Dict[str, Any]
) -> Any:
    return await client.put(task_url(project_id, task_id), json=payload, tool=TOOL)


async def set_task_workflow(
    client: DoorayClient, project_id: str, task_id: str, workflow_id: str
) -> None:
    await client.put(
        f"{task_url(project_id, task_id)}/set-workflow",
        json={"workflowId": workflow_id},
        tool=TOOL,
    )


async def set_parent_post(
    client: DoorayClient, project_id: str, task_id: str, parent_post_id: str
) -> None:
    await client.put(
        f"{task_url(project_id, task_id)}/set-parent-post",
        json={"parentPostId": parent_post_id},
        tool=TOOL,
    )


async def get_my_member(client: DoorayClient) -> Dict[str, Any]:
    return await client.get("/common/v1/members/me", tool="system")
