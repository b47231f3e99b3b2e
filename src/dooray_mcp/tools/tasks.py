from __future__ import annotations

import logging
from typing import Any, Dict

from dooray_mcp.api import projects as projects_api
from dooray_mcp.client import DoorayClient
from dooray_mcp.models import TaskCreateInput, TaskUpdateInput, to_dooray_members

log = logging.getLogger("dooray_mcp.tools.tasks")

# Optional scalar/collection fields sent in the field patch, with wire names.
_PATCH_FIELDS = (
    ("subject", "subject"),
    ("due_date", "dueDate"),
    ("milestone_id", "milestoneId"),
    ("tag_ids", "tagIds"),
    ("priority", "priority"),
)


def _field_patch(data: TaskUpdateInput) -> Dict[str, Any]:
    """Collect exactly the fields the caller supplied, keyed by wire name."""
    patch: Dict[str, Any] = {}
    for field, wire in _PATCH_FIELDS:
        if data.provided(field):
            patch[wire] = getattr(data, field)
    if data.provided("body") and data.body is not None:
        patch["body"] = data.body.to_dooray()
    if data.provided("assignees") or data.provided("cc"):
        patch["users"] = {
            "to": to_dooray_members(data.assignees),
            "cc": to_dooray_members(data.cc),
        }
    return patch


async def get_task(
    client: DoorayClient, project_id: str, task_id: str
) -> Dict[str, Any]:
    """
    Fetch a task with all current details: subject, body, users (to/cc),
    workflow, milestone, tags, priority, parent.
    """
    return await projects_api.get_task(client, project_id, task_id)


async def create_task(client: DoorayClient, data: TaskCreateInput) -> Dict[str, Any]:
    """
    Create a task in a Dooray project, or a draft task when isDraft is true.

    Assignees and cc entries are {id, type} where type is member, group or
    email. Projects with mandatory tag groups reject tasks missing those tags.
    Priority defaults to "none". Set parentPostId to create a subtask.

    Returns the created task, or {id, url, message} for a draft.
    """
    payload: Dict[str, Any] = {
        "subject": data.subject,
        "users": {
            "to": to_dooray_members(data.assignees),
            "cc": to_dooray_members(data.cc),
        },
        "priority": data.priority,
    }
    if data.parent_post_id is not None:
        payload["parentPostId"] = data.parent_post_id
    if data.body is not None:
        payload["body"] = data.body.to_dooray()
    if data.due_date is not None:
        payload["dueDate"] = data.due_date
    if data.milestone_id is not None:
        payload["milestoneId"] = data.milestone_id
    if data.tag_ids is not None:
        payload["tagIds"] = data.tag_ids

    if data.is_draft:
        draft = await projects_api.create_draft_task(client, data.project_id, payload)
        return {
            "id": draft.get("id"),
            "url": draft.get("url"),
            "message": (
                "Draft task created successfully. "
                "Open the URL in your browser to continue editing."
            ),
        }

    return await projects_api.create_task(client, data.project_id, payload)


async def update_task(client: DoorayClient, data: TaskUpdateInput) -> Dict[str, Any]:
    """
    Update an existing task. Only provided fields change.

    assignees, cc and tagIds replace the whole existing set; they are never
    merged. milestoneId=null removes the milestone. workflowId changes the
    status and parentPostId sets the parent task; a task that already has
    subtasks cannot become a child.

    The field patch, workflow change and parent change are separate calls made
    in that order. A failure stops the sequence without undoing earlier steps.
    Returns the task with all current details.
    """
    patch = _field_patch(data)

    result: Any = None
    if patch:
        result = await projects_api.update_task(
            client, data.project_id, data.task_id, patch
        )

    if data.provided("workflow_id"):
        await projects_api.set_task_workflow(
            client, data.project_id, data.task_id, data.workflow_id
        )

    if data.provided("parent_post_id"):
        await projects_api.set_parent_post(
            client, data.project_id, data.task_id, data.parent_post_id
        )

    if not result:
        log.debug("No task in field patch response; fetching %s", data.task_id)
        result = await projects_api.get_task(client, data.project_id, data.task_id)

    return result
