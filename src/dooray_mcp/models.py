from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

MARKDOWN = "text/x-markdown"

Priority = Literal["highest", "high", "normal", "low", "lowest", "none"]
MimeType = Literal["text/x-markdown", "text/html"]

# Tool arguments arrive in camelCase (projectId, tagIds); snake_case is accepted
# too so Python callers can build models directly.
INPUT_CONFIG = ConfigDict(
    extra="forbid", alias_generator=to_camel, populate_by_name=True
)

# Dooray wire names for each member kind: (type, nested key, id field)
_MEMBER_WIRE = {
    "member": ("member", "member", "organizationMemberId"),
    "group": ("group", "group", "projectMemberGroupId"),
    "email": ("emailUser", "emailUser", "emailAddress"),
}


# --- Shared DTOs ---


class Member(BaseModel):
    """A task assignee or CC entry."""

    id: str
    type: Literal["member", "group", "email"]

    model_config = INPUT_CONFIG

    def to_dooray(self) -> Dict[str, Any]:
        wire_type, key, id_field = _MEMBER_WIRE[self.type]
        return {"type": wire_type, key: {id_field: self.id}}


def to_dooray_members(members: Optional[List[Member]]) -> List[Dict[str, Any]]:
    return [m.to_dooray() for m in members or []]


class Body(BaseModel):
    mime_type: MimeType = MARKDOWN
    content: str

    model_config = INPUT_CONFIG

    def to_dooray(self) -> Dict[str, str]:
        return {"mimeType": self.mime_type, "content": self.content}


def markdown_body(content: str) -> Dict[str, str]:
    return {"mimeType": MARKDOWN, "content": content}


class ReferrerMember(BaseModel):
    organization_member_id: str

    model_config = INPUT_CONFIG


class Referrer(BaseModel):
    """A wiki page watcher."""

    type: Literal["member"] = "member"
    member: ReferrerMember

    model_config = INPUT_CONFIG

    def to_dooray(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "member": {"organizationMemberId": self.member.organization_member_id},
        }


def to_dooray_referrers(
    referrers: Optional[List[Referrer]],
) -> Optional[List[Dict[str, Any]]]:
    if referrers is None:
        return None
    return [r.to_dooray() for r in referrers]


# --- Input Models (Tool Payloads) ---


class WikiPageCreateInput(BaseModel):
    wiki_id: str
    subject: str
    content: str = Field(description="Page content (markdown)")
    parent_page_id: Optional[str] = Field(
        default=None,
        description="Parent page ID; the API rejects new pages without one.",
    )
    attach_file_ids: Optional[List[str]] = Field(
        default=None, description="attachFileId values from upload-wiki-file"
    )
    referrers: Optional[List[Referrer]] = None

    model_config = INPUT_CONFIG


class WikiPageUpdateInput(BaseModel):
    """
    Whole-page update. Only provided fields are sent; referrers=None is an
    explicit clear and is sent as null.
    """

    wiki_id: str
    page_id: str
    subject: Optional[str] = Field(
        default=None, description="Page title (the API requires it on every update)"
    )
    content: Optional[str] = None
    referrers: Optional[List[Referrer]] = None

    model_config = INPUT_CONFIG


class TaskCreateInput(BaseModel):
    project_id: str
    subject: str
    parent_post_id: Optional[str] = Field(
        default=None, description="Parent task ID; creates this task as a subtask"
    )
    is_draft: bool = Field(
        default=False,
        description="Create a draft task that is continued in the browser",
    )
    body: Optional[Body] = None
    assignees: Optional[List[Member]] = None
    cc: Optional[List[Member]] = None
    due_date: Optional[str] = Field(default=None, description="ISO 8601 due date")
    milestone_id: Optional[str] = None
    tag_ids: Optional[List[str]] = None
    priority: Priority = "none"

    model_config = INPUT_CONFIG


class TaskUpdateInput(BaseModel):
    """
    Update request for a single task.

    Each optional field has three states: absent from model_fields_set
    (leave unchanged), present with None (clear; milestone_id only), or
    present with a value. assignees, cc and tag_ids replace the whole set.
    """

    project_id: str
    task_id: str
    subject: Optional[str] = None
    body: Optional[Body] = None
    assignees: Optional[List[Member]] = None
    cc: Optional[List[Member]] = None
    due_date: Optional[str] = Field(default=None, description="ISO 8601 due date")
    milestone_id: Optional[str] = Field(
        default=None, description="Milestone ID, or null to remove the milestone"
    )
    tag_ids: Optional[List[str]] = Field(
        default=None, description="Complete replacement tag set"
    )
    priority: Optional[Priority] = None
    workflow_id: Optional[str] = Field(default=None, description="Workflow (status) ID")
    parent_post_id: Optional[str] = Field(
        default=None,
        description="Parent task ID; a task that has subtasks cannot be a child",
    )

    model_config = INPUT_CONFIG

    @model_validator(mode="after")
    def _only_milestone_clears(self) -> "TaskUpdateInput":
        fields = type(self).model_fields
        for name in self.model_fields_set - {"milestone_id"}:
            if getattr(self, name) is None:
                raise ValueError(f"{fields[name].alias or name} cannot be null")
        return self

    def provided(self, field: str) -> bool:
        return field in self.model_fields_set


# --- Output Models ---


class UploadedFile(BaseModel):
    id: str
    attach_file_id: Optional[str] = Field(default=None, alias="attachFileId")
    name: Optional[str] = None
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    size: Optional[int] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )
