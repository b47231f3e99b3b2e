import pytest
from dooray_mcp.models import (
    Member,
    Referrer,
    TaskCreateInput,
    TaskUpdateInput,
    UploadedFile,
    to_dooray_members,
    to_dooray_referrers,
)
from pydantic import ValidationError


def test_member_wire_shapes():
    members = [
        Member(id="m1", type="member"),
        Member(id="g1", type="group"),
        Member(id="a@b.c", type="email"),
    ]

    assert to_dooray_members(members) == [
        {"type": "member", "member": {"organizationMemberId": "m1"}},
        {"type": "group", "group": {"projectMemberGroupId": "g1"}},
        {"type": "emailUser", "emailUser": {"emailAddress": "a@b.c"}},
    ]
    assert to_dooray_members(None) == []


def test_member_rejects_unknown_type():
    with pytest.raises(ValidationError):
        Member(id="x", type="robot")


def test_referrers_none_stays_none():
    """None means clear and must survive conversion."""
    assert to_dooray_referrers(None) is None
    referrer = Referrer.model_validate({"member": {"organization_member_id": "m1"}})
    assert to_dooray_referrers([referrer]) == [
        {"type": "member", "member": {"organizationMemberId": "m1"}}
    ]


def test_task_update_tracks_provided_fields():
    data = TaskUpdateInput(project_id="p", task_id="t", milestone_id=None)

    assert data.provided("milestone_id")
    assert not data.provided("subject")
    assert not data.provided("workflow_id")


def test_task_update_rejects_null_outside_milestone():
    with pytest.raises(ValidationError) as exc:
        TaskUpdateInput(project_id="p", task_id="t", tag_ids=None)

    assert "tagIds cannot be null" in str(exc.value)


def test_task_update_accepts_camel_case_keys():
    data = TaskUpdateInput.model_validate(
        {
            "projectId": "p",
            "taskId": "t",
            "tagIds": ["a"],
            "milestoneId": None,
            "body": {"mimeType": "text/html", "content": "<p>x</p>"},
        }
    )

    assert data.tag_ids == ["a"]
    assert data.body.mime_type == "text/html"
    assert data.model_fields_set == {
        "project_id",
        "task_id",
        "tag_ids",
        "milestone_id",
        "body",
    }


def test_task_update_rejects_unknown_priority_and_fields():
    with pytest.raises(ValidationError):
        TaskUpdateInput(project_id="p", task_id="t", priority="urgent")
    with pytest.raises(ValidationError):
        TaskUpdateInput(project_id="p", task_id="t", status="done")


def test_task_create_defaults():
    data = TaskCreateInput(project_id="p", subject="s")

    assert data.priority == "none"
    assert data.is_draft is False
    assert data.body is None


def test_uploaded_file_parses_wire_names():
    uploaded = UploadedFile.model_validate(
        {
            "id": 12345,
            "attachFileId": "a-9",
            "name": "spec.pdf",
            "mimeType": "application/pdf",
            "size": 2048,
            "createdAt": "2026-10-01T09:00:00+09:00",
            "extra": "ignored",
        }
    )

    assert uploaded.id == "12345"
    assert uploaded.attach_file_id == "a-9"
    assert uploaded.mime_type == "application/pdf"
    assert uploaded.size == 2048
