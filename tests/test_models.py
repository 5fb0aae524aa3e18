"""Tests for issuedraft.models."""

import pytest

from issuedraft.models import CreatedIssue, CreationRequest, DirectoryEntity, DirectoryUser, ParsedDraft


def test_draft_frozen(sample_draft: ParsedDraft) -> None:
    with pytest.raises(Exception):  # ValidationError or TypeError depending on pydantic version
        sample_draft.title = "changed"  # type: ignore[misc]


def test_draft_defaults() -> None:
    draft = ParsedDraft()
    assert draft.title is None
    assert draft.description is None
    assert draft.owner is None
    assert draft.team is None
    assert draft.cycle is None
    assert draft.project is None


def test_entity_frozen(core_team: DirectoryEntity) -> None:
    with pytest.raises(Exception):
        core_team.name = "changed"  # type: ignore[misc]


def test_user_accepts_both_spellings() -> None:
    camel = DirectoryUser.model_validate({"id": "u1", "displayName": "jdoe"})
    snake = DirectoryUser(id="u1", display_name="jdoe")
    assert camel == snake


class TestCreationRequest:
    def test_team_id_required(self) -> None:
        with pytest.raises(Exception):
            CreationRequest(title="T", description="")  # type: ignore[call-arg]

    def test_input_omits_unresolved_ids(self) -> None:
        request = CreationRequest(title="T", description="", team_id="T1", assignee_id="U1")
        assert request.to_input() == {"title": "T", "description": "", "teamId": "T1", "assigneeId": "U1"}

    def test_empty_description_is_kept(self) -> None:
        assert CreationRequest(title="T", description="", team_id="T1").to_input()["description"] == ""

    def test_all_ids(self) -> None:
        request = CreationRequest(
            title="T", description="d", team_id="T1", project_id="P1", cycle_id="C1", assignee_id="U1"
        )
        assert request.to_input() == {
            "title": "T",
            "description": "d",
            "teamId": "T1",
            "projectId": "P1",
            "cycleId": "C1",
            "assigneeId": "U1",
        }


def test_created_issue_frozen() -> None:
    created = CreatedIssue(url="https://linear.app/core/issue/CORE-1")
    with pytest.raises(Exception):
        created.url = "changed"  # type: ignore[misc]
