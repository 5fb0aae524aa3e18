"""Shared test fixtures."""

import pytest

from issuedraft.ai.base import DraftModel
from issuedraft.errors import DirectoryRequestFailed, IssueCreateMalformedResponse
from issuedraft.models import CreatedIssue, CreationRequest, DirectoryEntity, DirectoryUser, ParsedDraft
from issuedraft.providers.base import EntityKind, TrackerDirectory
from issuedraft.settings import IssueDraftSettings


class FakeDirectory(TrackerDirectory):
    """In-memory tracker directory that records every call."""

    def __init__(
        self,
        teams: list[DirectoryEntity] | None = None,
        projects: list[DirectoryEntity] | None = None,
        cycles: list[DirectoryEntity] | None = None,
        users: list[DirectoryUser] | None = None,
        active_cycles: dict[str, DirectoryEntity] | None = None,
        created_url: str | None = "https://linear.app/core/issue/CORE-1",
        fail_on: set[str] | None = None,
    ) -> None:
        self.entities = {"teams": teams or [], "projects": projects or [], "cycles": cycles or []}
        self.users = users or []
        self.active_cycles = active_cycles or {}
        self.created_url = created_url
        self.fail_on = fail_on or set()
        self.calls: list[tuple[str, str | None]] = []
        self.created: list[CreationRequest] = []

    def _record(self, op: str, arg: str | None = None) -> None:
        self.calls.append((op, arg))
        if op in self.fail_on or arg in self.fail_on:
            raise DirectoryRequestFailed(f"Linear request failed (500) during {op}", 500)

    async def list_entities(self, kind: EntityKind) -> list[DirectoryEntity]:
        self._record("list", kind)
        return self.entities[kind]

    async def list_users(self) -> list[DirectoryUser]:
        self._record("list", "users")
        return self.users

    async def active_cycle(self, team_id: str) -> DirectoryEntity | None:
        self._record("active_cycle", team_id)
        return self.active_cycles.get(team_id)

    async def create_issue(self, request: CreationRequest) -> CreatedIssue:
        self._record("create")
        self.created.append(request)
        if self.created_url is None:
            raise IssueCreateMalformedResponse()
        return CreatedIssue(id="issue_1", title=request.title, url=self.created_url)


class FakeModel(DraftModel):
    name = "Fake AI"

    def __init__(self, response: str) -> None:
        self.response = response
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.response


@pytest.fixture
def fake_directory() -> type[FakeDirectory]:
    return FakeDirectory


@pytest.fixture
def fake_model() -> type[FakeModel]:
    return FakeModel


@pytest.fixture
def core_team() -> DirectoryEntity:
    return DirectoryEntity(id="T1", name="Core")


@pytest.fixture
def sample_users() -> list[DirectoryUser]:
    return [
        DirectoryUser(id="U1", name="Li Wei", display_name="liwei", email="wei.li@example.com"),
        DirectoryUser(id="U2", name="Yan Soul", display_name="Yan Soul", email="yansoul@x.com"),
        DirectoryUser(id="U3", name="Jane Doe", display_name="jdoe", email="jane.doe@example.com"),
    ]


@pytest.fixture
def sample_draft() -> ParsedDraft:
    return ParsedDraft(
        title="Fix crash",
        description="Console crashes on open.",
        owner="yansoul",
        team="Core",
        cycle=None,
        project="Recorder",
    )


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> IssueDraftSettings:
    for var in ("ISSUEDRAFT_USE_LOCAL_AI", "ISSUEDRAFT_OPENAI_API_KEY", "ISSUEDRAFT_LINEAR_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    return IssueDraftSettings(linear_api_key="lin_api_test")  # type: ignore[arg-type]
