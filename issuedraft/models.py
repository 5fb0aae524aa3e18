"""Shared pydantic models passed between the extractor, resolvers and providers."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ParsedDraft(BaseModel):
    """Issue fields extracted from free text, before any identifiers are resolved."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    description: str | None = None
    owner: str | None = None
    team: str | None = None
    cycle: str | None = None
    project: str | None = None


class DirectoryEntity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None  # Linear cycles can be unnamed


class DirectoryUser(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str | None = None
    display_name: str | None = None
    email: str | None = None


class CreationRequest(BaseModel):
    """Input for the tracker's issueCreate mutation."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: str
    description: str
    team_id: str
    project_id: str | None = None
    cycle_id: str | None = None
    assignee_id: str | None = None

    def to_input(self) -> dict:
        # Unresolved ids are left out of the payload entirely, never sent as null.
        return self.model_dump(by_alias=True, exclude_none=True)


class CreatedIssue(BaseModel):
    """Returned by create_issue; only what the caller needs."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    title: str | None = None
    url: str
