"""Abstract base class for tracker directories."""

from abc import ABC, abstractmethod
from typing import Literal

from issuedraft.models import CreatedIssue, CreationRequest, DirectoryEntity, DirectoryUser

EntityKind = Literal["teams", "projects", "cycles"]


class TrackerDirectory(ABC):
    @abstractmethod
    async def list_entities(self, kind: EntityKind) -> list[DirectoryEntity]: ...

    @abstractmethod
    async def list_users(self) -> list[DirectoryUser]: ...

    @abstractmethod
    async def active_cycle(self, team_id: str) -> DirectoryEntity | None: ...

    @abstractmethod
    async def create_issue(self, request: CreationRequest) -> CreatedIssue: ...
