"""Linear GraphQL API directory."""

import logging

import httpx

from issuedraft.errors import DirectoryRequestFailed, DraftError, IssueCreateFailed, IssueCreateMalformedResponse
from issuedraft.models import CreatedIssue, CreationRequest, DirectoryEntity, DirectoryUser
from issuedraft.providers.base import EntityKind, TrackerDirectory

logger = logging.getLogger(__name__)

ENDPOINT = "https://api.linear.app/graphql"

_LIST_ENTITIES = """
query List{collection} {{
  {kind} {{
    nodes {{
      id
      name
    }}
  }}
}}
"""

_LIST_USERS = """
query UsersForAssignment {
  users(first: 100) {
    nodes {
      id
      name
      displayName
      email
    }
  }
}
"""

_ACTIVE_CYCLE = """
query ActiveCycle($teamId: String!) {
  team(id: $teamId) {
    activeCycle {
      id
      name
    }
  }
}
"""

_CREATE_ISSUE = """
mutation IssueCreate($input: IssueCreateInput!) {
  issueCreate(input: $input) {
    issue {
      id
      title
      url
    }
  }
}
"""


class LinearDirectory(TrackerDirectory):
    def __init__(self, api_key: str, timeout: float = 30) -> None:
        if not api_key:
            raise RuntimeError("linear_api_key is required")
        self._api_key = api_key
        self._timeout = timeout

    async def _gql(
        self,
        query: str,
        variables: dict | None = None,
        error: type[DraftError] = DirectoryRequestFailed,
    ) -> dict:
        logger.debug("Linear request -> %s", ENDPOINT, extra={"variables": variables or {}})
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    ENDPOINT,
                    json={"query": query, "variables": variables or {}},
                    headers={
                        # Linear personal keys go in unprefixed
                        "Authorization": self._api_key,
                        "Content-Type": "application/json",
                    },
                )
        except httpx.HTTPError as exc:
            raise error(f"Linear request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            messages = "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
            raise error(f"Linear API error: {messages}", response.status_code)
        if not response.is_success:
            raise error(f"Linear request failed ({response.status_code})", response.status_code)
        if not isinstance(payload, dict) or payload.get("data") is None:
            raise error("Linear response did not include data", response.status_code)
        return payload["data"]

    async def list_entities(self, kind: EntityKind) -> list[DirectoryEntity]:
        query = _LIST_ENTITIES.format(collection=kind.capitalize(), kind=kind)
        data = await self._gql(query)
        nodes = (data.get(kind) or {}).get("nodes") or []
        return [DirectoryEntity(id=n["id"], name=n.get("name")) for n in nodes if n and n.get("id")]

    async def list_users(self) -> list[DirectoryUser]:
        data = await self._gql(_LIST_USERS)
        nodes = (data.get("users") or {}).get("nodes") or []
        return [DirectoryUser.model_validate(n) for n in nodes if n and n.get("id")]

    async def active_cycle(self, team_id: str) -> DirectoryEntity | None:
        data = await self._gql(_ACTIVE_CYCLE, {"teamId": team_id})
        cycle = (data.get("team") or {}).get("activeCycle")
        if not cycle or not cycle.get("id"):
            return None
        return DirectoryEntity(id=cycle["id"], name=cycle.get("name"))

    async def create_issue(self, request: CreationRequest) -> CreatedIssue:
        data = await self._gql(_CREATE_ISSUE, {"input": request.to_input()}, error=IssueCreateFailed)
        issue = (data.get("issueCreate") or {}).get("issue") or {}
        if not issue.get("url"):
            raise IssueCreateMalformedResponse()
        return CreatedIssue(id=issue.get("id"), title=issue.get("title"), url=issue["url"])
