"""Error taxonomy for a draft submission.

Every class here is fatal to the submission that raised it. Soft misses
(a named project, cycle or user with no match) are not errors and never
raise; they resolve to ``None``.
"""


class DraftError(RuntimeError):
    """Base class for all submission failures surfaced to the caller."""


class ContentMissing(DraftError):
    def __init__(self) -> None:
        super().__init__("Content required: add selected text or instructions so the AI has material to work with.")


class MissingCredentials(DraftError):
    def __init__(self) -> None:
        super().__init__("Missing OpenAI key: provide openai_api_key or enable use_local_ai.")


class AIRequestFailed(DraftError):
    def __init__(self, provider: str, status_code: int | None = None, detail: str | None = None) -> None:
        self.status_code = status_code
        message = f"{provider} request failed"
        if status_code is not None:
            message += f" ({status_code})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class AIResponseUnparsable(DraftError):
    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"AI returned content that was not valid JSON. Full payload:\n{raw or '(empty response)'}")


class TeamUnresolved(DraftError):
    def __init__(self, team: str | None) -> None:
        self.team = team
        if team:
            message = f"Unable to resolve Linear team '{team}'."
        else:
            message = "No Linear team was mentioned."
        super().__init__(f"{message} Mention the team name explicitly in the instructions.")


class DirectoryRequestFailed(DraftError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class IssueCreateFailed(DraftError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class IssueCreateMalformedResponse(DraftError):
    def __init__(self) -> None:
        super().__init__("Linear returned an unexpected response: no issue URL in issueCreate payload")
