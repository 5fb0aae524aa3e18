"""Draft resolution pipeline: extract, resolve, assemble, submit.

One submission walks Idle -> Extracting -> TeamResolving -> ParallelResolving
-> Submitting and ends in Succeeded or Failed. There are no retries; the
caller re-runs the whole pipeline, AI extraction included.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from issuedraft.ai.base import DraftModel
from issuedraft.ai.ollama import OllamaModel
from issuedraft.ai.openai import OpenAIChatModel
from issuedraft.errors import ContentMissing, DraftError, MissingCredentials, TeamUnresolved
from issuedraft.extractor import DESCRIPTION_LIMIT, extract_draft
from issuedraft.models import CreationRequest, ParsedDraft
from issuedraft.providers.base import TrackerDirectory
from issuedraft.providers.linear import LinearDirectory
from issuedraft.resolver import resolve_assignee, resolve_by_exact_name, resolve_cycle
from issuedraft.settings import IssueDraftSettings

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "AI generated issue"


class SubmissionState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    TEAM_RESOLVING = "team_resolving"
    PARALLEL_RESOLVING = "parallel_resolving"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


StateCallback = Callable[[SubmissionState], None]


def _ignore(state: SubmissionState) -> None:
    pass


async def build_request(
    draft: ParsedDraft,
    directory: TrackerDirectory,
    default_title: str = DEFAULT_TITLE,
    transition: StateCallback = _ignore,
) -> CreationRequest:
    """Resolve every draft name and assemble the creation request.

    Team resolves first because the cycle fallback needs its id; project,
    cycle and assignee then resolve concurrently.
    """
    transition(SubmissionState.TEAM_RESOLVING)
    team_id = await resolve_by_exact_name("teams", draft.team, directory)
    if not team_id:
        raise TeamUnresolved(draft.team)

    transition(SubmissionState.PARALLEL_RESOLVING)
    try:
        async with asyncio.TaskGroup() as group:
            project = group.create_task(resolve_by_exact_name("projects", draft.project, directory))
            cycle = group.create_task(resolve_cycle(draft.cycle, team_id, directory))
            assignee = group.create_task(resolve_assignee(draft.owner, directory))
    except ExceptionGroup as failures:
        # the first failure cancels the remaining lookups
        raise failures.exceptions[0] from None

    return CreationRequest(
        title=draft.title or default_title,
        description=draft.description or "",
        team_id=team_id,
        project_id=project.result(),
        cycle_id=cycle.result(),
        assignee_id=assignee.result(),
    )


async def build_and_submit(
    draft: ParsedDraft,
    directory: TrackerDirectory,
    default_title: str = DEFAULT_TITLE,
    transition: StateCallback = _ignore,
) -> str:
    """Resolve an already-extracted draft, create the issue and return its URL."""
    request = await build_request(draft, directory, default_title, transition)
    transition(SubmissionState.SUBMITTING)
    created = await directory.create_issue(request)
    logger.info("issue created: %s", created.url, extra={"event": "issue_created", "url": created.url})
    return created.url


class Submission:
    """A single attempt at turning text into a created issue."""

    def __init__(
        self,
        model: DraftModel,
        directory: TrackerDirectory,
        default_title: str = DEFAULT_TITLE,
        on_state: StateCallback | None = None,
        description_limit: int = DESCRIPTION_LIMIT,
    ) -> None:
        self.model = model
        self.directory = directory
        self.default_title = default_title
        self.description_limit = description_limit
        self.state = SubmissionState.IDLE
        self.error: DraftError | None = None
        self._on_state = on_state

    def _transition(self, state: SubmissionState) -> None:
        self.state = state
        logger.info("submission %s", state.value, extra={"event": "submission_state", "state": state.value})
        if self._on_state:
            self._on_state(state)

    def _fail(self, exc: DraftError) -> None:
        self.error = exc
        logger.error("submission failed: %s", exc, extra={"event": "submission_failed", "kind": type(exc).__name__})
        self._transition(SubmissionState.FAILED)

    async def resolve(self, reporter_context: str, selection: str) -> CreationRequest:
        """Extract and resolve without submitting; used for dry runs."""
        try:
            self._transition(SubmissionState.EXTRACTING)
            draft = await extract_draft(reporter_context, selection, self.model, self.description_limit)
            request = await build_request(draft, self.directory, self.default_title, self._transition)
        except DraftError as exc:
            self._fail(exc)
            raise
        self._transition(SubmissionState.SUCCEEDED)
        return request

    async def run(self, reporter_context: str, selection: str) -> str:
        """Run the whole pipeline and return the created issue's URL."""
        try:
            self._transition(SubmissionState.EXTRACTING)
            draft = await extract_draft(reporter_context, selection, self.model, self.description_limit)
            url = await build_and_submit(draft, self.directory, self.default_title, self._transition)
        except DraftError as exc:
            self._fail(exc)
            raise
        self._transition(SubmissionState.SUCCEEDED)
        return url


# ---------------------------------------------------------------------------
# Wiring from settings
# ---------------------------------------------------------------------------


def check_submission(selection: str, instructions: str, settings: IssueDraftSettings) -> None:
    """Reject a submission before any remote call is made."""
    if not selection.strip() and not instructions.strip():
        raise ContentMissing()
    if not settings.use_local_ai and not settings.openai_api_key:
        raise MissingCredentials()


def build_model(settings: IssueDraftSettings) -> DraftModel:
    if settings.use_local_ai:
        return OllamaModel(
            host=settings.ai_host,
            model=settings.ai_model,
            creativity=settings.ai_creativity,
            timeout=settings.http_timeout,
        )
    if not settings.openai_api_key:
        raise MissingCredentials()
    return OpenAIChatModel(
        api_key=settings.openai_api_key.get_secret_value(),
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        timeout=settings.http_timeout,
    )


def build_directory(settings: IssueDraftSettings) -> LinearDirectory:
    if not settings.linear_api_key:
        raise RuntimeError("linear_api_key is required")
    return LinearDirectory(settings.linear_api_key.get_secret_value(), timeout=settings.http_timeout)


def new_submission(
    selection: str,
    instructions: str,
    settings: IssueDraftSettings,
    on_state: StateCallback | None = None,
) -> Submission:
    check_submission(selection, instructions, settings)
    return Submission(
        model=build_model(settings),
        directory=build_directory(settings),
        default_title=settings.default_title,
        on_state=on_state,
        description_limit=settings.description_limit,
    )
