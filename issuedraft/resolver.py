"""Resolve human-readable draft names into tracker identifiers.

Teams, projects and cycles are matched exactly (ignoring case and
surrounding whitespace). Assignees are matched fuzzily, because the AI
tends to hand back nicknames, partial names or email handles. Cycles fall
back to the team's active cycle when no name matches.
"""

import logging
from collections.abc import Iterable, Sequence

from issuedraft.logging_utils import log_resolution
from issuedraft.models import DirectoryEntity, DirectoryUser
from issuedraft.providers.base import EntityKind, TrackerDirectory
from issuedraft.similarity import MIN_CONFIDENCE, similarity, slug

logger = logging.getLogger(__name__)


def _fold(value: str) -> str:
    return value.strip().casefold()


# ---------------------------------------------------------------------------
# Exact match: teams, projects, cycles
# ---------------------------------------------------------------------------


def find_entity_id(kind: str, name: str, entities: Iterable[DirectoryEntity]) -> str | None:
    """Return the id of the first entity whose folded name equals the folded query."""
    wanted = _fold(name)
    entities = list(entities)
    for entity in entities:
        if entity.name and _fold(entity.name) == wanted:
            log_resolution(logger, kind, name, "matched", 1.0, entity.id)
            return entity.id

    log_resolution(logger, kind, name, "miss")
    logger.debug("available %s: %s", kind, [e.name for e in entities if e.name])
    return None


async def resolve_by_exact_name(kind: EntityKind, name: str | None, directory: TrackerDirectory) -> str | None:
    if not name:
        log_resolution(logger, kind, name, "skipped")
        return None
    entities = await directory.list_entities(kind)
    return find_entity_id(kind, name, entities)


# ---------------------------------------------------------------------------
# Fuzzy match: assignees
# ---------------------------------------------------------------------------


def normalize_owner_query(value: str) -> str:
    """Drop a leading "@" and fold case, so "@Yan.Soul " becomes "yan.soul"."""
    return value.strip().removeprefix("@").strip().casefold()


def user_aliases(user: DirectoryUser) -> list[str]:
    """Folded display name, full name, email and email local part, empties dropped."""
    raw = [user.display_name, user.name, user.email]
    if user.email:
        raw.append(user.email.split("@", 1)[0])
    aliases: list[str] = []
    for value in raw:
        if value and (folded := _fold(value)) and folded not in aliases:
            aliases.append(folded)
    return aliases


def score_user(query: str, user: DirectoryUser) -> float:
    """Best similarity between a normalized query and any alias (or its slug) of the user."""
    queries = {query, slug(query)} - {""}
    best = 0.0
    for alias in user_aliases(user):
        for form in {alias, slug(alias)} - {""}:
            for q in queries:
                best = max(best, similarity(form, q))
    return best


def best_user_match(
    name: str,
    users: Sequence[DirectoryUser],
    threshold: float = MIN_CONFIDENCE,
) -> tuple[DirectoryUser | None, float]:
    """Pick the highest-scoring user; ties keep the first in listing order.

    Returns ``(None, best_score)`` when the best score is under ``threshold``.
    """
    query = normalize_owner_query(name)
    if not query:
        return None, 0.0

    winner: DirectoryUser | None = None
    best = 0.0
    for user in users:
        score = score_user(query, user)
        if score > best:
            winner, best = user, score

    if winner is None or best < threshold:
        return None, best
    return winner, best


async def resolve_assignee(
    name: str | None,
    directory: TrackerDirectory,
    threshold: float = MIN_CONFIDENCE,
) -> str | None:
    if not name:
        log_resolution(logger, "users", name, "skipped")
        return None

    users = await directory.list_users()
    user, score = best_user_match(name, users, threshold)
    if user is None:
        log_resolution(logger, "users", name, "miss", score)
        logger.debug("checked users: %s", [u.display_name or u.name for u in users])
        return None

    log_resolution(logger, "users", name, "matched", score, user.id)
    return user.id


# ---------------------------------------------------------------------------
# Cycles: exact name, then the team's active cycle
# ---------------------------------------------------------------------------


async def resolve_cycle(name: str | None, team_id: str | None, directory: TrackerDirectory) -> str | None:
    cycle_id = await resolve_by_exact_name("cycles", name, directory)
    if cycle_id:
        return cycle_id
    if not team_id:
        return None

    active = await directory.active_cycle(team_id)
    if active is None:
        log_resolution(logger, "active_cycle", team_id, "miss")
        return None
    log_resolution(logger, "active_cycle", team_id, "fallback", resolved_id=active.id)
    return active.id
