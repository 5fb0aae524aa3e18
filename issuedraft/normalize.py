"""Field normalizer for AI-extracted drafts."""

from collections.abc import Mapping
from typing import Any

from issuedraft.models import ParsedDraft

DRAFT_FIELDS = ("title", "description", "owner", "team", "cycle", "project")


def normalize_field(value: Any) -> str | None:
    """Trim a field; empty or whitespace-only becomes ``None``.

    Numbers are stringified (models sometimes emit ``"cycle": 12``); any
    other non-string value is treated as absent.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        value = str(value)
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def normalize_draft(data: Mapping[str, Any]) -> ParsedDraft:
    return ParsedDraft(**{field: normalize_field(data.get(field)) for field in DRAFT_FIELDS})
