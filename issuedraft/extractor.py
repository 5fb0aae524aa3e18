"""Turn a selection plus reporter instructions into a ParsedDraft via a generative model."""

import logging
import re
from typing import Any

import json5

from issuedraft.ai.base import DraftModel
from issuedraft.errors import AIResponseUnparsable
from issuedraft.models import ParsedDraft
from issuedraft.normalize import normalize_draft

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

DESCRIPTION_LIMIT = 300

PROMPT = """\
You are Linear Issue Synthesizer, an expert TPM who rewrites messy notes into ready-to-create Linear tickets.

You always receive two sections, either of which may be empty:
A) Selected Text: raw logs, requirements or notes.
B) Reporter Instructions: quick directions about owner, team, project, cycle or priority.

Priorities:
1. Selected Text is the source of truth for what happened.
2. When the instructions explicitly name an owner, team, project or cycle, use it.
3. When information is missing, stay conservative and say what is missing.

Tasks:
1. title: at most 12 words, professional tone, no emoji. If there is no usable context, use
   "Issue description pending" and say what is needed.
2. description: Markdown with these sections: Summary, Steps / What Happened, Expected,
   Actual / Impact, Additional Context. If a section lacks information, state what is needed
   instead of inventing content. Keep it under {description_limit} characters.
3. owner, team, cycle, project: only accept names explicitly present in the input, otherwise null.
   For owner prefer the tracker display name or email handle; keep nicknames exactly as written.
   Keep custom product names and handles exactly as written.

Output strict JSON only, no Markdown fence, no explanation, with exactly these keys:
{{
  "title": "",
  "description": "",
  "owner": null,
  "team": null,
  "cycle": null,
  "project": null
}}

Use null for any field the input does not state. Never fabricate field values.
When a field is null, list what is missing in the Additional Context section.
"""

_INPUT_TEMPLATE = """
=== Selected Text ===
{selection}

=== Reporter Instructions ===
{instructions}

Return JSON only:
"""


def build_prompt(reporter_context: str, selection: str, description_limit: int = DESCRIPTION_LIMIT) -> str:
    return PROMPT.format(description_limit=description_limit) + _INPUT_TEMPLATE.format(
        selection=selection.strip() or "(empty)",
        instructions=reporter_context.strip() or "(empty)",
    )


def strip_code_fence(text: str) -> str:
    """Return the body of the first ```/```json fenced block, or the text unchanged."""
    cleaned = text.strip()
    match = _CODE_FENCE.search(cleaned)
    if match:
        return match.group(1)
    return cleaned


def _outer_object(text: str) -> str | None:
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def parse_ai_payload(raw: str) -> dict[str, Any]:
    """Parse model output as a JSON object.

    Accepted relaxations are those of JSON5: unquoted keys, trailing commas,
    single-quoted strings and comments. Prose around a single object is
    tolerated by retrying on the outermost ``{...}`` span. Anything else
    raises AIResponseUnparsable carrying the raw text.
    """
    cleaned = strip_code_fence(raw)
    logger.debug("AI raw payload: %s", cleaned)

    candidates = [cleaned]
    outer = _outer_object(cleaned)
    if outer is not None and outer != cleaned:
        candidates.append(outer)

    for candidate in candidates:
        try:
            parsed = json5.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed

    logger.error("AI payload is not a JSON object", extra={"event": "ai_unparsable"})
    raise AIResponseUnparsable(cleaned)


async def extract_draft(
    reporter_context: str,
    selection: str,
    model: DraftModel,
    description_limit: int = DESCRIPTION_LIMIT,
) -> ParsedDraft:
    """Ask the model for the six draft fields and normalize its answer."""
    raw = await model.complete(build_prompt(reporter_context, selection, description_limit))
    draft = normalize_draft(parse_ai_payload(raw))
    logger.info(
        "AI draft extracted",
        extra={"event": "draft_extracted", "fields": sorted(k for k, v in draft.model_dump().items() if v is not None)},
    )
    return draft
