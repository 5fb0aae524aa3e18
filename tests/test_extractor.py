"""Tests for AI payload extraction."""

import asyncio

import pytest

from issuedraft.errors import AIResponseUnparsable, DraftError
from issuedraft.extractor import build_prompt, extract_draft, parse_ai_payload, strip_code_fence
from issuedraft.models import ParsedDraft


class TestStripCodeFence:
    def test_json_tagged_fence(self) -> None:
        assert strip_code_fence('```json\n{"title": "x"}\n```') == '{"title": "x"}'

    def test_untagged_fence(self) -> None:
        assert strip_code_fence('```\n{"title": "x"}\n```') == '{"title": "x"}'

    def test_fence_with_surrounding_prose(self) -> None:
        text = 'Here you go:\n```json\n{"team": "Core"}\n```\nLet me know!'
        assert strip_code_fence(text) == '{"team": "Core"}'

    def test_no_fence_returns_trimmed(self) -> None:
        assert strip_code_fence('  {"a": 1}\n') == '{"a": 1}'


class TestParseAIPayload:
    def test_strict_json(self) -> None:
        assert parse_ai_payload('{"title": "Fix crash", "owner": null}') == {"title": "Fix crash", "owner": None}

    def test_relaxed_grammar(self) -> None:
        raw = "{title: 'Fix crash', team: \"Core\", project: null,}"
        assert parse_ai_payload(raw) == {"title": "Fix crash", "team": "Core", "project": None}

    def test_fenced_relaxed(self) -> None:
        raw = "```json\n{\n  title: 'Fix crash',\n  cycle: null,\n}\n```"
        assert parse_ai_payload(raw) == {"title": "Fix crash", "cycle": None}

    def test_prose_wrapped_object(self) -> None:
        raw = 'Sure! The issue is {"title": "Fix crash"} as requested.'
        assert parse_ai_payload(raw) == {"title": "Fix crash"}

    @pytest.mark.parametrize(
        "raw",
        [
            "I could not understand the request.",
            "",
            "```json\nnot json at all\n```",
            "{title: Fix crash without quotes}",
        ],
    )
    def test_unparsable_raises_with_raw(self, raw: str) -> None:
        with pytest.raises(AIResponseUnparsable) as excinfo:
            parse_ai_payload(raw)
        assert excinfo.value.raw == strip_code_fence(raw)
        assert "not valid JSON" in str(excinfo.value)

    def test_non_object_is_unparsable(self) -> None:
        with pytest.raises(AIResponseUnparsable):
            parse_ai_payload('["title", "Fix crash"]')

    def test_empty_payload_message(self) -> None:
        with pytest.raises(AIResponseUnparsable, match="empty response"):
            parse_ai_payload("   ")


class TestBuildPrompt:
    def test_includes_both_sections(self) -> None:
        prompt = build_prompt("assign to yansoul, team Core", "Console crashes on open")
        assert "=== Selected Text ===\nConsole crashes on open" in prompt
        assert "=== Reporter Instructions ===\nassign to yansoul, team Core" in prompt
        assert '"owner": null' in prompt

    def test_empty_sections_marked(self) -> None:
        prompt = build_prompt("", "   ")
        assert prompt.count("(empty)") == 2

    def test_description_cap_defaults_to_300(self) -> None:
        assert "Keep it under 300 characters." in build_prompt("", "crash")

    def test_description_cap_is_configurable(self) -> None:
        prompt = build_prompt("", "crash", description_limit=500)
        assert "Keep it under 500 characters." in prompt
        assert "300" not in prompt


class TestExtractDraft:
    def test_end_to_end_fenced(self, fake_model) -> None:
        model = fake_model(
            '```json\n{"title":"Fix crash","team":"Core","owner":null,"cycle":null,"project":null,"description":"..."}\n```'
        )
        draft = asyncio.run(extract_draft("team Core", "crash log", model))
        assert draft == ParsedDraft(title="Fix crash", team="Core", description="...")
        assert len(model.prompts) == 1
        assert "crash log" in model.prompts[0]

    def test_blank_fields_become_absent(self, fake_model) -> None:
        model = fake_model('{"title": "  ", "owner": " yansoul ", "team": ""}')
        draft = asyncio.run(extract_draft("", "notes", model))
        assert draft.title is None
        assert draft.team is None
        assert draft.owner == "yansoul"

    def test_malformed_output_only_raises_unparsable(self, fake_model) -> None:
        model = fake_model("Sorry, I can't help with that.")
        with pytest.raises(DraftError) as excinfo:
            asyncio.run(extract_draft("", "notes", model))
        assert type(excinfo.value) is AIResponseUnparsable
