"""Unit and property-based tests for the response parser."""
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from taskpilot.agent import (
    CommandAction,
    FileDeleteAction,
    FileWriteAction,
    UnknownAction,
    extract_json_candidate,
    parse_task_result,
)
from taskpilot.errors import ParseError

# Prose that cannot be mistaken for JSON or a code fence
prose = st.text(
    alphabet=st.characters(exclude_characters="{}`", exclude_categories=("Cs",)),
    max_size=80,
)
safe_text = st.text(
    alphabet=st.characters(exclude_characters="`", exclude_categories=("Cs",)),
    max_size=40,
)


class TestExtraction:
    """Tests for locating the JSON span."""

    def test_fenced_block_wins_over_braces(self):
        """Test that a ```json fence is preferred to a brace span."""
        text = 'Note {not this}\n```json\n{"actions": []}\n```\nand {this neither}'
        assert extract_json_candidate(text) == '{"actions": []}'

    def test_brace_span_is_greedy(self):
        """Test that the span runs from the first { to the last }."""
        text = 'a {"x": 1} b {"y": 2} c'
        assert extract_json_candidate(text) == '{"x": 1} b {"y": 2}'

    def test_no_candidate(self):
        """Test that text without braces yields nothing."""
        assert extract_json_candidate("I could not do that.") is None


class TestParseTaskResult:
    """Tests for parse_task_result."""

    def test_bare_json(self):
        """Test parsing a reply that is just the JSON object."""
        result = parse_task_result(
            '{"actions": [{"type": "file_write", "path": "x.txt", "content": "hello"}],'
            ' "summary": "created x.txt"}'
        )
        assert result.actions == [FileWriteAction(path="x.txt", content="hello")]
        assert result.summary == "created x.txt"

    def test_prose_around_json(self):
        """Test parsing JSON embedded in prose."""
        result = parse_task_result(
            'Sure! Here is the plan: {"actions": [{"type": "command", "cmd": "ls"}]} Done.'
        )
        assert result.actions == [CommandAction(cmd="ls")]
        assert result.summary == ""

    def test_all_known_action_types(self):
        """Test that every known action type decodes to its model."""
        result = parse_task_result(json.dumps({
            "actions": [
                {"type": "file_write", "path": "a.py", "content": ""},
                {"type": "file_delete", "path": "b.py"},
                {"type": "command", "cmd": "make"},
            ],
        }))
        assert [type(a) for a in result.actions] == [FileWriteAction, FileDeleteAction, CommandAction]

    def test_unknown_action_is_kept(self):
        """Test that an unknown tag becomes UnknownAction with its payload."""
        result = parse_task_result('{"actions": [{"type": "rename", "from": "a", "to": "b"}]}')
        action = result.actions[0]
        assert isinstance(action, UnknownAction)
        assert action.type == "rename"
        assert action.raw == {"type": "rename", "from": "a", "to": "b"}

    def test_no_json_raises(self):
        """Test that a reply without JSON raises ParseError."""
        with pytest.raises(ParseError, match="no JSON object found"):
            parse_task_result("I'm sorry, I can't help with that.")

    def test_invalid_json_raises(self):
        """Test that a malformed span raises ParseError."""
        with pytest.raises(ParseError, match="invalid JSON"):
            parse_task_result("{actions: [}")

    def test_greedy_span_across_two_objects_raises(self):
        """Test that two separate objects in prose make an invalid span."""
        with pytest.raises(ParseError):
            parse_task_result('First {"a": 1} then {"actions": []}')

    def test_missing_actions_raises(self):
        """Test that the actions key is required."""
        with pytest.raises(ParseError, match="action contract"):
            parse_task_result('{"summary": "nothing"}')

    def test_actions_not_a_list_raises(self):
        """Test that actions must be a list."""
        with pytest.raises(ParseError):
            parse_task_result('{"actions": "write a file"}')

    def test_known_action_with_bad_payload_raises(self):
        """Test that a known tag with missing fields is rejected."""
        with pytest.raises(ParseError):
            parse_task_result('{"actions": [{"type": "file_write", "path": "a.txt"}]}')

    def test_parse_error_message_prefix(self):
        """Test the user-facing message of ParseError."""
        with pytest.raises(ParseError) as exc_info:
            parse_task_result("nothing")
        assert str(exc_info.value).startswith("Could not parse model response:")

    @given(before=prose, after=prose, path=safe_text.filter(bool), content=safe_text)
    def test_fenced_json_in_any_prose(self, before, after, path, content):
        """Property test: a fenced object parses regardless of surrounding prose."""
        payload = {
            "actions": [{"type": "file_write", "path": path, "content": content}],
            "summary": "s",
        }
        text = f"{before}\n```json\n{json.dumps(payload)}\n```\n{after}"

        result = parse_task_result(text)

        assert result.actions == [FileWriteAction(path=path, content=content)]
        assert result.summary == "s"

    @given(before=prose, after=prose, cmd=safe_text.filter(bool))
    def test_bare_json_in_brace_free_prose(self, before, after, cmd):
        """Property test: a bare object parses when the prose holds no braces."""
        text = before + json.dumps({"actions": [{"type": "command", "cmd": cmd}]}) + after
        assert parse_task_result(text).actions == [CommandAction(cmd=cmd)]
