"""Extraction of the TaskResult JSON object from free-form model output.

The model is asked for bare JSON but often wraps it in prose or a Markdown
code fence. Extraction is permissive about the surrounding text and strict
about the extracted span.
"""

import json
import re

from pydantic import ValidationError

from ..errors import ParseError
from .actions import TaskResult

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")


def extract_json_candidate(text: str) -> str | None:
    """Locate the JSON span in a reply.

    A fenced block tagged ``json`` wins; otherwise the greedy span from the
    first ``{`` to the last ``}`` of the whole text is used.

    Returns:
        The candidate span, or None if nothing looks like JSON
    """
    fenced = _FENCED_JSON.search(text)
    if fenced:
        return fenced.group(1)
    span = _BRACE_SPAN.search(text)
    if span:
        return span.group(0)
    return None


def parse_task_result(text: str) -> TaskResult:
    """Parse a model reply into a TaskResult.

    Args:
        text: Raw reply text

    Returns:
        Validated TaskResult

    Raises:
        ParseError: If no JSON span is found, the span is not valid JSON, or
            it does not satisfy the actions/summary contract
    """
    candidate = extract_json_candidate(text)
    if candidate is None:
        raise ParseError("no JSON object found")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON ({e.msg} at line {e.lineno} column {e.colno})") from e

    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object, got {type(data).__name__}")

    try:
        return TaskResult.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"response does not match the action contract: {e}") from e
