"""Locate a JSON-shaped substring inside free-form LLM output.

LLMs asked for "only JSON" still tend to wrap it in prose or markdown.
Each strategy below looks for a candidate in its own way and returns
``None`` when it finds nothing; :func:`extract_json_candidate` tries them
in order and stops at the first hit. Parsing the candidate is left to the
caller.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from virtual_api.models import ExtractionResult

logger = logging.getLogger(__name__)

ExtractionStrategy = Callable[[str], Optional[ExtractionResult]]

_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")
_GREEDY_ARRAY = re.compile(r"\[[\s\S]*\]")


def _balanced_bounds(text: str, opener: str, closer: str) -> tuple[int, int] | None:
    """Return ``(start, end)`` of the first ``opener`` and its matching ``closer``.

    Brackets inside JSON string literals are ignored. Returns None when the
    opener is missing or never closed; ``end`` is exclusive.
    """
    start = text.find(opener)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return start, i + 1
    return None


def _span(text: str, opener: str, closer: str, greedy: re.Pattern[str]) -> str | None:
    bounds = _balanced_bounds(text, opener, closer)
    if bounds is not None:
        return text[bounds[0] : bounds[1]]
    # Unbalanced: first opener through last closer
    match = greedy.search(text)
    return match.group(0) if match else None


def _inside_array(text: str) -> bool:
    """True when the first ``{`` sits inside a balanced array opened before it."""
    brace = text.find("{")
    array = _balanced_bounds(text, "[", "]")
    return brace != -1 and array is not None and array[0] < brace < array[1]


def object_span(text: str) -> ExtractionResult | None:
    """Candidate starting at the first ``{``, unless an array encloses it."""
    if _inside_array(text):
        return None
    span = _span(text, "{", "}", _GREEDY_OBJECT)
    return ExtractionResult("object_span", span) if span is not None else None


def array_span(text: str) -> ExtractionResult | None:
    """Candidate starting at the first ``[``."""
    span = _span(text, "[", "]", _GREEDY_ARRAY)
    return ExtractionResult("array_span", span) if span is not None else None


def whole_text(text: str) -> ExtractionResult | None:
    """The whole text, if it already looks like JSON."""
    stripped = text.strip()
    if stripped.startswith(("{", "[")):
        return ExtractionResult("whole_text", stripped)
    return None


def first_json_line(text: str) -> ExtractionResult | None:
    """Everything from the first line that opens an object or array."""
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if line.strip().startswith(("{", "[")):
            return ExtractionResult("first_json_line", "\n".join(lines[i:]))
    return None


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    object_span,
    array_span,
    whole_text,
    first_json_line,
)


def extract_json_candidate(
    text: str,
    strategies: tuple[ExtractionStrategy, ...] = DEFAULT_STRATEGIES,
) -> ExtractionResult | None:
    """Run extraction strategies in order and return the first candidate.

    Args:
        text: Raw LLM output
        strategies: Ordered strategies to try

    Returns:
        ExtractionResult from the first strategy that located a candidate,
        or None if none did
    """
    text = text.strip()
    for strategy in strategies:
        result = strategy(text)
        if result is not None:
            logger.debug("JSON candidate found by %s (%d chars)", result.strategy, len(result.candidate))
            return result
    return None
