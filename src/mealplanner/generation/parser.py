"""Extraction of JSON payloads from free-form generated text."""

import json
import re
from collections.abc import Callable, Sequence
from typing import Any

from mealplanner.logging_config import get_logger

logger = get_logger(__name__)

ParseStrategy = Callable[[str], Any]

_CODE_FENCE = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)\n?\s*```", re.S)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
# Greedy: from the first "{" to the last "}"
_OUTERMOST_BRACES = re.compile(r"\{.*\}", re.S)


class ResponseParseError(Exception):
    """Raised when no strategy could extract a JSON document."""

    def __init__(self, message: str, raw_text: str | None = None):
        super().__init__(message)
        self.raw_text = raw_text


# =============================================================================
# Text Cleaning Helpers
# =============================================================================


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences and surrounding whitespace."""
    match = _CODE_FENCE.search(text)
    if match:
        return match.group(1).strip()
    return text.replace("```", "").strip()


def remove_trailing_commas(text: str) -> str:
    """Drop trailing commas before closing braces/brackets."""
    return _TRAILING_COMMA.sub(r"\1", text)


# =============================================================================
# Parse Strategies
# =============================================================================


def parse_direct(text: str) -> Any:
    """Parse the text as JSON after stripping code fences."""
    return json.loads(strip_code_fences(text))


def parse_brace_span(text: str) -> Any:
    """Parse the outermost ``{...}`` span found anywhere in the text."""
    match = _OUTERMOST_BRACES.search(text)
    if not match:
        raise ValueError("no {...} span in response")
    return json.loads(remove_trailing_commas(match.group(0)))


DEFAULT_STRATEGIES: tuple[ParseStrategy, ...] = (parse_direct, parse_brace_span)


def parse_json_payload(
    text: str | None,
    strategies: Sequence[ParseStrategy] = DEFAULT_STRATEGIES,
) -> Any:
    """
    Extract a JSON document from raw generated text.

    Strategies are tried in order; the first one that succeeds wins.

    Args:
        text: Raw response text, possibly wrapped in prose or code fences.
        strategies: Ordered parse strategies.

    Returns:
        The decoded JSON value.

    Raises:
        ResponseParseError: If the text is empty or every strategy fails.
    """
    if not text or not text.strip():
        raise ResponseParseError("Empty response", raw_text=text)

    errors: list[str] = []
    for strategy in strategies:
        try:
            return strategy(text)
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            errors.append(f"{strategy.__name__}: {e}")

    logger.debug(f"All parse strategies failed: {'; '.join(errors)}")
    raise ResponseParseError(
        f"No JSON payload found ({len(errors)} strategies tried)", raw_text=text
    )


def parse_json_object(
    text: str | None,
    strategies: Sequence[ParseStrategy] = DEFAULT_STRATEGIES,
) -> dict[str, Any]:
    """Like :func:`parse_json_payload` but require a JSON object."""
    payload = parse_json_payload(text, strategies)
    if not isinstance(payload, dict):
        raise ResponseParseError(
            f"Expected a JSON object, got {type(payload).__name__}", raw_text=text
        )
    return payload
