"""Access to the external text-generation capability."""

from mealplanner.generation.gateway import (
    GenerationError,
    OpenAIGenerator,
    TextGenerator,
)
from mealplanner.generation.parser import (
    ResponseParseError,
    parse_json_object,
    parse_json_payload,
)

__all__ = [
    "GenerationError",
    "OpenAIGenerator",
    "ResponseParseError",
    "TextGenerator",
    "parse_json_object",
    "parse_json_payload",
]
