"""
Response Verification Module.

Never trust a single LLM pass.

This module turns raw generation output into canonical results:
- Lenient JSON extraction (fences, surrounding prose)
- Data-driven field alias resolution
- Quiz normalization (options padded/truncated to 4, letter or text answers)
- Per-item tolerance for flashcard and quiz batches

Usage:
    from verification import validate_response

    quiz = validate_response("quiz", raw_text, requested=10)
"""

from .field_aliases import FLASHCARD_ALIASES, MINDMAP_ALIASES, QUIZ_ALIASES, resolve_field
from .normalization import (
    NormalizedBatch,
    normalize_flashcard_item,
    normalize_mindmap,
    normalize_options,
    normalize_quiz_item,
    parse_json_response,
    resolve_correct_index,
)
from .response_validator import DEFAULT_TITLES, validate_response

__all__ = [
    "validate_response",
    "DEFAULT_TITLES",
    "parse_json_response",
    "normalize_quiz_item",
    "normalize_flashcard_item",
    "normalize_mindmap",
    "normalize_options",
    "resolve_correct_index",
    "NormalizedBatch",
    "resolve_field",
    "QUIZ_ALIASES",
    "FLASHCARD_ALIASES",
    "MINDMAP_ALIASES",
]
