"""
Field alias tables for generation responses.

Models do not reliably use the field names a prompt asks for. Each
canonical field maps to an ordered tuple of accepted names; the first one
present on an item wins.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

QUIZ_ALIASES = MappingProxyType(
    {
        "question": ("question", "prompt", "text"),
        "options": ("options", "choices", "answers"),
        "correct_index": (
            "correct_index",
            "correctIndex",
            "correctanswer",
            "correctAnswer",
            "correct_answer",
            "answerIndex",
            "answer_index",
            "answer",
            "correct",
        ),
        "explanation": ("explanation", "why", "rationale"),
        "difficulty": ("difficulty", "level"),
    }
)

FLASHCARD_ALIASES = MappingProxyType(
    {
        "question": ("question", "front", "prompt", "term"),
        "answer": ("answer", "back", "definition"),
        "difficulty": ("difficulty", "level"),
    }
)

MINDMAP_ALIASES = MappingProxyType(
    {
        "central": ("central", "central_topic", "centralTopic", "root", "title"),
        "branches": ("branches", "children", "nodes"),
        "topic": ("topic", "name", "title"),
        "subtopics": ("subtopics", "children", "items"),
    }
)

# Wrapper keys under which models nest collection arrays
COLLECTION_KEYS = ("items", "flashcards", "cards", "questions", "quiz", "data")

_MISSING = object()


def resolve_field(item: Mapping, aliases: Sequence[str], default: Any = None) -> Any:
    """
    Return the first non-null value among aliases present on item.

    Args:
        item: Raw response item
        aliases: Accepted field names in priority order
        default: Returned when none is present

    Returns:
        Field value or default
    """
    if not isinstance(item, Mapping):
        return default
    for name in aliases:
        value = item.get(name, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return default


def resolve_text(item: Mapping, aliases: Sequence[str]) -> Optional[str]:
    """Resolve a field as stripped text; None when absent or blank."""
    value = resolve_field(item, aliases)
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None
