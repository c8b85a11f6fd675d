"""
Normalization of generation responses onto the canonical result schemas.

Raw model output is parsed leniently (code fences and surrounding prose
are tolerated), field-name variants are resolved through the alias
tables, and malformed collection items are dropped and counted rather
than failing the whole batch.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from shared.config import settings
from shared.schemas import Difficulty, Flashcard, MindMap, MindMapBranch, QuizQuestion

from .field_aliases import (
    COLLECTION_KEYS,
    FLASHCARD_ALIASES,
    MINDMAP_ALIASES,
    QUIZ_ALIASES,
    resolve_field,
    resolve_text,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_LETTER_RE = re.compile(r"^(?:option\s+)?\(?([A-D])[).:]?$", re.IGNORECASE)
_VALID_DIFFICULTIES = {d.value for d in Difficulty}


@dataclass
class NormalizedBatch:
    """Items that survived normalization and how many were dropped."""

    items: List[Any] = field(default_factory=list)
    dropped: int = 0


def parse_json_response(response_text: str) -> Any:
    """
    Parse a JSON payload out of raw model output.

    Tries the text as-is, then the first fenced block, then the outermost
    array or object found in the text.

    Raises:
        ValueError: If no JSON payload can be parsed
    """
    text = (response_text or "").strip()
    if not text:
        raise ValueError("empty response")

    candidates = [text]
    fence = _FENCE_RE.search(text)
    if fence:
        candidates.append(fence.group(1).strip())
    for open_char, close_char in (("[", "]"), ("{", "}")):
        first, last = text.find(open_char), text.rfind(close_char)
        if 0 <= first < last:
            candidates.append(text[first : last + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except (ValueError, RecursionError):
            # RecursionError: pathologically nested arrays or objects
            continue

    raise ValueError("response is not valid JSON")


def extract_collection(payload: Any) -> Optional[List]:
    """Return the item array from a bare list or a wrapper object."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in COLLECTION_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return None


def normalize_difficulty(value: Any) -> Difficulty:
    """Lower-cased difficulty; anything unrecognized becomes the default."""
    text = str(value).strip().lower() if value is not None else ""
    if text in _VALID_DIFFICULTIES:
        return Difficulty(text)
    return Difficulty(settings.generation.default_difficulty)


def normalize_options(raw: Any, count: int = 4) -> Optional[List[str]]:
    """
    Coerce an options field to exactly `count` strings.

    Longer lists are truncated, shorter ones padded with empty strings.
    Mappings such as {"A": "...", "B": "..."} contribute their values.
    """
    if isinstance(raw, Mapping):
        raw = list(raw.values())
    if not isinstance(raw, (list, tuple)):
        return None

    options = ["" if opt is None else str(opt).strip() for opt in raw][:count]
    options.extend([""] * (count - len(options)))
    return options


def resolve_correct_index(value: Any, options: List[str]) -> Optional[int]:
    """
    Map a correct-answer field onto a 0-based option index.

    Accepts integers and integral floats (0-based), then for strings in
    order: a letter A-D, the exact text of one of the options, a digit
    string taken as a 0-based index.

    Returns:
        Index into options, or None when it cannot be resolved
    """
    index = None

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        index = value
    elif isinstance(value, float) and value.is_integer():
        index = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None

        lowered = [opt.lower() for opt in options]
        letter = _LETTER_RE.match(text)
        if letter:
            index = ord(letter.group(1).upper()) - ord("A")
        elif text.lower() in lowered:
            index = lowered.index(text.lower())
        elif text.lstrip("-").isdigit():
            index = int(text)

    if index is None or not 0 <= index < len(options):
        return None
    return index


def normalize_quiz_item(item: Any, option_count: int = None) -> Optional[QuizQuestion]:
    """Normalize one quiz item; None when it is malformed."""
    option_count = option_count or settings.generation.quiz_option_count
    if not isinstance(item, Mapping):
        return None

    question = resolve_text(item, QUIZ_ALIASES["question"])
    options = normalize_options(resolve_field(item, QUIZ_ALIASES["options"]), option_count)
    if not question or options is None or not any(options):
        return None

    correct_index = resolve_correct_index(resolve_field(item, QUIZ_ALIASES["correct_index"]), options)
    if correct_index is None or not options[correct_index]:
        # the answer must not point at a padding slot
        return None

    return QuizQuestion(
        question=question,
        options=options,
        correct_index=correct_index,
        explanation=resolve_text(item, QUIZ_ALIASES["explanation"]) or "",
        difficulty=normalize_difficulty(resolve_field(item, QUIZ_ALIASES["difficulty"])),
    )


def normalize_flashcard_item(item: Any) -> Optional[Flashcard]:
    """Normalize one flashcard; None when question or answer is missing."""
    if not isinstance(item, Mapping):
        return None

    question = resolve_text(item, FLASHCARD_ALIASES["question"])
    answer = resolve_text(item, FLASHCARD_ALIASES["answer"])
    if not question or not answer:
        return None

    return Flashcard(
        question=question,
        answer=answer,
        difficulty=normalize_difficulty(resolve_field(item, FLASHCARD_ALIASES["difficulty"])),
    )


def normalize_items(raw_items: List, normalizer) -> NormalizedBatch:
    """Apply a per-item normalizer, dropping and counting malformed items."""
    batch = NormalizedBatch()
    for position, raw in enumerate(raw_items):
        try:
            item = normalizer(raw)
        except (ValueError, TypeError) as e:
            logger.debug(f"Item {position} failed normalization: {e}")
            item = None

        if item is None:
            batch.dropped += 1
        else:
            batch.items.append(item)

    if batch.dropped:
        logger.warning(f"Dropped {batch.dropped} malformed item(s) of {len(raw_items)}")
    return batch


def _branch_from(raw: Any) -> Optional[MindMapBranch]:
    if isinstance(raw, str):
        topic = raw.strip()
        return MindMapBranch(topic=topic) if topic else None
    if not isinstance(raw, Mapping):
        return None

    topic = resolve_text(raw, MINDMAP_ALIASES["topic"])
    if not topic:
        return None

    subtopics = []
    raw_subtopics = resolve_field(raw, MINDMAP_ALIASES["subtopics"], default=[])
    if isinstance(raw_subtopics, list):
        for sub in raw_subtopics:
            text = resolve_text(sub, MINDMAP_ALIASES["topic"]) if isinstance(sub, Mapping) else str(sub).strip()
            if text:
                subtopics.append(text)

    return MindMapBranch(topic=topic, subtopics=subtopics)


def normalize_mindmap(payload: Any) -> Optional[MindMap]:
    """Normalize a mind map object; None when central or branches are unusable."""
    if not isinstance(payload, Mapping):
        return None

    central = resolve_text(payload, MINDMAP_ALIASES["central"])
    raw_branches = resolve_field(payload, MINDMAP_ALIASES["branches"])
    if not central or not isinstance(raw_branches, list):
        return None

    branches = [b for b in (_branch_from(raw) for raw in raw_branches) if b is not None]
    if not branches:
        return None

    dropped = len(raw_branches) - len(branches)
    if dropped:
        logger.warning(f"Dropped {dropped} malformed mind map branch(es)")
    return MindMap(central=central, branches=branches)


def is_error_placeholder(payload: Any) -> bool:
    """True for provider placeholders such as {"error": ..., "message": ...}."""
    return isinstance(payload, Mapping) and "error" in payload and set(payload) <= {"error", "message"}


def describe_payload(payload: Any) -> Dict:
    """Small summary of a payload for log messages."""
    if isinstance(payload, Mapping):
        return {"type": "object", "keys": sorted(payload)[:10]}
    if isinstance(payload, list):
        return {"type": "array", "length": len(payload)}
    return {"type": type(payload).__name__}
