"""
Structural validation of generation responses per task type.

- mindmap: JSON object with a central topic and at least one branch
- flashcard / quiz: JSON array (or wrapper object) with at least one
  well-formed item after normalization
- podcast / video / report: non-empty trimmed text
- unknown task types: non-empty trimmed text

Any failure raises ResponseValidationError so the orchestrator can retry.
"""

import json
import logging
from typing import Optional

from shared.errors import ResponseValidationError
from shared.schemas import (
    FlashcardSet,
    FreeText,
    GenerationResult,
    MindMap,
    QuizSet,
    TaskType,
)

from .normalization import (
    describe_payload,
    extract_collection,
    is_error_placeholder,
    normalize_flashcard_item,
    normalize_items,
    normalize_mindmap,
    normalize_quiz_item,
    parse_json_response,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLES = {
    TaskType.MINDMAP: "AI Generated Mind Map",
    TaskType.PODCAST: "AI Generated Podcast",
    TaskType.VIDEO: "AI Generated Video",
    TaskType.REPORT: "AI Generated Report",
}


def _parse(task_name: str, raw: str):
    try:
        return parse_json_response(raw)
    except ValueError as e:
        raise ResponseValidationError(f"{task_name} response is not valid JSON: {e}", task_name) from e


def validate_mindmap(raw: str) -> MindMap:
    payload = _parse("mindmap", raw)
    mindmap = normalize_mindmap(payload)
    if mindmap is None:
        raise ResponseValidationError(
            f"mindmap response missing central/branches: {describe_payload(payload)}", "mindmap"
        )
    return mindmap


def validate_flashcards(raw: str, requested: Optional[int] = None) -> FlashcardSet:
    payload = _parse("flashcard", raw)
    items = extract_collection(payload)
    if not items:
        raise ResponseValidationError(
            f"flashcard response is not a non-empty array: {describe_payload(payload)}", "flashcard"
        )

    batch = normalize_items(items, normalize_flashcard_item)
    if not batch.items:
        raise ResponseValidationError(
            f"no well-formed flashcards among {len(items)} item(s)", "flashcard"
        )

    result = FlashcardSet(items=batch.items, requested=requested, dropped=batch.dropped)
    _warn_if_partial("flashcard", result)
    return result


def validate_quiz(raw: str, requested: Optional[int] = None) -> QuizSet:
    payload = _parse("quiz", raw)
    items = extract_collection(payload)
    if not items:
        raise ResponseValidationError(
            f"quiz response is not a non-empty array: {describe_payload(payload)}", "quiz"
        )

    batch = normalize_items(items, normalize_quiz_item)
    if not batch.items:
        raise ResponseValidationError(f"no well-formed quiz questions among {len(items)} item(s)", "quiz")

    result = QuizSet(items=batch.items, requested=requested, dropped=batch.dropped)
    _warn_if_partial("quiz", result)
    return result


def validate_free_text(raw: str, task_name: str, title: Optional[str] = None) -> FreeText:
    body = (raw or "").strip()
    if not body:
        raise ResponseValidationError(f"{task_name} response is empty", task_name)

    if body.startswith("{"):
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            payload = None
        if is_error_placeholder(payload):
            raise ResponseValidationError(
                f"{task_name} response is a provider error: {payload.get('error')}", task_name
            )

    return FreeText(body=body, title=title)


def _warn_if_partial(task_name: str, result) -> None:
    if result.is_partial:
        logger.warning(
            f"Partial {task_name} batch: {len(result.items)} item(s) kept, "
            f"{result.dropped} dropped, {result.requested} requested"
        )


def validate_response(task_type, raw: str, requested: Optional[int] = None) -> GenerationResult:
    """
    Validate and normalize a raw generation response.

    Args:
        task_type: Task type name or TaskType
        raw: Raw text returned by the generation capability
        requested: Number of items asked for (collection tasks)

    Returns:
        Canonical result for the task type

    Raises:
        ResponseValidationError: If the response fails structural checks
    """
    task = TaskType.parse(task_type)

    if task == TaskType.MINDMAP:
        return validate_mindmap(raw)
    if task == TaskType.FLASHCARD:
        return validate_flashcards(raw, requested)
    if task == TaskType.QUIZ:
        return validate_quiz(raw, requested)
    if task is None:
        return validate_free_text(raw, str(task_type))
    return validate_free_text(raw, task.value, DEFAULT_TITLES.get(task))
