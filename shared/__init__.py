"""
Shared configuration, schemas and error types.

Usage:
    from shared import TaskType, settings
    from shared.errors import GenerationFailedError
"""

from .config import Settings, configure_logging, get_settings, settings
from .errors import (
    BoundingError,
    ChunkingError,
    ContentPipelineError,
    GenerationFailedError,
    ResponseValidationError,
    RetrievalError,
    RunFailedError,
    TransportError,
)
from .result import Result
from .schemas import (
    FREE_TEXT_TASKS,
    JSON_TASKS,
    TASK_ORDER,
    Flashcard,
    FlashcardSet,
    FreeText,
    GenerationRequest,
    GenerationResult,
    MindMap,
    MindMapBranch,
    QuizQuestion,
    QuizSet,
    TaskType,
)

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "configure_logging",
    "ContentPipelineError",
    "ChunkingError",
    "RetrievalError",
    "BoundingError",
    "ResponseValidationError",
    "TransportError",
    "GenerationFailedError",
    "RunFailedError",
    "Result",
    "TaskType",
    "TASK_ORDER",
    "JSON_TASKS",
    "FREE_TEXT_TASKS",
    "GenerationRequest",
    "GenerationResult",
    "MindMap",
    "MindMapBranch",
    "FreeText",
    "Flashcard",
    "FlashcardSet",
    "QuizQuestion",
    "QuizSet",
]
