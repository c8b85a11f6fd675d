"""
Pydantic schemas for task types, generation requests and canonical results.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class TaskType(str, Enum):
    """Kinds of derived artifacts generated from source text."""

    MINDMAP = "mindmap"
    PODCAST = "podcast"
    VIDEO = "video"
    REPORT = "report"
    FLASHCARD = "flashcard"
    QUIZ = "quiz"

    @classmethod
    def parse(cls, value) -> Optional["TaskType"]:
        """Return the matching task type, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# Fixed processing order for a per-unit run
TASK_ORDER = [
    TaskType.MINDMAP,
    TaskType.PODCAST,
    TaskType.VIDEO,
    TaskType.REPORT,
    TaskType.FLASHCARD,
    TaskType.QUIZ,
]

JSON_TASKS = frozenset({TaskType.MINDMAP, TaskType.FLASHCARD, TaskType.QUIZ})
FREE_TEXT_TASKS = frozenset({TaskType.PODCAST, TaskType.VIDEO, TaskType.REPORT})


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GenerationRequest(BaseModel):
    """A single generation call, built fresh per task."""

    task: str
    bounded_context: str
    options: Dict[str, Any] = Field(default_factory=dict)


class MindMapBranch(BaseModel):
    topic: str
    subtopics: List[str] = Field(default_factory=list)


class MindMap(BaseModel):
    """Mind map with a central topic and first-level branches."""

    central: str
    branches: List[MindMapBranch]


class FreeText(BaseModel):
    """Podcast script, video script or report body."""

    body: str
    title: Optional[str] = None


class Flashcard(BaseModel):
    question: str
    answer: str
    difficulty: Difficulty = Difficulty.MEDIUM


class QuizQuestion(BaseModel):
    question: str
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_index: int = Field(..., ge=0, le=3)
    explanation: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM


class _ItemBatch(BaseModel):
    """Shared bookkeeping for collection results."""

    requested: Optional[int] = None
    dropped: int = 0

    @property
    def is_partial(self) -> bool:
        """True when items were dropped or fewer than requested were produced."""
        produced = len(getattr(self, "items", []))
        if self.dropped:
            return True
        return self.requested is not None and produced < self.requested


class FlashcardSet(_ItemBatch):
    items: List[Flashcard] = Field(..., min_length=1)


class QuizSet(_ItemBatch):
    items: List[QuizQuestion] = Field(..., min_length=1)


GenerationResult = Union[MindMap, FreeText, FlashcardSet, QuizSet]
