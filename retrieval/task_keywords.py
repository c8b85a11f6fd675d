"""
Per-task keyword tables for lexical relevance scoring.

Built once at import and exposed read-only.
"""

from types import MappingProxyType
from typing import Tuple

from shared.schemas import TaskType

TASK_KEYWORDS = MappingProxyType(
    {
        TaskType.MINDMAP: (
            "concept", "relationship", "key", "main", "topic", "idea", "principle",
            "theory", "definition", "category", "type", "classification", "structure",
        ),
        TaskType.FLASHCARD: (
            "definition", "term", "important", "remember", "key", "concept", "fact",
            "meaning", "describe", "explain", "what is", "who is", "when", "where",
        ),
        TaskType.QUIZ: (
            "fact", "process", "explain", "describe", "how", "why", "what", "which",
            "correct", "incorrect", "true", "false", "example", "demonstrate", "show",
        ),
        TaskType.REPORT: (
            "summary", "analysis", "conclusion", "finding", "result", "evidence",
            "data", "research", "study", "investigation", "overview", "detail",
        ),
        TaskType.PODCAST: (
            "story", "narrative", "explain", "discuss", "explore", "understand",
            "learn", "discover", "journey", "example", "case", "scenario", "context",
        ),
        TaskType.VIDEO: (
            "visual", "show", "demonstrate", "illustrate", "example", "diagram",
            "chart", "graph", "image", "picture", "scene", "display", "present",
        ),
    }
)


def get_task_keywords(task_type) -> Tuple[str, ...]:
    """Keywords for a task type; empty for unknown task types."""
    task = TaskType.parse(task_type)
    if task is None:
        return ()
    return TASK_KEYWORDS.get(task, ())
