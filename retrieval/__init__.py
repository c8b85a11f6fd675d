"""
Task Retrieval Module.

Reduces many chunks to a bounded, task-relevant subset:
- Per-task keyword tables
- Keyword-density + length scoring
- Top-K selection that preserves document order

Usage:
    from retrieval import TaskRetriever

    retriever = TaskRetriever()
    selected = retriever.retrieve(chunks, "report", max_chunks=8)
"""

from .task_keywords import TASK_KEYWORDS, get_task_keywords
from .task_retriever import (
    ScoredChunk,
    TaskRetriever,
    combine_chunks,
    general_relevance,
    keyword_relevance,
    retrieve_relevant_chunks,
)

__all__ = [
    "TaskRetriever",
    "ScoredChunk",
    "keyword_relevance",
    "general_relevance",
    "combine_chunks",
    "retrieve_relevant_chunks",
    "TASK_KEYWORDS",
    "get_task_keywords",
]
