"""
Task-specific lexical retrieval over chunks.

Scoring is a cheap, explainable heuristic rather than a learned ranker:

    score = 0.7 * keyword_density + 0.3 * length_score

keyword_density weights each keyword hit by the keyword's length, divides
by chunk length and is amplified x10 before capping at 1.0. length_score
grows linearly up to a 2000-char ideal. Task types without a keyword table
use a generic score (length proximity + sentence density).

Selection keeps the top K by score (earlier chunk wins ties) and then
restores document order, so the narrative is never reordered.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from shared.config import RetrievalConfig, settings
from shared.errors import RetrievalError
from shared.result import Result

from .task_keywords import get_task_keywords

logger = logging.getLogger(__name__)

_SENTENCE_END_RE = re.compile(r"[.!?]+\s+")


@dataclass(frozen=True)
class ScoredChunk:
    """A chunk, its document position and its relevance score."""

    text: str
    ordinal: int
    score: float


def keyword_relevance(chunk: str, keywords: Sequence[str], config: RetrievalConfig = None) -> float:
    """
    Keyword-density relevance in [0, 1].

    Args:
        chunk: Chunk text
        keywords: Lower-case keywords for the task
        config: Scoring weights

    Returns:
        Relevance score
    """
    config = config or settings.retrieval
    if not chunk:
        return 0.0

    lowered = chunk.lower()
    length = len(chunk)

    total_weight = 0
    for keyword in keywords:
        hits = lowered.count(keyword)
        if hits:
            total_weight += hits * len(keyword)

    keyword_score = 0.0
    if total_weight:
        keyword_score = min(1.0, (total_weight / length) * config.density_amplification)

    length_score = min(1.0, length / config.ideal_length_chars)

    score = keyword_score * config.keyword_weight + length_score * config.length_weight
    return max(0.0, min(1.0, score))


def general_relevance(chunk: str, config: RetrievalConfig = None) -> float:
    """Relevance for task types with no keyword table."""
    config = config or settings.retrieval
    if not chunk:
        return 0.0

    ideal = config.generic_ideal_length_chars
    length_score = max(0.0, 1.0 - abs(len(chunk) - ideal) / ideal)

    sentences = len(_SENTENCE_END_RE.findall(chunk))
    sentence_score = min(1.0, sentences / config.generic_sentence_saturation)

    score = length_score * config.generic_length_weight + sentence_score * config.generic_sentence_weight
    return max(0.0, min(1.0, score))


def combine_chunks(chunks: Sequence[str]) -> str:
    """Join selected chunks with a blank line between them."""
    if not chunks:
        return ""
    return "\n\n".join(chunks)


class TaskRetriever:
    """
    Selects the chunks most relevant to a task type.

    Usage:
        retriever = TaskRetriever()
        selected = retriever.retrieve(chunks, "quiz", max_chunks=5)
        context = retriever.combine(selected)
    """

    def __init__(self, config: RetrievalConfig = None):
        self.config = config or settings.retrieval

    def score(self, chunk: str, task_type) -> float:
        """Relevance of one chunk for a task type."""
        keywords = get_task_keywords(task_type)
        if not keywords:
            return general_relevance(chunk, self.config)
        return keyword_relevance(chunk, keywords, self.config)

    def score_chunks(self, chunks: Sequence[str], task_type) -> List[ScoredChunk]:
        """Score every chunk; a chunk that fails to score gets 0."""
        scored = []
        for ordinal, chunk in enumerate(chunks):
            try:
                value = self.score(chunk, task_type)
            except Exception as e:
                logger.warning(f"Error scoring chunk {ordinal}: {e}, assigning score 0")
                value = 0.0
            scored.append(ScoredChunk(text=chunk, ordinal=ordinal, score=value))
        return scored

    def retrieve(self, chunks: Sequence[str], task_type, max_chunks: int = None) -> List[str]:
        """
        Retrieve the top chunks for a task, in original document order.

        Args:
            chunks: All chunks of a document, in order
            task_type: Task type name or TaskType
            max_chunks: Number of chunks to keep

        Returns:
            min(max_chunks, len(chunks)) chunks, a subsequence of the input
        """
        if not chunks:
            logger.debug("Retriever received empty chunks")
            return []

        max_chunks = self.config.default_max_chunks if max_chunks is None else max_chunks
        chunks = list(chunks)

        logger.debug(
            f"Retrieving chunks for task type {task_type} "
            f"(from {len(chunks)} total chunks, max: {max_chunks})"
        )

        if len(chunks) <= max_chunks:
            return chunks

        ranked = self._rank(chunks, task_type, max_chunks)
        if not ranked.is_ok:
            logger.error(f"Error retrieving relevant chunks: {ranked.error}")
            logger.warning(f"Returning first {max_chunks} chunks as fallback")
            return chunks[:max_chunks]

        result = [chunks[i] for i in ranked.value]
        logger.info(f"Retrieved {len(result)} relevant chunks for {task_type}")
        return result

    def _rank(self, chunks: List[str], task_type, max_chunks: int) -> Result[List[int]]:
        try:
            scored = self.score_chunks(chunks, task_type)
            scores = np.array([s.score for s in scored], dtype=float)
            ordinals = np.arange(len(scored))
            # lexsort: last key is primary -> score descending, then earlier ordinal
            order = np.lexsort((ordinals, -scores))
            top = sorted(int(i) for i in order[:max_chunks])
        except Exception as e:
            return Result.fail(RetrievalError(str(e)))
        return Result.ok(top)

    def combine(self, chunks: Sequence[str]) -> str:
        """Join selected chunks into a single context string."""
        return combine_chunks(chunks)


def retrieve_relevant_chunks(chunks: Sequence[str], task_type, max_chunks: int = None) -> List[str]:
    """Convenience wrapper around TaskRetriever.retrieve."""
    return TaskRetriever().retrieve(chunks, task_type, max_chunks)
