"""
Context bounding for generation prompts.

Small inputs pass through untouched. Large inputs are chunked, reduced to
the task's top-K relevant chunks, joined, and held to a hard output
ceiling. Any failure degrades to truncating the original text; the
assembler never raises.
"""

import logging
import time
from typing import Dict, List, Optional

from chunking.semantic_chunker import SemanticChunker
from chunking.token_estimator import count_words, estimate_tokens
from monitoring.alerts import AlertNotifier, LoggingAlertNotifier
from retrieval.task_retriever import TaskRetriever
from shared.config import ContextConfig, settings
from shared.errors import BoundingError
from shared.result import Result
from shared.schemas import TaskType

from .context_budgeting import fallback_truncate, truncate_to_tokens

logger = logging.getLogger(__name__)


class ContextAssembler:
    """
    Bounds source text to a size suitable for one generation call.

    Usage:
        assembler = ContextAssembler()
        context = assembler.bound(chapter_text, "quiz")
    """

    def __init__(
        self,
        chunker: SemanticChunker = None,
        retriever: TaskRetriever = None,
        notifier: Optional[AlertNotifier] = None,
        config: ContextConfig = None,
    ):
        self.config = config or settings.context
        self.chunker = chunker or SemanticChunker()
        self.retriever = retriever or TaskRetriever()
        self.notifier = notifier or LoggingAlertNotifier()

    def should_bound(self, text: str) -> bool:
        """True when text is larger than the bounding threshold."""
        if not text:
            return False
        return estimate_tokens(text) > self.config.rag_threshold_tokens

    def max_chunks_for(self, task_type) -> int:
        """Top-K for a task type: wider for narrative tasks, narrower for Q&A."""
        task = TaskType.parse(task_type)
        if task is None:
            return self.config.default_max_chunks
        return self.config.max_chunks_by_task.get(task.value, self.config.default_max_chunks)

    def bound(self, text: str, task_type, unit_id: Optional[int] = None) -> str:
        """
        Reduce text to task-relevant context within the output ceiling.

        Args:
            text: Source text for one content unit
            task_type: Task type name or TaskType
            unit_id: Optional unit id, used only for alerts

        Returns:
            Bounded context; never raises
        """
        if not text:
            logger.debug("Context assembler received empty content")
            return ""

        start = time.perf_counter()

        try:
            if not self.should_bound(text):
                logger.info(
                    f"Content is small enough ({estimate_tokens(text)} tokens), skipping bounding"
                )
                return text

            logger.info(f"Starting context bounding for task type: {task_type}")

            chunks = self._chunk_stage(text)
            if not chunks.is_ok:
                logger.warning(f"{chunks.error}, using fallback truncation")
                return fallback_truncate(text, self.config)

            selected = self._retrieve_stage(chunks.value, task_type)
            if not selected.is_ok:
                logger.warning(f"{selected.error}, using fallback truncation")
                return fallback_truncate(text, self.config)

            combined = self._combine_stage(selected.value)
            if not combined.is_ok:
                logger.warning(f"{combined.error}, using fallback truncation")
                return fallback_truncate(text, self.config)

            context = combined.value
            output_tokens = estimate_tokens(context)
            if output_tokens > self.config.max_output_tokens:
                logger.debug(
                    f"Processed content still too large ({output_tokens} tokens), "
                    f"truncating to {self.config.max_output_tokens} tokens"
                )
                context = truncate_to_tokens(context, self.config.max_output_tokens, self.config)

            elapsed = time.perf_counter() - start
            logger.info(
                f"Context bounding complete in {elapsed:.2f}s, output: {len(context)} characters "
                f"({estimate_tokens(context)} tokens)"
            )
            return context

        except Exception as e:
            logger.error(f"Context bounding failed: {e}")
            self._alert(task_type, str(e), unit_id)
            logger.warning("Falling back to content truncation")
            return fallback_truncate(text, self.config)

    def _chunk_stage(self, text: str) -> Result[List[str]]:
        chunks = self.chunker.chunk(text)
        if not chunks:
            return Result.fail(BoundingError("chunking produced no chunks"))
        logger.debug(f"Content chunked into {len(chunks)} segments")
        return Result.ok(chunks)

    def _retrieve_stage(self, chunks: List[str], task_type) -> Result[List[str]]:
        max_chunks = self.max_chunks_for(task_type)
        selected = self.retriever.retrieve(chunks, task_type, max_chunks)
        if not selected:
            return Result.fail(BoundingError("retrieval produced no chunks"))
        logger.debug(f"Retrieved {len(selected)} relevant chunks (max {max_chunks})")
        return Result.ok(selected)

    def _combine_stage(self, selected: List[str]) -> Result[str]:
        combined = self.retriever.combine(selected)
        if not combined:
            return Result.fail(BoundingError("chunk combination produced empty content"))
        return Result.ok(combined)

    def _alert(self, task_type, error: str, unit_id: Optional[int]) -> None:
        try:
            self.notifier.notify_bounding_failure(task_type, error, unit_id)
        except Exception as e:
            logger.error(f"Failed to send bounding failure alert: {e}")

    def stats(self, text: str) -> Dict:
        """
        Bounding statistics for a text.

        Returns:
            total_tokens, needs_bounding, total_chars, word_count and, when
            bounding applies, chunk_count and avg_chunk_tokens
        """
        stats = {
            "total_tokens": estimate_tokens(text),
            "needs_bounding": self.should_bound(text),
            "total_chars": len(text or ""),
            "word_count": count_words(text),
        }

        if stats["needs_bounding"]:
            chunks = self.chunker.chunk(text)
            stats["chunk_count"] = len(chunks)
            stats["avg_chunk_tokens"] = (
                stats["total_tokens"] // len(chunks) if chunks else 0
            )

        return stats


def bound_context(text: str, task_type) -> str:
    """Bound text for a task with the default assembler."""
    return ContextAssembler().bound(text, task_type)
