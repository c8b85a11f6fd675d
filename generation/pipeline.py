"""
Per-unit generation run across enabled task types.

Task types run one after another in a fixed order. Each is bounded,
prompted and orchestrated independently; a failed task records an error
marker, raises an alert and does not stop its siblings. A run is fatal
only when every enabled task failed.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol

from context.context_assembler import ContextAssembler
from monitoring.alerts import AlertNotifier, LoggingAlertNotifier
from monitoring.error_tracker import ErrorSink, ErrorTracker
from shared.errors import GenerationFailedError, RunFailedError
from shared.schemas import TASK_ORDER, GenerationResult, TaskType

from .orchestrator import GenerationOrchestrator

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    def save(self, unit_id: int, task_type: str, result: GenerationResult) -> None:
        ...


def _task_key(task_type) -> str:
    task = TaskType.parse(task_type)
    return task.value if task else str(getattr(task_type, "value", task_type)).strip().lower()


class InMemoryResultSink:
    """Keeps the latest result per unit and task type."""

    def __init__(self):
        self.results: Dict[tuple, GenerationResult] = {}

    def save(self, unit_id: int, task_type, result: GenerationResult) -> None:
        self.results[(unit_id, _task_key(task_type))] = result

    def get(self, unit_id: int, task_type) -> Optional[GenerationResult]:
        return self.results.get((unit_id, _task_key(task_type)))


@dataclass
class RunReport:
    """Outcome of one per-unit run."""

    unit_id: int
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: bool = False
    elapsed_seconds: float = 0.0

    @property
    def all_failed(self) -> bool:
        return bool(self.failed) and not self.succeeded


def combine_sources(texts: Iterable[str]) -> str:
    """Concatenate a unit's source texts, each followed by a blank line."""
    return "".join(f"{text}\n\n" for text in texts if text and text.strip())


class ContentGenerationPipeline:
    """
    Generates all enabled artifacts for a content unit.

    Usage:
        pipeline = ContentGenerationPipeline(GenerationOrchestrator(OpenAIGenerator()))
        report = pipeline.run(unit_id=42, source_text=text, enabled_tasks=["mindmap", "quiz"])
    """

    def __init__(
        self,
        orchestrator: GenerationOrchestrator,
        assembler: ContextAssembler = None,
        result_sink: ResultSink = None,
        error_sink: ErrorSink = None,
        notifier: AlertNotifier = None,
    ):
        self.orchestrator = orchestrator
        self.notifier = notifier or LoggingAlertNotifier()
        self.assembler = assembler or ContextAssembler(notifier=self.notifier)
        self.result_sink = result_sink or InMemoryResultSink()
        self.error_sink = error_sink or ErrorTracker()

    def generate_task(
        self,
        unit_id: int,
        task_type,
        source_text: str,
        options: Optional[Dict] = None,
    ) -> Optional[GenerationResult]:
        """
        Bound, generate and store one task type for a unit.

        Task types without a template are generated as free text with the
        bounded context as the prompt. A blank task type is a no-op.

        Returns:
            The stored result, or None when there was nothing to generate

        Raises:
            GenerationFailedError: If generation exhausted its retries
        """
        task = _task_key(task_type)
        if not task:
            logger.warning(f"No task type given for unit {unit_id}, nothing to generate")
            return None
        if TaskType.parse(task) is None:
            logger.warning(f"No template for task type {task}, generating free text")

        context = self.assembler.bound(source_text, task, unit_id=unit_id)
        result = self.orchestrator.execute(task, context, options)

        self.result_sink.save(unit_id, task, result)
        self.error_sink.clear(unit_id, task)
        return result

    def run(
        self,
        unit_id: int,
        source_text: str,
        enabled_tasks: Iterable,
        options: Optional[Dict[str, Dict]] = None,
    ) -> RunReport:
        """
        Run every enabled task type for a unit.

        Args:
            unit_id: Content unit identifier
            source_text: Combined source text of the unit
            enabled_tasks: Task type names or TaskType values
            options: Optional per-task options keyed by task name

        Returns:
            RunReport with succeeded and failed task types

        Raises:
            RunFailedError: If every enabled task failed
        """
        report = RunReport(unit_id=unit_id)
        options = options or {}

        if not source_text or not source_text.strip():
            logger.info(f"No source content for unit {unit_id}, skipping generation")
            report.skipped = True
            return report

        if not self._generator_configured():
            logger.warning(f"No text-generation provider configured, skipping generation for unit {unit_id}")
            report.skipped = True
            return report

        enabled = self._enabled_in_order(enabled_tasks)
        start = time.monotonic()

        for task in enabled:
            logger.info(f"Generating {task.value} for unit {unit_id}")
            try:
                self.generate_task(unit_id, task, source_text, options.get(task.value))
                report.succeeded.append(task.value)
            except GenerationFailedError as e:
                self._record_failure(unit_id, task, e)
                report.failed[task.value] = str(e)
            except Exception as e:
                logger.exception(f"Unexpected error generating {task.value} for unit {unit_id}")
                self._record_failure(unit_id, task, e)
                report.failed[task.value] = f"{type(e).__name__}: {e}"

        report.elapsed_seconds = time.monotonic() - start
        logger.info(
            f"Generation for unit {unit_id} finished: {len(report.succeeded)} succeeded, "
            f"{len(report.failed)} failed in {report.elapsed_seconds:.2f}s"
        )

        if report.all_failed:
            raise RunFailedError(unit_id, report.failed)
        return report

    def _enabled_in_order(self, enabled_tasks: Iterable) -> List[TaskType]:
        requested = set()
        for name in enabled_tasks:
            task = TaskType.parse(name)
            if task is None:
                logger.warning(f"Ignoring unknown task type: {name}")
                continue
            requested.add(task)
        return [task for task in TASK_ORDER if task in requested]

    def _generator_configured(self) -> bool:
        is_configured = getattr(self.orchestrator.generator, "is_configured", None)
        return not callable(is_configured) or bool(is_configured())

    def _record_failure(self, unit_id: int, task: TaskType, error: Exception) -> None:
        message = f"{task.value.capitalize()} generation failed: {getattr(error, 'last_error', None) or error}"
        self.error_sink.store(unit_id, task.value, message)
        try:
            self.notifier.notify_generation_failure(task.value, str(error), unit_id)
        except Exception as e:
            logger.error(f"Failed to send generation failure alert: {e}")
