"""
Error taxonomy for the content pipeline.

Everything below the orchestrator is fail-soft: chunking, retrieval and
bounding errors are recovered where they happen and only show up in logs.
Validation and transport errors are retried; GenerationFailedError is the
single terminal error surfaced to callers.
"""

from typing import Optional


class ContentPipelineError(Exception):
    """Base class for pipeline errors."""

    pass


class ChunkingError(ContentPipelineError):
    """Boundary detection or greedy chunking could not produce chunks."""

    pass


class RetrievalError(ContentPipelineError):
    """Relevance scoring or selection failed."""

    pass


class BoundingError(ContentPipelineError):
    """Context bounding failed at some stage."""

    pass


class ResponseValidationError(ContentPipelineError):
    """A generation response did not pass structural validation."""

    def __init__(self, message: str, task_type: Optional[str] = None):
        super().__init__(message)
        self.task_type = task_type


class TransportError(ContentPipelineError):
    """The text-generation capability raised or was unreachable."""

    pass


class GenerationFailedError(ContentPipelineError):
    """Raised after all generation attempts for a task are exhausted."""

    def __init__(
        self,
        task_type: str,
        attempts: int,
        elapsed_seconds: float,
        last_error: Optional[BaseException] = None,
    ):
        self.task_type = task_type
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds
        self.last_error = last_error
        last_message = str(last_error) if last_error else "unknown error"
        super().__init__(
            f"{task_type} generation failed after {attempts} attempt(s) "
            f"in {elapsed_seconds:.2f}s: {last_message}"
        )


class RunFailedError(ContentPipelineError):
    """Raised when every enabled task type of a run failed."""

    def __init__(self, unit_id: int, failures: dict):
        self.unit_id = unit_id
        self.failures = failures
        tasks = ", ".join(sorted(failures))
        super().__init__(f"All enabled tasks failed for unit {unit_id}: {tasks}")
