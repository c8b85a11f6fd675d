"""
Generation orchestration with retry, validation and normalization.

Per task invocation:

    Building -> Calling -> Validating -> Success
                   ^           |
                   +- RetryWait <- (transport or validation failure)

Retries are bounded (MAX_RETRIES total attempts, default 3) with
exponential backoff INITIAL_DELAY * 2^(attempt-1): 1s, 2s, 4s ... The
wait is a blocking sleep. After the last attempt a single
GenerationFailedError carries the last failure and the elapsed time.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt

from shared.config import GenerationConfig, LLMConfig, settings
from shared.errors import GenerationFailedError, ResponseValidationError, TransportError
from shared.schemas import FlashcardSet, FreeText, GenerationResult, MindMap, QuizSet, TaskType
from verification.response_validator import validate_response

from .llm_client import TextGenerator
from .prompt_builder import build_prompt, build_request, requested_count

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (TransportError, ResponseValidationError)


@dataclass
class RetryState:
    """Attempt bookkeeping for one orchestrator call."""

    attempt: int = 0
    last_error: Optional[Exception] = None


class GenerationOrchestrator:
    """
    Runs one generation task end to end.

    Usage:
        orchestrator = GenerationOrchestrator(OpenAIGenerator())
        quiz = orchestrator.execute("quiz", bounded_context, {"count": 10})
    """

    def __init__(
        self,
        generator: TextGenerator,
        config: GenerationConfig = None,
        llm_config: LLMConfig = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            generator: Text-generation capability
            config: Retry configuration
            llm_config: Default temperature and max tokens
            sleep: Blocking wait used between attempts
        """
        self.generator = generator
        self.config = config or settings.generation
        self.llm_config = llm_config or settings.llm
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        """Backoff before retrying after the given (1-based) failed attempt."""
        delay = self.config.initial_delay * (2 ** (attempt - 1))
        return min(delay, self.config.max_delay)

    def _wait(self, retry_state: RetryCallState) -> float:
        return self.delay_for(retry_state.attempt_number)

    def execute(
        self,
        task_type,
        bounded_context: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> GenerationResult:
        """
        Build the prompt, call the generator and validate the response.

        Args:
            task_type: Task type name or TaskType
            bounded_context: Context already bounded for the task
            options: "count", "temperature", "max_tokens"

        Returns:
            Canonical result for the task type

        Raises:
            GenerationFailedError: After all attempts fail
        """
        request = build_request(task_type, bounded_context, options)
        prompt = build_prompt(task_type, request.bounded_context, request.options)
        requested = requested_count(task_type, request.options)
        temperature = request.options.get("temperature", self.llm_config.temperature)
        max_tokens = request.options.get("max_tokens", self.llm_config.max_tokens)

        state = RetryState()
        start = time.monotonic()

        retryer = Retrying(
            stop=stop_after_attempt(max(1, self.config.max_retries)),
            wait=self._wait,
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            sleep=self._sleep,
            before_sleep=lambda rs: self._log_retry(request.task, rs),
            reraise=True,
        )

        try:
            for attempt in retryer:
                with attempt:
                    state.attempt = attempt.retry_state.attempt_number
                    result = self._attempt(request.task, prompt, requested, temperature, max_tokens)
        except RETRYABLE_ERRORS as e:
            state.last_error = e
            elapsed = time.monotonic() - start
            logger.error(
                f"{request.task} generation failed after {state.attempt} attempt(s) "
                f"in {elapsed:.2f}s: {e}"
            )
            raise GenerationFailedError(request.task, state.attempt, elapsed, e) from e

        logger.info(
            f"{request.task} generation succeeded on attempt {state.attempt} "
            f"in {time.monotonic() - start:.2f}s"
        )
        return result

    def _attempt(
        self,
        task: str,
        prompt: str,
        requested: Optional[int],
        temperature: float,
        max_tokens: int,
    ) -> GenerationResult:
        try:
            raw = self.generator.generate(prompt, temperature=temperature, max_tokens=max_tokens)
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        try:
            return validate_response(task, raw, requested)
        except ResponseValidationError:
            raise
        except Exception as e:
            raise ResponseValidationError(f"{task} response failed validation: {type(e).__name__}: {e}", task) from e

    def _log_retry(self, task: str, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"{task} attempt {retry_state.attempt_number} failed: {error}; "
            f"retrying in {delay:.1f}s"
        )

    # One entry point per task type

    def generate_mindmap(self, context: str) -> MindMap:
        return self.execute(TaskType.MINDMAP, context)

    def generate_podcast(self, context: str) -> FreeText:
        return self.execute(TaskType.PODCAST, context)

    def generate_video_script(self, context: str) -> FreeText:
        return self.execute(TaskType.VIDEO, context)

    def generate_report(self, context: str) -> FreeText:
        return self.execute(TaskType.REPORT, context)

    def generate_flashcards(self, context: str, count: int = None) -> FlashcardSet:
        return self.execute(TaskType.FLASHCARD, context, {"count": count} if count else None)

    def generate_quiz(self, context: str, count: int = None) -> QuizSet:
        return self.execute(TaskType.QUIZ, context, {"count": count} if count else None)
