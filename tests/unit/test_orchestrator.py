"""Unit tests for GenerationOrchestrator retry and validation behavior."""
import pytest

from generation.orchestrator import GenerationOrchestrator
from shared.config import GenerationConfig, LLMConfig
from shared.errors import GenerationFailedError, ResponseValidationError, TransportError
from shared.schemas import FlashcardSet, FreeText, MindMap, QuizSet

CONTEXT = "Plants use chlorophyll to absorb light."


def _orchestrator(generator, sleep, **config):
    return GenerationOrchestrator(
        generator,
        config=GenerationConfig(**{"max_retries": 3, "initial_delay": 1.0, **config}),
        llm_config=LLMConfig(model="test-model", temperature=0.7, max_tokens=2000),
        sleep=sleep,
    )


@pytest.mark.unit
class TestBackoff:
    def test_delays_double(self, recording_sleep, scripted_generator):
        orchestrator = _orchestrator(scripted_generator(["x"]), recording_sleep)
        assert [orchestrator.delay_for(n) for n in (1, 2, 3)] == [1.0, 2.0, 4.0]

    def test_delay_is_capped(self, recording_sleep, scripted_generator):
        orchestrator = _orchestrator(scripted_generator(["x"]), recording_sleep, initial_delay=10.0, max_delay=15.0)
        assert orchestrator.delay_for(3) == 15.0


@pytest.mark.unit
class TestExecute:
    def test_success_on_first_attempt(self, recording_sleep, scripted_generator, valid_responses):
        generator = scripted_generator([valid_responses["quiz"]])
        result = _orchestrator(generator, recording_sleep).execute("quiz", CONTEXT)

        assert isinstance(result, QuizSet)
        assert len(generator.calls) == 1
        assert recording_sleep.delays == []
        assert generator.calls[0]["prompt"].endswith(CONTEXT)
        assert generator.calls[0]["temperature"] == 0.7
        assert generator.calls[0]["max_tokens"] == 2000

    def test_options_override_call_parameters(self, recording_sleep, scripted_generator):
        generator = scripted_generator(["A report."])
        _orchestrator(generator, recording_sleep).execute("report", CONTEXT, {"temperature": 0.2, "max_tokens": 500})
        assert generator.calls[0]["temperature"] == 0.2
        assert generator.calls[0]["max_tokens"] == 500

    def test_invalid_response_is_retried(self, recording_sleep, scripted_generator, valid_responses):
        generator = scripted_generator(["Sorry, I cannot help.", valid_responses["mindmap"]])
        result = _orchestrator(generator, recording_sleep).execute("mindmap", CONTEXT)

        assert isinstance(result, MindMap)
        assert len(generator.calls) == 2
        assert recording_sleep.delays == [1.0]

    def test_transport_error_is_retried(self, recording_sleep, scripted_generator):
        generator = scripted_generator([TimeoutError("read timed out"), "HOST: Hello."])
        result = _orchestrator(generator, recording_sleep).execute("podcast", CONTEXT)
        assert isinstance(result, FreeText)
        assert recording_sleep.delays == [1.0]

    def test_always_failing_generator_exhausts_retries(self, recording_sleep, scripted_generator):
        generator = scripted_generator([ConnectionError("provider down")])

        with pytest.raises(GenerationFailedError) as exc_info:
            _orchestrator(generator, recording_sleep).execute("quiz", CONTEXT)

        error = exc_info.value
        assert len(generator.calls) == 3
        assert error.attempts == 3
        assert error.task_type == "quiz"
        assert "provider down" in str(error)
        assert isinstance(error.last_error, TransportError)
        assert error.elapsed_seconds >= 0
        assert recording_sleep.delays == [1.0, 2.0]

    def test_validation_failures_exhaust_retries(self, recording_sleep, scripted_generator):
        generator = scripted_generator(["[]"])
        with pytest.raises(GenerationFailedError) as exc_info:
            _orchestrator(generator, recording_sleep).execute("flashcard", CONTEXT)
        assert isinstance(exc_info.value.last_error, ResponseValidationError)

    def test_configured_retry_count(self, recording_sleep, scripted_generator):
        generator = scripted_generator([RuntimeError("nope")])
        with pytest.raises(GenerationFailedError):
            _orchestrator(generator, recording_sleep, max_retries=5).execute("report", CONTEXT)
        assert len(generator.calls) == 5
        assert recording_sleep.delays == [1.0, 2.0, 4.0, 8.0]

    def test_at_least_one_attempt(self, recording_sleep, scripted_generator):
        generator = scripted_generator([RuntimeError("nope")])
        with pytest.raises(GenerationFailedError):
            _orchestrator(generator, recording_sleep, max_retries=0).execute("report", CONTEXT)
        assert len(generator.calls) == 1
        assert recording_sleep.delays == []

    def test_transport_errors_are_not_rewrapped(self, recording_sleep, scripted_generator):
        original = TransportError("gateway closed")
        generator = scripted_generator([original])
        with pytest.raises(GenerationFailedError) as exc_info:
            _orchestrator(generator, recording_sleep, max_retries=1).execute("video", CONTEXT)
        assert exc_info.value.last_error is original

    def test_unknown_task_sends_context_as_prompt(self, recording_sleep, scripted_generator):
        generator = scripted_generator(["five seven five"])
        result = _orchestrator(generator, recording_sleep).execute("haiku", CONTEXT)
        assert generator.calls[0]["prompt"] == CONTEXT
        assert result.body == "five seven five"


@pytest.mark.unit
class TestTaskEntryPoints:
    def test_generate_flashcards_with_count(self, recording_sleep, scripted_generator, valid_responses):
        generator = scripted_generator([valid_responses["flashcard"]])
        result = _orchestrator(generator, recording_sleep).generate_flashcards(CONTEXT, count=2)

        assert isinstance(result, FlashcardSet)
        assert result.requested == 2
        assert generator.calls[0]["prompt"].startswith("Generate 2 educational flashcards")

    def test_generate_quiz_default_count(self, recording_sleep, scripted_generator, valid_responses):
        generator = scripted_generator([valid_responses["quiz"]])
        result = _orchestrator(generator, recording_sleep).generate_quiz(CONTEXT)
        assert result.requested == 10
        assert result.is_partial

    @pytest.mark.parametrize(
        "method,key",
        [
            ("generate_mindmap", "mindmap"),
            ("generate_podcast", "podcast"),
            ("generate_video_script", "video"),
            ("generate_report", "report"),
        ],
    )
    def test_single_result_entry_points(self, method, key, recording_sleep, scripted_generator, valid_responses):
        generator = scripted_generator([valid_responses[key]])
        result = getattr(_orchestrator(generator, recording_sleep), method)(CONTEXT)
        assert result is not None
        assert len(generator.calls) == 1
