"""Unit tests for prompt construction."""
import pytest

from generation.prompt_builder import TEMPLATES, build_prompt, build_request, requested_count
from shared.schemas import TaskType

CONTEXT = "Photosynthesis happens in chloroplasts."


@pytest.mark.unit
class TestBuildPrompt:
    def test_template_for_every_task(self):
        assert set(TEMPLATES) == set(TaskType)

    @pytest.mark.parametrize("task", list(TaskType))
    def test_context_is_appended(self, task):
        prompt = build_prompt(task, CONTEXT)
        assert prompt.endswith("Content:\n" + CONTEXT)

    def test_unknown_task_passes_context_through(self):
        assert build_prompt("haiku", CONTEXT) == CONTEXT

    def test_default_counts(self):
        assert build_prompt("flashcard", CONTEXT).startswith("Generate 15 educational flashcards")
        assert build_prompt("quiz", CONTEXT).startswith("Generate 10 multiple-choice quiz questions")

    def test_count_override(self):
        assert build_prompt("quiz", CONTEXT, {"count": 3}).startswith("Generate 3 ")

    def test_json_format_hints_survive_formatting(self):
        prompt = build_prompt("mindmap", CONTEXT)
        assert '{"central": "main topic"' in prompt

    def test_context_with_braces_is_not_formatted(self):
        context = "Sets are written {a, b}."
        assert build_prompt("report", context).endswith(context)


@pytest.mark.unit
class TestRequests:
    @pytest.mark.parametrize(
        "task,options,expected",
        [("flashcard", None, 15), ("quiz", {"count": 4}, 4), ("report", {"count": 4}, None), ("haiku", None, None)],
    )
    def test_requested_count(self, task, options, expected):
        assert requested_count(task, options) == expected

    def test_build_request(self):
        request = build_request(TaskType.QUIZ, CONTEXT, {"count": 2})
        assert request.task == "quiz"
        assert request.bounded_context == CONTEXT
        assert request.options == {"count": 2}

    def test_build_request_unknown_task(self):
        assert build_request("haiku", CONTEXT).task == "haiku"
