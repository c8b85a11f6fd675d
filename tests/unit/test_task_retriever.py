"""Unit tests for task-specific lexical retrieval."""
import pytest

from retrieval.task_keywords import TASK_KEYWORDS, get_task_keywords
from retrieval.task_retriever import (
    TaskRetriever,
    combine_chunks,
    general_relevance,
    keyword_relevance,
    retrieve_relevant_chunks,
)
from shared.schemas import TaskType

NEUTRAL = "zzz " * 10
QUIZ_HEAVY = "why " * 10


@pytest.mark.unit
class TestTaskKeywords:
    def test_every_task_has_keywords(self):
        assert set(TASK_KEYWORDS) == set(TaskType)

    def test_lookup_by_name(self):
        assert "summary" in get_task_keywords("report")
        assert "why" in get_task_keywords(TaskType.QUIZ)

    def test_unknown_task_has_no_keywords(self):
        assert get_task_keywords("haiku") == ()

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            TASK_KEYWORDS[TaskType.QUIZ] = ("nothing",)


@pytest.mark.unit
class TestRelevanceScores:
    def test_keyword_density_caps_at_one(self):
        score = keyword_relevance(QUIZ_HEAVY, get_task_keywords("quiz"))
        # density saturates, length is 40 of the 2000-char ideal
        assert score == pytest.approx(0.7 + 0.3 * 40 / 2000)

    def test_no_keywords_scores_length_only(self):
        score = keyword_relevance(NEUTRAL, get_task_keywords("quiz"))
        assert score == pytest.approx(0.3 * 40 / 2000)

    def test_empty_chunk_scores_zero(self):
        assert keyword_relevance("", ("why",)) == 0.0
        assert general_relevance("") == 0.0

    def test_general_relevance_rewards_sentences(self):
        with_sentences = "Short sentence here. " * 20
        without = "x" * len(with_sentences)
        assert general_relevance(with_sentences) > general_relevance(without)

    @pytest.mark.parametrize("task", ["quiz", "report", "mindmap", "haiku"])
    def test_scores_within_unit_interval(self, task, document):
        retriever = TaskRetriever()
        for paragraph in document.split("\n\n")[:20]:
            assert 0.0 <= retriever.score(paragraph, task) <= 1.0


@pytest.mark.unit
class TestTaskRetriever:
    def test_returns_everything_when_k_covers_input(self):
        chunks = ["a", "b", "c"]
        assert TaskRetriever().retrieve(chunks, "quiz", 5) == chunks

    def test_empty_input(self):
        assert TaskRetriever().retrieve([], "quiz", 5) == []

    def test_top_k_in_document_order(self):
        chunks = [NEUTRAL, QUIZ_HEAVY, NEUTRAL, QUIZ_HEAVY + "how ", NEUTRAL]
        selected = TaskRetriever().retrieve(chunks, "quiz", 2)
        assert selected == [chunks[1], chunks[3]]

    def test_ties_prefer_earlier_chunks(self):
        chunks = ["same text"] * 4
        retriever = TaskRetriever()
        scored = retriever.score_chunks(chunks, "quiz")
        assert len({s.score for s in scored}) == 1
        selected_positions = retriever._rank(chunks, "quiz", 2).value
        assert selected_positions == [0, 1]

    def test_result_is_subsequence_of_exact_size(self, document):
        chunks = [f"Part {i}. {p}" for i, p in enumerate(document.split("\n\n"))]
        selected = TaskRetriever().retrieve(chunks, "report", 8)
        assert len(selected) == 8
        positions = [chunks.index(c) for c in selected]
        assert positions == sorted(positions)

    def test_failing_chunk_scores_zero(self, monkeypatch):
        retriever = TaskRetriever()
        original = retriever.score

        def flaky(chunk, task_type):
            if chunk == "explode":
                raise RuntimeError("bad chunk")
            return original(chunk, task_type)

        monkeypatch.setattr(retriever, "score", flaky)
        scored = retriever.score_chunks(["explode", QUIZ_HEAVY], "quiz")
        assert scored[0].score == 0.0
        assert scored[1].score > 0.0

    def test_total_failure_returns_first_k(self, monkeypatch):
        import retrieval.task_retriever as module

        def broken(*args, **kwargs):
            raise RuntimeError("ranking exploded")

        monkeypatch.setattr(module.np, "lexsort", broken)
        chunks = [NEUTRAL, QUIZ_HEAVY, NEUTRAL, QUIZ_HEAVY]
        assert TaskRetriever().retrieve(chunks, "quiz", 2) == chunks[:2]

    def test_unknown_task_uses_generic_score(self):
        prose = "A complete sentence. " * 70
        chunks = ["tiny", prose, "x" * 50]
        assert TaskRetriever().retrieve(chunks, "haiku", 1) == [prose]

    def test_combine_all_when_k_covers_input(self):
        chunks = ["first", "second", "third"]
        retriever = TaskRetriever()
        assert retriever.combine(retriever.retrieve(chunks, "report", 3)) == "first\n\nsecond\n\nthird"

    def test_combine_empty(self):
        assert combine_chunks([]) == ""

    def test_module_helper(self):
        assert retrieve_relevant_chunks(["one", "two"], "quiz", 1) == ["one"]
