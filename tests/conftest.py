"""
Pytest configuration and shared fixtures.
Ensures the project root is importable and provides fake generators,
a recording sleep and sample documents. No network, no real sleeps.
"""
import json
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


_VOCABULARY = [
    "learning", "students", "explore", "concept", "structure", "analysis",
    "evidence", "history", "example", "process", "principle", "research",
    "chapter", "knowledge", "question", "describe", "important", "method",
    "context", "summary",
]


def make_document(words: int = 10000, words_per_sentence: int = 10, sentences_per_paragraph: int = 8) -> str:
    """Deterministic prose of exactly `words` words, in sentences and paragraphs."""
    paragraphs = []
    sentence = []
    paragraph = []
    for i in range(words):
        sentence.append(_VOCABULARY[(i * 7 + i // 13) % len(_VOCABULARY)])
        if len(sentence) == words_per_sentence or i == words - 1:
            text = " ".join(sentence)
            paragraph.append(text[0].upper() + text[1:] + ".")
            sentence = []
            if len(paragraph) == sentences_per_paragraph:
                paragraphs.append(" ".join(paragraph))
                paragraph = []
    if paragraph:
        paragraphs.append(" ".join(paragraph))
    return "\n\n".join(paragraphs)


class ScriptedGenerator:
    """Returns scripted responses in order; Exception entries are raised."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def generate(self, prompt, temperature=None, max_tokens=None):
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        response = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        return response


class RoutingGenerator:
    """Answers by recognizing the task from its prompt; failing tasks always raise."""

    MARKERS = {
        "mindmap": "mind map",
        "podcast": "podcast script",
        "video": "video script",
        "report": "educational report",
        "flashcard": "flashcards",
        "quiz": "multiple-choice quiz",
    }

    def __init__(self, responses, failing=()):
        self.responses = responses
        self.failing = set(failing)
        self.tasks_called = []

    def generate(self, prompt, temperature=None, max_tokens=None):
        task = next(t for t, marker in self.MARKERS.items() if marker in prompt)
        self.tasks_called.append(task)
        if task in self.failing:
            raise ConnectionError(f"{task} provider unavailable")
        return self.responses[task]


class RecordingSleep:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


class RecordingNotifier:
    def __init__(self):
        self.generation_failures = []
        self.bounding_failures = []

    def notify_generation_failure(self, task_type, error, unit_id=None):
        self.generation_failures.append((task_type, error, unit_id))

    def notify_bounding_failure(self, task_type, error, unit_id=None):
        self.bounding_failures.append((task_type, error, unit_id))


VALID_RESPONSES = {
    "mindmap": json.dumps(
        {
            "central": "Photosynthesis",
            "branches": [
                {"topic": "Light reactions", "subtopics": ["Chlorophyll", "ATP"]},
                {"topic": "Calvin cycle", "subtopics": ["Carbon fixation"]},
            ],
        }
    ),
    "podcast": "HOST: Welcome to today's episode about photosynthesis.",
    "video": "[VISUAL: A leaf in sunlight] Narration: Plants capture light.",
    "report": "# Executive Summary\nPhotosynthesis converts light into chemical energy.",
    "flashcard": json.dumps(
        [
            {"question": "What is chlorophyll?", "answer": "A green pigment", "difficulty": "easy"},
            {"question": "Where does the Calvin cycle occur?", "answer": "Stroma", "difficulty": "medium"},
        ]
    ),
    "quiz": json.dumps(
        [
            {
                "question": "What does chlorophyll absorb?",
                "options": ["Light", "Water", "Soil", "Oxygen"],
                "correct_index": 0,
                "explanation": "Chlorophyll absorbs light energy.",
                "difficulty": "easy",
            }
        ]
    ),
}


@pytest.fixture
def document():
    return make_document(10000)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def valid_responses():
    return dict(VALID_RESPONSES)


@pytest.fixture
def document_factory():
    return make_document


@pytest.fixture
def scripted_generator():
    return ScriptedGenerator


@pytest.fixture
def routing_generator():
    return RoutingGenerator
