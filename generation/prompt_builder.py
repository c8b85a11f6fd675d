"""
Prompt construction per task type.

Each task has a fixed template; the bounded context is appended under a
"Content:" heading. Unknown task types get the context unmodified.
"""

import logging
from typing import Any, Dict, Optional

from shared.config import settings
from shared.schemas import GenerationRequest, TaskType

logger = logging.getLogger(__name__)


MINDMAP_PROMPT = """Generate a comprehensive mind map structure in JSON format based on the following content. The mind map should have a central topic and multiple branches with sub-topics.
Format: {{"central": "main topic", "branches": [{{"topic": "branch1", "subtopics": ["sub1", "sub2"]}}, ...]}}
Return ONLY the JSON object.

Content:
{content}"""


PODCAST_PROMPT = """Create an engaging podcast script based on the following educational content. The script should be conversational, informative, and suitable for audio narration. Include an introduction, main points discussion, and conclusion. Format it with speaker labels (HOST:) where appropriate.

Content:
{content}"""


VIDEO_PROMPT = """Create a detailed video script for an educational explainer video based on the following content. Include visual descriptions in [VISUAL: ...] tags and narration. Make it engaging and educational.

Content:
{content}"""


REPORT_PROMPT = """Generate a comprehensive educational report based on the following content. Include: Executive Summary, Key Topics, Detailed Analysis, and Conclusions. Use proper headings and formatting.

Content:
{content}"""


FLASHCARD_PROMPT = """Generate {count} educational flashcards based on the following content. Each flashcard should have a question and answer.
Format as JSON: [{{"question": "...", "answer": "...", "difficulty": "easy|medium|hard"}}, ...]
Return ONLY the JSON array.

Content:
{content}"""


QUIZ_PROMPT = """Generate {count} multiple-choice quiz questions based on the following content. Each question should have exactly 4 options with one correct answer.
Format as JSON: [{{"question": "...", "options": ["opt1", "opt2", "opt3", "opt4"], "correct_index": 0-3, "explanation": "...", "difficulty": "easy|medium|hard"}}, ...]
Return ONLY the JSON array.

Content:
{content}"""


TEMPLATES = {
    TaskType.MINDMAP: MINDMAP_PROMPT,
    TaskType.PODCAST: PODCAST_PROMPT,
    TaskType.VIDEO: VIDEO_PROMPT,
    TaskType.REPORT: REPORT_PROMPT,
    TaskType.FLASHCARD: FLASHCARD_PROMPT,
    TaskType.QUIZ: QUIZ_PROMPT,
}


def requested_count(task_type, options: Optional[Dict[str, Any]] = None) -> Optional[int]:
    """Number of items a collection task asks for; None for other tasks."""
    options = options or {}
    task = TaskType.parse(task_type)
    if task == TaskType.FLASHCARD:
        return int(options.get("count") or settings.generation.flashcard_count)
    if task == TaskType.QUIZ:
        return int(options.get("count") or settings.generation.quiz_count)
    return None


def build_prompt(task_type, context: str, options: Optional[Dict[str, Any]] = None) -> str:
    """
    Build the generation prompt for a task.

    Args:
        task_type: Task type name or TaskType
        context: Bounded context
        options: Task options ("count" for flashcard/quiz)

    Returns:
        Complete prompt string
    """
    task = TaskType.parse(task_type)
    template = TEMPLATES.get(task) if task else None
    if template is None:
        logger.debug(f"No template for task type {task_type}, passing context through")
        return context

    count = requested_count(task, options)
    return template.format(content=context, count=count)


def build_request(task_type, context: str, options: Optional[Dict[str, Any]] = None) -> GenerationRequest:
    """Bundle task, bounded context and options for one generation call."""
    task = TaskType.parse(task_type)
    return GenerationRequest(
        task=task.value if task else str(task_type),
        bounded_context=context,
        options=dict(options or {}),
    )
