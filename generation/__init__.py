"""
Generation Module.

Orchestrates generation calls for each output task type:
- Per-task prompt templates
- Bounded retries with exponential backoff (1s, 2s, 4s ...)
- Validation and normalization of heterogeneous responses
- Per-unit runs with per-task failure isolation

Usage:
    from generation import ContentGenerationPipeline, GenerationOrchestrator, OpenAIGenerator

    orchestrator = GenerationOrchestrator(OpenAIGenerator())
    report = ContentGenerationPipeline(orchestrator).run(42, text, ["report", "quiz"])
"""

from .llm_client import OpenAIGenerator, TextGenerator
from .orchestrator import GenerationOrchestrator, RetryState
from .pipeline import (
    ContentGenerationPipeline,
    InMemoryResultSink,
    ResultSink,
    RunReport,
    combine_sources,
)
from .prompt_builder import TEMPLATES, build_prompt, build_request, requested_count

__all__ = [
    "TextGenerator",
    "OpenAIGenerator",
    "GenerationOrchestrator",
    "RetryState",
    "ContentGenerationPipeline",
    "ResultSink",
    "InMemoryResultSink",
    "RunReport",
    "combine_sources",
    "build_prompt",
    "build_request",
    "requested_count",
    "TEMPLATES",
]
