"""
Configuration module for the content pipeline.
Manages environment variables and tunable constants with sane defaults.

The relevance and bounding constants are empirically chosen; keep them
configurable rather than re-deriving them.
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict


@dataclass
class ChunkingConfig:
    """Chunking strategy configuration."""
    max_tokens: int = 1000
    overlap_tokens: int = 100
    chars_per_token: int = 4
    tokens_per_word: float = 1.3
    min_paragraph_boundaries: int = 10
    min_line_boundaries: int = 20
    word_snap_ratio: float = 0.8


@dataclass
class RetrievalConfig:
    """Lexical relevance scoring configuration."""
    default_max_chunks: int = 5
    keyword_weight: float = 0.7
    length_weight: float = 0.3
    density_amplification: float = 10.0
    ideal_length_chars: int = 2000
    # Generic scoring for task types without a keyword table
    generic_ideal_length_chars: int = 1500
    generic_length_weight: float = 0.6
    generic_sentence_weight: float = 0.4
    generic_sentence_saturation: int = 10


@dataclass
class ContextConfig:
    """Bounding thresholds for the context assembler."""
    rag_threshold_tokens: int = 2000
    max_output_tokens: int = 3000
    sentence_window: float = 0.8
    word_window: float = 0.9
    emergency_chars: int = 12000
    truncation_note: str = (
        "[Note: Content has been truncated due to length. "
        "This is a partial view of the full material.]"
    )
    max_chunks_by_task: Dict[str, int] = field(
        default_factory=lambda: {
            "report": 8,  # comprehensive coverage
            "mindmap": 6,  # broad overview
            "podcast": 6,
            "video": 6,
            "flashcard": 5,  # focused Q&A
            "quiz": 5,
        }
    )
    default_max_chunks: int = 5


@dataclass
class GenerationConfig:
    """Retry and request-shape configuration for generation calls."""
    max_retries: int = field(default_factory=lambda: int(os.getenv("RVS_MAX_RETRIES", "3")))
    initial_delay: float = field(default_factory=lambda: float(os.getenv("RVS_INITIAL_DELAY", "1.0")))
    max_delay: float = 60.0
    flashcard_count: int = 15
    quiz_count: int = 10
    default_difficulty: str = "medium"
    quiz_option_count: int = 4


@dataclass
class LLMConfig:
    """LLM configuration for generation."""
    model: str = field(default_factory=lambda: os.getenv("RVS_LLM_MODEL", "gpt-4o-mini"))
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout: int = 60


@dataclass
class Settings:
    """Main application settings loaded from environment."""

    # OpenAI settings
    OPENAI_API_KEY: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))

    # Application settings
    DEBUG: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    NOTIFICATIONS_ENABLED: bool = field(
        default_factory=lambda: os.getenv("RVS_NOTIFICATIONS", "true").lower() == "true"
    )

    # Nested configs
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = None) -> None:
    """Apply LOG_LEVEL for entry points; library modules never call this."""
    level_name = (level or get_settings().LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = get_settings()
