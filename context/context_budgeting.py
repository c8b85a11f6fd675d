"""
Context token budget enforcement.

Treat prompt context as a resource with a budget: once selected, context
is cut down to a hard token ceiling, preferring sentence and word
boundaries near the end of the allowed length over a hard cut.
"""

import logging

from chunking.token_estimator import estimate_tokens
from shared.config import ContextConfig, settings

logger = logging.getLogger(__name__)

# Shrink passes for text denser than 4 chars/token
_MAX_SHRINK_PASSES = 5


def _cut_at_boundary(text: str, max_chars: int, sentence_window: float, word_window: float) -> str:
    """Cut text to max_chars at the best preceding sentence or word boundary."""
    truncated = text[:max_chars]

    last_sentence = max(truncated.rfind("."), truncated.rfind("?"), truncated.rfind("!"))
    if last_sentence != -1 and last_sentence > max_chars * sentence_window:
        truncated = truncated[:last_sentence + 1]
    else:
        last_space = truncated.rfind(" ")
        if last_space != -1 and last_space > max_chars * word_window:
            truncated = truncated[:last_space]

    return truncated.strip()


def truncate_to_tokens(text: str, max_tokens: int, config: ContextConfig = None) -> str:
    """
    Truncate text so its estimated size fits max_tokens.

    Strategy:
    - sentence end within the last 20% of the allowed length
    - else word boundary within the last 10%
    - else hard cut

    Args:
        text: Text to truncate
        max_tokens: Token ceiling
        config: Boundary windows

    Returns:
        Text unchanged when it fits, otherwise a trimmed prefix
    """
    config = config or settings.context
    if estimate_tokens(text) <= max_tokens:
        return text

    max_chars = max(1, int(max_tokens * settings.chunking.chars_per_token))
    truncated = _cut_at_boundary(text, max_chars, config.sentence_window, config.word_window)

    passes = 0
    while truncated and estimate_tokens(truncated) > max_tokens and passes < _MAX_SHRINK_PASSES:
        estimated = estimate_tokens(truncated)
        max_chars = max(1, int(len(truncated) * max_tokens / estimated * 0.95))
        truncated = _cut_at_boundary(text, max_chars, config.sentence_window, config.word_window)
        passes += 1

    if estimate_tokens(truncated) > max_tokens:
        logger.debug("Boundary-aware truncation did not converge, hard cutting")
        truncated = text[:max_chars]

    return truncated


def fallback_truncate(text: str, config: ContextConfig = None) -> str:
    """
    Truncate the original text to the output ceiling with a visible note.

    Used when bounding fails at any stage. If truncation itself fails, an
    emergency fixed-length prefix is returned.
    """
    config = config or settings.context
    try:
        note_tokens = estimate_tokens(config.truncation_note)
        budget = max(1, config.max_output_tokens - note_tokens)
        truncated = truncate_to_tokens(text, budget, config)

        if len(truncated) < len(text):
            logger.warning(f"Content truncated from {len(text)} to {len(truncated)} characters")
            return f"{config.truncation_note}\n\n{truncated}"

        return truncated

    except Exception as e:
        logger.error(f"Fallback truncation failed: {e}")
        logger.warning(f"Using emergency truncation to {config.emergency_chars} characters")
        return text[:config.emergency_chars]
