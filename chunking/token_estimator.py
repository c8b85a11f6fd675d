"""
Cheap token estimation for bounding decisions.

Word count x 1.3 tracks subword tokenizers closely for prose. Scripts that
are not whitespace/Latin delimited produce no words, so those fall back to
characters / 4. The estimate never raises.

count_tokens() gives an exact cl100k_base count for diagnostics only; the
pipeline decisions use estimate_tokens().
"""

import logging
import re
from functools import lru_cache

import tiktoken

from shared.config import settings

logger = logging.getLogger(__name__)

# Latin-script words, allowing inner apostrophes and hyphens ("don't", "well-known")
_WORD_RE = re.compile(r"[A-Za-zÀ-ɏ]+(?:['’-][A-Za-zÀ-ɏ]+)*")


def count_words(text: str) -> int:
    """Count Latin-script words in text."""
    if not text:
        return 0
    return len(_WORD_RE.findall(text))


def estimate_tokens(
    text: str,
    tokens_per_word: float = None,
    chars_per_token: int = None,
) -> int:
    """
    Estimate the token count of a text span.

    Args:
        text: Text to estimate
        tokens_per_word: Tokens per word ratio (default from settings)
        chars_per_token: Characters per token for the fallback path

    Returns:
        0 for empty text, otherwise an estimate >= 1
    """
    if not text:
        return 0

    tokens_per_word = tokens_per_word or settings.chunking.tokens_per_word
    chars_per_token = chars_per_token or settings.chunking.chars_per_token

    words = count_words(text)
    if words == 0:
        estimate = int(len(text) / chars_per_token)
    else:
        estimate = int(words * tokens_per_word)

    return max(1, estimate)


@lru_cache(maxsize=1)
def _encoding():
    return tiktoken.get_encoding("cl100k_base")


def count_tokens(text: str) -> int:
    """Count tokens using cl100k_base encoding."""
    if not text:
        return 0
    return len(_encoding().encode(text))
