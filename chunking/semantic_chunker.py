"""
Semantic chunking bounded by a token budget.

Boundaries are collected in priority order:
- Paragraph breaks (blank-line separated)
- Single line breaks, when fewer than 10 paragraph boundaries exist
- Sentence endings (. ! ? followed by whitespace), when still fewer than 20

Segments between boundaries are accumulated greedily up to the budget
(tokens converted to characters at 4 chars/token). Each new chunk is seeded
with the trailing overlap of the previous one. When no usable boundaries
exist, a fixed-size sliding window is used instead.

Chunking never blocks generation: any unexpected error returns the whole
text as a single chunk.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from shared.config import ChunkingConfig, settings
from shared.errors import ChunkingError
from shared.result import Result

from .token_estimator import estimate_tokens

logger = logging.getLogger(__name__)

_PARAGRAPH_RE = re.compile(r"\n\s*\n")
_LINE_RE = re.compile(r"\n")
_SENTENCE_RE = re.compile(r"[.!?]+\s+")


@dataclass(frozen=True)
class Chunk:
    """A contiguous piece of the source text and its position in the document."""

    text: str
    ordinal: int


def find_semantic_boundaries(
    text: str,
    min_paragraph_boundaries: int = 10,
    min_line_boundaries: int = 20,
) -> Result[List[int]]:
    """
    Find candidate split offsets in priority order.

    Args:
        text: Text to analyze
        min_paragraph_boundaries: Below this, line breaks are added
        min_line_boundaries: Below this, sentence endings are added

    Returns:
        Result with sorted, unique offsets including 0 and len(text),
        or a ChunkingError when no interior boundary exists
    """
    length = len(text)
    boundaries = [m.end() for m in _PARAGRAPH_RE.finditer(text)]

    if len(boundaries) < min_paragraph_boundaries:
        boundaries.extend(m.end() for m in _LINE_RE.finditer(text))

    if len(boundaries) < min_line_boundaries:
        boundaries.extend(m.end() for m in _SENTENCE_RE.finditer(text))

    interior = sorted({b for b in boundaries if 0 < b < length})
    if not interior:
        return Result.fail(ChunkingError("no semantic boundaries found"))

    return Result.ok([0] + interior + [length])


def fixed_size_chunks(text: str, max_chars: int, overlap_chars: int, snap_ratio: float = 0.8) -> List[str]:
    """
    Split text with a sliding character window.

    The window end snaps back to the last space when that space lies past
    snap_ratio of the window, so words are not cut in half.

    Args:
        text: Text to split
        max_chars: Window size in characters
        overlap_chars: Characters shared by consecutive windows
        snap_ratio: Minimum window fraction kept when snapping to a space

    Returns:
        List of non-empty, trimmed chunk strings
    """
    max_chars = max(1, max_chars)
    overlap_chars = max(0, overlap_chars)
    length = len(text)
    chunks = []
    position = 0

    while position < length:
        size = min(max_chars, length - position)
        piece = text[position:position + size]

        if position + size < length:
            last_space = piece.rfind(" ")
            if last_space > size * snap_ratio:
                piece = piece[:last_space]
                size = last_space

        if piece.strip():
            chunks.append(piece.strip())

        step = size - overlap_chars
        if step <= 0:
            # Overlap swallowed the window; move on without overlap
            step = max(1, size)
        position += step

    return chunks


def _greedy_chunks(
    text: str,
    boundaries: List[int],
    max_chars: int,
    overlap_chars: int,
    snap_ratio: float,
) -> Result[List[str]]:
    """Accumulate boundary-delimited segments into chunks of at most max_chars."""
    chunks: List[str] = []
    current = ""
    # current may hold only overlap already emitted in the previous chunk
    pending = False
    last = boundaries[0]

    for boundary in boundaries[1:]:
        segment = text[last:boundary]
        last = boundary
        if not segment:
            continue

        if len(segment) > max_chars:
            # A single segment larger than the budget is windowed on its own
            if pending and current.strip():
                chunks.append(current.strip())
            chunks.extend(fixed_size_chunks(segment, max_chars, overlap_chars, snap_ratio))
            current = segment[-overlap_chars:] if overlap_chars > 0 else ""
            pending = False
            continue

        if len(current) + len(segment) <= max_chars:
            current += segment
        elif pending and current.strip():
            chunks.append(current.strip())
            seed = current[-overlap_chars:] if 0 < overlap_chars < len(current) else ""
            if seed and len(seed) + len(segment) <= max_chars:
                current = seed + segment
            else:
                current = segment
        else:
            current = segment
        pending = True

    if pending and current.strip():
        chunks.append(current.strip())

    if not chunks:
        return Result.fail(ChunkingError("greedy pass produced no chunks"))
    return Result.ok(chunks)


class SemanticChunker:
    """
    Token-budgeted semantic chunker with fixed-size fallback.

    Usage:
        chunker = SemanticChunker(max_tokens=1000, overlap_tokens=100)
        chunks = chunker.chunk(document_text)
    """

    def __init__(
        self,
        max_tokens: int = None,
        overlap_tokens: int = None,
        config: ChunkingConfig = None,
    ):
        self.config = config or settings.chunking
        self.max_tokens = max_tokens or self.config.max_tokens
        self.overlap_tokens = (
            overlap_tokens if overlap_tokens is not None else self.config.overlap_tokens
        )

    def chunk(self, text: str) -> List[str]:
        """
        Split text into ordered chunks.

        Args:
            text: Document text

        Returns:
            List of chunk strings in document order; [text] when it fits
        """
        if not text:
            logger.debug("Chunker received empty content")
            return []

        try:
            total_tokens = estimate_tokens(text)
            if total_tokens <= self.max_tokens:
                logger.debug(f"Content fits in a single chunk ({total_tokens} tokens)")
                return [text]

            logger.debug(
                f"Chunking content: {total_tokens} tokens, max chunk size: {self.max_tokens} tokens"
            )
            chunks = self._split(text)
            logger.info(f"Content chunked into {len(chunks)} segments")
            return chunks

        except Exception as e:
            logger.error(f"Error during content chunking: {e}")
            logger.warning("Returning content as single chunk due to chunking error")
            return [text]

    def chunk_records(self, text: str) -> List[Chunk]:
        """Chunk text and attach each chunk's ordinal."""
        return [Chunk(text=t, ordinal=i) for i, t in enumerate(self.chunk(text))]

    def _split(self, text: str) -> List[str]:
        max_chars = int(self.max_tokens * self.config.chars_per_token)
        overlap_chars = int(self.overlap_tokens * self.config.chars_per_token)

        boundaries = find_semantic_boundaries(
            text,
            self.config.min_paragraph_boundaries,
            self.config.min_line_boundaries,
        )
        if not boundaries.is_ok:
            logger.warning(f"{boundaries.error}, using fallback chunking")
            return self._fallback(text, max_chars, overlap_chars)

        logger.debug(f"Found {len(boundaries.value)} semantic boundaries")

        greedy = _greedy_chunks(
            text, boundaries.value, max_chars, overlap_chars, self.config.word_snap_ratio
        )
        if not greedy.is_ok:
            logger.warning(f"Semantic chunking failed ({greedy.error}), using fallback")
            return self._fallback(text, max_chars, overlap_chars)

        return greedy.value

    def _fallback(self, text: str, max_chars: int, overlap_chars: int) -> List[str]:
        # Dense short-word text estimates above 1 token per 4 chars; shrink the
        # window (with 10% headroom) so each piece still fits the token budget.
        estimated = estimate_tokens(text)
        density_chars = int(0.9 * self.max_tokens * len(text) / estimated) if estimated else max_chars
        if 0 < density_chars < max_chars:
            overlap_chars = int(overlap_chars * density_chars / max_chars)
            max_chars = density_chars

        chunks = fixed_size_chunks(text, max_chars, overlap_chars, self.config.word_snap_ratio)
        return chunks or [text]


def chunk_text(
    text: str,
    max_tokens: int = None,
    overlap_tokens: Optional[int] = None,
) -> List[str]:
    """
    Chunk text with the default configuration.

    Example:
        >>> chunks = chunk_text(chapter, max_tokens=1000, overlap_tokens=100)
    """
    return SemanticChunker(max_tokens=max_tokens, overlap_tokens=overlap_tokens).chunk(text)
