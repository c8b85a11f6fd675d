"""
Chunking Module.

Splits arbitrarily large source text into token-bounded segments:
- Token estimation from word/character counts
- Boundary-priority semantic chunking (paragraph, line, sentence)
- Fixed-size sliding window fallback

Usage:
    from chunking import SemanticChunker, estimate_tokens

    chunker = SemanticChunker(max_tokens=1000, overlap_tokens=100)
    chunks = chunker.chunk(text)
"""

from .semantic_chunker import (
    Chunk,
    SemanticChunker,
    chunk_text,
    find_semantic_boundaries,
    fixed_size_chunks,
)
from .token_estimator import count_tokens, count_words, estimate_tokens

__all__ = [
    "SemanticChunker",
    "Chunk",
    "chunk_text",
    "find_semantic_boundaries",
    "fixed_size_chunks",
    "estimate_tokens",
    "count_words",
    "count_tokens",
]
