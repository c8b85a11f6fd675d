"""
Context Assembly Module.

Treat prompt context as a resource with a budget.

This module handles:
- Deciding whether source text needs bounding
- Chunk -> retrieve -> combine for large inputs
- Output ceiling enforcement with boundary-aware truncation
- Fallback and emergency truncation when anything fails

Usage:
    from context import ContextAssembler

    context = ContextAssembler().bound(text, "report")
"""

from .context_assembler import ContextAssembler, bound_context
from .context_budgeting import fallback_truncate, truncate_to_tokens

__all__ = [
    "ContextAssembler",
    "bound_context",
    "truncate_to_tokens",
    "fallback_truncate",
]
