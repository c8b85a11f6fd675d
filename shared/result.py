"""
Explicit success/failure values for fallback tiers.

Expected degradation paths (no boundaries found, empty chunk list, a
retrieval that selected nothing) return a Result instead of raising, so
each caller decides which simpler strategy to try next.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or an error, never both."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: Exception) -> "Result[T]":
        return cls(error=error)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.is_ok else default
