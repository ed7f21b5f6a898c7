"""Explicit success/failure results returned by catalog fetches.

Callers branch on :attr:`ok` (or ``isinstance``) instead of catching
exceptions, and :meth:`unwrap_or` gives the "empty result set" fallback used
by the views.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from moviq.schemas.error import ErrorType, FetchError

T = TypeVar("T")
D = TypeVar("D")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap_or(self, default: D) -> T | D:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: FetchError

    @property
    def ok(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    @property
    def error_type(self) -> ErrorType:
        return self.error.error_type

    def unwrap_or(self, default: D) -> D:
        return default


FetchResult = Success[T] | Failure

__all__ = ["Failure", "FetchResult", "Success"]
