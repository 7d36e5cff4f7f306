"""
Base source abstraction for Todo Digest.

Defines the interface for external data providers (weather, image) and
the FetchResult type they return instead of raising.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Outcome of a single provider call.

    Exactly one of value/error is set: value on success, error (a short
    human-readable reason) on failure.

    Attributes:
        value: The fetched domain value, or None on failure.
        error: Failure reason, or None on success.
        duration_ms: Wall time spent on the call.
    """
    value: Optional[T] = None
    error: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.value is not None

    @classmethod
    def ok(cls, value: T, duration_ms: float = 0.0) -> "FetchResult[T]":
        return cls(value=value, duration_ms=duration_ms)

    @classmethod
    def failed(cls, error: str, duration_ms: float = 0.0) -> "FetchResult[T]":
        return cls(error=error, duration_ms=duration_ms)


class Source(ABC, Generic[T]):
    """
    Abstract base class for external providers.

    Attributes:
        name: Unique identifier for this source (e.g., "open-meteo", "unsplash").
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the unique name identifier for this source.

        Used as the log prefix, e.g. ``[open-meteo] ...``.
        """
        pass

    @abstractmethod
    def fetch(self) -> FetchResult[T]:
        """
        Call the provider once and map its response to a domain value.

        Implementations must:
        - Make exactly one request, bounded by the configured timeout
        - Never raise: network, HTTP status and parse errors all become
          FetchResult.failed(...)

        Returns:
            FetchResult with the value or the failure reason.
        """
        pass

    def __str__(self) -> str:
        return f"Source({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
