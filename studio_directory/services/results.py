"""Typed results returned by claim operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from studio_directory.api.middleware.error_handler import APIError

T = TypeVar("T")


@dataclass
class ClaimResult(Generic[T]):
    """Outcome of a claim operation.

    Claim operations never raise across their public boundary. A failed
    result carries the APIError describing why; callers either render
    ``message`` directly or re-raise ``error`` for the HTTP error handler.
    """

    value: T | None = None
    error: APIError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    @classmethod
    def success(cls, value: T) -> "ClaimResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: APIError) -> "ClaimResult[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
