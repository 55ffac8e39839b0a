"""Result type for a single pipeline step."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from product_finder.exceptions import ProductFinderError

T = TypeVar("T")


@dataclass(frozen=True)
class StepOutcome(Generic[T]):
    """Either the step's value or the error that stopped it."""

    value: T | None = None
    error: ProductFinderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "StepOutcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ProductFinderError) -> "StepOutcome[T]":
        return cls(error=error)
