"""Constraints on boolean, string and frame-format media properties."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional


class Fitness(NamedTuple):
    """How far a value is from a constraint, and whether it is acceptable."""

    distance: float
    satisfied: bool


MATCH = Fitness(0.0, True)
MISMATCH = Fitness(1.0, False)


class Constraint(ABC):
    """A constraint on one media property."""

    @abstractmethod
    def compare(self, actual: Any) -> Fitness:
        """Rate ``actual`` against this constraint."""

    @abstractmethod
    def preferred(self) -> Any:
        """Return the single value this constraint asks for, or None."""


@dataclass(frozen=True)
class BoolExact(Constraint):
    """Accepts only the given boolean."""

    value: bool

    def compare(self, actual: bool) -> Fitness:
        return MATCH if self.value == actual else MISMATCH

    def preferred(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return f"{str(bool(self.value)).lower()} (exact)"


@dataclass(frozen=True)
class Bool(Constraint):
    """Prefers the given boolean but accepts either."""

    value: bool

    def compare(self, actual: bool) -> Fitness:
        return Fitness(BoolExact(self.value).compare(actual).distance, True)

    def preferred(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return f"{str(bool(self.value)).lower()} (ideal)"


@dataclass(frozen=True)
class String(Constraint):
    """Prefers the given string but accepts any."""

    value: str

    def compare(self, actual: str) -> Fitness:
        return MATCH if self.value == actual else Fitness(1.0, True)

    def preferred(self) -> str:
        return self.value

    def __str__(self) -> str:
        return f"{self.value} (ideal)"


@dataclass(frozen=True)
class StringExact(Constraint):
    """Accepts only the given string."""

    value: str

    def compare(self, actual: str) -> Fitness:
        return MATCH if self.value == actual else MISMATCH

    def preferred(self) -> str:
        return self.value

    def __str__(self) -> str:
        return f"{self.value} (exact)"


@dataclass(frozen=True)
class StringOneOf(Constraint):
    """Accepts any of the listed strings."""

    values: tuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def compare(self, actual: str) -> Fitness:
        return MATCH if actual in self.values else MISMATCH

    def preferred(self) -> Optional[str]:
        return None

    def __str__(self) -> str:
        return f"{','.join(self.values)} (one of values)"


@dataclass(frozen=True)
class FrameFormat(Constraint):
    """Prefers the given frame format but accepts any."""

    value: str

    def compare(self, actual: str) -> Fitness:
        return MATCH if self.value == actual else Fitness(1.0, True)

    def preferred(self) -> str:
        return self.value

    def __str__(self) -> str:
        return f"{self.value} (ideal)"


@dataclass(frozen=True)
class FrameFormatExact(Constraint):
    """Accepts only the given frame format."""

    value: str

    def compare(self, actual: str) -> Fitness:
        return MATCH if self.value == actual else MISMATCH

    def preferred(self) -> str:
        return self.value

    def __str__(self) -> str:
        return f"{self.value} (exact)"


@dataclass(frozen=True)
class FrameFormatOneOf(Constraint):
    """Accepts any of the listed frame formats."""

    values: tuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def compare(self, actual: str) -> Fitness:
        return MATCH if actual in self.values else MISMATCH

    def preferred(self) -> Optional[str]:
        return None

    def __str__(self) -> str:
        return f"{','.join(str(v) for v in self.values)} (one of values)"