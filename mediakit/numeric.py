"""Constraints on integer, float and duration media properties."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from mediakit.constraints import MATCH, MISMATCH, Constraint, Fitness

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_SECOND = 1_000_000_000
_NS_PER_MINUTE = 60 * _NS_PER_SECOND
_ZERO = timedelta(0)


def _nanoseconds(value: timedelta) -> int:
    return (
        (value.days * 86_400 + value.seconds) * _NS_PER_SECOND
        + value.microseconds * _NS_PER_US
    )


def _fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{str(rest).rjust(width, '0').rstrip('0')}"


def format_duration(value: timedelta) -> str:
    """Render a duration compactly, e.g. ``20ms``, ``1.5s`` or ``1h2m3s``."""
    ns = _nanoseconds(value)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < _NS_PER_US:
        return f"{sign}{ns}ns"
    if ns < _NS_PER_MS:
        return f"{sign}{_fraction(ns, _NS_PER_US)}µs"
    if ns < _NS_PER_SECOND:
        return f"{sign}{_fraction(ns, _NS_PER_MS)}ms"

    minutes, rest = divmod(ns, _NS_PER_MINUTE)
    text = f"{_fraction(rest, _NS_PER_SECOND)}s"
    if minutes:
        hours, minutes = divmod(minutes, 60)
        text = f"{minutes}m{text}"
        if hours:
            text = f"{hours}h{text}"
    return sign + text


def _relative_distance(actual: Any, ideal: Any) -> float:
    scale = max(abs(actual), abs(ideal))
    if not scale:
        return math.nan
    return abs(actual - ideal) / scale


def _ranged_fitness(minimum: Any, maximum: Any, ideal: Any, actual: Any) -> Fitness:
    """Rate ``actual`` against a range; zero bounds mean unspecified."""
    if minimum and minimum > actual:
        return MISMATCH
    if maximum and maximum < actual:
        return MISMATCH
    if not ideal or actual == ideal:
        return MATCH
    if actual < ideal:
        if not minimum:
            return MATCH
        return Fitness((ideal - actual) / (ideal - minimum), True)
    if not maximum:
        return MATCH
    return Fitness((actual - ideal) / (maximum - ideal), True)


def _exact_fitness(expected: Any, actual: Any) -> Fitness:
    return MATCH if expected == actual else MISMATCH


def _one_of_fitness(values: tuple, actual: Any) -> Fitness:
    return MATCH if actual in values else MISMATCH


# Integers


@dataclass(frozen=True)
class Int(Constraint):
    """Prefers the given integer; any value is allowed, the closest ranks first."""

    value: int

    def compare(self, actual: int) -> Fitness:
        return Fitness(_relative_distance(actual, self.value), True)

    def preferred(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value} (ideal)"


@dataclass(frozen=True)
class IntExact(Constraint):
    """Accepts only the given integer."""

    value: int

    def compare(self, actual: int) -> Fitness:
        return _exact_fitness(self.value, actual)

    def preferred(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value} (exact)"


@dataclass(frozen=True)
class IntOneOf(Constraint):
    """Accepts any of the listed integers."""

    values: tuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def compare(self, actual: int) -> Fitness:
        return _one_of_fitness(self.values, actual)

    def preferred(self) -> Optional[int]:
        return None

    def __str__(self) -> str:
        return f"{','.join(str(v) for v in self.values)} (one of values)"


@dataclass(frozen=True)
class IntRanged(Constraint):
    """Accepts integers in a range; a non-zero ideal ranks the closest first."""

    minimum: int = 0
    maximum: int = 0
    ideal: int = 0

    def compare(self, actual: int) -> Fitness:
        return _ranged_fitness(self.minimum, self.maximum, self.ideal, actual)

    def preferred(self) -> Optional[int]:
        return None

    def __str__(self) -> str:
        return f"{self.minimum} - {self.maximum} (range), {self.ideal} (ideal)"


# Floats


@dataclass(frozen=True)
class Float(Constraint):
    """Prefers the given float; any value is allowed, the closest ranks first."""

    value: float

    def compare(self, actual: float) -> Fitness:
        return Fitness(_relative_distance(actual, self.value), True)

    def preferred(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:.2f} (ideal)"


@dataclass(frozen=True)
class FloatExact(Constraint):
    """Accepts only the given float."""

    value: float

    def compare(self, actual: float) -> Fitness:
        return _exact_fitness(self.value, actual)

    def preferred(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:.2f} (exact)"


@dataclass(frozen=True)
class FloatOneOf(Constraint):
    """Accepts any of the listed floats."""

    values: tuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def compare(self, actual: float) -> Fitness:
        return _one_of_fitness(self.values, actual)

    def preferred(self) -> Optional[float]:
        return None

    def __str__(self) -> str:
        return f"{','.join(f'{v:.2f}' for v in self.values)} (one of values)"


@dataclass(frozen=True)
class FloatRanged(Constraint):
    """Accepts floats in a range; a non-zero ideal ranks the closest first."""

    minimum: float = 0.0
    maximum: float = 0.0
    ideal: float = 0.0

    def compare(self, actual: float) -> Fitness:
        return _ranged_fitness(self.minimum, self.maximum, self.ideal, actual)

    def preferred(self) -> Optional[float]:
        return None

    def __str__(self) -> str:
        return (
            f"{self.minimum:.2f} - {self.maximum:.2f} (range), "
            f"{self.ideal:.2f} (ideal)"
        )


# Durations


@dataclass(frozen=True)
class Duration(Constraint):
    """Prefers the given duration; any value is allowed, the closest ranks first."""

    value: timedelta

    def compare(self, actual: timedelta) -> Fitness:
        return Fitness(_relative_distance(actual, self.value), True)

    def preferred(self) -> timedelta:
        return self.value

    def __str__(self) -> str:
        return f"{format_duration(self.value)} (ideal)"


@dataclass(frozen=True)
class DurationExact(Constraint):
    """Accepts only the given duration."""

    value: timedelta

    def compare(self, actual: timedelta) -> Fitness:
        return _exact_fitness(self.value, actual)

    def preferred(self) -> timedelta:
        return self.value

    def __str__(self) -> str:
        return f"{format_duration(self.value)} (exact)"


@dataclass(frozen=True)
class DurationOneOf(Constraint):
    """Accepts any of the listed durations."""

    values: tuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def compare(self, actual: timedelta) -> Fitness:
        return _one_of_fitness(self.values, actual)

    def preferred(self) -> Optional[timedelta]:
        return None

    def __str__(self) -> str:
        return (
            f"{','.join(format_duration(v) for v in self.values)} (one of values)"
        )


@dataclass(frozen=True)
class DurationRanged(Constraint):
    """Accepts durations in a range; a non-zero ideal ranks the closest first."""

    minimum: timedelta = _ZERO
    maximum: timedelta = _ZERO
    ideal: timedelta = _ZERO

    def compare(self, actual: timedelta) -> Fitness:
        return _ranged_fitness(self.minimum, self.maximum, self.ideal, actual)

    def preferred(self) -> Optional[timedelta]:
        return None

    def __str__(self) -> str:
        return (
            f"{format_duration(self.minimum)} - {format_duration(self.maximum)} "
            f"(range), {format_duration(self.ideal)} (ideal)"
        )