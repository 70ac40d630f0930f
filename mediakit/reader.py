"""Pull-based readers and the errors they raise."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable


class Reader(ABC):
    """A source of data that is pulled one item at a time.

    ``read`` returns the next item. A failure to produce one is raised as an
    exception, and no item is returned.
    """

    @abstractmethod
    def read(self) -> Any:
        """Return the next item from the source."""


@dataclass(frozen=True)
class ReaderFunc(Reader):
    """A reader backed by a plain callable taking no arguments."""

    func: Callable[[], Any]

    def read(self) -> Any:
        return self.func()


class InsufficientBufferError(Exception):
    """The buffer given is too small to hold the whole sample."""

    def __init__(self, required_size: int) -> None:
        self.required_size = required_size
        super().__init__(
            "provided buffer doesn't meet the size requirement of length, "
            f"{required_size}"
        )