"""A pull-based broadcaster that shares one source between many readers."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from mediakit.reader import Reader

_COUNT_MASK = 0xFFFFFFFF
DEFAULT_BUFFER_SIZE = 32
# Sources faster than about 30 fps see some jitter; enough for general use.
DEFAULT_POLL_DURATION = 0.033


@dataclass
class BroadcasterConfig:
    """Tuning for a broadcaster.

    ``buffer_size`` is the number of recent items kept for late readers.
    ``poll_duration`` is the longest wait, in seconds, between checks for
    new data. A value of zero selects the default.
    """

    buffer_size: int = DEFAULT_BUFFER_SIZE
    poll_duration: float = DEFAULT_POLL_DURATION


@dataclass(frozen=True)
class _Entry:
    data: Any
    error: Optional[BaseException]
    count: int


class _Ring:
    """Fixed-size ring of recent entries; one reader at a time pulls the source."""

    def __init__(self, size: int, poll_duration: float) -> None:
        self._slots: list[Optional[_Entry]] = [None] * size
        self._poll_duration = poll_duration
        self._next = 0
        self._reading = False
        self._cond = threading.Condition()

    def _index(self, count: int) -> int:
        return count % len(self._slots)

    def acquire(self, count: int) -> Optional[Callable[[_Entry], None]]:
        """Claim the right to read entry ``count`` from the source."""
        with self._cond:
            if self._reading or self._next != count:
                return None
            self._reading = True

        def push(entry: _Entry) -> None:
            with self._cond:
                self._slots[self._index(count)] = entry
                self._next = (count + 1) & _COUNT_MASK
                self._reading = False
                self._cond.notify_all()

        return push

    def get(self, count: int) -> _Entry:
        """Return entry ``count``, or the oldest newer entry still kept."""
        while True:
            with self._cond:
                while self._reading and self._next == count:
                    self._cond.wait(self._poll_duration)
                entry = self._slots[self._index(count)]
            if entry is not None and entry.count == count:
                return entry
            count = (count + 1) & _COUNT_MASK

    def last_count(self) -> int:
        with self._cond:
            return (self._next - 1) & _COUNT_MASK


class _BroadcastReader(Reader):
    def __init__(
        self, broadcaster: Broadcaster, copy_fn: Callable[[Any], Any]
    ) -> None:
        self._broadcaster = broadcaster
        self._copy_fn = copy_fn
        self._count = broadcaster._ring.last_count()

    def read(self) -> Any:
        ring = self._broadcaster._ring
        self._count = (self._count + 1) & _COUNT_MASK
        push = ring.acquire(self._count)
        if push is not None:
            data: Any = None
            error: Optional[BaseException] = None
            try:
                data = self._broadcaster.source().read()
            except Exception as exc:
                error = exc
            except BaseException as exc:
                push(_Entry(None, exc, self._count))
                raise
            push(_Entry(data, error, self._count))
        else:
            entry = ring.get(self._count)
            data, error, self._count = entry.data, entry.error, entry.count

        if error is not None:
            raise error
        if data is not None:
            data = self._copy_fn(data)
        return data


def _identity(value: Any) -> Any:
    return value


class Broadcaster:
    """Shares one source among readers that may come and go at any time.

    The source is expected to drop items when a reader is slower than it.
    Readers that fall far behind miss items that have left the ring.
    """

    def __init__(
        self, source: Reader, config: Optional[BroadcasterConfig] = None
    ) -> None:
        buffer_size = DEFAULT_BUFFER_SIZE
        poll_duration = DEFAULT_POLL_DURATION
        if config is not None:
            if config.buffer_size:
                buffer_size = config.buffer_size
            if config.poll_duration:
                poll_duration = config.poll_duration
        self._ring = _Ring(buffer_size, poll_duration)
        self._source: Reader
        self.replace_source(source)

    def new_reader(
        self, copy_fn: Optional[Callable[[Any], Any]] = None
    ) -> Reader:
        """Create a reader that sees the same items as every other reader.

        ``copy_fn`` turns each shared item into the reader's own copy; without
        it the shared item is returned as is.
        """
        return _BroadcastReader(self, copy_fn or _identity)

    def replace_source(self, source: Reader) -> None:
        """Swap the underlying source; safe to call while readers run."""
        if source is None:
            raise ValueError("source can't be None")
        self._source = source

    def source(self) -> Reader:
        """Return the underlying source."""
        return self._source