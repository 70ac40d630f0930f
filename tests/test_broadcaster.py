import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from mediakit.broadcaster import Broadcaster, BroadcasterConfig
from mediakit.reader import ReaderFunc


class CountingSource:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        value = self.calls
        self.calls += 1
        return value


def test_single_reader_reads_in_order():
    source = CountingSource()
    broadcaster = Broadcaster(ReaderFunc(source))
    reader = broadcaster.new_reader()
    assert [reader.read() for _ in range(5)] == [0, 1, 2, 3, 4]
    assert source.calls == 5


def test_readers_share_the_same_item():
    source = CountingSource()
    broadcaster = Broadcaster(ReaderFunc(source))
    first = broadcaster.new_reader()
    second = broadcaster.new_reader()
    assert first.read() == 0
    assert second.read() == 0
    assert source.calls == 1
    assert second.read() == 1
    assert first.read() == 1
    assert source.calls == 2


def test_late_reader_gets_oldest_item_still_in_ring():
    source = CountingSource()
    size = 4
    broadcaster = Broadcaster(ReaderFunc(source), BroadcasterConfig(buffer_size=size))
    fast = broadcaster.new_reader()
    slow = broadcaster.new_reader()
    for _ in range(10):
        fast.read()
    got = [slow.read() for _ in range(5)]
    assert got == [10 - size, 7, 8, 9, 10]
    assert source.calls == 11


def test_default_ring_size_keeps_32_items():
    source = CountingSource()
    broadcaster = Broadcaster(ReaderFunc(source))
    fast = broadcaster.new_reader()
    slow = broadcaster.new_reader()
    for _ in range(40):
        fast.read()
    assert slow.read() == 40 - 32


def test_zero_config_values_mean_defaults():
    source = CountingSource()
    broadcaster = Broadcaster(
        ReaderFunc(source), BroadcasterConfig(buffer_size=0, poll_duration=0)
    )
    fast = broadcaster.new_reader()
    slow = broadcaster.new_reader()
    for _ in range(40):
        fast.read()
    assert slow.read() == 8


def test_copy_fn_applied_per_reader():
    broadcaster = Broadcaster(ReaderFunc(lambda: [1, 2]))
    copying = broadcaster.new_reader(lambda data: list(data))
    sharing = broadcaster.new_reader()
    copied = copying.read()
    shared = sharing.read()
    assert copied == shared == [1, 2]
    assert copied is not shared


def test_source_error_reaches_every_reader():
    error = RuntimeError("expected error")

    def failing():
        raise error

    copies = []
    broadcaster = Broadcaster(ReaderFunc(failing))
    first = broadcaster.new_reader(lambda d: copies.append(d) or d)
    second = broadcaster.new_reader()
    with pytest.raises(RuntimeError) as info1:
        first.read()
    with pytest.raises(RuntimeError) as info2:
        second.read()
    assert info1.value is error
    assert info2.value is error
    assert copies == []


def test_reader_recovers_after_error():
    outcomes = iter([ValueError("bad"), "good"])

    def flaky():
        item = next(outcomes)
        if isinstance(item, Exception):
            raise item
        return item

    reader = Broadcaster(ReaderFunc(flaky)).new_reader()
    with pytest.raises(ValueError):
        reader.read()
    assert reader.read() == "good"


def test_replace_source():
    first = ReaderFunc(lambda: "a")
    second = ReaderFunc(lambda: "b")
    broadcaster = Broadcaster(first)
    reader = broadcaster.new_reader()
    assert broadcaster.source() is first
    assert reader.read() == "a"
    broadcaster.replace_source(second)
    assert broadcaster.source() is second
    assert reader.read() == "b"


def test_replace_source_rejects_none():
    broadcaster = Broadcaster(ReaderFunc(lambda: 1))
    with pytest.raises(ValueError):
        broadcaster.replace_source(None)
    assert broadcaster.source().read() == 1


def test_constructor_rejects_none():
    with pytest.raises(ValueError):
        Broadcaster(None)


@pytest.mark.parametrize("n_readers", [1, 16])
def test_concurrent_readers_see_increasing_frames(n_readers):
    source = CountingSource()
    lock = threading.Lock()

    def produce():
        time.sleep(0.002)
        with lock:
            return source()

    broadcaster = Broadcaster(
        ReaderFunc(produce), BroadcasterConfig(poll_duration=0.001)
    )
    readers = [broadcaster.new_reader() for _ in range(n_readers)]
    barrier = threading.Barrier(n_readers)

    def run(reader):
        barrier.wait()
        return [reader.read() for _ in range(30)]

    with ThreadPoolExecutor(max_workers=n_readers) as pool:
        results = list(pool.map(run, readers, timeout=30))

    for frames in results:
        assert len(frames) == 30
        assert all(a < b for a, b in zip(frames, frames[1:]))
        assert frames[-1] < source.calls
    assert source.calls <= 30 * n_readers

    produced = source.calls
    assert broadcaster.new_reader().read() == produced
    assert source.calls == produced + 1