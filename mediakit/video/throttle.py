"""Frame-rate throttling of video readers."""

from __future__ import annotations

from time import monotonic

from mediakit.reader import Reader, ReaderFunc
from mediakit.video.transform import TransformFunc


def throttle(rate: float) -> TransformFunc:
    """Drop incoming frames so that at most ``rate`` frames per second pass.

    Ticks start when the transform is applied; a frame passes once a tick has
    come due since the last frame passed, and missed ticks are not made up.
    """

    def apply(reader: Reader) -> Reader:
        if rate <= 0:
            raise ValueError("rate must be positive")
        period = 1.0 / rate
        next_tick = monotonic() + period

        def read():
            nonlocal next_tick
            while True:
                img = reader.read()
                now = monotonic()
                if now >= next_tick:
                    next_tick += (int((now - next_tick) // period) + 1) * period
                    return img

        return ReaderFunc(read)

    return apply