"""Detection of changes in video frame properties."""

from __future__ import annotations

import copy
import math
from datetime import timedelta
from time import monotonic
from typing import Callable, Optional, Union

from mediakit.media import Media
from mediakit.reader import Reader, ReaderFunc
from mediakit.video.transform import TransformFunc


def detect_changes(
    interval: Union[timedelta, float],
    fps_diff_tolerance: float,
    on_change: Callable[[Media], None],
) -> TransformFunc:
    """Call ``on_change`` whenever frame size or frame rate changes.

    The frame rate is measured over windows of ``interval`` (a timedelta or
    seconds) and only counts as changed when it differs by more than
    ``fps_diff_tolerance``. The callback receives a copy of the properties.
    """
    window = (
        interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
    )

    def apply(reader: Reader) -> Reader:
        current = Media()
        last_taken: Optional[float] = None
        frames = 0

        def read():
            nonlocal last_taken, frames
            img = reader.read()
            video = current.video
            dirty = False

            width, height = img.rect.dx(), img.rect.dy()
            if video.width != width:
                video.width = width
                dirty = True
            if video.height != height:
                video.height = height
                dirty = True

            now = monotonic()
            elapsed = math.inf if last_taken is None else now - last_taken
            if elapsed >= window:
                fps = frames / elapsed
                frames = 0
                last_taken = now
                if abs(video.frame_rate - fps) > fps_diff_tolerance:
                    video.frame_rate = fps
                    dirty = True

            if dirty:
                on_change(copy.deepcopy(current))

            frames += 1
            return img

        return ReaderFunc(read)

    return apply