"""A reusable store for copies of video frames."""

from __future__ import annotations

import dataclasses
from typing import Any, Optional

from mediakit.video.convert import image_to_rgba
from mediakit.video.images import (
    CMYK,
    RGBA,
    RGBA64,
    NRGBA,
    NRGBA64,
    Alpha,
    Alpha16,
    Gray,
    Gray16,
    NYCbCrA,
    YCbCr,
)

_PACKED = (Alpha, Alpha16, CMYK, Gray, Gray16, NRGBA, NRGBA64, RGBA, RGBA64)


class FrameBuffer:
    """Holds a private copy of the last stored frame, reusing memory if it can."""

    def __init__(self, initial_size: int = 0) -> None:
        self._planes: list[bytearray] = [bytearray(initial_size)]
        self._image: Optional[Any] = None

    def _store(self, *sources: bytes) -> list[bytearray]:
        for i, src in enumerate(sources):
            if i < len(self._planes):
                plane = self._planes[i]
                if len(plane) == len(src):
                    plane[:] = src
                else:
                    self._planes[i] = bytearray(src)
            else:
                self._planes.append(bytearray(src))
        return self._planes[: len(sources)]

    def load(self) -> Optional[Any]:
        """Return the stored copy, or None before anything was stored."""
        return self._image

    def store_copy(self, src: Any) -> None:
        """Store a copy of ``src``; unknown image types are stored as RGBA."""
        if isinstance(src, NYCbCrA):
            y, cb, cr, a = self._store(src.y, src.cb, src.cr, src.a)
            self._image = dataclasses.replace(src, y=y, cb=cb, cr=cr, a=a)
        elif isinstance(src, YCbCr):
            y, cb, cr = self._store(src.y, src.cb, src.cr)
            self._image = dataclasses.replace(src, y=y, cb=cb, cr=cr)
        elif isinstance(src, _PACKED):
            (pix,) = self._store(src.pix)
            self._image = dataclasses.replace(src, pix=pix)
        else:
            self.store_copy(image_to_rgba(src))