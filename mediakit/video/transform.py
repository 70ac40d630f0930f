"""Composition of video reader transforms."""

from __future__ import annotations

from typing import Callable, Optional

from mediakit.reader import Reader

TransformFunc = Callable[[Reader], Reader]


def merge(*transforms: Optional[TransformFunc]) -> TransformFunc:
    """Chain transforms so they apply in order; None entries are skipped."""

    def apply(reader: Reader) -> Reader:
        for transform in transforms:
            if transform is not None:
                reader = transform(reader)
        return reader

    return apply