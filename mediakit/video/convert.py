"""Pixel format conversion for video frames."""

from __future__ import annotations

import dataclasses
from typing import Any

from mediakit.reader import Reader, ReaderFunc
from mediakit.video.images import (
    RGBA,
    Rectangle,
    SubsampleRatio,
    YCbCr,
    rgb_to_ycbcr,
    ycbcr_to_rgb,
)


def _pixels(rect: Rectangle):
    for y in range(rect.min_y, rect.max_y):
        for x in range(rect.min_x, rect.max_x):
            yield x, y


def image_to_ycbcr(src: Any) -> YCbCr:
    """Return ``src`` as Y'CbCr; non-Y'CbCr images become 4:4:4 (lossy)."""
    if isinstance(src, YCbCr):
        return dataclasses.replace(src)
    rect = src.rect
    ys, cbs, crs = bytearray(), bytearray(), bytearray()
    if isinstance(src, RGBA):
        for x, y in _pixels(rect):
            i = src._offset(x, y)
            yy, cb, cr = rgb_to_ycbcr(*src.pix[i : i + 3])
            ys.append(yy)
            cbs.append(cb)
            crs.append(cr)
    else:
        for x, y in _pixels(rect):
            r, g, b, _ = src.rgba_at(x, y)
            yy, cb, cr = rgb_to_ycbcr(r >> 8, g >> 8, b >> 8)
            ys.append(yy)
            cbs.append(cb)
            crs.append(cr)
    return YCbCr(ys, cbs, crs, rect.dx(), rect.dx(), SubsampleRatio.RATIO_444, rect)


def _i444_to_i420(img: YCbCr) -> YCbCr:
    s = img.c_stride

    def down(plane: bytearray) -> bytearray:
        out = bytearray()
        for row in range(0, img.rect.dy() // 2 * 2, 2):
            top, bottom = row * s, (row + 1) * s
            for col in range(0, s // 2 * 2, 2):
                total = (
                    plane[top + col] + plane[top + col + 1]
                    + plane[bottom + col] + plane[bottom + col + 1]
                )
                out.append(total // 4)
        return out

    return dataclasses.replace(
        img, cb=down(img.cb), cr=down(img.cr), c_stride=s // 2,
        subsample_ratio=SubsampleRatio.RATIO_420,
    )


def _i422_to_i420(img: YCbCr) -> YCbCr:
    s = img.c_stride

    def down(plane: bytearray) -> bytearray:
        out = bytearray()
        for row in range(0, img.rect.dy() // 2 * 2, 2):
            top, bottom = row * s, (row + 1) * s
            out.extend((plane[top + c] + plane[bottom + c]) // 2 for c in range(s))
        return out

    return dataclasses.replace(
        img, cb=down(img.cb), cr=down(img.cr),
        subsample_ratio=SubsampleRatio.RATIO_420,
    )


def image_to_rgba(src: Any) -> RGBA:
    """Return ``src`` as an RGBA image."""
    if isinstance(src, RGBA):
        return dataclasses.replace(src)
    rect = src.rect
    pix = bytearray()
    if isinstance(src, YCbCr) and src.subsample_ratio is SubsampleRatio.RATIO_444:
        for x, y in _pixels(rect):
            i = src._y_offset(x, y)
            ci = src._c_offset(x, y)
            pix.extend(ycbcr_to_rgb(src.y[i], src.cb[ci], src.cr[ci]))
            pix.append(0xFF)
    else:
        for x, y in _pixels(rect):
            pix.extend(v >> 8 for v in src.rgba_at(x, y))
    return RGBA(pix, 4 * rect.dx(), rect)


def to_i420(reader: Reader) -> Reader:
    """Wrap ``reader`` so that it yields I420 (4:2:0 Y'CbCr) frames."""

    def read() -> YCbCr:
        img = image_to_ycbcr(reader.read())
        ratio = img.subsample_ratio
        if ratio is SubsampleRatio.RATIO_420:
            return img
        if ratio is SubsampleRatio.RATIO_444:
            return _i444_to_i420(img)
        if ratio is SubsampleRatio.RATIO_422:
            return _i422_to_i420(img)
        raise ValueError(f"unsupported pixel format: {ratio.name}")

    return ReaderFunc(read)


def to_rgba(reader: Reader) -> Reader:
    """Wrap ``reader`` so that it yields RGBA frames."""
    return ReaderFunc(lambda: image_to_rgba(reader.read()))