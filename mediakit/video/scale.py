"""Resizing of video frames."""

from __future__ import annotations

from typing import Optional

from mediakit.reader import Reader, ReaderFunc
from mediakit.video.images import (
    RGBA,
    Rectangle,
    SubsampleRatio,
    YCbCr,
    new_ycbcr,
)
from mediakit.video.transform import TransformFunc


class NearestNeighborScaler:
    """Nearest-neighbour resampling; each output pixel copies one input pixel."""

    def resample(
        self,
        pix: bytes,
        channels: int,
        src_width: int,
        src_height: int,
        src_stride: int,
        dst_width: int,
        dst_height: int,
    ) -> bytearray:
        """Resample a packed plane; the result is tightly packed."""
        columns = [
            (2 * x + 1) * src_width // (2 * dst_width) * channels
            for x in range(dst_width)
        ]
        out = bytearray()
        view = memoryview(pix)
        for y in range(dst_height):
            row = (2 * y + 1) * src_height // (2 * dst_height) * src_stride
            for col in columns:
                out += view[row + col : row + col + channels]
        return out


def _chroma_rect(rect: Rectangle, ratio: SubsampleRatio) -> Rectangle:
    if ratio is SubsampleRatio.RATIO_422:
        return Rectangle(rect.min_x, rect.min_y, rect.max_x // 2, rect.max_y)
    if ratio is SubsampleRatio.RATIO_420:
        return Rectangle(rect.min_x, rect.min_y, rect.max_x // 2, rect.max_y // 2)
    return rect


def _scale_rgba(scaler: NearestNeighborScaler, src: RGBA, rect: Rectangle) -> RGBA:
    pix = scaler.resample(
        src.pix, 4, src.rect.dx(), src.rect.dy(), src.stride, rect.dx(), rect.dy()
    )
    return RGBA(pix, 4 * rect.dx(), rect)


def _scale_ycbcr(
    scaler: NearestNeighborScaler, src: YCbCr, rect: Rectangle
) -> YCbCr:
    ratio = src.subsample_ratio
    sw, sh = src.rect.dx(), src.rect.dy()
    dw, dh = rect.dx(), rect.dy()
    layout = new_ycbcr(rect, ratio)

    src_c = _chroma_rect(src.rect, ratio)
    valid_w = max(0, min(src_c.max_x - src.rect.min_x, sw))
    valid_h = max(0, min(src_c.max_y - src.rect.min_y, sh))
    dst_c = _chroma_rect(rect, ratio)
    cdw, cdh = dst_c.dx(), dst_c.dy()
    c_stride = layout.c_stride
    plane_size = max(len(layout.cb), cdw * cdh)

    def chroma(plane: bytes) -> bytearray:
        # Chroma is sampled on the luma grid; outside its own extent it reads
        # as zero and is not written.
        padded = bytearray(sw * sh)
        for y in range(valid_h):
            start = y * src.c_stride
            row = bytes(plane[start : start + valid_w]).ljust(valid_w, b"\0")
            padded[y * sw : y * sw + valid_w] = row
        scaled = scaler.resample(padded, 1, sw, sh, sw, dw, dh)
        out = bytearray(plane_size)
        for y in range(cdh):
            out[y * c_stride : y * c_stride + cdw] = scaled[y * dw : y * dw + cdw]
        return out

    luma = scaler.resample(src.y, 1, sw, sh, src.y_stride, dw, dh)
    return YCbCr(
        luma,
        chroma(src.cb),
        chroma(src.cr),
        layout.y_stride,
        c_stride,
        ratio,
        rect,
    )


def scale(
    width: int, height: int, scaler: Optional[NearestNeighborScaler] = None
) -> TransformFunc:
    """Resize frames to ``width`` x ``height``.

    A non-positive width or height keeps the aspect ratio of each incoming
    frame. RGBA and Y'CbCr frames are supported; other types raise TypeError.
    """
    resampler = scaler if scaler is not None else NearestNeighborScaler()

    def apply(reader: Reader) -> Reader:
        if width <= 0 and height <= 0:
            raise ValueError("width and height can't both be non-positive")

        def target(src: Rectangle) -> Rectangle:
            if width > 0 and height > 0:
                return Rectangle(0, 0, width, height)
            if height <= 0:
                return Rectangle(0, 0, width, src.dy() * width // src.dx())
            return Rectangle(0, 0, src.dx() * height // src.dy(), height)

        def read():
            img = reader.read()
            if type(img) is RGBA:
                return _scale_rgba(resampler, img, target(img.rect))
            if type(img) is YCbCr:
                return _scale_ycbcr(resampler, img, target(img.rect))
            raise TypeError("scaling: unsupported image type")

        return ReaderFunc(read)

    return apply