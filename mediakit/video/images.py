"""In-memory image types and the colour arithmetic they share."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar


def _clamp8(value: int) -> int:
    if 0 <= value < 1 << 24:
        return value >> 16
    return 0 if value < 0 else 0xFF


def _clamp16(value: int) -> int:
    if 0 <= value < 1 << 24:
        return value >> 8
    return 0 if value < 0 else 0xFFFF


def rgb_to_ycbcr(r: int, g: int, b: int) -> tuple[int, int, int]:
    """Convert 8-bit RGB to 8-bit Y'CbCr (JFIF full range)."""
    y = (19595 * r + 38470 * g + 7471 * b + (1 << 15)) >> 16
    cb = -11056 * r - 21712 * g + 32768 * b + (257 << 15)
    cr = 32768 * r - 27440 * g - 5328 * b + (257 << 15)
    return y & 0xFF, _clamp8(cb), _clamp8(cr)


def ycbcr_to_rgb(y: int, cb: int, cr: int) -> tuple[int, int, int]:
    """Convert 8-bit Y'CbCr (JFIF full range) to 8-bit RGB."""
    yy = y * 0x10101
    cb -= 128
    cr -= 128
    r = yy + 91881 * cr
    g = yy - 22554 * cb - 46802 * cr
    b = yy + 116130 * cb
    return _clamp8(r), _clamp8(g), _clamp8(b)


def _ycbcr_rgba16(y: int, cb: int, cr: int) -> tuple[int, int, int, int]:
    yy = y * 0x10101
    cb -= 128
    cr -= 128
    r = yy + 91881 * cr
    g = yy - 22554 * cb - 46802 * cr
    b = yy + 116130 * cb
    return _clamp16(r), _clamp16(g), _clamp16(b), 0xFFFF


@dataclass(frozen=True)
class Rectangle:
    """A half-open rectangle from (min_x, min_y) to (max_x, max_y)."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def dx(self) -> int:
        return self.max_x - self.min_x

    def dy(self) -> int:
        return self.max_y - self.min_y


class SubsampleRatio(enum.Enum):
    """Chroma subsampling of a Y'CbCr image."""

    RATIO_444 = "444"
    RATIO_422 = "422"
    RATIO_420 = "420"
    RATIO_440 = "440"
    RATIO_411 = "411"
    RATIO_410 = "410"


@dataclass
class _Packed:
    """An image with all channels of a pixel stored together."""

    pix: bytearray
    stride: int
    rect: Rectangle

    bytes_per_pixel: ClassVar[int] = 1

    def _offset(self, x: int, y: int) -> int:
        return (y - self.rect.min_y) * self.stride + (
            x - self.rect.min_x
        ) * self.bytes_per_pixel

    def _word(self, i: int) -> int:
        return (self.pix[i] << 8) | self.pix[i + 1]


@dataclass
class Gray(_Packed):
    """8-bit grayscale."""

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        v = self.pix[self._offset(x, y)] * 0x101
        return v, v, v, 0xFFFF


@dataclass
class Gray16(_Packed):
    """16-bit big-endian grayscale."""

    bytes_per_pixel: ClassVar[int] = 2

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        v = self._word(self._offset(x, y))
        return v, v, v, 0xFFFF


@dataclass
class Alpha(_Packed):
    """8-bit alpha mask."""

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        a = self.pix[self._offset(x, y)] * 0x101
        return a, a, a, a


@dataclass
class Alpha16(_Packed):
    """16-bit big-endian alpha mask."""

    bytes_per_pixel: ClassVar[int] = 2

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        a = self._word(self._offset(x, y))
        return a, a, a, a


@dataclass
class CMYK(_Packed):
    """8-bit CMYK."""

    bytes_per_pixel: ClassVar[int] = 4

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        i = self._offset(x, y)
        c, m, yy, k = self.pix[i : i + 4]
        w = 0xFFFF - k * 0x101
        r = (0xFFFF - c * 0x101) * w // 0xFFFF
        g = (0xFFFF - m * 0x101) * w // 0xFFFF
        b = (0xFFFF - yy * 0x101) * w // 0xFFFF
        return r, g, b, 0xFFFF


@dataclass
class NRGBA(_Packed):
    """8-bit non-premultiplied RGBA."""

    bytes_per_pixel: ClassVar[int] = 4

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        i = self._offset(x, y)
        r, g, b, a = (v * 0x101 for v in self.pix[i : i + 4])
        return r * a // 0xFFFF, g * a // 0xFFFF, b * a // 0xFFFF, a


@dataclass
class NRGBA64(_Packed):
    """16-bit big-endian non-premultiplied RGBA."""

    bytes_per_pixel: ClassVar[int] = 8

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        i = self._offset(x, y)
        r, g, b, a = (self._word(i + k) for k in range(0, 8, 2))
        return r * a // 0xFFFF, g * a // 0xFFFF, b * a // 0xFFFF, a


@dataclass
class RGBA(_Packed):
    """8-bit premultiplied RGBA."""

    bytes_per_pixel: ClassVar[int] = 4

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        i = self._offset(x, y)
        r, g, b, a = (v * 0x101 for v in self.pix[i : i + 4])
        return r, g, b, a


@dataclass
class RGBA64(_Packed):
    """16-bit big-endian premultiplied RGBA."""

    bytes_per_pixel: ClassVar[int] = 8

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        i = self._offset(x, y)
        r, g, b, a = (self._word(i + k) for k in range(0, 8, 2))
        return r, g, b, a


@dataclass
class YCbCr:
    """Planar Y'CbCr with subsampled chroma."""

    y: bytearray
    cb: bytearray
    cr: bytearray
    y_stride: int
    c_stride: int
    subsample_ratio: SubsampleRatio
    rect: Rectangle

    def _y_offset(self, x: int, y: int) -> int:
        return (y - self.rect.min_y) * self.y_stride + (x - self.rect.min_x)

    def _c_offset(self, x: int, y: int) -> int:
        r = self.rect
        ratio = self.subsample_ratio
        if ratio in (SubsampleRatio.RATIO_420, SubsampleRatio.RATIO_440, SubsampleRatio.RATIO_410):
            row = y // 2 - r.min_y // 2
        else:
            row = y - r.min_y
        if ratio in (SubsampleRatio.RATIO_422, SubsampleRatio.RATIO_420):
            col = x // 2 - r.min_x // 2
        elif ratio in (SubsampleRatio.RATIO_411, SubsampleRatio.RATIO_410):
            col = x // 4 - r.min_x // 4
        else:
            col = x - r.min_x
        return row * self.c_stride + col

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        ci = self._c_offset(x, y)
        return _ycbcr_rgba16(self.y[self._y_offset(x, y)], self.cb[ci], self.cr[ci])


@dataclass
class NYCbCrA(YCbCr):
    """Planar Y'CbCr with a non-premultiplied alpha plane."""

    a: bytearray = field(default_factory=bytearray)
    a_stride: int = 0

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, _ = super().rgba_at(x, y)
        ai = (y - self.rect.min_y) * self.a_stride + (x - self.rect.min_x)
        a = self.a[ai] * 0x101
        return r * a // 0xFFFF, g * a // 0xFFFF, b * a // 0xFFFF, a


def new_gray(rect: Rectangle) -> Gray:
    """Create a blank grayscale image."""
    return Gray(bytearray(rect.dx() * rect.dy()), rect.dx(), rect)


def new_rgba(rect: Rectangle) -> RGBA:
    """Create a blank RGBA image."""
    return RGBA(bytearray(4 * rect.dx() * rect.dy()), 4 * rect.dx(), rect)


def _chroma_size(rect: Rectangle, ratio: SubsampleRatio) -> tuple[int, int]:
    w, h = rect.dx(), rect.dy()
    half_w = (rect.max_x + 1) // 2 - rect.min_x // 2
    quarter_w = (rect.max_x + 3) // 4 - rect.min_x // 4
    half_h = (rect.max_y + 1) // 2 - rect.min_y // 2
    return {
        SubsampleRatio.RATIO_444: (w, h),
        SubsampleRatio.RATIO_422: (half_w, h),
        SubsampleRatio.RATIO_420: (half_w, half_h),
        SubsampleRatio.RATIO_440: (w, half_h),
        SubsampleRatio.RATIO_411: (quarter_w, h),
        SubsampleRatio.RATIO_410: (quarter_w, half_h),
    }[ratio]


def new_ycbcr(rect: Rectangle, ratio: SubsampleRatio) -> YCbCr:
    """Create a blank Y'CbCr image with the given subsampling."""
    cw, ch = _chroma_size(rect, ratio)
    return YCbCr(
        bytearray(rect.dx() * rect.dy()),
        bytearray(cw * ch),
        bytearray(cw * ch),
        rect.dx(),
        cw,
        ratio,
        rect,
    )


def new_nycbcra(rect: Rectangle, ratio: SubsampleRatio) -> NYCbCrA:
    """Create a blank Y'CbCr image with an alpha plane."""
    base = new_ycbcr(rect, ratio)
    return NYCbCrA(
        base.y,
        base.cb,
        base.cr,
        base.y_stride,
        base.c_stride,
        ratio,
        rect,
        bytearray(rect.dx() * rect.dy()),
        rect.dx(),
    )