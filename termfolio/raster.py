"""RGBA rasters, the GIF compositing canvas and the bilinear resampler."""

import math
from dataclasses import dataclass
from typing import Optional

# A terminal cell is about twice as tall as it is wide. A half-block cell holds
# two vertical pixels, a glyph cell only one.
HALF_BLOCK_COMPENSATION = 1.0
GLYPH_COMPENSATION = 0.5


def round_half_up(value: float) -> int:
    """Round a non-negative float, ties away from zero."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Raster:
    """Row-major RGBA8 pixels."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(
                f"raster {self.width}x{self.height} needs {expected} bytes, got {len(self.pixels)}"
            )

    def pixel(self, x: int, y: int):
        """Return (r, g, b, a) at (x, y)."""
        i = (y * self.width + x) * 4
        return tuple(self.pixels[i:i + 4])


class Canvas:
    """Persistent surface that GIF frames are composited onto.

    Frames are sparse updates: a frame pixel replaces the canvas pixel only
    when its alpha is non-zero.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._buf = bytearray(width * height * 4)

    def composite(self, frame_pixels: bytes) -> None:
        if len(frame_pixels) != len(self._buf):
            raise ValueError("frame size does not match canvas size")
        buf = self._buf
        for i in range(0, len(buf), 4):
            alpha = frame_pixels[i + 3]
            if alpha:
                buf[i:i + 4] = frame_pixels[i:i + 4]

    def snapshot(self) -> Raster:
        return Raster(self.width, self.height, bytes(self._buf))


def target_height(src_width: int, src_height: int, width: int, colored: bool,
                  height: Optional[int] = None) -> int:
    """Rows to resize to for a given column count.

    An explicit height always wins. Otherwise the source aspect ratio is kept,
    halved for glyph rendering.
    """
    if height:
        return height
    compensation = HALF_BLOCK_COMPENSATION if colored else GLYPH_COMPENSATION
    return max(1, round_half_up(width * (src_height / src_width) * compensation))


def resize(src: Raster, width: int, height: int) -> Raster:
    """Bilinearly resize a raster, each of R, G, B, A interpolated separately."""
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid target size {width}x{height}")
    if src.width == 0 or src.height == 0:
        return Raster(width, height, bytes(width * height * 4))

    data = src.pixels
    sw, sh = src.width, src.height
    x_ratio = sw / width
    y_ratio = sh / height
    dst = bytearray(width * height * 4)

    for y in range(height):
        src_y = y * y_ratio
        y1 = int(src_y)
        y2 = min(y1 + 1, sh - 1)
        y_frac = src_y - y1
        row1 = y1 * sw
        row2 = y2 * sw
        for x in range(width):
            src_x = x * x_ratio
            x1 = int(src_x)
            x2 = min(x1 + 1, sw - 1)
            x_frac = src_x - x1

            tl = (row1 + x1) * 4
            tr = (row1 + x2) * 4
            bl = (row2 + x1) * 4
            br = (row2 + x2) * 4
            out = (y * width + x) * 4
            for c in range(4):
                top = data[tl + c] + (data[tr + c] - data[tl + c]) * x_frac
                bottom = data[bl + c] + (data[br + c] - data[bl + c]) * x_frac
                dst[out + c] = round_half_up(top + (bottom - top) * y_frac)

    return Raster(width, height, bytes(dst))
