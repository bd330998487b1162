"""Render an RGBA raster as ASCII glyphs or as half-block ANSI color text."""

import math

from termfolio.raster import Raster, round_half_up
from termfolio.terminal import DEFAULT_BG, DEFAULT_FG, RESET

# Glyph ramps, sparse to dense.
ASCII_RAMP = " .:-=+*#%@"
DETAILED_RAMP = " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"

# Pixels below this alpha are treated as transparent.
ALPHA_THRESHOLD = 128

UPPER_HALF_BLOCK = "▀"

_PATTERN_RAMP = "█▓▒░ "


# ---------------------------------------------------------------------------
# Color codec
# ---------------------------------------------------------------------------

def luminance(r: int, g: int, b: int) -> float:
    # 0.299R + 0.587G + 0.114B
    return (299 * r + 587 * g + 114 * b) / 1000


def glyph_for(r: int, g: int, b: int, ramp: str = ASCII_RAMP) -> str:
    """Map a color to a ramp character by its luminance."""
    index = math.floor((luminance(r, g, b) / 255) * (len(ramp) - 1))
    return ramp[index]


def rgb_to_256(r: int, g: int, b: int) -> int:
    """Quantize an RGB color to an ANSI 256-color index.

    Grays use the 24-step ramp at 232-255, everything else the 6x6x6 cube.
    """
    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round_half_up(((r - 8) / 247) * 24) + 232
    ri = round_half_up(r / 51)
    gi = round_half_up(g / 51)
    bi = round_half_up(b / 51)
    return 16 + 36 * ri + 6 * gi + bi


def true_color(r: int, g: int, b: int, layer: str = "fg") -> str:
    """24-bit SGR escape for the foreground or background."""
    code = 38 if layer == "fg" else 48
    return f"\033[{code};2;{r};{g};{b}m"


def color_256(r: int, g: int, b: int, layer: str = "fg") -> str:
    """256-color SGR escape for the foreground or background."""
    code = 38 if layer == "fg" else 48
    return f"\033[{code};5;{rgb_to_256(r, g, b)}m"


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_glyphs(raster: Raster, ramp: str = ASCII_RAMP) -> str:
    """One character per pixel, one text row per raster row."""
    data = raster.pixels
    lines = []
    for y in range(raster.height):
        row = []
        for x in range(raster.width):
            i = (y * raster.width + x) * 4
            if data[i + 3] < ALPHA_THRESHOLD:
                row.append(" ")
            else:
                row.append(glyph_for(data[i], data[i + 1], data[i + 2], ramp))
        lines.append("".join(row) + "\n")
    return "".join(lines)


def render_half_blocks(raster: Raster, use_true_color: bool = True) -> str:
    """Render two vertical pixels per cell with the upper half block.

    The upper pixel is the foreground color and the lower pixel the
    background. A transparent side falls back to the terminal default color;
    a cell with both sides transparent is a plain space.
    """
    escape = true_color if use_true_color else color_256
    data = raster.pixels
    width, height = raster.width, raster.height
    lines = []
    for y in range(0, height, 2):
        parts = []
        has_bottom = y + 1 < height
        for x in range(width):
            i1 = (y * width + x) * 4
            r1, g1, b1, a1 = data[i1], data[i1 + 1], data[i1 + 2], data[i1 + 3]
            if has_bottom:
                i2 = ((y + 1) * width + x) * 4
                r2, g2, b2, a2 = data[i2], data[i2 + 1], data[i2 + 2], data[i2 + 3]
            else:
                r2 = g2 = b2 = a2 = 0

            if a1 < ALPHA_THRESHOLD and a2 < ALPHA_THRESHOLD:
                parts.append(f"{RESET} ")
                continue

            fg = escape(r1, g1, b1, "fg") if a1 >= ALPHA_THRESHOLD else DEFAULT_FG
            bg = escape(r2, g2, b2, "bg") if a2 >= ALPHA_THRESHOLD else DEFAULT_BG
            parts.append(f"{fg}{bg}{UPPER_HALF_BLOCK}")
        lines.append("".join(parts) + RESET + "\n")
    return "".join(lines)


# ---------------------------------------------------------------------------
# Fallback patterns
# ---------------------------------------------------------------------------

def ring_pattern(width: int = 40, height: int = 20) -> str:
    """Concentric rings of shade glyphs, dense at the center."""
    max_dist = math.sqrt((width / 2) ** 2 + (height / 2) ** 2)
    last = len(_PATTERN_RAMP) - 1
    lines = []
    for y in range(height):
        row = []
        for x in range(width):
            dist = math.sqrt((x - width / 2) ** 2 + (y - height / 2) ** 2)
            index = math.floor((dist / max_dist) * last) if max_dist else 0
            row.append(_PATTERN_RAMP[min(index, last)])
        lines.append("".join(row) + "\n")
    return "".join(lines)


def gradient_pattern(width: int = 40, height: int = 20, use_true_color: bool = False) -> str:
    """Red/green gradient rendered as half blocks, `height` text rows tall."""
    real_h = height * 2
    buf = bytearray(width * real_h * 4)
    for y in range(real_h):
        for x in range(width):
            i = (y * width + x) * 4
            buf[i] = math.floor((x / width) * 255)
            buf[i + 1] = math.floor((y / real_h) * 255)
            buf[i + 2] = 128
            buf[i + 3] = 255
    return render_half_blocks(Raster(width, real_h, bytes(buf)), use_true_color)
