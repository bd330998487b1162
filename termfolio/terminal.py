"""ANSI escape codes, random glyphs and grapheme splitting."""

import random
import shutil

from wcwidth import wcwidth

RESET = "\033[0m"
CLEAR = "\033[2J\033[0;0H"  # clear screen, cursor to top-left
CLEAR_LINE = "\r\033[K"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"

BOLD = "\033[1m"
DIM = "\033[2m"

RED = "\033[31m"
GREEN = "\033[32m"
CYAN = "\033[36m"
BRIGHT_GREEN = "\033[92m"
BRIGHT_CYAN = "\033[96m"
BRIGHT_WHITE = "\033[97m"

# Terminal default colors, used for the transparent side of a half-block cell.
DEFAULT_FG = "\033[39m"
DEFAULT_BG = "\033[49m"

_GLYPHS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789@#$%&*"

_ZWJ = "\u200d"


def random_glyph() -> str:
    """Return one random scramble glyph."""
    return random.choice(_GLYPHS)


def _is_regional_indicator(ch):
    return "\U0001F1E6" <= ch <= "\U0001F1FF"


def _is_skin_tone(ch):
    return "\U0001F3FB" <= ch <= "\U0001F3FF"


def split_graphemes(text: str) -> list:
    """Split text into user-perceived characters.

    Zero-width code points (combining marks, variation selectors, ZWJ) and
    emoji skin-tone modifiers stay glued to the character before them, a ZWJ
    also pulls in the code point after it, and regional indicators pair up
    into flags.
    """
    clusters: list[str] = []
    join_next = False
    for ch in text:
        if clusters and clusters[-1] != "\n":
            last = clusters[-1]
            if join_next:
                clusters[-1] = last + ch
                join_next = ch == _ZWJ
                continue
            if ch != "\n" and (wcwidth(ch) == 0 or _is_skin_tone(ch)):
                clusters[-1] = last + ch
                join_next = ch == _ZWJ
                continue
            if (_is_regional_indicator(ch) and len(last) == 1
                    and _is_regional_indicator(last)):
                clusters[-1] = last + ch
                continue
        clusters.append(ch)
        join_next = False
    return clusters


def get_terminal_width() -> int:
    """Return the current terminal width in columns."""
    return shutil.get_terminal_size().columns
