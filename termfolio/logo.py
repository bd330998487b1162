"""Logo pages: figlet banner text with a scan-in and a light-wave sweep."""

import logging
from typing import List

import pyfiglet

from termfolio.channel import sleep
from termfolio.effects import Push
from termfolio.terminal import BRIGHT_CYAN, BRIGHT_GREEN, BRIGHT_WHITE, CLEAR, CYAN, RESET, split_graphemes

logger = logging.getLogger(__name__)

DEFAULT_FONT = "standard"

# Wave colors by distance from the crest: crest, near, far.
_WAVE_COLORS = (BRIGHT_WHITE, BRIGHT_CYAN, CYAN)


def banner(text: str, font: str = DEFAULT_FONT) -> str:
    """Render text as a figlet banner, without trailing blank lines."""
    try:
        art = pyfiglet.figlet_format(text, font=font)
    except pyfiglet.FontNotFound:
        logger.warning("figlet font %r not found, using %s", font, DEFAULT_FONT)
        art = pyfiglet.figlet_format(text, font=DEFAULT_FONT)
    return art.rstrip("\n")


def compose_logo(text=None, ascii_art=None, subtitle=None, tagline=None,
                 font: str = DEFAULT_FONT) -> str:
    """Banner (or ready-made art) followed by the subtitle and tagline."""
    if ascii_art:
        content = ascii_art
    else:
        content = banner(text or "HELLO", font)
    if subtitle:
        content += f"\n\n> {subtitle}"
    if tagline:
        content += f"\n> {tagline}"
    return content


async def scan_display(push: Push, lines: List[str], speed: int = 20,
                       scan_char: str = "▌", color: str = BRIGHT_CYAN) -> None:
    """Show each line after a brief scan cursor flash."""
    for line in lines:
        if line.strip():
            await push(f"{BRIGHT_GREEN}{scan_char}{RESET}")
            await sleep(speed)
            await push(f"\r{color}{line}{RESET}\n")
        else:
            await push("\n")
        await sleep(speed)


def _wave_color(dist):
    if dist <= 1:
        return _WAVE_COLORS[0]
    if dist <= 3:
        return _WAVE_COLORS[1]
    return _WAVE_COLORS[2]


async def light_wave(push: Push, lines: List[str], speed: int = 40) -> None:
    """Sweep a bright band left to right across the lines, then settle."""
    rows = [split_graphemes(line) for line in lines]
    max_width = max((len(row) for row in rows), default=0)

    for wave_pos in range(-4, max_width + 5, 2):
        await push(CLEAR)
        for row in rows:
            parts = []
            for i, char in enumerate(row):
                if char == " ":
                    parts.append(char)
                else:
                    parts.append(f"{_wave_color(abs(i - wave_pos))}{char}{RESET}")
            await push("".join(parts) + "\n")
        await sleep(speed)

    await push(CLEAR)
    for line in lines:
        await push(f"{BRIGHT_CYAN}{line}{RESET}\n")
