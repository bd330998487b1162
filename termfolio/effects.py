"""Text reveal effects, paced by sleeps between pushes to the output channel."""

import enum
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from termfolio.channel import sleep
from termfolio.terminal import (
    BRIGHT_CYAN,
    BRIGHT_GREEN,
    CLEAR,
    GREEN,
    RED,
    RESET,
    random_glyph,
    split_graphemes,
)

logger = logging.getLogger(__name__)

Push = Callable[[str], Awaitable[None]]

# Characters after which the typing effect pauses longer.
PAUSE_CHARS = frozenset(",.:;!?，。：；！？")


class Effect(enum.Enum):
    NONE = "none"
    TYPING = "typing"
    DECRYPT = "decrypt"
    GLITCH = "glitch"
    MATRIX = "matrix"

    @classmethod
    def parse(cls, name) -> "Effect":
        """Look up an effect by name; unknown or missing names give NONE."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            if name is not None:
                logger.warning("unknown effect %r, showing content without effect", name)
            return cls.NONE


@dataclass(frozen=True)
class EffectOptions:
    speed: Optional[int] = None
    pause_speed: Optional[int] = None
    color: Optional[str] = None
    cycles: Optional[int] = None
    iterations: Optional[int] = None


def _pick(value, default):
    return default if value is None else value


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------

async def effect_none(push: Push, text: str, options: EffectOptions = EffectOptions()) -> None:
    await push(text)


async def effect_typing(push: Push, text: str, options: EffectOptions = EffectOptions()) -> None:
    """Type the text one character at a time."""
    speed = _pick(options.speed, 20)
    pause = _pick(options.pause_speed, 100)
    color = options.color or ""

    for char in split_graphemes(text):
        await push(f"{color}{char}{RESET}" if color else char)
        if char == "\n":
            await sleep(speed * 2)
        elif char in PAUSE_CHARS:
            await sleep(pause)
        else:
            await sleep(speed)


async def effect_decrypt(push: Push, text: str, options: EffectOptions = EffectOptions()) -> None:
    """Unscramble the text left to right, rewriting the line in place."""
    speed = _pick(options.speed, 50)
    cycles = _pick(options.cycles, 3)
    color = _pick(options.color, BRIGHT_GREEN)

    chars = split_graphemes(text)
    display = [random_glyph() for _ in chars]

    for i, target in enumerate(chars):
        for _ in range(cycles):
            for j in range(i, len(chars)):
                if chars[j] in (" ", "\n"):
                    display[j] = chars[j]
                else:
                    display[j] = random_glyph()
            await push(f"\r{color}{''.join(display)}{RESET}")
            await sleep(speed)

        display[i] = target
        await push(f"\r{color}{''.join(display)}{RESET}")
    await push("\n")


async def effect_glitch(push: Push, text: str, options: EffectOptions = EffectOptions()) -> None:
    """Flash the text with random glyph noise, then settle."""
    speed = _pick(options.speed, 80)
    iterations = _pick(options.iterations, 5)
    color = _pick(options.color, BRIGHT_GREEN)
    lines = text.split("\n")

    for _ in range(iterations):
        await push(CLEAR)
        for line in lines:
            parts = []
            for char in split_graphemes(line):
                if random.random() < 0.3:
                    glitch_color = RED if random.random() < 0.5 else BRIGHT_CYAN
                    parts.append(f"{glitch_color}{random_glyph()}{RESET}")
                else:
                    parts.append(f"{color}{char}{RESET}")
            await push("".join(parts) + "\n")
        await sleep(speed)

    await push(CLEAR)
    await push(f"{color}{text}{RESET}")


async def effect_matrix(push: Push, text: str, options: EffectOptions = EffectOptions()) -> None:
    """Reveal one line per step with falling glyph noise below it."""
    speed = _pick(options.speed, 30)
    color = _pick(options.color, BRIGHT_GREEN)
    lines = text.split("\n")
    max_width = max(len(split_graphemes(line)) for line in lines)
    height = len(lines)

    for row in range(height):
        await push(CLEAR)

        for done in lines[:row]:
            await push(f"{color}{done}{RESET}\n")

        parts = []
        for char in split_graphemes(lines[row]):
            if random.random() < 0.7:
                parts.append(f"{BRIGHT_GREEN}{random_glyph()}{RESET}")
            else:
                parts.append(f"{color}{char}{RESET}")
        await push("".join(parts) + "\n")

        for _ in range(row + 1, min(row + 4, height + 3)):
            length = int(random.random() * max_width * 0.5)
            await push("".join(f"{GREEN}{random_glyph()}{RESET}" for _ in range(length)) + "\n")

        await sleep(speed)

    await push(CLEAR)
    await push(f"{color}{text}{RESET}")


async def run_effect(effect: Effect, push: Push, text: str,
                     options: EffectOptions = EffectOptions()) -> None:
    """Reveal `text` with the given effect."""
    if effect is Effect.NONE:
        await effect_none(push, text, options)
    elif effect is Effect.TYPING:
        await effect_typing(push, text, options)
    elif effect is Effect.DECRYPT:
        await effect_decrypt(push, text, options)
    elif effect is Effect.GLITCH:
        await effect_glitch(push, text, options)
    elif effect is Effect.MATRIX:
        await effect_matrix(push, text, options)
    else:
        raise ValueError(f"unhandled effect {effect!r}")


# ---------------------------------------------------------------------------
# Frame playback
# ---------------------------------------------------------------------------

async def play_ascii_animation(push: Push, frames: Iterable, loops: int = 1,
                               colored: bool = False) -> None:
    """Play pre-rendered frames, clearing the screen before each one."""
    frames = list(frames)
    for _ in range(loops):
        for frame in frames:
            await push(CLEAR)
            await push(frame.colored_ascii if colored and frame.colored_ascii else frame.ascii)
            await sleep(frame.delay)
