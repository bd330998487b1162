"""Short animations played between pages."""

import enum
import logging
import random

from termfolio.channel import sleep
from termfolio.effects import Push
from termfolio.terminal import BRIGHT_CYAN, BRIGHT_GREEN, CLEAR, RED, RESET

logger = logging.getLogger(__name__)

_GLITCH_CHARS = "█▓▒░╔╗╚╝║═@#$%&*"
_GLITCH_WIDTH = 50
_SCANLINE_WIDTH = 55


class Transition(enum.Enum):
    NONE = "none"
    FADE = "fade"
    GLITCH = "glitch"
    SCANLINE = "scanline"

    @classmethod
    def parse(cls, name) -> "Transition":
        """Look up a transition by name; unknown or missing names give NONE."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            if name is not None:
                logger.warning("unknown transition %r, using none", name)
            return cls.NONE


async def transition_fade(push: Push) -> None:
    await sleep(200)
    await push(CLEAR)


async def transition_glitch(push: Push) -> None:
    """Three bands of block noise, each redrawn reversed, then clear."""
    for _ in range(3):
        line = "".join(random.choice(_GLITCH_CHARS) for _ in range(_GLITCH_WIDTH))
        await push(f"{RED}{line}{RESET}\r")
        await sleep(50)
        await push(f"{BRIGHT_GREEN}{line[::-1]}{RESET}\r")
        await sleep(40)
    await push(CLEAR)


async def transition_scanline(push: Push) -> None:
    for _ in range(8):
        await push(f"{BRIGHT_CYAN}{'▀' * _SCANLINE_WIDTH}{RESET}\n")
        await sleep(15)
    await sleep(50)
    await push(CLEAR)


async def run_transition(transition: Transition, push: Push) -> None:
    if transition is Transition.NONE:
        return
    if transition is Transition.FADE:
        await transition_fade(push)
    elif transition is Transition.GLITCH:
        await transition_glitch(push)
    elif transition is Transition.SCANLINE:
        await transition_scanline(push)
    else:
        raise ValueError(f"unhandled transition {transition!r}")
