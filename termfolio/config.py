"""Page configuration: typed page content, speeds, and JSON loading.

Names are normalized here, once: unknown effects and transitions become
`none`, unknown page types become raw text pages, and bad speed multipliers
fall back to 1.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from termfolio.effects import Effect
from termfolio.errors import ConfigError
from termfolio.transitions import Transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogoContent:
    text: Optional[str] = None
    ascii: Optional[str] = None
    subtitle: Optional[str] = None
    tagline: Optional[str] = None
    font: str = "standard"


@dataclass(frozen=True)
class MarkdownContent:
    markdown: str = ""


@dataclass(frozen=True)
class ImageContent:
    src: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    colored: bool = False
    true_color: bool = True
    animated: bool = False
    frame_delay: Optional[int] = None


@dataclass(frozen=True)
class RawContent:
    text: str = ""


PageContent = Union[LogoContent, MarkdownContent, ImageContent, RawContent]


@dataclass(frozen=True)
class SpeedConfig:
    typing: Optional[int] = None
    typing_pause: Optional[int] = None
    transition: Optional[int] = None
    effect: Optional[int] = None

    def merged(self, override: "SpeedConfig") -> "SpeedConfig":
        """Values from `override` win where they are set."""
        return SpeedConfig(
            typing=_first(override.typing, self.typing),
            typing_pause=_first(override.typing_pause, self.typing_pause),
            transition=_first(override.transition, self.transition),
            effect=_first(override.effect, self.effect),
        )


@dataclass(frozen=True)
class PageConfig:
    content: PageContent
    effect: Effect = Effect.NONE
    transition: Transition = Transition.NONE
    speed: SpeedConfig = SpeedConfig()
    stay_time: int = 0
    speed_multiplier: float = 1.0


@dataclass(frozen=True)
class ResumeConfig:
    pages: List[PageConfig] = field(default_factory=list)
    speed: SpeedConfig = SpeedConfig()
    base_dir: Optional[Path] = None  # relative image paths resolve against this


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _int_or_none(value, name):
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        logger.warning("ignoring non-numeric %s=%r", name, value)
        return None
    return max(0, int(value))


def _object(raw, name) -> dict:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{name}' must be an object, got {type(raw).__name__}")
    return raw


def _parse_speed(raw, name="speed") -> SpeedConfig:
    raw = _object(raw, name)
    return SpeedConfig(
        typing=_int_or_none(raw.get("typing"), "speed.typing"),
        typing_pause=_int_or_none(raw.get("typingPause"), "speed.typingPause"),
        transition=_int_or_none(raw.get("transition"), "speed.transition"),
        effect=_int_or_none(raw.get("effect"), "speed.effect"),
    )


def _parse_multiplier(value) -> float:
    if value is None:
        return 1.0
    if isinstance(value, bool) or not isinstance(value, (int, float)) \
            or not math.isfinite(value) or value < 0:
        logger.warning("invalid speedMultiplier %r, using 1", value)
        return 1.0
    return float(value)


def _parse_content(kind, raw) -> PageContent:
    raw = _object(raw, "content")
    if kind == "logo":
        return LogoContent(
            text=raw.get("text"),
            ascii=raw.get("ascii"),
            subtitle=raw.get("subtitle"),
            tagline=raw.get("tagline"),
            font=raw.get("font") or "standard",
        )
    if kind == "markdown":
        return MarkdownContent(markdown=raw.get("markdown") or "")
    if kind == "image":
        return ImageContent(
            src=raw.get("src") or "",
            width=_int_or_none(raw.get("width"), "content.width") or None,
            height=_int_or_none(raw.get("height"), "content.height") or None,
            colored=bool(raw.get("colored", False)),
            true_color=bool(raw.get("trueColor", True)),
            animated=bool(raw.get("animated", False)),
            frame_delay=_int_or_none(raw.get("frameDelay"), "content.frameDelay"),
        )
    if kind != "raw":
        logger.warning("unknown page type %r, rendering as raw text", kind)
    return RawContent(text=str(raw.get("text") or ""))


def parse_page(raw: dict) -> PageConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"page must be an object, got {type(raw).__name__}")
    return PageConfig(
        content=_parse_content(raw.get("type"), raw.get("content")),
        effect=Effect.parse(raw.get("effect")),
        transition=Transition.parse(raw.get("transition")),
        speed=_parse_speed(raw.get("speed")),
        stay_time=_int_or_none(raw.get("stayTime"), "stayTime") or 0,
        speed_multiplier=_parse_multiplier(raw.get("speedMultiplier")),
    )


def parse_config(raw: dict, base_dir: Optional[Path] = None) -> ResumeConfig:
    """Build a ResumeConfig from its JSON form."""
    if not isinstance(raw, dict):
        raise ConfigError("configuration must be a JSON object")
    pages = raw.get("pages") or []
    if not isinstance(pages, list):
        raise ConfigError("'pages' must be a list")
    global_ = _object(raw.get("global"), "global")
    return ResumeConfig(
        pages=[parse_page(page) for page in pages],
        speed=_parse_speed(global_.get("speed"), "global.speed"),
        base_dir=base_dir,
    )


def load_config(path) -> ResumeConfig:
    """Load a JSON configuration file."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"cannot read configuration {path}: {exc}") from exc
    config = parse_config(raw, base_dir=path.resolve().parent)
    logger.info("loaded %d pages from %s", len(config.pages), path)
    return config


def default_config() -> ResumeConfig:
    """A short built-in demo resume."""
    return parse_config({
        "global": {
            "speed": {"typing": 20, "typingPause": 100, "transition": 80, "effect": 50},
        },
        "pages": [
            {
                "type": "logo",
                "content": {
                    "text": "termfolio",
                    "subtitle": "A resume you can curl",
                    "tagline": "Pages, effects and transitions, streamed as ANSI",
                },
                "transition": "scanline",
                "stayTime": 500,
            },
            {
                "type": "markdown",
                "content": {
                    "markdown": "## About\n\n"
                                "Every page is revealed with an effect: typing, decrypt,\n"
                                "glitch or matrix. Images are converted to ASCII art.\n",
                },
                "effect": "typing",
                "transition": "glitch",
            },
            {
                "type": "raw",
                "content": {"text": "Thanks for reading!"},
                "effect": "decrypt",
            },
        ],
    })
