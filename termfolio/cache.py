"""Read-only lookup of payloads rendered ahead of time by an offline build."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Union

from termfolio.convert import AsciiFrame, AsciiResult
from termfolio.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaticPayload:
    result: AsciiResult


@dataclass(frozen=True)
class AnimatedPayload:
    frames: List[AsciiFrame]


@dataclass(frozen=True)
class MarkdownPayload:
    rendered: str


Payload = Union[StaticPayload, AnimatedPayload, MarkdownPayload]


class PayloadCache(Protocol):
    def lookup(self, key: str) -> Optional[Payload]:
        ...


class MappingCache:
    """A PayloadCache over a plain dict."""

    def __init__(self, payloads: Optional[Mapping[str, Payload]] = None):
        self._payloads: Dict[str, Payload] = dict(payloads or {})

    def lookup(self, key: str) -> Optional[Payload]:
        return self._payloads.get(key)

    def __len__(self):
        return len(self._payloads)


EMPTY_CACHE = MappingCache()


def markdown_key(index: int) -> str:
    """Cache key of the index-th markdown page."""
    return f"markdown:{index}"


def parse_payload(raw: dict) -> Optional[Payload]:
    """Build a payload from its JSON form; unknown types give None."""
    kind = raw.get("type")
    if kind == "static":
        result = raw["result"]
        return StaticPayload(AsciiResult(result["text"], result.get("colored")))
    if kind == "animated":
        frames = [
            AsciiFrame(f["ascii"], f.get("coloredAscii"), int(f.get("delay", 100)))
            for f in raw["frames"]
        ]
        return AnimatedPayload(frames)
    if kind == "markdown":
        return MarkdownPayload(raw["rendered"])
    return None


def load_cache(path) -> MappingCache:
    """Load a JSON payload map written by the offline preprocessor."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"cannot read payload cache {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"payload cache {path} must be a JSON object")

    payloads = {}
    for key, value in raw.items():
        try:
            payload = parse_payload(value)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"malformed payload {key!r} in {path}: {exc}") from exc
        if payload is None:
            logger.warning("skipping payload %r with unknown type", key)
            continue
        payloads[key] = payload
    logger.info("loaded %d cached payloads from %s", len(payloads), path)
    return MappingCache(payloads)
