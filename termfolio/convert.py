"""Image bytes to ASCII: decode, resize, render."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from termfolio.decoder import decode, decode_animated, detect_format, fetch_bytes
from termfolio.raster import Canvas, Raster, resize, target_height
from termfolio.renderer import ASCII_RAMP, DETAILED_RAMP, render_glyphs, render_half_blocks

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80
DEFAULT_FRAME_DELAY = 100  # ms, when a GIF frame carries no delay
STATIC_FRAME_DELAY = 200  # ms, when a still image is played as an animation


@dataclass(frozen=True)
class AsciiResult:
    text: str
    colored: Optional[str] = None


@dataclass(frozen=True)
class AsciiFrame:
    ascii: str
    colored_ascii: Optional[str] = None
    delay: int = DEFAULT_FRAME_DELAY


@dataclass(frozen=True)
class RenderOptions:
    width: int = DEFAULT_WIDTH
    height: Optional[int] = None
    colored: bool = True
    true_color: bool = True
    detailed: bool = False


def _render(raster: Raster, options: RenderOptions) -> AsciiResult:
    ramp = DETAILED_RAMP if options.detailed else ASCII_RAMP
    text = render_glyphs(raster, ramp)
    colored = render_half_blocks(raster, options.true_color) if options.colored else None
    return AsciiResult(text, colored)


def image_to_ascii(image: Raster, options: RenderOptions = RenderOptions()) -> AsciiResult:
    """Resize a decoded image to the target grid and render it."""
    height = target_height(image.width, image.height, options.width,
                           options.colored, options.height)
    return _render(resize(image, options.width, height), options)


def gif_to_frames(data: bytes, options: RenderOptions = RenderOptions()) -> List[AsciiFrame]:
    """Render every frame of a GIF, compositing each onto a shared canvas.

    Non-GIF input is rendered once and returned as a single frame.
    """
    if detect_format(data) != "gif":
        result = image_to_ascii(decode(data), options)
        return [AsciiFrame(result.text, result.colored, STATIC_FRAME_DELAY)]

    gif = decode_animated(data)
    height = target_height(gif.width, gif.height, options.width,
                           options.colored, options.height)
    canvas = Canvas(gif.width, gif.height)
    frames = []
    for frame in gif.frames:
        canvas.composite(frame.pixels)
        result = _render(resize(canvas.snapshot(), options.width, height), options)
        frames.append(AsciiFrame(result.text, result.colored,
                                 frame.delay * 10 or DEFAULT_FRAME_DELAY))
    return frames


async def fetch_image_to_ascii(src: str, options: RenderOptions = RenderOptions(),
                               base_dir: Optional[Path] = None) -> AsciiResult:
    """Fetch, decode and render a still image off the event loop."""
    data = await asyncio.to_thread(fetch_bytes, src, base_dir)
    return await asyncio.to_thread(lambda: image_to_ascii(decode(data), options))


async def fetch_gif_to_frames(src: str, options: RenderOptions = RenderOptions(),
                              base_dir: Optional[Path] = None) -> List[AsciiFrame]:
    """Fetch and render an animated GIF off the event loop."""
    data = await asyncio.to_thread(fetch_bytes, src, base_dir)
    frames = await asyncio.to_thread(gif_to_frames, data, options)
    logger.debug("rendered %d frames from %s", len(frames), src)
    return frames
