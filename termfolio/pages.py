"""Page orchestration: render each configured page, pause, transition, repeat."""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from termfolio import convert
from termfolio.cache import EMPTY_CACHE, AnimatedPayload, MarkdownPayload, PayloadCache, StaticPayload, markdown_key
from termfolio.channel import OutputChannel, sleep
from termfolio.config import (
    ImageContent,
    LogoContent,
    MarkdownContent,
    PageConfig,
    RawContent,
    ResumeConfig,
    SpeedConfig,
)
from termfolio.convert import AsciiFrame, RenderOptions
from termfolio.effects import EffectOptions, Push, play_ascii_animation, run_effect
from termfolio.errors import ChannelClosedError, DecodeError, ImageError
from termfolio.logo import compose_logo, light_wave, scan_display
from termfolio.raster import round_half_up
from termfolio.renderer import ring_pattern
from termfolio.terminal import BOLD, BRIGHT_CYAN, DIM, RED, RESET
from termfolio.transitions import run_transition

logger = logging.getLogger(__name__)

ANIMATION_LOOPS = 2


@dataclass(frozen=True)
class ResolvedSpeed:
    """Page speeds with the page's multiplier applied on lookup."""

    speed: SpeedConfig
    multiplier: float = 1.0

    def get(self, key: str, fallback: int) -> int:
        value = getattr(self.speed, key)
        return self.scale(fallback if value is None else value)

    def scale(self, ms) -> int:
        return max(0, round_half_up(ms * self.multiplier))


def resolve_speed(page: PageConfig, defaults: SpeedConfig) -> ResolvedSpeed:
    """Global speeds, overridden by the page's own, scaled by its multiplier."""
    return ResolvedSpeed(defaults.merged(page.speed), max(0.0, page.speed_multiplier))


def render_markdown(markdown: str) -> str:
    """Fallback when no pre-rendered markdown is cached: the source itself."""
    return markdown or ""


# ---------------------------------------------------------------------------
# Page renderers
# ---------------------------------------------------------------------------

async def render_logo_page(push: Push, content: LogoContent, speed: ResolvedSpeed) -> None:
    logo = compose_logo(content.text, content.ascii, content.subtitle, content.tagline,
                        font=content.font)
    lines = logo.split("\n")
    await scan_display(push, lines, speed=speed.get("typing", 15), color=BRIGHT_CYAN)
    await sleep(speed.scale(300))
    await light_wave(push, lines, speed=speed.get("transition", 40))
    await sleep(speed.scale(500))


async def render_markdown_page(push: Push, page: PageConfig, content: MarkdownContent,
                               speed: ResolvedSpeed, cache: PayloadCache, index: int) -> None:
    cached = cache.lookup(markdown_key(index))
    if isinstance(cached, MarkdownPayload):
        text = cached.rendered
    else:
        text = render_markdown(content.markdown)

    await run_effect(page.effect, push, text, EffectOptions(
        speed=speed.get("typing", 20),
        pause_speed=speed.get("typing_pause", 100),
    ))
    await push("\n")


async def _convert_live(convert_fn, src: str, options: RenderOptions, base_dir):
    """Run a live conversion; any failure surfaces as an ImageError."""
    try:
        return await convert_fn(src, options, base_dir)
    except ImageError:
        raise
    except Exception as exc:
        raise DecodeError(f"cannot convert {src}: {exc}") from exc


async def _load_frames(content: ImageContent, cache: PayloadCache, base_dir):
    cached = cache.lookup(content.src)
    if isinstance(cached, AnimatedPayload):
        return cached.frames
    options = RenderOptions(width=content.width or 60, height=content.height,
                            colored=content.colored, true_color=content.true_color)
    return await _convert_live(convert.fetch_gif_to_frames, content.src, options, base_dir)


async def _load_still(content: ImageContent, cache: PayloadCache, base_dir):
    cached = cache.lookup(content.src)
    if isinstance(cached, StaticPayload):
        return cached.result
    options = RenderOptions(width=content.width or 80, height=content.height,
                            colored=content.colored, true_color=content.true_color)
    return await _convert_live(convert.fetch_image_to_ascii, content.src, options, base_dir)


async def _image_failed(push: Push, content: ImageContent, exc: Exception) -> None:
    logger.error("image load failed for %s: %s", content.src, exc)
    pattern = ring_pattern(content.width or 60, 20)
    await push(f"{DIM}[image load failed: {content.src}]{RESET}\n\n")
    await push(f"{BRIGHT_CYAN}{pattern}{RESET}")


async def render_image_page(push: Push, page: PageConfig, content: ImageContent,
                            speed: ResolvedSpeed, cache: PayloadCache, base_dir=None) -> None:
    if content.animated:
        try:
            frames = await _load_frames(content, cache, base_dir)
        except ImageError as exc:
            await _image_failed(push, content, exc)
        else:
            frames = [
                AsciiFrame(f.ascii, f.colored_ascii,
                           speed.scale(content.frame_delay if content.frame_delay else f.delay))
                for f in frames
            ]
            await play_ascii_animation(push, frames, loops=ANIMATION_LOOPS, colored=content.colored)
    else:
        try:
            result = await _load_still(content, cache, base_dir)
        except ImageError as exc:
            await _image_failed(push, content, exc)
        else:
            text = result.colored if content.colored and result.colored else result.text
            await run_effect(page.effect, push, text, EffectOptions(speed=speed.get("effect", 10)))
    await push("\n")


async def render_raw_page(push: Push, page: PageConfig, content: RawContent,
                          speed: ResolvedSpeed) -> None:
    await run_effect(page.effect, push, content.text, EffectOptions(
        speed=speed.get("effect", 50),
        color=f"{RED}{BOLD}",
    ))
    await push("\n")


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

class State(enum.Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    TRANSITIONING = "transitioning"
    DONE = "done"


class Orchestrator:
    """Walks the page list in order on a single task.

    State goes IDLE -> RENDERING(i) -> TRANSITIONING(i) -> RENDERING(i + 1)
    ... -> DONE. There is no transition after the last page.
    """

    def __init__(self, config: ResumeConfig, cache: Optional[PayloadCache] = None):
        self.config = config
        self.cache = cache if cache is not None else EMPTY_CACHE
        self.state = State.IDLE
        self.page_index: Optional[int] = None

    def _enter(self, state, index=None):
        self.state = state
        self.page_index = index
        logger.debug("orchestrator %s page=%s", state.value, index)

    async def render_page(self, push: Push, page: PageConfig, markdown_index: int) -> None:
        speed = resolve_speed(page, self.config.speed)
        content = page.content
        if isinstance(content, LogoContent):
            await render_logo_page(push, content, speed)
        elif isinstance(content, MarkdownContent):
            await render_markdown_page(push, page, content, speed, self.cache, markdown_index)
        elif isinstance(content, ImageContent):
            await render_image_page(push, page, content, speed, self.cache, self.config.base_dir)
        elif isinstance(content, RawContent):
            await render_raw_page(push, page, content, speed)
        else:
            raise TypeError(f"unhandled page content {type(content).__name__}")

    async def run(self, push: Push) -> None:
        pages = self.config.pages
        markdown_index = 0
        for i, page in enumerate(pages):
            self._enter(State.RENDERING, i)
            await self.render_page(push, page, markdown_index)
            if isinstance(page.content, MarkdownContent):
                markdown_index += 1

            if page.stay_time > 0:
                await sleep(page.stay_time)

            if i < len(pages) - 1:
                self._enter(State.TRANSITIONING, i)
                await run_transition(page.transition, push)
        self._enter(State.DONE)


async def render_all_pages(push: Push, config: ResumeConfig,
                           cache: Optional[PayloadCache] = None) -> None:
    await Orchestrator(config, cache).run(push)


async def stream_resume(channel: OutputChannel, config: ResumeConfig,
                        cache: Optional[PayloadCache] = None) -> bool:
    """Render every page onto the channel and release it exactly once.

    Returns False if the client went away mid-stream. Any other error aborts
    the channel and propagates.
    """
    try:
        await render_all_pages(channel.push, config, cache)
    except ChannelClosedError as exc:
        logger.info("stream aborted after %d bytes: %s", channel.bytes_written, exc)
        channel.abort()
        return False
    except BaseException:
        channel.abort()
        raise
    await channel.close()
    logger.info("stream finished, %d bytes", channel.bytes_written)
    return True
