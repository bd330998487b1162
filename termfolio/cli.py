"""CLI argument parsing and main entry point."""

import argparse
import asyncio
import logging
import math
import sys
from dataclasses import replace
from typing import Optional

from termfolio.cache import EMPTY_CACHE, load_cache
from termfolio.channel import FileWriter, OutputChannel
from termfolio.config import default_config, load_config
from termfolio.convert import RenderOptions, image_to_ascii
from termfolio.decoder import decode, fetch_bytes
from termfolio.errors import ImageError, TermfolioError
from termfolio.pages import stream_resume
from termfolio.renderer import gradient_pattern
from termfolio.terminal import HIDE_CURSOR, RESET, SHOW_CURSOR, get_terminal_width

logger = logging.getLogger("termfolio")


def _multiplier(value: str) -> float:
    try:
        speed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid speed multiplier: {value!r}")
    if not math.isfinite(speed) or speed < 0:
        raise argparse.ArgumentTypeError(f"speed multiplier must be a finite number >= 0, got {value}")
    return speed


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="termfolio",
        description="Stream an animated terminal resume to stdout.",
    )
    parser.add_argument("config", nargs="?", default=None,
                        help="JSON page configuration (default: built-in demo)")
    parser.add_argument("--cache", default=None,
                        help="JSON file of pre-rendered image and markdown payloads")
    parser.add_argument(
        "--speed",
        type=_multiplier,
        default=None,
        help="Override every page's speed multiplier (0 = no delays, 2 = half speed)",
    )
    parser.add_argument("--image", default=None,
                        help="Convert a single image (path or URL) and print it instead")
    parser.add_argument("--width", type=int, default=0,
                        help="Columns for --image (default: terminal width, max 80)")
    parser.add_argument("--height", type=int, default=None, help="Rows for --image")
    parser.add_argument("--mono", action="store_true", help="Plain ASCII glyphs for --image")
    parser.add_argument("--256", dest="palette_256", action="store_true",
                        help="256-color escapes instead of 24-bit for --image")
    parser.add_argument("--pattern", action="store_true",
                        help="Print a color gradient to check terminal color support")
    parser.add_argument("--log-file", default=None, help="Also write debug logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool, log_file: Optional[str]) -> None:
    # stdout carries the stream, logs go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers = [console_handler]
    logger.setLevel(logging.DEBUG)

    if log_file:
        file_handler = logging.FileHandler(filename=log_file, mode="w")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.handlers.append(file_handler)
        logger.info("Logging to %s", log_file)


def _print_image(args) -> int:
    columns = args.width if args.width > 0 else min(get_terminal_width(), 80)
    options = RenderOptions(width=columns, height=args.height, colored=not args.mono,
                            true_color=not args.palette_256)
    try:
        result = image_to_ascii(decode(fetch_bytes(args.image)), options)
    except ImageError as exc:
        logger.error("Cannot convert %s: %s", args.image, exc)
        return 1
    sys.stdout.write(result.text if args.mono else result.colored)
    sys.stdout.flush()
    return 0


async def _stream(config, cache) -> bool:
    channel = OutputChannel(FileWriter(sys.stdout.buffer))
    return await stream_resume(channel, config, cache)


def main(argv=None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose, args.log_file)

    if args.pattern:
        sys.stdout.write(gradient_pattern(40, 10, use_true_color=not args.palette_256))
        return 0

    if args.image:
        return _print_image(args)

    try:
        config = load_config(args.config) if args.config else default_config()
        cache = load_cache(args.cache) if args.cache else EMPTY_CACHE
    except TermfolioError as exc:
        logger.error("%s", exc)
        return 1

    if args.speed is not None:
        config = replace(config, pages=[replace(p, speed_multiplier=args.speed) for p in config.pages])

    sys.stdout.write(HIDE_CURSOR)
    sys.stdout.flush()
    try:
        completed = asyncio.run(_stream(config, cache))
    except KeyboardInterrupt:
        completed = False
    finally:
        try:
            sys.stdout.write(RESET + SHOW_CURSOR)
            sys.stdout.flush()
        except BrokenPipeError:
            pass
    return 0 if completed else 1
