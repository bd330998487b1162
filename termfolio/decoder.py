"""Image format sniffing, Pillow-backed decoding and source fetching."""

import base64
import binascii
import io
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from PIL import Image, ImageSequence

from termfolio.errors import DecodeError, FetchError, UnsupportedFormatError
from termfolio.raster import Raster

logger = logging.getLogger(__name__)

# Pillow modes that hold 8-bit samples and convert losslessly to RGBA.
_RGBA8_MODES = ("1", "L", "LA", "P", "PA", "RGB", "RGBA", "CMYK")

_FETCH_TIMEOUT = 15


@dataclass(frozen=True)
class GifFrame:
    pixels: bytes
    delay: int  # centiseconds, as stored in the GIF


@dataclass(frozen=True)
class AnimatedImage:
    width: int
    height: int
    frames: List[GifFrame]


def detect_format(data: bytes) -> str:
    """Identify an image by its leading bytes."""
    if data[:4] == b"\x89PNG":
        return "png"
    if data[:3] == b"\xff\xd8\xff":
        return "jpeg"
    if data[:3] == b"GIF":
        return "gif"
    if data[:2] == b"BM":
        return "bmp"
    return "unknown"


def _open(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, SyntaxError, EOFError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"cannot decode image: {exc}") from exc
    return image


def _to_rgba(image: Image.Image) -> Raster:
    if image.mode not in _RGBA8_MODES:
        raise DecodeError(f"unsupported pixel format: {image.mode}")
    rgba = image.convert("RGBA")
    return Raster(rgba.width, rgba.height, rgba.tobytes())


def decode(data: bytes) -> Raster:
    """Decode a PNG, JPEG or GIF (first frame) into an RGBA raster."""
    fmt = detect_format(data)
    if fmt not in ("png", "jpeg", "gif"):
        raise UnsupportedFormatError(f"unsupported image format: {fmt}")
    return _to_rgba(_open(data))


def decode_animated(data: bytes) -> AnimatedImage:
    """Decode every frame of a GIF."""
    fmt = detect_format(data)
    if fmt != "gif":
        raise UnsupportedFormatError(f"not a GIF: {fmt}")
    image = _open(data)
    frames = []
    try:
        for frame in ImageSequence.Iterator(image):
            rgba = frame.convert("RGBA")
            duration = int(frame.info.get("duration", 0) or 0)
            frames.append(GifFrame(rgba.tobytes(), duration // 10))
    except (OSError, ValueError, EOFError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"cannot decode GIF frame: {exc}") from exc
    logger.debug("decoded GIF %dx%d with %d frames", image.width, image.height, len(frames))
    return AnimatedImage(image.width, image.height, frames)


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def _read_data_url(src):
    header, _, payload = src.partition(",")
    if not header.endswith(";base64"):
        raise FetchError("only base64 data URLs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FetchError(f"invalid base64 data URL: {exc}") from exc


def fetch_bytes(src: str, base_dir: Optional[Path] = None) -> bytes:
    """Read an image source: http(s) URL, base64 data URL or file path."""
    if src.startswith(("http://", "https://")):
        try:
            with urllib.request.urlopen(src, timeout=_FETCH_TIMEOUT) as response:
                return response.read()
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise FetchError(f"failed to fetch {src}: {exc}") from exc

    if src.startswith("data:"):
        return _read_data_url(src)

    path = Path(src)
    if not path.is_absolute() and base_dir is not None:
        path = Path(base_dir) / path
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FetchError(f"failed to read {path}: {exc}") from exc
