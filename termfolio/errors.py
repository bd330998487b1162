"""Exceptions raised by the rendering pipeline and the output channel."""


class TermfolioError(Exception):
    """Base class for every error raised by termfolio."""


class ConfigError(TermfolioError):
    """A configuration or payload cache file could not be read or parsed."""


class ImageError(TermfolioError):
    """An image source could not be turned into a raster."""


class UnsupportedFormatError(ImageError):
    """The byte signature is unknown, or known but not decodable."""


class DecodeError(ImageError):
    """Malformed bytes, or a pixel format other than 8-bit RGBA-convertible."""


class FetchError(ImageError):
    """The image source could not be read from the network or disk."""


class ChannelClosedError(TermfolioError):
    """A write was attempted on a closed or aborted output channel."""
