"""Push-only output channel and the pacing sleep used by every animation."""

import asyncio
import logging
import math

from termfolio.errors import ChannelClosedError

logger = logging.getLogger(__name__)


async def sleep(ms) -> None:
    """Suspend for `ms` milliseconds; negative or NaN delays do not wait."""
    if ms is None or math.isnan(ms) or ms <= 0:
        await asyncio.sleep(0)
        return
    await asyncio.sleep(ms / 1000)


class FileWriter:
    """Adapt a binary file object (e.g. stdout) to the stream-writer interface."""

    def __init__(self, fileobj):
        self._file = fileobj

    def write(self, data: bytes) -> None:
        self._file.write(data)

    async def drain(self) -> None:
        self._file.flush()

    def close(self) -> None:
        self._file.flush()

    async def wait_closed(self) -> None:
        pass


class OutputChannel:
    """Sequential, backpressured text output over a stream writer.

    `writer` needs `write(bytes)`, `async drain()`, `close()` and
    `async wait_closed()`, which both asyncio's StreamWriter and FileWriter
    provide. Each push returns only once the writer has drained.
    """

    def __init__(self, writer, encoding: str = "utf-8"):
        self._writer = writer
        self._encoding = encoding
        self._closed = False
        self._released = False
        self.bytes_written = 0

    @property
    def closed(self) -> bool:
        return self._closed

    async def push(self, text: str) -> None:
        if self._closed:
            raise ChannelClosedError("write to a closed channel")
        data = text.encode(self._encoding)
        try:
            self._writer.write(data)
            await self._writer.drain()
        except (BrokenPipeError, ConnectionError) as exc:
            self._closed = True
            raise ChannelClosedError(f"client went away: {exc}") from exc
        self.bytes_written += len(data)

    async def close(self) -> None:
        """Flush and release the writer. Only the first close or abort counts."""
        self._closed = True
        if self._released:
            return
        self._released = True
        try:
            self._writer.close()
            await self._writer.wait_closed()
        except (BrokenPipeError, ConnectionError) as exc:
            logger.debug("error while closing channel: %s", exc)

    def abort(self) -> None:
        """Release the writer without flushing."""
        self._closed = True
        if self._released:
            return
        self._released = True
        transport = getattr(self._writer, "transport", None)
        if transport is not None:
            transport.abort()
