"""Single-connection request/response channel over a TCP stream."""

from __future__ import annotations

import asyncio
import logging

from .errors import BoincConnectionClosed, BoincNotConnected, BoincUsageError
from .protocol import is_terminated
from .stream import DEFAULT_PORT, open_stream

_LOGGER = logging.getLogger(__name__)

MIN_RECEIVE_BUFFER_SIZE = 256


class TransportChannel:
    """Owns one TCP stream and performs one exchange at a time.

    Exchanges are serialized by a per-instance lock, so concurrent callers
    never see interleaved bytes on the wire.
    """

    def __init__(self) -> None:
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._lock = asyncio.Lock()
        self._connecting = False
        self._peer = "-"

    async def connect(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        timeout: float = 15.0,
    ) -> None:
        """Open the stream to ``host:port``.

        Raises:
            BoincUsageError: If connected, or another connect is in progress
        """
        if self._connecting:
            raise BoincUsageError("Channel is already connecting")
        if self.is_connected:
            raise BoincUsageError(
                "Channel is already connected. Close it before opening a new connection."
            )

        self._connecting = True
        try:
            # Drop a stream the remote end already closed.
            await self.close()

            self._reader, self._writer = await open_stream(host, port, timeout=timeout)
        finally:
            self._connecting = False

        self._peer = f"{host}:{port}"
        _LOGGER.info("[%s] Connected", self._peer)

    async def close(self) -> None:
        """Close the stream. Safe to call when not connected."""
        writer = self._writer
        self._reader = None
        self._writer = None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError) as err:
            _LOGGER.debug("[%s] Error while closing stream: %s", self._peer, err)
        _LOGGER.info("[%s] Connection closed", self._peer)

    @property
    def is_connected(self) -> bool:
        """Check if the channel holds an open stream.

        A stream whose remote end sent EOF counts as disconnected.
        """
        if self._reader is None or self._writer is None:
            return False
        return not self._writer.is_closing() and not self._reader.at_eof()

    @property
    def peer(self) -> str:
        """The ``host:port`` of the last connection."""
        return self._peer

    async def exchange(self, request: bytes) -> bytes:
        """Send one framed request and return the reply without its terminator.

        Raises:
            BoincNotConnected: If there is no open stream
            BoincConnectionClosed: If the remote closes before the terminator
        """
        async with self._lock:
            reader, writer = self._reader, self._writer
            if reader is None or writer is None or writer.is_closing():
                raise BoincNotConnected("RPC client is not connected")

            try:
                writer.write(request)
                await writer.drain()
                reply = await self._read_reply(reader)
            except asyncio.CancelledError:
                _LOGGER.warning(
                    "[%s] Exchange cancelled mid-flight, dropping connection",
                    self._peer,
                )
                self._abort(writer)
                raise
            except BoincConnectionClosed:
                self._abort(writer)
                raise

        _LOGGER.debug(
            "[%s] Exchanged %d request bytes for %d reply bytes",
            self._peer,
            len(request),
            len(reply),
        )
        return reply

    async def _read_reply(self, reader: asyncio.StreamReader) -> bytes:
        buffer = bytearray(MIN_RECEIVE_BUFFER_SIZE)
        length = 0

        while True:
            if len(buffer) - length < MIN_RECEIVE_BUFFER_SIZE:
                buffer.extend(bytes(len(buffer)))

            chunk = await reader.read(len(buffer) - length)
            if not chunk:
                _LOGGER.warning(
                    "[%s] Connection closed by remote after %d reply bytes",
                    self._peer,
                    length,
                )
                raise BoincConnectionClosed("RPC response is truncated")

            buffer[length : length + len(chunk)] = chunk
            length += len(chunk)

            if is_terminated(chunk):
                return bytes(buffer[: length - 1])

    def _abort(self, writer: asyncio.StreamWriter) -> None:
        """Drop the stream without waiting; the framing is no longer usable.

        Only ``writer`` is closed, so a connection opened meanwhile survives.
        """
        writer.close()
        if self._writer is writer:
            self._reader = None
            self._writer = None
