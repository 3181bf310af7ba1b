"""Pytest configuration and fixtures for boinc_gui_rpc tests."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

from boinc_gui_rpc.protocol import (
    REQUEST_ENVELOPE_CLOSE,
    REQUEST_ENVELOPE_OPEN,
    TERMINATOR_BYTE,
)

Responder = Callable[[str], Any]


def reply(body: str) -> bytes:
    """Wrap a reply body the way the daemon does, terminator included."""
    return f"<boinc_gui_rpc_reply>\n{body}\n</boinc_gui_rpc_reply>\n".encode() + TERMINATOR_BYTE


def request_payload(frame: bytes) -> str:
    """Return the payload text of a framed request."""
    text = frame.rstrip(TERMINATOR_BYTE).decode("ascii")
    assert text.startswith(REQUEST_ENVELOPE_OPEN + "\n")
    assert text.endswith("\n" + REQUEST_ENVELOPE_CLOSE + "\n")
    return text[len(REQUEST_ENVELOPE_OPEN) + 1 : -len(REQUEST_ENVELOPE_CLOSE) - 2]


class RecordingStream:
    """Reader/writer stand-in that answers each write with a scripted reply.

    Replies are handed out in small chunks with a yield between reads, and
    the number of exchanges in flight at once is recorded.
    """

    def __init__(self, responder: Callable[[str], bytes], chunk_size: int = 7) -> None:
        self.responder = responder
        self.chunk_size = chunk_size
        self.writes: list[bytes] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self._pending = b""

    def write(self, data: bytes) -> None:
        self.writes.append(data)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self._pending += self.responder(request_payload(data))

    async def drain(self) -> None:
        await asyncio.sleep(0)

    async def read(self, n: int = -1) -> bytes:
        await asyncio.sleep(0)
        if not self._pending:
            return b""
        size = min(n, self.chunk_size)
        chunk, self._pending = self._pending[:size], self._pending[size:]
        if chunk.endswith(TERMINATOR_BYTE):
            self.in_flight -= 1
        return chunk

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        return None

    def is_closing(self) -> bool:
        return self.closed

    def at_eof(self) -> bool:
        return self.closed

    @property
    def payloads(self) -> list[str]:
        return [request_payload(frame) for frame in self.writes]


@pytest.fixture
def patch_stream() -> Iterator[Callable[[RecordingStream], AsyncMock]]:
    """Make open_stream return the given RecordingStream for the test."""
    patchers = []

    def _patch(stream: RecordingStream) -> AsyncMock:
        patcher = patch(
            "boinc_gui_rpc.channel.open_stream",
            new=AsyncMock(return_value=(stream, stream)),
        )
        patchers.append(patcher)
        return patcher.start()

    yield _patch

    for patcher in patchers:
        patcher.stop()


class FakeDaemon:
    """Loopback TCP server speaking the GUI RPC framing."""

    def __init__(self, responder: Responder, *, close_on_accept: bool = False) -> None:
        self.responder = responder
        self.close_on_accept = close_on_accept
        self.accepted = 0
        self.requests: list[bytes] = []
        self.port = 0
        self._server: asyncio.Server | None = None

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]

    async def stop(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self.accepted += 1
        try:
            while not self.close_on_accept:
                try:
                    frame = await reader.readuntil(TERMINATOR_BYTE)
                except asyncio.IncompleteReadError:
                    break
                self.requests.append(frame)

                result = self.responder(request_payload(frame))
                if inspect.isawaitable(result):
                    result = await result
                if result is None:
                    break

                chunks = result if isinstance(result, list) else [result]
                for chunk in chunks:
                    writer.write(chunk)
                    await writer.drain()
                    await asyncio.sleep(0)
        finally:
            writer.close()


@pytest_asyncio.fixture
async def fake_daemon() -> AsyncIterator[Callable[..., Awaitable[FakeDaemon]]]:
    """Start loopback daemons on demand and stop them after the test."""
    daemons: list[FakeDaemon] = []

    async def _start(responder: Responder, **kwargs: Any) -> FakeDaemon:
        daemon = FakeDaemon(responder, **kwargs)
        await daemon.start()
        daemons.append(daemon)
        return daemon

    yield _start

    for daemon in daemons:
        await daemon.stop()
