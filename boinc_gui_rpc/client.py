"""High-level RPC client for the BOINC GUI RPC protocol.

This module is the entry point for callers. It handles:
- Connection lifecycle (connect, close, dispose)
- The challenge/response authorization handshake
- Single request/response calls with reply classification
- Polling of operations the daemon completes asynchronously

Command-specific request builders and reply records are built on top of
``RpcClient.call`` and ``RpcClient.poll``.
"""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import TYPE_CHECKING

from .auth import authenticate
from .channel import TransportChannel
from .classifier import ClassifiedResponse, classify_response
from .errors import BoincNotConnected, BoincPollCancelled, BoincUsageError
from .protocol import Payload, encode_request
from .status import IN_PROGRESS, STATUS_FIELD, describe_status, status_code_of
from .stream import DEFAULT_PORT

if TYPE_CHECKING:
    from .config import ClientConfig

_LOGGER = logging.getLogger(__name__)

DEFAULT_POLLING_INTERVAL = 0.25


class RpcClient:
    """Client for one BOINC daemon connection.

    Usage:
        async with RpcClient() as client:
            await client.connect("localhost", 31416)
            if await client.authorize("secret"):
                reply = await client.call("<get_cc_status/>", "cc_status")
    """

    def __init__(
        self,
        host: str | None = None,
        port: int = DEFAULT_PORT,
        *,
        password: str | None = None,
        polling_interval: float = DEFAULT_POLLING_INTERVAL,
        connect_timeout: float = 15.0,
    ) -> None:
        """Initialize client.

        Args:
            host: Default host used by connect() when none is given
            port: Default port used by connect() when none is given
            password: Default password used by authorize() when none is given
            polling_interval: Delay between poll attempts (seconds)
            connect_timeout: Timeout for opening the TCP stream (seconds)
        """
        self.host = host
        self.port = port
        self.password = password
        self.polling_interval = polling_interval
        self.connect_timeout = connect_timeout

        self._channel = TransportChannel()
        self._disposed = False

    @classmethod
    def from_config(cls, config: ClientConfig) -> RpcClient:
        """Create a client from a loaded configuration."""
        return cls(
            config.host,
            config.port,
            password=config.password,
            polling_interval=config.polling_interval,
            connect_timeout=config.connect_timeout,
        )

    async def __aenter__(self) -> RpcClient:
        self._check_disposed()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    # -------------------------------------------------------------------------
    # Public API: Connection Management
    # -------------------------------------------------------------------------

    async def connect(self, host: str | None = None, port: int | None = None) -> None:
        """Connect to the daemon.

        Raises:
            BoincUsageError: If already connected, disposed, or arguments are invalid
            BoincConnectionError: If the stream cannot be opened
            BoincTimeout: If opening the stream times out
        """
        self._check_disposed()

        host = host if host is not None else self.host
        port = port if port is not None else self.port

        if not host:
            raise BoincUsageError("host is required")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
            raise BoincUsageError(f"port must be in range 0-65535, got {port!r}")
        if self._channel.is_connected:
            raise BoincUsageError(
                "RpcClient is already connected. Close it before opening a new connection."
            )

        await self._channel.connect(host, port, timeout=self.connect_timeout)

    async def close(self) -> None:
        """Close the connection. The client can connect again afterwards."""
        self._check_disposed()
        await self._channel.close()

    async def dispose(self) -> None:
        """Close the connection and make the client unusable."""
        if self._disposed:
            return
        await self._channel.close()
        self._disposed = True

    @property
    def is_connected(self) -> bool:
        """Check if the client holds an open connection."""
        self._check_disposed()
        return self._channel.is_connected

    # -------------------------------------------------------------------------
    # Public API: Authorization
    # -------------------------------------------------------------------------

    async def authorize(self, password: str | None = None) -> bool:
        """Authorize the session with the daemon's GUI RPC password.

        Falls back to the password the client was created with.

        Returns:
            True if authorized, False if the password was refused
        """
        self._check_disposed()
        if password is None:
            password = self.password
        if password is None:
            raise BoincUsageError("password is required")
        self._check_connected()

        authorized = await authenticate(self, password)
        if authorized:
            _LOGGER.info("[%s] Session authorized", self._channel.peer)
        else:
            _LOGGER.warning("[%s] Authorization refused", self._channel.peer)
        return authorized

    # -------------------------------------------------------------------------
    # Public API: Calls
    # -------------------------------------------------------------------------

    async def call(
        self, payload: Payload, expected_tag: str | None = None
    ) -> ClassifiedResponse:
        """Send one request and classify its reply.

        Args:
            payload: Request body as text, bytes or an Element
            expected_tag: Tag of the domain reply, None for plain acknowledgements

        Raises:
            BoincNotConnected: If there is no open connection
            BoincConnectionClosed: If the daemon closed the socket mid-reply
            BoincMalformedResponse: If the reply is not well-formed
            BoincUnexpectedTag: If the reply tag is not recognized
        """
        self._check_disposed()
        reply = await self._channel.exchange(encode_request(payload))
        return classify_response(reply, expected_tag)

    async def poll(
        self,
        payload: Payload,
        expected_tag: str,
        *,
        interval: float | None = None,
        cancel: asyncio.Event | None = None,
        status_field: str = STATUS_FIELD,
    ) -> ClassifiedResponse:
        """Repeat a poll request until the daemon stops reporting IN_PROGRESS.

        Each attempt waits ``interval`` seconds first. Only the reserved
        in-progress status continues the loop; every other status, and any
        non-domain outcome, is returned as the terminal result.

        Raises:
            BoincPollCancelled: If ``cancel`` is set before or during a wait
        """
        delay = self.polling_interval if interval is None else interval
        attempts = 0

        while True:
            await self._poll_wait(delay, cancel)

            attempts += 1
            response = await self.call(payload, expected_tag)
            status = status_code_of(response, status_field)

            if status != IN_PROGRESS:
                _LOGGER.debug(
                    "[%s] Poll %s finished after %d attempts (status %s)",
                    self._channel.peer,
                    expected_tag,
                    attempts,
                    describe_status(status) if status is not None else response.tag,
                )
                return response

            _LOGGER.debug(
                "[%s] Poll %s still in progress (attempt %d)",
                self._channel.peer,
                expected_tag,
                attempts,
            )

    async def _poll_wait(self, delay: float, cancel: asyncio.Event | None) -> None:
        if cancel is None:
            await asyncio.sleep(delay)
            return

        if cancel.is_set():
            raise BoincPollCancelled("Poll cancelled")
        try:
            await asyncio.wait_for(cancel.wait(), timeout=delay)
        except TimeoutError:
            pass
        if cancel.is_set():
            raise BoincPollCancelled("Poll cancelled")

    def _check_disposed(self) -> None:
        if self._disposed:
            raise BoincUsageError("RpcClient has been disposed")

    def _check_connected(self) -> None:
        if not self._channel.is_connected:
            raise BoincNotConnected("RpcClient is not connected")
