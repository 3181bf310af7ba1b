"""TCP stream helpers for the BOINC GUI RPC transport."""

from __future__ import annotations

import asyncio

from .errors import BoincConnectionError, BoincTimeout

DEFAULT_PORT = 31416


async def open_stream(
    host: str,
    port: int = DEFAULT_PORT,
    *,
    timeout: float = 15.0,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Open a TCP stream to the daemon.

    Args:
        host: Target host
        port: Target port (default: 31416)
        timeout: Connection timeout in seconds
    """
    try:
        return await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise BoincTimeout(f"Connection to {host}:{port} timed out") from err
    except OSError as err:
        raise BoincConnectionError(f"Connection to {host}:{port} failed: {err}") from err
