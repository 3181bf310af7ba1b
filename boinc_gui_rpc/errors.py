"""Client error types for BOINC GUI RPC interactions."""

from __future__ import annotations


class BoincClientError(Exception):
    """Base error for BOINC GUI RPC client failures."""


class BoincUsageError(BoincClientError):
    """The client was used incorrectly (already connected, disposed, bad arguments)."""


class BoincNotConnected(BoincClientError):
    """Operation attempted without an active connection."""


class BoincConnectionError(BoincClientError):
    """Network connection to the daemon could not be opened."""


class BoincTimeout(BoincClientError):
    """Timeout while opening the connection to the daemon."""


class BoincConnectionClosed(BoincClientError):
    """Remote end closed the socket before the reply terminator arrived."""


class BoincMalformedResponse(BoincClientError):
    """Reply could not be parsed or a field could not be converted."""


class BoincUnexpectedTag(BoincClientError):
    """Reply element matched neither a known marker nor the expected tag."""

    def __init__(self, expected_tag: str | None, actual_tag: str) -> None:
        if expected_tag is None:
            message = (
                "Expected <success/>, <error>, <status> or <unauthorized/> "
                f"element but encountered <{actual_tag}>"
            )
        else:
            message = f"Expected <{expected_tag}> element but encountered <{actual_tag}>"
        super().__init__(message)
        self.expected_tag = expected_tag
        self.actual_tag = actual_tag


class BoincOperationError(BoincClientError):
    """The daemon reported a failure with an <error> or <status> reply."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BoincUnauthorized(BoincClientError):
    """The daemon rejected the request because the session is not authorized."""


class BoincPollCancelled(BoincClientError):
    """The cancellation signal fired while waiting between poll attempts."""
