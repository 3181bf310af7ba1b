"""Client core for the BOINC GUI RPC protocol.

Provides connection management, message framing, reply classification,
the authorization handshake and polling of asynchronous daemon operations.
"""

__version__ = "0.1.0"

from .auth import authenticate, nonce_hash
from .channel import TransportChannel
from .classifier import (
    ClassifiedResponse,
    ResponseKind,
    RpcDomainResult,
    RpcOperationError,
    RpcSuccess,
    RpcUnauthorized,
    classify_response,
    raise_for_outcome,
)
from .client import RpcClient
from .config import ClientConfig, ConfigLoadError, load_config, read_password_file
from .document import RpcDocument, parse_document
from .errors import (
    BoincClientError,
    BoincConnectionClosed,
    BoincConnectionError,
    BoincMalformedResponse,
    BoincNotConnected,
    BoincOperationError,
    BoincPollCancelled,
    BoincTimeout,
    BoincUnauthorized,
    BoincUnexpectedTag,
    BoincUsageError,
)
from .protocol import build_request, encode_request, is_terminated
from .status import IN_PROGRESS, ErrorCode, status_code_of
from .stream import DEFAULT_PORT, open_stream

__all__ = [
    "DEFAULT_PORT",
    "IN_PROGRESS",
    "BoincClientError",
    "BoincConnectionClosed",
    "BoincConnectionError",
    "BoincMalformedResponse",
    "BoincNotConnected",
    "BoincOperationError",
    "BoincPollCancelled",
    "BoincTimeout",
    "BoincUnauthorized",
    "BoincUnexpectedTag",
    "BoincUsageError",
    "ClassifiedResponse",
    "ClientConfig",
    "ConfigLoadError",
    "ErrorCode",
    "ResponseKind",
    "RpcClient",
    "RpcDocument",
    "RpcDomainResult",
    "RpcOperationError",
    "RpcSuccess",
    "RpcUnauthorized",
    "TransportChannel",
    "__version__",
    "authenticate",
    "build_request",
    "classify_response",
    "encode_request",
    "is_terminated",
    "load_config",
    "nonce_hash",
    "open_stream",
    "parse_document",
    "raise_for_outcome",
    "read_password_file",
    "status_code_of",
]
