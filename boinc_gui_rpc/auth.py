"""Challenge/response authorization handshake.

The daemon issues a nonce for ``<auth1/>`` and expects the lowercase hex MD5
of ``nonce + password`` in ``<auth2>``. This proves knowledge of a shared
secret only; it does not protect the session against active attackers.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING

from .classifier import RpcDomainResult, RpcUnauthorized
from .errors import BoincUnexpectedTag
from .protocol import build_request

if TYPE_CHECKING:
    from .client import RpcClient

_LOGGER = logging.getLogger(__name__)

AUTH1_REQUEST = "<auth1/>"
NONCE_TAG = "nonce"
AUTHORIZED_TAG = "authorized"


def nonce_hash(nonce: str, password: str) -> str:
    """Return the hex MD5 digest of ``nonce + password``."""
    return hashlib.md5((nonce + password).encode("ascii", errors="replace")).hexdigest()


async def authenticate(client: RpcClient, password: str) -> bool:
    """Run the two-message handshake on ``client``.

    Returns:
        True if the daemon authorized the session, False if it refused

    Raises:
        BoincUnexpectedTag: If either reply is not part of the handshake
    """
    first = await client.call(AUTH1_REQUEST, NONCE_TAG)
    if not isinstance(first, RpcDomainResult):
        raise BoincUnexpectedTag(NONCE_TAG, first.tag)

    digest = nonce_hash(first.document.text, password)
    second = await client.call(
        build_request("auth2", {"nonce_hash": digest}), AUTHORIZED_TAG
    )

    if isinstance(second, RpcDomainResult):
        return True
    if isinstance(second, RpcUnauthorized):
        return False
    raise BoincUnexpectedTag(AUTHORIZED_TAG, second.tag)
