"""Classification of parsed replies into a closed set of outcomes.

Domain outcomes (success, expected reply, declared failure, unauthorized)
are returned as values. Transport and protocol faults are raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .document import RpcDocument, parse_document
from .errors import BoincOperationError, BoincUnauthorized, BoincUnexpectedTag

SUCCESS_TAG = "success"
ERROR_TAG = "error"
STATUS_TAG = "status"
UNAUTHORIZED_TAG = "unauthorized"


class ResponseKind(Enum):
    """Outcome variants of a classified reply."""

    SUCCESS = "success"
    DOMAIN_RESULT = "domain_result"
    OPERATION_ERROR = "operation_error"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class RpcSuccess:
    """Generic ``<success/>`` acknowledgement."""

    kind = ResponseKind.SUCCESS
    tag = SUCCESS_TAG


@dataclass(frozen=True)
class RpcDomainResult:
    """Reply whose element matched the caller's expected tag."""

    tag: str
    document: RpcDocument

    kind = ResponseKind.DOMAIN_RESULT


@dataclass(frozen=True)
class RpcOperationError:
    """Declared failure from an ``<error>`` or ``<status>`` reply."""

    message: str
    tag: str = ERROR_TAG

    kind = ResponseKind.OPERATION_ERROR


@dataclass(frozen=True)
class RpcUnauthorized:
    """The request needs an authorized session."""

    kind = ResponseKind.UNAUTHORIZED
    tag = UNAUTHORIZED_TAG


ClassifiedResponse = RpcSuccess | RpcDomainResult | RpcOperationError | RpcUnauthorized


def classify_response(
    response: bytes, expected_tag: str | None = None
) -> ClassifiedResponse:
    """Parse reply bytes and classify the (unwrapped) reply element.

    Raises:
        BoincMalformedResponse: If the reply is not well-formed
        BoincUnexpectedTag: If the element matches no marker and not ``expected_tag``
    """
    root = parse_document(response)

    # Single-result replies arrive wrapped in <boinc_gui_rpc_reply>.
    element = root[0] if len(root) == 1 else root
    tag = element.tag

    if expected_tag is None and tag == SUCCESS_TAG:
        return RpcSuccess()
    if expected_tag is not None and tag == expected_tag:
        return RpcDomainResult(tag=tag, document=RpcDocument(element))
    if tag in (ERROR_TAG, STATUS_TAG):
        return RpcOperationError(message="".join(element.itertext()), tag=tag)
    if tag == UNAUTHORIZED_TAG:
        return RpcUnauthorized()
    raise BoincUnexpectedTag(expected_tag, tag)


def raise_for_outcome(response: ClassifiedResponse) -> RpcDocument | None:
    """Turn declared failures into exceptions.

    Returns the document of a domain result, or None for a plain success.
    """
    if isinstance(response, RpcOperationError):
        raise BoincOperationError(response.message)
    if isinstance(response, RpcUnauthorized):
        raise BoincUnauthorized("RPC request requires authorization")
    if isinstance(response, RpcDomainResult):
        return response.document
    return None
