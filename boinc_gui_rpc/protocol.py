"""Wire framing helpers for the BOINC GUI RPC protocol.

Every request is wrapped in a ``<boinc_gui_rpc_request>`` envelope and both
directions end each message with a single ``0x03`` byte.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

REQUEST_ENVELOPE_OPEN = "<boinc_gui_rpc_request>"
REQUEST_ENVELOPE_CLOSE = "</boinc_gui_rpc_request>"
TERMINATOR = 0x03
TERMINATOR_BYTE = bytes([TERMINATOR])

# Some daemon versions emit this prolog inside the reply although the payload
# is not ISO-8859-1 (BOINC/boinc#1509). Only this exact string is stripped.
LEGACY_XML_PROLOG = b'<?xml version="1.0" encoding="ISO-8859-1" ?>'

Payload = str | bytes | ET.Element


def payload_text(payload: Payload) -> str:
    """Return the request text for a str, bytes or Element payload."""
    if isinstance(payload, ET.Element):
        return ET.tostring(payload, encoding="unicode", short_empty_elements=True)
    if isinstance(payload, bytes):
        return payload.decode("ascii", errors="replace")
    return payload


def encode_request(payload: Payload) -> bytes:
    """Wrap a payload in the request envelope and append the terminator.

    Non-ASCII characters are replaced with ``?``.
    """
    text = f"{REQUEST_ENVELOPE_OPEN}\n{payload_text(payload)}\n{REQUEST_ENVELOPE_CLOSE}\n"
    return text.encode("ascii", errors="replace") + TERMINATOR_BYTE


def is_terminated(buffer: bytes | bytearray | memoryview) -> bool:
    """Return True when the last byte of ``buffer`` is the terminator."""
    return len(buffer) > 0 and buffer[-1] == TERMINATOR


def strip_legacy_prolog(response: bytes) -> bytes:
    """Remove the known-bad encoding declaration from a reply."""
    if LEGACY_XML_PROLOG in response:
        return response.replace(LEGACY_XML_PROLOG, b"")
    return response


def build_request(tag: str, fields: dict[str, Any] | None = None) -> ET.Element:
    """Build a request element with one child per field.

    Boolean ``True`` values produce an empty flag element, ``False`` and
    ``None`` values are omitted.
    """
    element = ET.Element(tag)
    for name, value in (fields or {}).items():
        if value is None or value is False:
            continue
        child = ET.SubElement(element, name)
        if value is not True:
            child.text = str(value)
    return element
