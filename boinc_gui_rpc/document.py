"""Parsed reply documents with typed field accessors."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

from .errors import BoincMalformedResponse
from .protocol import strip_legacy_prolog

_TRUE_VALUES = frozenset({"1", "true"})
_FALSE_VALUES = frozenset({"0", "false"})


def parse_document(response: bytes) -> ET.Element:
    """Parse reply bytes into an element tree root.

    Raises:
        BoincMalformedResponse: If the reply is not well-formed XML
    """
    text = strip_legacy_prolog(response).decode("ascii", errors="replace")
    try:
        return ET.fromstring(text)
    except ET.ParseError as err:
        raise BoincMalformedResponse(f"RPC response is malformed: {err}") from err


class RpcDocument:
    """Read-only view over one reply element.

    Accessors look up a direct child by name and return ``default`` when it
    is missing. A child that is present but cannot be converted raises
    ``BoincMalformedResponse``.
    """

    __slots__ = ("_element",)

    def __init__(self, element: ET.Element) -> None:
        self._element = element

    @classmethod
    def from_bytes(cls, response: bytes) -> RpcDocument:
        return cls(parse_document(response))

    @property
    def element(self) -> ET.Element:
        return self._element

    @property
    def tag(self) -> str:
        return self._element.tag

    @property
    def text(self) -> str:
        """All text content of the element, like ``(string)XElement``."""
        return "".join(self._element.itertext())

    def __repr__(self) -> str:
        return f"RpcDocument(<{self.tag}>)"

    def has(self, name: str) -> bool:
        return self._element.find(name) is not None

    def child(self, name: str) -> RpcDocument | None:
        found = self._element.find(name)
        return RpcDocument(found) if found is not None else None

    def children(self, name: str | None = None) -> list[RpcDocument]:
        if name is None:
            return [RpcDocument(e) for e in self._element]
        return [RpcDocument(e) for e in self._element.iterfind(name)]

    def __iter__(self) -> Iterator[RpcDocument]:
        return iter(self.children())

    def __len__(self) -> int:
        return len(self._element)

    def get_str(self, name: str, default: str | None = None) -> str | None:
        found = self._element.find(name)
        if found is None:
            return default
        return "".join(found.itertext())

    def get_int(self, name: str, default: int = 0) -> int:
        raw = self.get_str(name)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError as err:
            raise BoincMalformedResponse(
                f"Field <{name}> is not an integer: {raw!r}"
            ) from err

    def get_float(self, name: str, default: float = 0.0) -> float:
        raw = self.get_str(name)
        if raw is None:
            return default
        try:
            return float(raw.strip())
        except ValueError as err:
            raise BoincMalformedResponse(
                f"Field <{name}> is not a number: {raw!r}"
            ) from err

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Read a flag; an empty element such as ``<flag/>`` counts as True."""
        found = self._element.find(name)
        if found is None:
            return default
        if len(found) == 0 and not (found.text or "").strip():
            return True
        raw = "".join(found.itertext()).strip().lower()
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        raise BoincMalformedResponse(f"Field <{name}> is not a boolean: {raw!r}")

    def get_duration(
        self, name: str, default: timedelta = timedelta(0)
    ) -> timedelta:
        """Read a number of seconds as a timedelta."""
        if not self.has(name):
            return default
        return timedelta(seconds=self.get_float(name))

    def get_timestamp(
        self, name: str, default: datetime | None = None
    ) -> datetime | None:
        """Read unix epoch seconds as an aware UTC datetime."""
        if not self.has(name):
            return default
        seconds = self.get_float(name)
        return datetime.fromtimestamp(0, UTC) + timedelta(
            milliseconds=int(seconds * 1000)
        )
