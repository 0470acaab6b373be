"""Field serializer.

A PTMP message body is a sequence of fields, each one rendered as text and
terminated by a single NUL byte. Fields never contain an embedded NUL; that
is a contract on the caller, not something checked here.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from .constants import TERMINATOR
from .errors import InvalidFieldValue, UnexpectedEndOfStream


ENCODING = "utf-8"

# Spellings accepted for a boolean field. The reference server only sends
# 'true' and 'false', the rest are tolerated.

_TRUE = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSE = frozenset(("0", "f", "F", "FALSE", "false", "False"))


def render(value: Any) -> str:
    """Return the text form of *value* as it appears in a field."""

    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, bytes):
        return value.decode(ENCODING)
    return str(value)


def write_field(value: Any) -> bytes:
    return render(value).encode(ENCODING) + TERMINATOR


def write_fields(values: Iterable[Any]) -> bytes:
    return b"".join(write_field(value) for value in values)


def decode_text(raw: bytes, name: Optional[str] = None) -> str:
    try:
        return raw.decode(ENCODING)
    except UnicodeDecodeError as e:
        raise InvalidFieldValue(f"{_label(name)}: not valid {ENCODING}: {raw!r}") from e


def parse_int(text: str, name: Optional[str] = None) -> int:
    # int() would also accept surrounding whitespace and underscores.
    stripped = text[1:] if text[:1] in ("-", "+") else text
    if not stripped.isdigit() or not stripped.isascii():
        raise InvalidFieldValue(f"{_label(name)}: not an integer: {text!r}")
    return int(text)


def parse_bool(text: str, name: Optional[str] = None) -> bool:
    """Parse a boolean field. An empty field is read as False rather than
    rejected; some server responses leave the status field blank.
    """

    if len(text) < 1:
        return False
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidFieldValue(f"{_label(name)}: not a boolean: {text!r}")


def _label(name: Optional[str]) -> str:
    return name if name else "field"


class FieldReader:
    """Cursor over a bounded block of bytes, typically one frame body.

    The reader never looks past the end of the block it was given, so the
    number of bytes it hands back is bounded by the declared frame length.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.position = 0

    def __repr__(self):
        return f"FieldReader({self.position}/{len(self.data)})"

    @property
    def consumed(self) -> int:
        return self.position

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position

    def at_end(self) -> bool:
        return self.position >= len(self.data)

    def read_raw(self, name: Optional[str] = None) -> bytes:
        """Return the next field without its terminator."""

        end = self.data.find(TERMINATOR, self.position)
        if end == -1:
            raise UnexpectedEndOfStream(
                f"{_label(name)}: no terminator in the remaining {self.remaining} bytes"
            )

        raw = self.data[self.position:end]
        self.position = end + 1
        return raw

    def read_field(self, name: Optional[str] = None) -> str:
        return decode_text(self.read_raw(name), name)

    def read_int(self, name: Optional[str] = None) -> int:
        return parse_int(self.read_field(name), name)

    def read_bool(self, name: Optional[str] = None) -> bool:
        return parse_bool(self.read_field(name), name)

    def read_rest(self) -> bytes:
        rest = self.data[self.position:]
        self.position = len(self.data)
        return rest


# Readers that pull fields straight off a transport. The transport's
# read_until() returns whatever it has, without the terminator, when the
# stream ends early.

def read_raw(transport, name: Optional[str] = None) -> bytes:
    """Return the next field from *transport*, including its terminator."""

    raw = transport.read_until(TERMINATOR)
    if not raw.endswith(TERMINATOR):
        raise UnexpectedEndOfStream(f"{_label(name)}: stream ended after {len(raw)} bytes")
    return raw


def read_field(transport, name: Optional[str] = None) -> str:
    return decode_text(read_raw(transport, name)[:-1], name)


def read_int(transport, name: Optional[str] = None) -> int:
    return parse_int(read_field(transport, name), name)


def read_bool(transport, name: Optional[str] = None) -> bool:
    return parse_bool(read_field(transport, name), name)
