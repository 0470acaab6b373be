"""Frame codec.

Every PTMP message travels as one frame::

    <length>\\0<type>\\0<body>

where *length* and *type* are ASCII decimal integers and *length* counts the
bytes of the type field (terminator included) plus the body. Frames are
always read in (length, type) order; this is the canonical order for both
directions, even though some historical clients read a few responses
type-first.
"""

from __future__ import annotations

from .constants import MsgType, TERMINATOR, is_known_type
from .errors import (
    FrameLengthMismatch,
    MalformedInteger,
    TruncatedFrame,
    UnexpectedEndOfStream,
    UnexpectedMessage,
)
from . import fields


class Frame:
    """ One length-prefixed, type-tagged message unit. A :class:`Frame` is
        built fresh for every send and is not modified afterwards.

        A frame received in lenient mode may carry fewer body bytes than
        its declared *length*; such a frame is flagged as :attr:`truncated`
        and cannot be re-encoded.
    """

    def __init__(self, type, body=b'', length=None):

        type = int(type)
        body = bytes(body)

        header = fields.write_field(type)
        actual = len(header) + len(body)

        if length is None:
            length = actual
        else:
            length = int(length)
            if length < actual:
                raise FrameLengthMismatch(f"declared length {length} is shorter than the {actual} bytes present")

        self._type = type
        self._body = body
        self._header = header
        self._length = length


    def __repr__(self):
        try:
            name = MsgType(self._type).name
        except ValueError:
            name = str(self._type)
        return f"Frame({name}, length={self._length}, body={self._body!r})"


    def __eq__(self, other):
        if not isinstance(other, Frame):
            return NotImplemented
        return (self._type, self._body, self._length) == (other._type, other._body, other._length)


    def __hash__(self):
        return hash((self._type, self._body, self._length))


    @property
    def type(self) -> int:
        return self._type

    @property
    def body(self) -> bytes:
        return self._body

    @property
    def length(self) -> int:
        """ The declared length: type field plus body, in bytes.
        """
        return self._length

    @property
    def truncated(self) -> bool:
        return self._length > len(self._header) + len(self._body)


    def encode(self) -> bytes:

        if self.truncated:
            raise FrameLengthMismatch('cannot encode a truncated frame')

        return fields.write_field(self._length) + self._header + self._body


    def reader(self) -> fields.FieldReader:
        """ Return a cursor over the body of this frame.
        """
        return fields.FieldReader(self._body)


# end of class Frame



def encode(type, body=b'') -> bytes:
    return Frame(type, body).encode()


def write_frame(transport, frame: Frame, observer=None) -> int:
    """Put one frame on the wire. Returns the number of bytes written."""

    data = frame.encode()
    count = transport.write(data)

    if observer is not None:
        observer.frame_sent(frame, data)

    return count


def read_frame(transport, *, strict: bool = True, observer=None) -> Frame:
    """Read one frame from *transport*.

    The header is read field by field; the body is then read in one block of
    exactly the declared size, so nothing past the end of the frame is ever
    consumed. With *strict* False a body cut short by the end of the stream
    is returned as a truncated frame instead of raising.
    """

    length_raw = _read_header_field(transport, "length")
    length = _header_int(length_raw, "length")

    type_raw = _read_header_field(transport, "type")
    type = _header_int(type_raw, "type")

    if not is_known_type(type):
        raise UnexpectedMessage(f"unknown message type {type} (declared length {length})")

    needed = length - len(type_raw)
    if needed < 0:
        raise FrameLengthMismatch(f"declared length {length} cannot hold the type field {type_raw!r}")

    if needed:
        body = transport.read(needed)
    else:
        body = b''

    if len(body) < needed and strict:
        raise TruncatedFrame(f"stream ended after {len(body)} of {needed} body bytes")

    frame = Frame(type, body, length)

    if observer is not None:
        observer.frame_received(frame)

    return frame


def _read_header_field(transport, name: str) -> bytes:
    try:
        return fields.read_raw(transport, name)
    except UnexpectedEndOfStream as e:
        raise TruncatedFrame(f"stream ended while reading the frame {name}") from e


def _header_int(raw: bytes, name: str) -> int:
    digits = raw[:-1] if raw.endswith(TERMINATOR) else raw
    if not digits.isdigit():
        raise MalformedInteger(f"frame {name} is not a decimal integer: {digits!r}")
    return int(digits)
