""" IPC call construction and response parsing.

    An IPC call addresses a dotted call path, such as
    ``appWindow.getActiveWorkspace.getLogicalWorkspace``. On the wire each
    segment is its own field, with a marker field of ``" 0 "`` after every
    segment except the last; the typed arguments follow, and one more marker
    closes the argument list::

        1\\0appWindow\\0 0 \\0getVersion\\0 0 \\0

    The response carries the call id followed by zero or more typed return
    values, bounded by the length of the frame that carries them.
"""

from __future__ import annotations

import itertools
import threading
from typing import Any, Iterable, List, Optional

from .constants import CALL_SEPARATOR, IPC_RANGE, MsgType, SCOPE_MARKER
from .errors import FrameLengthMismatch, UnexpectedEndOfStream, UnexpectedMessage
from .frame import Frame
from .values import IpcData, decode_value, encode_typed, wrap
from . import fields


class IpcCallInfo:
    """ A single IPC call: the *call_id* used to tag the response, the
        dotted *call_name*, and the ordered *args*. Arguments that are not
        already :class:`IpcData` are wrapped with a type guessed from their
        Python type.
    """

    msg_type = MsgType.IPC_CALL

    def __init__(self, call_id: int, call_name: str, args: Iterable[Any] = ()):
        self.call_id = int(call_id)
        self.call_name = call_name
        self.args = [wrap(arg) for arg in args]

    def __repr__(self):
        return f"IpcCallInfo({self.call_id}, {self.call_name!r}, {self.args!r})"

    def encode(self) -> bytes:
        return build_call(self.call_id, self.call_name, self.args)

    def frame(self) -> Frame:
        return Frame(self.msg_type, self.encode())


# end of class IpcCallInfo



class IpcCallResponseInfo:
    """ The decoded response to an IPC call. The *complete* flag is False
        when the frame ended in the middle of a return value and the parse
        stopped early.
    """

    def __init__(self, call_id: int, rets: Optional[List[IpcData]] = None, complete: bool = True):
        self.call_id = call_id
        self.rets = list(rets) if rets else list()
        self.complete = complete

    def __repr__(self):
        return f"IpcCallResponseInfo({self.call_id}, {self.rets!r}, complete={self.complete})"

    def __eq__(self, other):
        if not isinstance(other, IpcCallResponseInfo):
            return NotImplemented
        return (self.call_id, self.rets, self.complete) == (other.call_id, other.rets, other.complete)

    def python(self) -> List[Any]:
        """ Return the return values as native Python values.
        """
        return [ret.python() for ret in self.rets]


# end of class IpcCallResponseInfo



def build_call(call_id: int, call_name: str, args: Iterable[Any] = ()) -> bytes:
    """Return the body of an IPC call frame."""

    segments = call_name.split(CALL_SEPARATOR)
    for segment in segments:
        if segment == '':
            raise ValueError(f"empty segment in call name {call_name!r}")

    parts = [fields.write_field(int(call_id))]

    last = len(segments) - 1
    for index, segment in enumerate(segments):
        parts.append(fields.write_field(segment))
        if index < last:
            parts.append(fields.write_field(SCOPE_MARKER))

    for arg in args:
        parts.append(encode_typed(wrap(arg)))

    parts.append(fields.write_field(SCOPE_MARKER))
    return b''.join(parts)


def parse_call_response(frame: Frame, *, strict: bool = False) -> IpcCallResponseInfo:
    """ Decode an IPC call response from *frame*.

        Return values are read until the frame body is used up; nothing past
        the declared frame length is ever looked at. If the body runs out in
        the middle of a value the lenient default is to stop and return what
        was decoded so far, flagged as incomplete; with *strict* set a
        :class:`FrameLengthMismatch` is raised instead.
    """

    if frame.type not in IPC_RANGE:
        raise UnexpectedMessage(f"expected an IPC frame, received type {frame.type}")

    reader = frame.reader()
    call_id = reader.read_int('call id')

    rets = list()
    complete = not frame.truncated

    while not reader.at_end():
        try:
            tag = reader.read_field('type id')
            if tag == SCOPE_MARKER:
                # Closes the return list; nothing may follow it.
                if not reader.at_end():
                    if strict:
                        raise FrameLengthMismatch(
                            f"IPC response {call_id}: {reader.remaining} bytes after the closing marker"
                        )
                    complete = False
                break
            rets.append(decode_value(fields.parse_int(tag, 'type id'), reader))
        except UnexpectedEndOfStream as e:
            if strict:
                raise FrameLengthMismatch(
                    f"IPC response {call_id}: value runs past the declared length {frame.length}"
                ) from e
            complete = False
            break

    if strict and frame.truncated:
        raise FrameLengthMismatch(f"IPC response {call_id}: body shorter than the declared length {frame.length}")

    return IpcCallResponseInfo(call_id, rets, complete)


_id_min = 1
_id_max = 0x7FFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def next_call_id() -> int:
    """ Return the next call identification number. Numbers are unique
        within this process until they wrap around.
    """

    global _id_ticker

    with _id_lock:
        call_id = next(_id_ticker)

        if call_id >= _id_max:
            _id_ticker = itertools.count(_id_min)

    return call_id
