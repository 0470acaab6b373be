"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`ptmp.protocol` so the protocol remains transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A read or write did not complete in time."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportClosed(TransportError):
    """The transport was used after it was closed."""


class Transport(ABC):
    """Minimal contract for a byte-stream transport."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write all of *data*; return the number of bytes written."""

    @abstractmethod
    def read_until(self, terminator: bytes) -> bytes:
        """Return bytes up to and including *terminator*.

        If the stream ends first, whatever was read is returned without a
        terminator; an empty result means the stream had already ended.
        """

    @abstractmethod
    def read(self, size: int) -> bytes:
        """Return exactly *size* bytes, or fewer if the stream ends first."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class BufferedTransport(Transport):
    """Implements the reads on top of a single primitive, :meth:`_recv`,
    which returns the next chunk of whatever size is available, or an empty
    bytes object at the end of the stream.
    """

    def __init__(self):
        self._buffer = bytearray()
        self._eof = False

    @abstractmethod
    def _recv(self) -> bytes:
        """Return the next available chunk; b'' at end of stream."""

    def _check(self) -> None:
        """Raise TransportClosed if the transport can no longer be used."""

    def _fill(self) -> bool:
        if self._eof:
            return False

        chunk = self._recv()
        if not chunk:
            self._eof = True
            return False

        self._buffer.extend(chunk)
        return True

    def read_until(self, terminator: bytes) -> bytes:
        self._check()
        start = 0

        while True:
            index = self._buffer.find(terminator, start)
            if index != -1:
                end = index + len(terminator)
                return self._take(end)

            # The terminator may straddle the boundary between chunks.
            start = max(0, len(self._buffer) - len(terminator) + 1)

            if not self._fill():
                return self._take(len(self._buffer))

    def read(self, size: int) -> bytes:
        self._check()

        while len(self._buffer) < size:
            if not self._fill():
                break

        return self._take(min(size, len(self._buffer)))

    def _take(self, count: int) -> bytes:
        data = bytes(self._buffer[:count])
        del self._buffer[:count]
        return data

    @property
    def buffered(self) -> int:
        """Number of bytes received but not yet consumed."""
        return len(self._buffer)


class MemoryTransport(BufferedTransport):
    """In-process transport over fixed input bytes. Everything written is
    collected in :attr:`written`. Useful for replaying captured traffic.
    """

    def __init__(self, incoming: bytes = b'', chunk_size: Optional[int] = None):
        BufferedTransport.__init__(self)
        self._incoming = bytearray(incoming)
        self.chunk_size = chunk_size
        self.written = bytearray()
        self.closed = False

    def feed(self, data: bytes) -> None:
        """Append more bytes for the reading side."""
        self._incoming.extend(data)
        self._eof = False

    def _check(self) -> None:
        if self.closed:
            raise TransportClosed('transport is closed')

    def _recv(self) -> bytes:
        size = self.chunk_size or len(self._incoming)
        chunk = bytes(self._incoming[:size])
        del self._incoming[:size]
        return chunk

    def write(self, data: bytes) -> int:
        self._check()
        self.written.extend(data)
        return len(data)

    def close(self) -> None:
        self.closed = True

    @property
    def is_open(self) -> bool:
        return not self.closed
