""" Plain TCP transport over a :mod:`socket` connection.
"""

from __future__ import annotations

import logging
import socket
from typing import Optional

from .base import (
    BufferedTransport,
    TransportClosed,
    TransportConnectionError,
    TransportTimeout,
)


logger = logging.getLogger(__name__)


class TcpTransport(BufferedTransport):
    """ Connect to *address* and *port* and exchange raw bytes. The optional
        *timeout* (seconds) applies to the connect and to every individual
        socket operation; None blocks indefinitely.
    """

    recv_size = 4096

    def __init__(self, address: str, port: int, timeout: Optional[float] = None, sock=None):

        BufferedTransport.__init__(self)

        port = int(port)
        self.address = address
        self.port = port

        if sock is None:
            logger.info("connecting to PTMP server at %s:%d", address, port)
            try:
                sock = socket.create_connection((address, port), timeout=timeout)
            except socket.timeout as e:
                raise TransportTimeout(f"connect to {address}:{port} timed out") from e
            except OSError as e:
                raise TransportConnectionError(f"cannot connect to {address}:{port}: {e}") from e
            logger.info("connected to %s:%d", address, port)

        sock.settimeout(timeout)
        self.socket = sock


    @classmethod
    def from_socket(cls, sock, timeout: Optional[float] = None) -> "TcpTransport":
        """ Wrap an already connected socket.
        """

        try:
            peer = sock.getpeername()
        except OSError:
            peer = None

        # Only internet sockets have an (address, port) peer name.
        if isinstance(peer, tuple):
            address, port = peer[:2]
        else:
            address, port = peer, 0

        return cls(address, port, timeout, sock=sock)


    def _check(self):
        if self.socket is None:
            raise TransportClosed('transport is closed')


    def _recv(self) -> bytes:
        self._check()

        try:
            return self.socket.recv(self.recv_size)
        except socket.timeout as e:
            raise TransportTimeout('receive timed out') from e
        except OSError as e:
            raise TransportConnectionError(f"receive failed: {e}") from e


    def write(self, data: bytes) -> int:
        self._check()

        try:
            self.socket.sendall(data)
        except socket.timeout as e:
            raise TransportTimeout('send timed out') from e
        except OSError as e:
            raise TransportConnectionError(f"send failed: {e}") from e

        return len(data)


    def close(self) -> None:
        sock = self.socket
        if sock is None:
            return

        self.socket = None

        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Already disconnected by the peer.
            pass

        sock.close()
        logger.info("connection to %s:%s closed", self.address, self.port)


    @property
    def is_open(self) -> bool:
        return self.socket is not None


# end of class TcpTransport


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
