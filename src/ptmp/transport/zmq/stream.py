"""ZeroMQ STREAM transport.

A STREAM socket speaks raw TCP to a peer that knows nothing about ZeroMQ,
which is exactly what a PTMP server is. Every message on the socket is a
two-part sequence:

    routing_id, data

An empty *data* part received from the peer is a connect or disconnect
notification; sending an empty *data* part closes the connection.
"""

from __future__ import annotations

import logging
from typing import Optional

import zmq

from ..base import (
    BufferedTransport,
    TransportClosed,
    TransportConnectionError,
    TransportError,
    TransportTimeout,
)


logger = logging.getLogger(__name__)

zmq_context = zmq.Context.instance()

# How long to wait for the connection to come up if no timeout was given.
connect_timeout = 10.0

# Milliseconds to keep flushing queued data, such as the disconnect
# message, after the socket is closed.
linger = 1000


class StreamTransport(BufferedTransport):
    """Connect a ZeroMQ STREAM socket to *address* and *port*."""

    def __init__(self, address: str, port: int, timeout: Optional[float] = None):

        BufferedTransport.__init__(self)

        self.address = address
        self.port = int(port)
        self.timeout = timeout
        self.routing_id: Optional[bytes] = None

        server = f"tcp://{address}:{self.port}"

        self.socket = zmq_context.socket(zmq.STREAM)
        self.socket.setsockopt(zmq.LINGER, linger)

        if timeout is not None:
            milliseconds = int(timeout * 1000)
            self.socket.setsockopt(zmq.RCVTIMEO, milliseconds)
            self.socket.setsockopt(zmq.SNDTIMEO, milliseconds)

        logger.info("connecting to PTMP server at %s", server)

        try:
            self.socket.connect(server)
            self.routing_id = self._wait_connected(server)
        except zmq.ZMQError as e:
            self.socket.close()
            self.socket = None
            raise TransportConnectionError(f"cannot connect to {server}: {e}") from e
        except TransportError:
            self.socket.close()
            self.socket = None
            raise

        logger.info("connected to %s", server)


    def _wait_connected(self, server: str) -> bytes:
        """ The first message on a freshly connected STREAM socket is the
            connect notification; it carries the routing id for the peer.
        """

        wait = self.timeout if self.timeout is not None else connect_timeout

        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)

        if not poller.poll(int(wait * 1000)):
            raise TransportTimeout(f"no connection to {server} in {wait:.2f} sec")

        routing_id, data = self.socket.recv_multipart()
        if data:
            # Data arrived with the connection; keep it.
            self._buffer.extend(data)

        return routing_id


    def _check(self):
        if self.socket is None:
            raise TransportClosed('transport is closed')


    def _recv(self) -> bytes:
        self._check()

        try:
            routing_id, data = self.socket.recv_multipart()
        except zmq.Again as e:
            raise TransportTimeout('receive timed out') from e
        except zmq.ZMQError as e:
            raise TransportConnectionError(f"receive failed: {e}") from e

        if routing_id != self.routing_id:
            # Not our connection.
            return self._recv()

        # An empty data part here is the disconnect notification, which
        # is also what the end of the stream looks like to our caller.
        return data


    def write(self, data: bytes) -> int:
        self._check()

        if not data:
            # An empty part would close the connection.
            return 0

        try:
            self.socket.send_multipart((self.routing_id, data))
        except zmq.Again as e:
            raise TransportTimeout('send timed out') from e
        except zmq.ZMQError as e:
            raise TransportConnectionError(f"send failed: {e}") from e

        return len(data)


    def close(self) -> None:
        sock = self.socket
        if sock is None:
            return

        self.socket = None

        try:
            sock.send_multipart((self.routing_id, b''), flags=zmq.NOBLOCK)
        except zmq.ZMQError:
            # The peer may already be gone.
            pass

        sock.close()
        logger.info("connection to %s:%d closed", self.address, self.port)


    @property
    def is_open(self) -> bool:
        return self.socket is not None


# end of class StreamTransport


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
