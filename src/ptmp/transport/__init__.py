"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    TransportClosed,
    BufferedTransport,
    MemoryTransport,
)

from . import tcp


backends = ('tcp', 'zmq')


def connect(address, port, backend=None, timeout=None):
    """ Return a connected :class:`Transport` for the requested *backend*,
        either 'tcp' or 'zmq'. If no backend is specified the configured
        default is used; see :func:`ptmp.config.load`.
    """

    if backend is None:
        from .. import config
        backend = config.load()['transport']

    if backend == 'tcp':
        return tcp.TcpTransport(address, port, timeout)

    if backend == 'zmq':
        # Imported on demand, pyzmq starts a context on import.
        from .zmq import StreamTransport
        return StreamTransport(address, port, timeout)

    raise ValueError(f"unknown PTMP transport backend: {backend!r}")
