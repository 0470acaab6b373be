import os
import pytest

import ptmp
from ptmp.protocol import frame
from ptmp.transport.base import MemoryTransport


class RecordingObserver(ptmp.protocol.observer.Observer):
    """ Keep every observed event, in order, for later inspection.
    """

    def __init__(self):
        self.events = list()

    def frame_sent(self, sent, data):
        self.events.append(('sent', sent.type))

    def frame_received(self, received):
        self.events.append(('received', received.type))

    def error(self, operation, exception):
        self.events.append(('error', operation, type(exception)))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """ Point the configuration at an empty directory, with no PTMP_*
        environment variables set.
    """

    for variable in list(os.environ):
        if variable.startswith('PTMP_'):
            monkeypatch.delenv(variable)

    monkeypatch.setattr(ptmp.config.directory, 'found', str(tmp_path))
    monkeypatch.setattr(ptmp.config, '_cache', None)

    yield tmp_path


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def server_frames():
    """ Return a function that encodes (type, body) pairs into one stream of
        bytes and wraps it in a :class:`MemoryTransport`.
    """

    def build(*frames, chunk_size=None):
        incoming = b''.join(frame.encode(type, body) for type, body in frames)
        return MemoryTransport(incoming, chunk_size=chunk_size)

    return build


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
