from . import stream
from .stream import StreamTransport
