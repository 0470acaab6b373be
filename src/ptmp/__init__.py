""" Python implementation of a PTMP client. This includes the protocol
    codec (frames, fields, typed values, IPC calls), byte-stream transports,
    and the session state machine that sequences negotiation,
    authentication, IPC calls and disconnect.
"""

# Utility components.

from . import json

# Submodules used by multiple other components.

from . import protocol
from . import config
from . import transport
home = config.directory

# Primary public-facing interfaces.

from . import session
connect = session.connect

from .session import Session, State
from .protocol.errors import *
from .protocol.values import IpcData
from .protocol.constants import IpcType, MsgType

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
