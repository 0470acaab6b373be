from . import constants
from . import errors
from . import fields
from . import frame
from . import values
from . import message
from . import ipc
from . import observer

from .constants import IpcType, MsgType
from .errors import *
from .frame import Frame
from .values import IpcData
from .message import (
    AuthenticationChallenge,
    AuthenticationRequest,
    AuthenticationResponse,
    AuthenticationStatus,
    Disconnect,
    KeepAlive,
    NegotiationInfo,
)
from .ipc import IpcCallInfo, IpcCallResponseInfo


"""
PTMP Protocol Layer
===================

This package defines the PTMP codec: how messages are framed, how their
fields and typed values are rendered, and how IPC calls are laid out.

The protocol layer MUST NOT depend on any transport implementation; the
only thing it asks of a transport is write(), read_until() and read().

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Session (ptmp.session)
    Ordering of the handshake and calls
    - negotiate()
    - authenticate()
    - call()
    - disconnect()

    │
    ▼
Messages (message.py, ipc.py)
    Session message bodies, IPC call builder/parser
    - NegotiationInfo
    - Authentication*
    - IpcCallInfo / IpcCallResponseInfo

    │
    ▼
Typed Values (values.py)
    IpcData tagged union, keyed by IpcType

    │
    ▼
Fields (fields.py)
    NUL-terminated text fields, FieldReader cursor

    │
    ▼
Frames (frame.py)
    <length>\\0<type>\\0<body> envelope

---------------------------------------------------------------------

Below the Protocol Layer
------------------------

Transport (ptmp.transport)
    Moves bytes
    - TCP socket
    - ZeroMQ STREAM socket

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
