"""Wire constants for PTMP.

Keep these in one place to avoid magic numbers in message handling.
"""

from __future__ import annotations

import enum


IDENTIFIER = "PTMP"
VERSION = 1

DEFAULT_IPC_PORT = 39000
DEFAULT_KEEP_ALIVE_PERIOD = 60
DEFAULT_RESERVED = ":PTVER8.0.0.0000"

TERMINATOR = b"\0"

# Separator between segments of a dotted call name, and the marker field
# written after each non-final segment and after the argument list.
CALL_SEPARATOR = "."
SCOPE_MARKER = " 0 "

# Negotiation enumerations. Only the 'none' values of encryption and
# compression are ever sent by this client.

ENCODING_TEXT = 1
ENCODING_BINARY = 2

ENCRYPTION_NONE = 1
COMPRESSION_NONE = 1

AUTHENTICATION_CLEARTEXT = 1
AUTHENTICATION_SIMPLE = 2
AUTHENTICATION_MD5 = 4


class MsgType(enum.IntEnum):
    NEGOTIATION_REQUEST = 0
    NEGOTIATION_RESPONSE = 1
    AUTHENTICATION_REQUEST = 2
    AUTHENTICATION_CHALLENGE = 3
    AUTHENTICATION_RESPONSE = 4
    AUTHENTICATION_STATUS = 5
    KEEP_ALIVE = 6
    DISCONNECT = 7
    COMMUNICATION = 8
    IPC_CALL = 100


# IPC messages occupy type codes 100-199, multi-user messages 200-299.

IPC_RANGE = range(100, 200)
MULTIUSER_RANGE = range(200, 300)


def is_known_type(code: int) -> bool:
    """Whether *code* is a message type this client can expect to see."""

    if code in IPC_RANGE or code in MULTIUSER_RANGE:
        return True

    try:
        MsgType(code)
    except ValueError:
        return False
    return True


class IpcType(enum.IntEnum):
    """Type tags for typed IPC arguments and return values."""

    BYTE = 1
    BOOL = 2
    SHORT = 3
    INT = 4
    LONG = 5
    FLOAT = 6
    DOUBLE = 7
    STRING = 8
    QSTRING = 9
    IP_ADDRESS = 10
    IPV6_ADDRESS = 11
    MAC_ADDRESS = 12
    UUID = 13

    # Composite types, IPC only.
    PAIR = 14
    VECTOR = 15
    DATA = 16


TEXT_TYPES = frozenset((
    IpcType.STRING,
    IpcType.QSTRING,
    IpcType.IP_ADDRESS,
    IpcType.IPV6_ADDRESS,
    IpcType.MAC_ADDRESS,
    IpcType.UUID,
))

INTEGER_TYPES = frozenset((
    IpcType.BYTE,
    IpcType.SHORT,
    IpcType.INT,
    IpcType.LONG,
))

FLOAT_TYPES = frozenset((
    IpcType.FLOAT,
    IpcType.DOUBLE,
))

NUMERIC_TYPES = INTEGER_TYPES | FLOAT_TYPES | frozenset((IpcType.BOOL,))

UNSUPPORTED_TYPES = frozenset((
    IpcType.PAIR,
    IpcType.DATA,
))
