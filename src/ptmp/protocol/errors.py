"""Protocol-layer exceptions.

Every codec or parsing failure is raised as one of these; transport
failures are reported separately, see :mod:`ptmp.transport.base`.
"""


class ProtocolError(Exception):
    """Base class for all protocol-layer errors."""


class UnexpectedEndOfStream(ProtocolError):
    """A field terminator was not found before the data ran out."""


class TruncatedFrame(UnexpectedEndOfStream):
    """The stream ended in the middle of a frame."""


class MalformedInteger(ProtocolError):
    """A frame header field is not a decimal integer."""


class InvalidFieldValue(ProtocolError):
    """A body field could not be parsed as the expected type."""


class NegotiationError(InvalidFieldValue):
    """The peer answered the negotiation with an incompatible identifier
    or protocol version.
    """


class FrameLengthMismatch(ProtocolError):
    """The content of a frame does not agree with its declared length."""


class UnsupportedType(ProtocolError):
    """A typed value uses a type tag this codec cannot handle."""


class InvalidState(ProtocolError):
    """An operation was attempted out of order for the session."""


class UnexpectedMessage(ProtocolError):
    """A frame of a different message type arrived than the one expected."""


class PeerDisconnected(ProtocolError):
    """The peer sent a disconnect message.

    :ivar reason: The reason string supplied by the peer, if any.
    """

    def __init__(self, reason=None):
        self.reason = reason
        if reason:
            message = 'peer disconnected: ' + reason
        else:
            message = 'peer disconnected'
        ProtocolError.__init__(self, message)


class AuthenticationRejected(ProtocolError):
    """The server answered the authentication handshake with a failed
    status.
    """
