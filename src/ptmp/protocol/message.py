""" Message bodies for the session-level PTMP exchanges: negotiation,
    the four-step authentication handshake, and disconnect.

    Each class knows its PTMP message type, how to render its fields as a
    frame body (:func:`encode`), and how to parse them back out of a
    received :class:`ptmp.protocol.frame.Frame` (:func:`decode`).
"""

import time as timemodule
import uuid

from . import constants
from . import fields
from .errors import UnexpectedMessage
from .frame import Frame


class Message:
    """ Base class for the fixed-layout session messages. Subclasses
        declare the *msg_type* and the ordered *field_names*; the default
        encoding writes each named attribute as one field.
    """

    msg_type = None
    field_names = ()

    def __repr__(self):
        values = ', '.join(f"{name}={getattr(self, name)!r}" for name in self.field_names)
        return f"{type(self).__name__}({values})"


    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.values() == other.values()


    def values(self):
        return tuple(getattr(self, name) for name in self.field_names)


    def encode(self):
        """ Return the frame body for this message.
        """
        return fields.write_fields(self.values())


    def frame(self):
        return Frame(self.msg_type, self.encode())


    @classmethod
    def check_type(cls, frame):
        if frame.type != cls.msg_type:
            raise UnexpectedMessage(f"expected a {cls.msg_type.name} frame, received type {frame.type}")


    @classmethod
    def decode(cls, frame):
        cls.check_type(frame)
        return cls.parse(frame.reader())


    @classmethod
    def parse(cls, reader):
        values = [reader.read_field(name) for name in cls.field_names]
        return cls(*values)


# end of class Message



def make_timestamp(when=None):
    """ Return the negotiation timestamp format, YYYYmmddHHMMSS, for the
        UNIX epoch time *when* (default: now, local time).
    """

    if when is None:
        when = timemodule.time()

    return timemodule.strftime('%Y%m%d%H%M%S', timemodule.localtime(when))



class NegotiationInfo(Message):
    """ The negotiation request sent by the client, and the response read
        back from the server. Every field has a usable default; a fresh
        *app_id* is generated if none is supplied.
    """

    msg_type = constants.MsgType.NEGOTIATION_REQUEST
    response_type = constants.MsgType.NEGOTIATION_RESPONSE

    field_names = (
        'identifier',
        'version',
        'app_id',
        'encoding',
        'encryption',
        'compression',
        'authentication',
        'timestamp',
        'keep_alive_period',
        'reserved',
    )

    def __init__(self, app_id=None, identifier=constants.IDENTIFIER,
                 version=constants.VERSION,
                 encoding=constants.ENCODING_TEXT,
                 encryption=constants.ENCRYPTION_NONE,
                 compression=constants.COMPRESSION_NONE,
                 authentication=constants.AUTHENTICATION_CLEARTEXT,
                 timestamp=None,
                 keep_alive_period=constants.DEFAULT_KEEP_ALIVE_PERIOD,
                 reserved=constants.DEFAULT_RESERVED):

        if app_id is None:
            app_id = str(uuid.uuid4())

        if timestamp is None:
            timestamp = make_timestamp()

        self.identifier = identifier
        self.version = int(version)
        self.app_id = app_id
        self.encoding = int(encoding)
        self.encryption = int(encryption)
        self.compression = int(compression)
        self.authentication = int(authentication)
        self.timestamp = timestamp
        self.keep_alive_period = int(keep_alive_period)
        self.reserved = reserved


    def encode(self):

        # The application id goes out wrapped in braces, and the body ends
        # with one extra empty field; Packet Tracer expects both.

        values = list(self.values())
        values[2] = '{' + self.app_id + '}'
        return fields.write_fields(values) + constants.TERMINATOR


    @classmethod
    def check_type(cls, frame):

        # The same layout is used in both directions.

        if frame.type not in (cls.msg_type, cls.response_type):
            raise UnexpectedMessage(f"expected a negotiation frame, received type {frame.type}")


    @classmethod
    def parse(cls, reader):

        identifier = reader.read_field('identifier')
        version = reader.read_int('version')
        app_id = reader.read_field('app id')
        encoding = reader.read_int('encoding')
        encryption = reader.read_int('encryption')
        compression = reader.read_int('compression')
        authentication = reader.read_int('authentication')
        timestamp = reader.read_field('timestamp')
        keep_alive_period = reader.read_int('keep alive period')
        reserved = reader.read_field('reserved')

        # Anything after the reserved field, such as the empty padding
        # field, is ignored.

        if app_id.startswith('{') and app_id.endswith('}'):
            app_id = app_id[1:-1]

        return cls(app_id, identifier, version, encoding, encryption,
                   compression, authentication, timestamp,
                   keep_alive_period, reserved)


# end of class NegotiationInfo



class AuthenticationRequest(Message):

    msg_type = constants.MsgType.AUTHENTICATION_REQUEST
    field_names = ('username',)

    def __init__(self, username):
        self.username = username


class AuthenticationChallenge(Message):

    msg_type = constants.MsgType.AUTHENTICATION_CHALLENGE
    field_names = ('challenge',)

    def __init__(self, challenge):
        self.challenge = challenge


class AuthenticationResponse(Message):
    """ The *digest* is computed by the caller from the challenge and the
        shared secret; it is carried here as an opaque string.
    """

    msg_type = constants.MsgType.AUTHENTICATION_RESPONSE
    field_names = ('username', 'digest', 'custom')

    def __init__(self, username, digest, custom=''):
        self.username = username
        self.digest = digest
        self.custom = custom


class AuthenticationStatus(Message):

    msg_type = constants.MsgType.AUTHENTICATION_STATUS
    field_names = ('status',)

    def __init__(self, status):
        self.status = bool(status)

    @classmethod
    def parse(cls, reader):
        return cls(reader.read_bool('status'))


class Disconnect(Message):

    msg_type = constants.MsgType.DISCONNECT
    field_names = ('reason',)

    def __init__(self, reason=''):
        self.reason = reason

    @classmethod
    def parse(cls, reader):

        # A peer may close without giving a reason at all.

        if reader.at_end():
            return cls('')
        return cls(reader.read_field('reason'))


class KeepAlive(Message):

    msg_type = constants.MsgType.KEEP_ALIVE

    def __init__(self):
        pass


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
