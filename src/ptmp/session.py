""" The PTMP session state machine. A :class:`Session` owns one connected
    transport and walks it through the protocol in order:

    negotiation request/response, the four-step authentication handshake,
    any number of IPC calls, and finally a disconnect.

    Each step is a blocking send or a blocking receive; nothing overlaps.
    Any operation attempted out of order raises
    :class:`ptmp.protocol.errors.InvalidState` before touching the wire.
"""

import enum
import functools
import logging

from .protocol import constants
from .protocol.constants import MsgType
from .protocol.errors import (
    AuthenticationRejected,
    InvalidState,
    NegotiationError,
    PeerDisconnected,
    ProtocolError,
    UnexpectedMessage,
)
from .protocol.frame import read_frame, write_frame
from .protocol.ipc import IpcCallInfo, next_call_id, parse_call_response
from .protocol.message import (
    AuthenticationChallenge,
    AuthenticationRequest,
    AuthenticationResponse,
    AuthenticationStatus,
    Disconnect,
    KeepAlive,
    NegotiationInfo,
)
from .protocol.observer import LoggingObserver
from .transport.base import TransportError


logger = logging.getLogger(__name__)


class State(enum.Enum):
    DISCONNECTED = 'disconnected'
    NEGOTIATING = 'negotiating'
    NEGOTIATED = 'negotiated'
    AUTH_REQUESTED = 'authentication requested'
    AUTH_CHALLENGED = 'authentication challenged'
    AUTH_RESPONDED = 'authentication responded'
    READY = 'ready'
    CALL_PENDING = 'call pending'
    REJECTED = 'rejected'
    CLOSED = 'closed'


def operation(*allowed):
    """ Decorator for session operations: check that the session is in one
        of the *allowed* states before running the operation, and report any
        failure to the observer before it propagates. Protocol and transport
        errors are reported, as are the ValueErrors raised for arguments
        that cannot be put on the wire.
    """

    def decorator(method):

        name = method.__name__

        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                if self.state not in allowed:
                    raise InvalidState(f"{name}() is not permitted while the session is {self.state.value}")
                return method(self, *args, **kwargs)
            except (ProtocolError, TransportError, ValueError) as e:
                self.observer.error(name, e)
                raise

        return wrapper

    return decorator


_connected = tuple(state for state in State if state is not State.CLOSED)


class Session:
    """ Drive one PTMP conversation over *transport*. The *observer* is
        notified of every frame and every failure; by default traffic is
        logged via :class:`ptmp.protocol.observer.LoggingObserver`.

        With *strict* set, frames cut short by the end of the stream and IPC
        responses that do not fill their declared length exactly are errors;
        otherwise whatever could be decoded is returned.

        :ivar state: The current :class:`State`.
        :ivar negotiated: The negotiation response from the server, once
            received.
        :ivar pending: The :class:`ptmp.protocol.ipc.IpcCallInfo` awaiting
            a response, if any.
    """

    def __init__(self, transport, observer=None, strict=False):

        if observer is None:
            observer = LoggingObserver()

        self.transport = transport
        self.observer = observer
        self.strict = strict
        self.state = State.DISCONNECTED

        self.negotiated = None
        self.pending = None


    def __repr__(self):
        return f"<Session {self.state.value}>"


    def __enter__(self):
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        if self.state is not State.CLOSED:
            if exc_type is None:
                self.disconnect('Finished')
                return

            # The original exception takes precedence over a failed goodbye.
            try:
                self.disconnect(exc_type.__name__)
            except (ProtocolError, TransportError):
                logger.debug("disconnect after %s did not complete", exc_type.__name__, exc_info=True)


    @property
    def ready(self):
        return self.state is State.READY


    @property
    def closed(self):
        return self.state is State.CLOSED


    def _send(self, message):
        write_frame(self.transport, message.frame(), self.observer)


    def _receive(self, expected):
        """ Return the next frame whose type is in *expected*. Keep-alive
            frames from the server are skipped; a disconnect frame closes
            the session.
        """

        while True:
            frame = read_frame(self.transport, strict=self.strict, observer=self.observer)

            if frame.type == MsgType.KEEP_ALIVE:
                logger.debug("skipping keep-alive while waiting for %s", _names(expected))
                continue

            if frame.type == MsgType.DISCONNECT:
                try:
                    reason = Disconnect.decode(frame).reason
                except ProtocolError:
                    reason = None
                self._close()
                raise PeerDisconnected(reason)

            if frame.type not in expected:
                raise UnexpectedMessage(f"expected {_names(expected)}, received type {frame.type}")

            return frame


    def _close(self):
        self.state = State.CLOSED
        self.pending = None
        self.transport.close()


    # Negotiation.

    @operation(State.DISCONNECTED)
    def send_negotiation_request(self, info=None):
        """ Send the negotiation request. If *info* is None a default
            :class:`ptmp.protocol.message.NegotiationInfo` is sent. The
            request that was sent is returned.
        """

        if info is None:
            info = NegotiationInfo()

        self._send(info)
        self.state = State.NEGOTIATING
        return info


    @operation(State.NEGOTIATING)
    def receive_negotiation_response(self):
        """ Read the negotiation response and check that the server speaks
            the same protocol and version. A response that cannot be used
            leaves the session rejected.
        """

        frame = self._receive((MsgType.NEGOTIATION_RESPONSE,))

        # The response has been consumed; if it is unusable the only way
        # forward is to disconnect.
        try:
            info = NegotiationInfo.decode(frame)

            if info.identifier != constants.IDENTIFIER:
                raise NegotiationError(f"server identifies as {info.identifier!r}, expected {constants.IDENTIFIER!r}")

            if info.version != constants.VERSION:
                raise NegotiationError(f"server speaks version {info.version}, expected {constants.VERSION}")
        except ProtocolError:
            self.state = State.REJECTED
            raise

        self.negotiated = info
        self.state = State.NEGOTIATED
        return info


    # Authentication, four steps in strict order.

    @operation(State.NEGOTIATED)
    def send_authentication_request(self, request):
        """ The *request* is an :class:`AuthenticationRequest` or simply
            the username.
        """

        if not isinstance(request, AuthenticationRequest):
            request = AuthenticationRequest(request)

        self._send(request)
        self.state = State.AUTH_REQUESTED


    @operation(State.AUTH_REQUESTED)
    def receive_authentication_challenge(self):
        frame = self._receive((MsgType.AUTHENTICATION_CHALLENGE,))
        challenge = AuthenticationChallenge.decode(frame)
        self.state = State.AUTH_CHALLENGED
        return challenge


    @operation(State.AUTH_CHALLENGED)
    def send_authentication_response(self, response):
        self._send(response)
        self.state = State.AUTH_RESPONDED


    @operation(State.AUTH_RESPONDED)
    def receive_authentication_status(self):
        """ Read the authentication status. A failed status leaves the
            session rejected; the only operation still permitted is
            :func:`disconnect`.
        """

        frame = self._receive((MsgType.AUTHENTICATION_STATUS,))
        status = AuthenticationStatus.decode(frame)

        if status.status:
            self.state = State.READY
        else:
            self.state = State.REJECTED

        return status


    # IPC calls, strictly one at a time.

    @operation(State.READY)
    def send_ipc_call(self, info):
        self._send(info)
        self.pending = info
        self.state = State.CALL_PENDING


    @operation(State.CALL_PENDING)
    def receive_ipc_call_response(self):

        frame = self._receive(constants.IPC_RANGE)
        pending = self.pending

        # Once the frame is off the wire the exchange is over, even if the
        # response cannot be decoded.
        try:
            response = parse_call_response(frame, strict=self.strict)
        finally:
            self.pending = None
            self.state = State.READY

        if response.call_id != pending.call_id:
            logger.warning("response carries call id %d, expected %d", response.call_id, pending.call_id)

        if not response.complete:
            logger.warning("response to call %d stopped short of its declared length", response.call_id)

        return response


    @operation(State.READY)
    def keep_alive(self):
        self._send(KeepAlive())


    @operation(*_connected)
    def disconnect(self, reason=''):
        """ Send a disconnect message with the given *reason* and release
            the transport. The transport is closed even if the message could
            not be sent. No further operations are permitted afterwards.
        """

        try:
            self._send(Disconnect(reason))
        finally:
            self._close()


    # Conveniences built on the individual steps.

    def negotiate(self, info=None):
        """ Run the negotiation exchange; return the server's response.
        """

        self.send_negotiation_request(info)
        return self.receive_negotiation_response()


    def authenticate(self, username, digest, custom=''):
        """ Run the four-step authentication handshake and return True if
            the server accepted it. The *digest* is either the string to
            send, or a callable that computes it from the challenge string.
        """

        self.send_authentication_request(username)
        challenge = self.receive_authentication_challenge()

        if callable(digest):
            digest = digest(challenge.challenge)

        self.send_authentication_response(AuthenticationResponse(username, digest, custom))
        status = self.receive_authentication_status()
        return status.status


    def call(self, call_name, *args, call_id=None):
        """ Issue one IPC call and wait for its response. Arguments that are
            not :class:`ptmp.protocol.values.IpcData` instances are wrapped
            according to their Python type.
        """

        if call_id is None:
            call_id = next_call_id()

        self.send_ipc_call(IpcCallInfo(call_id, call_name, args))
        return self.receive_ipc_call_response()


# end of class Session



def connect(address=None, port=None, username=None, digest=None, custom='',
            backend=None, timeout=None, app_id=None, observer=None, strict=None):
    """ Open a transport, negotiate, and authenticate if a *username* is
        given. Anything left unspecified comes from :func:`ptmp.config.load`.
        The returned :class:`Session` is ready for IPC calls, or merely
        negotiated if no *username* was provided.

        If any step fails the session is disconnected before the exception
        is raised; a failed authentication raises
        :class:`ptmp.protocol.errors.AuthenticationRejected`.
    """

    from . import config
    from . import transport as transports

    settings = config.load()

    if address is None:
        address = settings['address']
    if port is None:
        port = settings['port']
    if username is None:
        username = settings['username']
    if backend is None:
        backend = settings['transport']
    if timeout is None:
        timeout = settings['timeout']
    if app_id is None:
        app_id = settings['app_id']
    if strict is None:
        strict = settings['strict']

    connection = transports.connect(address, port, backend, timeout)
    session = Session(connection, observer, strict)

    info = NegotiationInfo(app_id,
                           authentication=settings['authentication'],
                           keep_alive_period=settings['keep_alive_period'],
                           reserved=settings['reserved'])

    try:
        session.negotiate(info)

        if username is not None:
            if digest is None:
                raise ValueError('a digest is required to authenticate')

            if not session.authenticate(username, digest, custom):
                raise AuthenticationRejected(f"server rejected authentication for {username!r}")

    except BaseException:
        if not session.closed:
            try:
                session.disconnect('Failed')
            except (ProtocolError, TransportError):
                logger.debug("disconnect after failure did not complete", exc_info=True)
        raise

    return session


def _names(expected):
    names = list()
    for code in expected:
        try:
            names.append(MsgType(code).name)
        except ValueError:
            names.append(str(code))

    if len(names) > 3:
        return f"types {names[0]}..{names[-1]}"
    return ' or '.join(names)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
