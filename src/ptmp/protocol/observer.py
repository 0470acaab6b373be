""" Observation hooks for protocol traffic. A session calls its observer
    whenever a frame is sent or received, and whenever an operation fails;
    the codec itself never logs or prints anything.
"""

import logging

from .constants import MsgType, TERMINATOR


class Observer:
    """ No-op base class. Subclass and override the hooks of interest.
    """

    def frame_sent(self, frame, data):
        """ Called after *frame* was written; *data* is the encoded bytes.
        """
        pass

    def frame_received(self, frame):
        pass

    def error(self, operation, exception):
        """ Called with the name of the failed session *operation* before
            the *exception* propagates to the caller.
        """
        pass


class LoggingObserver(Observer):
    """ Report traffic through the standard :mod:`logging` module. Frame
        contents are only rendered at DEBUG level.
    """

    def __init__(self, logger=None):
        if logger is None:
            logger = logging.getLogger('ptmp.traffic')
        self.logger = logger

    def frame_sent(self, frame, data):
        self.logger.info("sent %s, %d bytes", _name(frame.type), len(data))
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("sent: %s", printable(data))

    def frame_received(self, frame):
        self.logger.info("received %s, length %d", _name(frame.type), frame.length)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("received: %s", printable(frame.body))

    def error(self, operation, exception):
        self.logger.error("%s failed: %s: %s", operation, type(exception).__name__, exception)


def printable(data):
    """ Render *data* as text with each NUL terminator shown as ``\\x00``.
    """

    text = data.decode('utf-8', errors='backslashreplace')
    return text.replace(TERMINATOR.decode(), '\\x00')


def _name(code):
    try:
        return MsgType(code).name
    except ValueError:
        return 'type ' + str(code)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
