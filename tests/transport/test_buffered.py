import pytest

from ptmp.transport.base import MemoryTransport, TransportClosed


def test_read_until():

    transport = MemoryTransport(b'first\x00second\x00third', chunk_size=3)

    assert transport.read_until(b'\x00') == b'first\x00'
    assert transport.read_until(b'\x00') == b'second\x00'

    # End of stream: whatever is left, without a terminator.
    assert transport.read_until(b'\x00') == b'third'
    assert transport.read_until(b'\x00') == b''


def test_multibyte_terminator():

    transport = MemoryTransport(b'abc\r\ndef\r\n', chunk_size=4)

    assert transport.read_until(b'\r\n') == b'abc\r\n'
    assert transport.read_until(b'\r\n') == b'def\r\n'


def test_read():

    transport = MemoryTransport(b'0123456789', chunk_size=4)

    assert transport.read(6) == b'012345'
    assert transport.buffered == 2
    assert transport.read(0) == b''
    assert transport.read(10) == b'6789'
    assert transport.read(1) == b''


def test_write_and_close():

    with MemoryTransport() as transport:
        assert transport.is_open
        assert transport.write(b'hello') == 5
        assert bytes(transport.written) == b'hello'

    assert transport.is_open == False

    with pytest.raises(TransportClosed):
        transport.write(b'again')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
