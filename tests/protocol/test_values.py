import uuid

import pytest

from ptmp.protocol.constants import IpcType
from ptmp.protocol.errors import InvalidFieldValue, UnsupportedType
from ptmp.protocol.fields import FieldReader
from ptmp.protocol.values import IpcData, decode_value, encode_typed, encode_value, wrap


def test_text_round_trip():

    identifier = uuid.uuid4()

    for data in (IpcData.string('hello world'),
                 IpcData.qstring('Hello from PTMP'),
                 IpcData.uuid(identifier),
                 IpcData(IpcType.IP_ADDRESS, '192.168.0.1'),
                 IpcData(IpcType.MAC_ADDRESS, '0001.6400.1234')):

        reader = FieldReader(encode_value(data))
        decoded = decode_value(data.type, reader)

        assert decoded == data
        assert reader.at_end()

    assert IpcData.uuid(identifier).value == str(identifier)


def test_scalar_encoding():

    assert encode_value(IpcData.boolean(True)) == b'true\x00'
    assert encode_value(IpcData.integer(7)) == b'7\x00'
    assert encode_value(IpcData.integer(-2, IpcType.LONG)) == b'-2\x00'
    assert encode_value(IpcData.double(1.5)) == b'1.5\x00'
    assert encode_typed(IpcData.qstring('hi')) == b'9\x00hi\x00'


def test_numeric_decode_keeps_text():

    decoded = decode_value(IpcType.INT, FieldReader(b'42\x00'))
    assert decoded.value == '42'
    assert decoded.python() == 42

    decoded = decode_value(IpcType.DOUBLE, FieldReader(b'2.25\x00'))
    assert decoded.python() == 2.25

    decoded = decode_value(IpcType.BOOL, FieldReader(b'false\x00'))
    assert decoded.python() == False

    decoded = decode_value(IpcType.SHORT, FieldReader(b'lots\x00'))
    with pytest.raises(InvalidFieldValue):
        decoded.python()


def test_vector():

    data = IpcData.vector(IpcType.STRING, ['a', 'b', 'c'])
    encoded = encode_value(data)
    assert encoded == b'3\x008\x00a\x00b\x00c\x00'

    reader = FieldReader(encoded)
    decoded = decode_value(IpcType.VECTOR, reader)

    assert decoded == data
    assert decoded.element_type == IpcType.STRING
    assert decoded.python() == ['a', 'b', 'c']
    assert reader.at_end()

    empty = decode_value(IpcType.VECTOR, FieldReader(b'0\x004\x00'))
    assert empty.value == []
    assert empty.element_type == IpcType.INT


def test_nested_vector():

    inner = IpcData.vector(IpcType.INT, [1, 2])
    outer = IpcData.vector(IpcType.VECTOR, [inner])

    encoded = encode_value(outer)
    assert encoded == b'1\x0015\x002\x004\x001\x002\x00'

    decoded = decode_value(IpcType.VECTOR, FieldReader(encoded))
    assert decoded.python() == [[1, 2]]


def test_unsupported_types():

    for type in (IpcType.PAIR, IpcType.DATA):
        reader = FieldReader(b'x\x00y\x00')

        with pytest.raises(UnsupportedType):
            decode_value(type, reader)

        # Nothing is silently skipped.
        assert reader.consumed == 0

        with pytest.raises(UnsupportedType):
            IpcData(type, 'x')

    with pytest.raises(UnsupportedType):
        decode_value(99, FieldReader(b'x\x00'))

    with pytest.raises(UnsupportedType):
        decode_value(IpcType.VECTOR, FieldReader(b'1\x0014\x00x\x00'))


def test_value_checks():

    with pytest.raises(ValueError):
        IpcData(IpcType.INT, 1.5)

    with pytest.raises(ValueError):
        IpcData(IpcType.INT, True)

    with pytest.raises(ValueError):
        IpcData(IpcType.STRING, 5)

    with pytest.raises(ValueError):
        IpcData(IpcType.BOOL, 1)

    with pytest.raises(ValueError):
        IpcData(IpcType.VECTOR, [IpcData.string('a')])

    with pytest.raises(ValueError):
        IpcData(IpcType.VECTOR, [IpcData.integer(1)], IpcType.STRING)


def test_wrap():

    assert wrap(True).type == IpcType.BOOL
    assert wrap(3).type == IpcType.INT
    assert wrap(3.5).type == IpcType.DOUBLE
    assert wrap('text').type == IpcType.STRING
    assert wrap('text', IpcType.QSTRING).type == IpcType.QSTRING

    data = IpcData.qstring('kept')
    assert wrap(data) is data

    with pytest.raises(TypeError):
        wrap(object())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
