""" Typed value codec. An :class:`IpcData` instance is one typed argument
    or return value of an IPC call: a type tag from
    :class:`ptmp.protocol.constants.IpcType` plus the value itself.

    The representation of the value depends on the tag:

    * text types (STRING, QSTRING, the address types, UUID) hold a str;
    * BOOL holds a bool;
    * BYTE, SHORT, INT and LONG hold an int;
    * FLOAT and DOUBLE hold a float;
    * VECTOR holds a list of :class:`IpcData`, all of the same element type.

    Numeric values decoded off the wire are kept as the text the server sent;
    :func:`IpcData.python` converts them on request. PAIR and DATA are not
    supported in either direction.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from .constants import (
    FLOAT_TYPES,
    INTEGER_TYPES,
    IpcType,
    TEXT_TYPES,
    UNSUPPORTED_TYPES,
)
from .errors import InvalidFieldValue, UnsupportedType
from . import fields


def type_tag(type) -> IpcType:
    """Return the :class:`IpcType` for *type*, or raise UnsupportedType."""

    try:
        return IpcType(int(type))
    except ValueError:
        raise UnsupportedType(f"unknown type tag {type!r}") from None


class IpcData:
    """ A single typed value. The *element_type* is only meaningful (and
        required) for vectors.
    """

    def __init__(self, type, value, element_type=None):

        type = type_tag(type)

        if type in UNSUPPORTED_TYPES:
            raise UnsupportedType(f"{type.name} values are not supported")

        if type == IpcType.VECTOR:
            if element_type is None:
                raise ValueError('a vector requires an element type')
            element_type = type_tag(element_type)
            value = list(value)
            for item in value:
                if not isinstance(item, IpcData) or item.type != element_type:
                    raise ValueError(f"vector elements must be {element_type.name} IpcData, not {item!r}")
        else:
            element_type = None
            _check_scalar(type, value)

        self.type = type
        self.value = value
        self.element_type = element_type


    def __repr__(self):
        if self.type == IpcType.VECTOR:
            return f"IpcData(VECTOR<{self.element_type.name}>, {self.value!r})"
        return f"IpcData({self.type.name}, {self.value!r})"


    def __eq__(self, other):
        if not isinstance(other, IpcData):
            return NotImplemented
        return (self.type, self.value, self.element_type) == (other.type, other.value, other.element_type)


    def python(self) -> Any:
        """ Return the value as a native Python type, parsing numeric text
            received from the wire as needed.
        """

        type = self.type
        value = self.value

        if type == IpcType.VECTOR:
            return [item.python() for item in value]

        if not isinstance(value, str) or type in TEXT_TYPES:
            return value

        name = type.name.lower()

        if type == IpcType.BOOL:
            return fields.parse_bool(value, name)
        if type in INTEGER_TYPES:
            return fields.parse_int(value, name)

        try:
            return float(value)
        except ValueError:
            raise InvalidFieldValue(f"{name}: not a number: {value!r}") from None


    # Convenience constructors.

    @classmethod
    def string(cls, value: str) -> "IpcData":
        return cls(IpcType.STRING, value)

    @classmethod
    def qstring(cls, value: str) -> "IpcData":
        return cls(IpcType.QSTRING, value)

    @classmethod
    def uuid(cls, value) -> "IpcData":
        return cls(IpcType.UUID, str(value))

    @classmethod
    def boolean(cls, value: bool) -> "IpcData":
        return cls(IpcType.BOOL, bool(value))

    @classmethod
    def integer(cls, value: int, type=IpcType.INT) -> "IpcData":
        return cls(type, int(value))

    @classmethod
    def double(cls, value: float, type=IpcType.DOUBLE) -> "IpcData":
        return cls(type, float(value))

    @classmethod
    def vector(cls, element_type, values: Iterable[Any]) -> "IpcData":
        """ Build a vector from plain values or :class:`IpcData` instances;
            plain values are wrapped with the *element_type* tag.
        """

        element_type = type_tag(element_type)
        items = list()

        for value in values:
            if not isinstance(value, IpcData):
                value = cls(element_type, value)
            items.append(value)

        return cls(IpcType.VECTOR, items, element_type)


# end of class IpcData



def _check_scalar(type: IpcType, value: Any) -> None:

    # Text received from the wire is acceptable for every scalar type.
    if isinstance(value, str):
        return

    if type in TEXT_TYPES:
        raise ValueError(f"{type.name} value must be a str, not {value!r}")

    if type == IpcType.BOOL:
        if not isinstance(value, bool):
            raise ValueError(f"BOOL value must be a bool, not {value!r}")
        return

    if type in INTEGER_TYPES:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{type.name} value must be an int, not {value!r}")
        return

    if type in FLOAT_TYPES:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{type.name} value must be a float, not {value!r}")
        return


def encode_value(data: IpcData) -> bytes:
    """Return the wire form of the value alone, without its type tag."""

    if data.type in UNSUPPORTED_TYPES:
        raise UnsupportedType(f"cannot encode {data.type.name} values")

    if data.type == IpcType.VECTOR:
        parts = [
            fields.write_field(len(data.value)),
            fields.write_field(int(data.element_type)),
        ]
        parts.extend(encode_value(item) for item in data.value)
        return b''.join(parts)

    return fields.write_field(data.value)


def encode_typed(data: IpcData) -> bytes:
    """Return the type tag field followed by the value."""

    return fields.write_field(int(data.type)) + encode_value(data)


def decode_value(type, reader: fields.FieldReader) -> IpcData:
    """ Read one value of the given *type* from *reader*. Vectors are read
        as an element count, an element type tag, and that many element
        values of the element type.
    """

    type = type_tag(type)

    if type in UNSUPPORTED_TYPES:
        raise UnsupportedType(f"cannot decode {type.name} values")

    if type == IpcType.VECTOR:
        count = reader.read_int('vector length')
        element_type = type_tag(reader.read_int('vector element type'))

        if count < 0:
            raise InvalidFieldValue(f"negative vector length: {count}")

        items: List[IpcData] = list()
        for index in range(count):
            items.append(decode_value(element_type, reader))

        return IpcData(type, items, element_type)

    return IpcData(type, reader.read_field(type.name.lower()))


def wrap(value: Any, type: Optional[IpcType] = None) -> IpcData:
    """ Wrap a plain Python value as :class:`IpcData`, guessing the type
        tag from the Python type unless *type* is given.
    """

    if isinstance(value, IpcData):
        return value

    if type is not None:
        return IpcData(type, value)

    if isinstance(value, bool):
        return IpcData(IpcType.BOOL, value)
    if isinstance(value, int):
        return IpcData(IpcType.INT, value)
    if isinstance(value, float):
        return IpcData(IpcType.DOUBLE, value)
    if isinstance(value, str):
        return IpcData(IpcType.STRING, value)

    raise TypeError(f"cannot infer an IPC type for {value!r}")
