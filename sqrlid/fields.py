"""
An Item is the "fundamental" datatype of a block: a single value directly
packable/unpackable, described by an ItemDefinition.

The value of an item is always kept as text, in its canonical form:

 - unsigned decimal for the integer types
 - lowercase hexadecimal for the byte arrays

so that whoever is editing an identity deals with a single representation.
"""
import binascii
import logging
import struct
import uuid

from .enum import ItemType
from .exceptions import SchemaError
from .schema import ItemDefinition


logger = logging.getLogger(__name__)


class Item(object):
    """Base class to subclass from"""
    type = None

    def __init__(self, name='', description='', size=0, value=None, remaining=False):
        self.logger = logging.getLogger(__name__)
        self.uid = uuid.uuid4().hex
        self.name = name
        self.description = description
        self.size = size
        self.remaining = remaining
        self.check_size()

        self._value = ''
        self.value = self.value_from_default() if value is None else value

    def __repr__(self):
        return '<%s(%s=%r)>' % (self.__class__.__name__, self.name, self.value)

    def __str__(self):
        return self.value

    @classmethod
    def for_type(cls, item_type: ItemType):
        return _TYPE2ITEM[item_type]

    @classmethod
    def from_definition(cls, definition: ItemDefinition, size=None) -> "Item":
        '''Create a zero-valued item following the definition.

        For the items taking the remaining bytes of the block the caller
        must indicate the resolved size.'''
        item_cls = cls.for_type(definition.type)

        if size is None:
            size = 0 if definition.remaining else definition.size

        return item_cls(
            name=definition.name,
            description=definition.description,
            size=size,
            remaining=definition.remaining,
        )

    def check_size(self):
        pass

    def value_from_default(self):
        return ''

    def _get_value(self):
        return self._value

    def _set_value(self, value):
        raise NotImplementedError(f"method {self.__class__.__name__}._set_value() not implemented")

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    def _set_raw(self, raw: bytes) -> None:
        raise NotImplementedError(f"method {self.__class__.__name__}._set_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
        fset=lambda self, value: self._set_raw(value),
    )

    def unpack(self, stream):
        self.logger.debug('unpacking %s (%d bytes) at offset %d' % (self.name, self.size, stream.tell()))
        self.raw = stream.read(self.size)


class StructItem(Item):
    """
    Simplest of the items: mimic the behaviour of the struct module packing/unpacking
    little endian unsigned integers to/from bytes.
    """
    format = None

    def check_size(self):
        expected = struct.calcsize(self.get_format())
        if self.size != expected:
            raise SchemaError('Invalid byte count for datatype %s: %d instead of %d' % (
                self.type.value, self.size, expected), chain=[self.name])

    def get_format(self):
        return '<%s' % self.format

    def value_from_default(self):
        return 0

    @property
    def number(self) -> int:
        return int(self._value)

    def _set_value(self, value) -> None:
        # int(3.9) or int(True) would silently become something else
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValueError(f"{value!r} is not a valid value for {self.type.value} item '{self.name}'")

        try:
            number = int(value)
        except ValueError:
            raise ValueError(f"'{value}' is not a valid value for {self.type.value} item '{self.name}'")

        if number < 0 or number >= 1 << (8 * self.size):
            raise ValueError(f"{number} doesn't fit in the {self.size} bytes of item '{self.name}'")

        self._value = str(number)

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.number)

    def _set_raw(self, raw: bytes) -> None:
        try:
            self.value = struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            raise SchemaError(str(e), chain=[self.name]) from e


class Uint8Item(StructItem):
    type = ItemType.UINT_8
    format = 'B'


class Uint16Item(StructItem):
    type = ItemType.UINT_16
    format = 'H'


class Uint32Item(StructItem):
    type = ItemType.UINT_32
    format = 'I'


class ByteArrayItem(Item):
    """Represent a contiguous chunk of bytes.

    The size is fixed unless the item takes the remaining bytes of its block,
    in that case setting the value resizes the item."""
    type = ItemType.BYTE_ARRAY

    def __len__(self):
        return self.size

    def check_size(self):
        if not self.remaining and self.size < 1:
            raise SchemaError('Invalid byte count for datatype %s: %d' % (
                self.type.value, self.size), chain=[self.name])

    def value_from_default(self):
        return b'\x00' * self.size

    def _set_value(self, value) -> None:
        if isinstance(value, (bytes, bytearray)):
            raw = bytes(value)
        else:
            try:
                raw = binascii.unhexlify(value)
            except (TypeError, ValueError):
                raise ValueError(f"'{value}' is not a valid hexadecimal value for item '{self.name}'")

        if not self.remaining and len(raw) != self.size:
            raise ValueError(f"you are trying to set a value with the wrong size for item '{self.name}' (that is {self.size} bytes)")

        self.size = len(raw)
        self._value = raw.hex()

    def _get_raw(self) -> bytes:
        return bytes.fromhex(self._value)

    def _set_raw(self, raw: bytes) -> None:
        self.value = raw


class UnknownItem(Item):
    """Item with a type we don't know how to handle: it has no value, but
    the bytes it occupies are kept as they are and packed back."""
    type = ItemType.UNKNOWN

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._raw = b'\x00' * self.size

    def _set_value(self, value) -> None:
        self._value = ''

    def _get_raw(self) -> bytes:
        return self._raw

    def _set_raw(self, raw: bytes) -> None:
        self._raw = bytes(raw)
        self.size = len(self._raw)

    def unpack(self, stream):
        if self.size > 0:
            self.logger.warning('keeping %d opaque bytes of item \'%s\' with unknown type' % (self.size, self.name))
        self.raw = stream.read(self.size)


def repeat_count(definition: ItemDefinition, items) -> int:
    '''How many times the item described by the definition occurs, given the
    items already present in the block.

    An index outside of the items means a single occurrence.'''
    if definition.repeat_index is None:
        return 1

    if not 0 <= definition.repeat_index < len(items):
        logger.debug('repeat index %d for \'%s\' is out of range' % (definition.repeat_index, definition.name))
        return 1

    counter = items[definition.repeat_index]

    if not isinstance(counter, StructItem):
        raise SchemaError('repeat index of \'%s\' must refer to an integer item' % definition.name,
                          chain=[definition.name])

    return counter.number


_TYPE2ITEM = {
    ItemType.UINT_8:     Uint8Item,
    ItemType.UINT_16:    Uint16Item,
    ItemType.UINT_32:    Uint32Item,
    ItemType.BYTE_ARRAY: ByteArrayItem,
    ItemType.UNKNOWN:    UnknownItem,
}
