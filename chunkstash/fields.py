"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable: it doesn't hold a value itself, it describes how the value
found in a given position of a Chunk is encoded.

Each method receives the chunk the field belongs to as "father", this is how
a field can look at its siblings (see properties.Dependency).
"""
import logging
import struct

from .enum import Compliant
from .meta import FieldBase, Endianess
from .properties import Dependency
from .exceptions import StashException, MagicException, PackException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, default=None, endianess=Endianess.LITTLE_ENDIAN,
                 compliant=Compliant.MAGIC, is_magic=False):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.default = default
        self.endianess = endianess
        self.compliant = compliant
        self.is_magic = is_magic

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.name})>'

    def value_from_default(self):
        return self.default

    def clean(self, value):
        '''Normalize a value passed from outside before storing it.'''
        return value

    def is_compliant(self, level):
        return bool(self.compliant & level)

    def size(self, value) -> int:
        raise NotImplementedError(f"method {self.__class__.__name__}.size() not implemented")

    def check(self, value) -> None:
        '''Raise PackException if the value cannot be represented.'''
        pass

    def _update_value(self, father):
        '''This is used to update the values depending on this field before packing'''
        pass

    def pack(self, value, father=None) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}.pack() not implemented")

    def unpack(self, stream, father=None):
        raise NotImplementedError(f"method {self.__class__.__name__}.unpack() not implemented")


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def get_format(self):
        prefix = {
            Endianess.LITTLE_ENDIAN: '<',
            Endianess.BIG_ENDIAN: '>',
            Endianess.NETWORK: '!',
            Endianess.NATIVE: '=',
        }[self.endianess]

        return '%s%s' % (prefix, self.format)

    def size(self, value=None) -> int:
        return struct.calcsize(self.get_format())

    def check(self, value) -> None:
        self.pack(value)

    def pack(self, value, father=None) -> bytes:
        try:
            return struct.pack(self.get_format(), value)
        except struct.error as e:
            raise PackException(f"value {value!r} doesn't fit field '{self.name}' with format '{self.format}': {e}") from e

    def unpack(self, stream, father=None):
        raw = stream.read(self.size())
        value = struct.unpack(self.get_format(), raw)[0]

        if self.is_magic and value != self.default:
            self.logger.warning('the magic doesn\'t correspond')
            if self.is_compliant(Compliant.MAGIC):
                raise MagicException(expected=self.default, found=value)

        return value


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length is either fixed (an integer) or a Dependency on a sibling
    field: in the latter case the sibling is read to know how many bytes
    to unpack and is updated with the actual length during the relayouting."""

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError("StringField must have 'n' or 'default' indicated!")

        if n is not None and not isinstance(n, (int, Dependency)):
            raise ValueError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def value_from_default(self):
        if self.default is not None:
            return self.default

        return b'' if isinstance(self.length, Dependency) else b'\x00' * self.length

    def clean(self, value):
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)

        return value

    def get_length(self, father) -> int:
        if isinstance(self.length, Dependency):
            return self.length.resolve(father)

        return self.length

    def size(self, value) -> int:
        return len(value)

    def check(self, value) -> None:
        if not isinstance(value, bytes):
            raise PackException(f"field '{self.name}' accepts only bytes, not {value.__class__.__name__}")

        if isinstance(self.length, int) and len(value) != self.length:
            raise PackException(f"field '{self.name}' must be {self.length} bytes long, got {len(value)}")

    def _update_value(self, father):
        if isinstance(self.length, Dependency):
            self.length.resolve_and_set(father, len(father.get_value(self.name)))

    def pack(self, value, father=None) -> bytes:
        self.check(value)

        return value

    def unpack(self, stream, father=None):
        raw = stream.read(self.get_length(father))

        if self.is_magic and raw != self.default:
            self.logger.warning('the magic doesn\'t correspond')
            if self.is_compliant(Compliant.MAGIC):
                raise MagicException(expected=self.default, found=raw)

        return raw


class ArrayField(Field):
    '''Un/Pack an array of Chunks.

    You can indicate an explicit number of elements via the parameter named "n",
    otherwise the elements are unpacked until the stream is exhausted.
    '''

    def __init__(self, field_cls, n=None, **kw):
        self.field_cls = field_cls
        self.n = n
        super().__init__(**kw)

    def value_from_default(self):
        return list(self.default or [])

    def clean(self, value):
        # the chunk owns its own list
        return list(value)

    def size(self, value) -> int:
        return sum(element.size for element in value)

    def check(self, value) -> None:
        for element in value:
            if not isinstance(element, self.field_cls):
                raise PackException(f"field '{self.name}' accepts only {self.field_cls.__name__}, not {element.__class__.__name__}")

    def pack(self, value, father=None) -> bytes:
        self.check(value)

        return b''.join(element.pack() for element in value)

    def _is_finished(self, stream, elements):
        if self.n is not None:
            return len(elements) >= self.n

        return stream.is_exhausted()

    def unpack(self, stream, father=None):
        elements = []
        while not self._is_finished(stream, elements):
            idx = len(elements)
            self.logger.debug('unpacking element %d of \'%s\' at offset %d' % (idx, self.name, stream.tell()))
            try:
                element = self.field_cls(stream)
            except StashException as e:
                e.chain.insert(0, f'[{idx}]')
                raise

            elements.append(element)

        return elements
