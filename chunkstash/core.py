"""
Core module for the abstraction of a file format

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import StashException


class Chunk(metaclass=MetaChunk):
    """
    This is the class that defines a record of a format: the subclasses declare
    as class attributes the fields composing it, in the order they are found in
    the stream.

        class TLV(Chunk):
            type   = fields.StructField('I')
            length = fields.StructField('I')
            data   = fields.StringField(Dependency('.length'))

    An instance is built either from a source (bytes, a path or a Stream) that
    is unpacked right away, or from the values of the fields passed as keyword
    arguments; the fields not indicated take their default and the fields
    depending on others (lengths, checksums) are recomputed.
    """

    def __init__(self, source=None, **kwargs):
        self._values: Dict[str, object] = {}

        if source is not None:
            if kwargs:
                raise TypeError('you can pass a source or the values of the fields, not both')

            if isinstance(source, Stream):
                self.unpack(source)
            else:
                with Stream(source) as stream:
                    self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, stream))
                    self.unpack(stream)

            return

        for field_name, field in self.get_fields():
            if field_name in kwargs:
                value = field.clean(kwargs.pop(field_name))
            else:
                value = field.value_from_default()

            self._values[field_name] = value

        if kwargs:
            raise TypeError(f"{self.__class__.__name__} has no fields named {', '.join(kwargs)}")

        self.relayout()

    @classmethod
    def get_ordered_fields_name(cls) -> List[str]:
        return cls._meta.fields

    @classmethod
    def get_fields(cls) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, field) for each field.'''
        return [(_, cls._meta.instances[_]) for _ in cls.get_ordered_fields_name()]

    @classmethod
    def get_field(cls, name: str) -> Field:
        return cls._meta.instances[name]

    def get_value(self, name: str):
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(f"'{self.__class__.__name__}' has no value for field '{name}' yet") from None

    def set_value(self, name: str, value) -> None:
        '''Internal: fields use it to fill in themselves and their siblings.'''
        self._values[name] = value

    def __eq__(self, other):
        if not isinstance(other, Chunk) or other.__class__ != self.__class__:
            return NotImplemented

        return self._values == other._values

    def __repr__(self):
        msg = []
        for field_name, _ in self.get_fields():
            msg.append('%s=%r' % (field_name, self._values.get(field_name)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, _ in self.get_fields():
            msg += '%s: %r\n' % (field_name, self._values.get(field_name))
        return msg

    @property
    def size(self) -> int:
        '''the size MUST be derived from the fields'''
        return sum(field.size(self._values[name]) for name, field in self.get_fields())

    @property
    def raw(self) -> bytes:
        return self.pack()

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        offset = 0
        for name, field in self.get_fields():
            size = field.size(self._values[name])
            result[name] = (offset, size)
            offset += size

        return result

    def relayout(self):
        '''This method triggers the fields to update the values depending on
        other fields, like the length of a string or a checksum.

        The fields are visited in order so a checksum placed after the data
        it covers sees the data already settled.'''
        for field_name, field in self.get_fields():
            self.logger.debug('relayouting %s.%s' % (self.__class__.__name__, field_name))
            field._update_value(self)

    def pack(self) -> bytes:
        '''Encode the chunk: the values are expected to be consistent, i.e.
        relayout() has been called after the last change.'''
        value = b''
        for field_name, field in self.get_fields():
            self.logger.debug('packing %s.%s' % (self.__class__.__name__, field_name))
            value += field.pack(self._values[field_name], self)

        return value

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        Each field reads its own bytes from the stream, starting from the current
        offset, so that after this call the stream is positioned right after the
        chunk. When a field fails its name is added to the chain of the exception
        and the exception propagates: no partial chunk is ever returned.
        '''
        self._values = {}
        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, stream.tell()))

            try:
                self._values[field_name] = field.unpack(stream, self)
            except StashException as e:
                e.chain.insert(0, field_name)
                raise
