'''
# Portable Network Graphics

Format created to replace patent-emcumbered GIF files.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html>.

A PNG file is an 8 bytes signature followed by a sequence of chunks, until
the end of the file; there is no count nor terminator other than the end of
the data (the IEND chunk closes the image, not the file). Here all the chunks
are opaque typed blobs: nothing of the image itself is interpreted.

'''
import functools
import logging
from typing import Optional, Union

from bitstring import Bits

from chunkstash.core import Chunk
from chunkstash import fields
from chunkstash.common import crc
from chunkstash.enum import Compliant
from chunkstash.meta import Endianess
from chunkstash.properties import Dependency
from chunkstash.exceptions import (
    ChunkTypeException,
    ChunkNotFoundException,
    PackException,
    TextDecodeException,
)
from .utils import summarize


logger = logging.getLogger(__name__)

PNG_SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'


@functools.total_ordering
class PNGChunkType(object):
    '''The 4 bytes type code of a chunk.

    For convenience in description and in examining PNG files, type codes are
    restricted to consist of uppercase and lowercase ASCII letters (A-Z and a-z).

    Four bits of the type code, namely bit 5 (value 32) of each byte, are used
    to convey chunk properties:

     1. ancillary bit (first byte): uppercase means critical, i.e. necessary
        to display the image.
     2. private bit (second byte): uppercase means public, i.e. part of the
        PNG specification or registered.
     3. reserved bit (third byte): must be uppercase in files conforming
        to this version of PNG.
     4. safe-to-copy bit (fourth byte): lowercase means the chunk may be copied
        by an editor regardless of the modifications to the critical chunks.
    '''
    __slots__ = ('_raw',)

    def __init__(self, raw: bytes):
        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise ChunkTypeException(f'a chunk type is built from bytes, not {raw.__class__.__name__}')

        raw = bytes(raw)
        if len(raw) != 4:
            raise ChunkTypeException(f'a chunk type must be 4 bytes long, got {len(raw)}')

        if not raw.isalpha():
            raise ChunkTypeException(f'invalid chunk type {raw!r}: bytes must be ASCII alphabetic')

        self._raw = raw

    @classmethod
    def from_bytes(cls, raw: bytes, compliant=Compliant.NONE) -> "PNGChunkType":
        '''Build the type from raw bytes, with Compliant.RESERVED also the reserved bit
        must be valid (this is what is asked for the chunks found in a file).'''
        chunk_type = cls(raw)

        if compliant & Compliant.RESERVED and not chunk_type.is_valid():
            raise ChunkTypeException(f'invalid chunk type {chunk_type}: the reserved bit is set')

        return chunk_type

    @classmethod
    def from_text(cls, text: str) -> "PNGChunkType":
        try:
            raw = text.encode('ascii')
        except UnicodeEncodeError:
            raise ChunkTypeException(f'invalid chunk type {text!r}: characters must be ASCII alphabetic') from None

        return cls(raw)

    @property
    def raw(self) -> bytes:
        return self._raw

    def _is_uppercase(self, position: int) -> bool:
        # bit 5 of the byte, counting from the most significant bit
        return not Bits(self._raw)[position * 8 + 2]

    def is_critical(self) -> bool:
        return self._is_uppercase(0)

    def is_public(self) -> bool:
        return self._is_uppercase(1)

    def is_reserved_bit_valid(self) -> bool:
        return self._is_uppercase(2)

    def is_safe_to_copy(self) -> bool:
        return not self._is_uppercase(3)

    def is_valid(self) -> bool:
        return self._raw.isalpha() and self.is_reserved_bit_valid()

    def __str__(self):
        return self._raw.decode('ascii')

    def __repr__(self):
        return f'<{self.__class__.__name__}({self})>'

    def __eq__(self, other):
        if not isinstance(other, PNGChunkType):
            return NotImplemented

        return self._raw == other._raw

    def __lt__(self, other):
        if not isinstance(other, PNGChunkType):
            return NotImplemented

        return self._raw < other._raw

    def __hash__(self):
        return hash(self._raw)


class ChunkTypeField(fields.StringField):
    '''The type of a chunk: 4 bytes unpacked as PNGChunkType.

    The field is built with Compliant.RESERVED so that a type with the reserved
    bit set is refused when found in a stream even if it is possible
    to build one by hand.'''

    def __init__(self, **kw):
        super().__init__(4, **kw)

    def value_from_default(self):
        return None

    def clean(self, value):
        if isinstance(value, str):
            return PNGChunkType.from_text(value)

        if isinstance(value, (bytes, bytearray, memoryview)):
            return PNGChunkType.from_bytes(value)

        return value

    def size(self, value) -> int:
        return 4

    def check(self, value) -> None:
        if not isinstance(value, PNGChunkType):
            raise PackException(f"field '{self.name}' accepts only PNGChunkType, not {value.__class__.__name__}")

    def pack(self, value, father=None) -> bytes:
        self.check(value)

        return value.raw

    def unpack(self, stream, father=None):
        return PNGChunkType.from_bytes(stream.read(4), compliant=self.compliant)


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each integer is intended big-endian.

    A chunk is defined as critical or ancillary depending on the case of the
    starting letter of the type field.

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk
    '''
    length = fields.StructField('I', endianess=Endianess.BIG_ENDIAN)
    type   = ChunkTypeField(compliant=Compliant.RESERVED)
    data   = fields.StringField(Dependency('.length'))
    crc    = crc.CRCField(['type', 'data'], endianess=Endianess.BIG_ENDIAN)  # network byte order

    @property
    def chunk_type(self) -> PNGChunkType:
        return self.type

    def data_as_text(self) -> str:
        try:
            return self.data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise TextDecodeException(f'data of chunk {self.type} is not valid text: {e}') from e

    def __str__(self):
        return f'{self.type} length={self.length} crc=0x{self.crc:08x} data={summarize(self.data)}'


class PNGFile(Chunk):
    '''The container: the signature and all the chunks, in file order.

    The chunks can be looked up and removed by the text of their type; since
    the same type can appear more than once, only the first one is considered.'''
    signature = fields.StringField(8, default=PNG_SIGNATURE, is_magic=True)
    chunks    = fields.ArrayField(PNGChunk)

    def header(self) -> bytes:
        return self.signature

    def append_chunk(self, chunk: PNGChunk) -> None:
        self.get_field('chunks').check([chunk])
        self.logger.debug('appending chunk %s' % chunk.type)
        self.chunks.append(chunk)

    def _index_of(self, chunk_type: Union[str, PNGChunkType]) -> Optional[int]:
        name = str(chunk_type)
        for idx, chunk in enumerate(self.chunks):
            if str(chunk.type) == name:
                return idx

        return None

    def chunk_by_type(self, chunk_type: Union[str, PNGChunkType]) -> Optional[PNGChunk]:
        idx = self._index_of(chunk_type)

        return self.chunks[idx] if idx is not None else None

    def remove_chunk(self, chunk_type: Union[str, PNGChunkType]) -> PNGChunk:
        idx = self._index_of(chunk_type)

        if idx is None:
            raise ChunkNotFoundException(f'chunk {chunk_type} not found')

        self.logger.debug('removing chunk %s at index %d' % (chunk_type, idx))

        return self.chunks.pop(idx)

    def as_bytes(self) -> bytes:
        return self.pack()

    def __str__(self):
        lines = [f'PNG file with {len(self.chunks)} chunks']
        for idx, chunk in enumerate(self.chunks):
            lines.append(f'[{idx:02d}] {chunk}')

        return '\n'.join(lines)
