import pytest

from chunkstash.core import Chunk
from chunkstash.common.crc import CRCField, crc32
from chunkstash.exceptions import ChecksumException, PackException, TruncatedException
from chunkstash.fields import StructField, StringField
from chunkstash.meta import Endianess
from chunkstash.properties import Dependency


def test_chunk():
    """Check that building a Chunk from fields behaves correctly."""
    class Dummy(Chunk):
        a = StructField('I', default=0xbad)
        b = StringField(0x10)
        c = StructField('I', default=0xdeadbeef)

    dummy = Dummy()

    assert dummy.get_ordered_fields_name() == ['a', 'b', 'c']
    assert isinstance(Dummy.a, StructField)

    assert dummy.a == 0xbad
    assert dummy.b == b'\x00' * 0x10
    assert dummy.c == 0xdeadbeef

    assert dummy.layout == {
        'a': (0x00, 0x04),
        'b': (0x04, 0x10),
        'c': (0x14, 0x04),
    }

    assert dummy.size == 0x18
    assert len(dummy.raw) == dummy.size
    assert dummy.raw == (
        b'\xad\x0b\x00\x00' +
        b'\x00' * 0x10 +
        b'\xef\xbe\xad\xde'
    )


def test_chunk_is_read_only():
    class Dummy(Chunk):
        a = StructField('I')

    dummy = Dummy(a=1)

    with pytest.raises(AttributeError):
        dummy.a = 2


def test_chunk_unknown_field():
    class Dummy(Chunk):
        a = StructField('I')

    with pytest.raises(TypeError):
        Dummy(b=1)


def test_inheritance():
    '''subclasses inherit fields'''
    class Father(Chunk):
        field_a = StringField(0x10)
        field_b = StructField("I")

    class Son(Father):
        field_c = StringField(0x08)

    field_b_value = b'\x01\x02\x03\x04'
    field_c_value = b'ABCDEFGH'
    son = Son(b'A' * 16 + field_b_value + field_c_value)

    assert [_ for _, __ in son.get_fields()] == [
        'field_a', 'field_b', 'field_c',
    ]
    assert Father.get_ordered_fields_name() == ['field_a', 'field_b']

    assert son.field_b == 0x04030201
    assert son.field_c == field_c_value


def test_chunk_w_dependencies():
    class Example(Chunk):
        sz = StructField('I')
        data = StringField(Dependency('.sz'), default=b'kebab')

    example = Example()

    assert example.sz == 5
    assert example.data == b'kebab'
    assert example.raw == b'\x05\x00\x00\x00kebab'


def test_dependency_size_limit():
    """A string longer than what its length field can tell is refused."""
    class Example(Chunk):
        sz = StructField('B')
        data = StringField(Dependency('.sz'))

    assert Example(data=b'A' * 0xff).sz == 0xff

    with pytest.raises(PackException):
        Example(data=b'A' * 0x100)


def test_dependency_only_siblings():
    with pytest.raises(ValueError):
        Dependency('sz')


def test_offset_dependencies():
    class TLV(Chunk):
        type   = StructField('I')
        length = StructField('I')
        data   = StringField(Dependency('.length'))
        extra  = StructField('I')

    contents = (
        b'\x01\x00\x00\x00'
        b'\x0f\x00\x00\x00'
        b'\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41'
        b'\x0a\x0b\x0c\x0d'
    )
    tlv = TLV(contents)

    assert tlv.type == 0x01
    assert tlv.length == 0x0f
    assert tlv.data == b'\x41' * 0x0f
    assert tlv.extra == 0x0d0c0b0a
    assert tlv.layout['extra'] == (0x04 + 0x04 + 0x0f, 4)

    assert tlv.pack() == contents

    # changing the data means building a new record, the length follows
    other = TLV(type=tlv.type, data=b'\x42\x42\x42', extra=tlv.extra)

    assert other.length == 0x03
    assert other.layout['extra'] == (0x04 + 0x04 + 0x03, 4)


def test_unpack_truncated_chain():
    class TLV(Chunk):
        length = StructField('I')
        data   = StringField(Dependency('.length'))

    with pytest.raises(TruncatedException) as excinfo:
        TLV(b'\x10\x00\x00\x00AAAA')

    assert excinfo.value.chain == ['data']
    assert str(excinfo.value).startswith('data: truncated input')


def test_crc_field():
    class Packet(Chunk):
        length = StructField('H', endianess=Endianess.BIG_ENDIAN)
        data   = StringField(Dependency('.length'))
        crc    = CRCField(['data'], endianess=Endianess.BIG_ENDIAN)

    packet = Packet(data=b'123456789')

    # the check value of CRC-32/ISO-HDLC
    assert packet.crc == 0xcbf43926
    assert crc32(b'123456789') == 0xcbf43926

    assert Packet(packet.raw) == packet

    corrupted = bytearray(packet.raw)
    corrupted[-1] ^= 0x01

    with pytest.raises(ChecksumException) as excinfo:
        Packet(bytes(corrupted))

    assert excinfo.value.expected == 0xcbf43926
    assert excinfo.value.found == 0xcbf43927
    assert excinfo.value.chain == ['crc']
