'''
We are implementing fields to handle CRC calculation.
'''
import zlib

from .. import fields
from ..exceptions import ChecksumException


def crc32(data: bytes) -> int:
    '''CRC-32/ISO-HDLC, the one used by PNG, zlib and friends.'''
    return zlib.crc32(data) & 0xffffffff


class CRCField(fields.StructField):
    """standard CRC methods with pre and post conditioning, as defined by ISO 3309 [ISO-3309]
    or ITU-T V.42 [ITU-V42]. The CRC polynomial employed is

      x^32+x^26+x^23+x^22+x^16+x^12+x^11+x^10+x^8+x^7+x^5+x^4+x^2+x+1

    The 32-bit CRC register is initialized to all 1's, and then the data from each byte is processed
    from the least significant bit (1) to the most significant bit (128). After all the data bytes are processed,
    the CRC register is inverted (its ones complement is taken). This value is transmitted (stored in the file)
    MSB first.

    The value is computed over the packed representation of the fields whose names are
    passed, so they must precede this one in the chunk: when unpacking the stored value
    is compared with the computed one and a mismatch is an error.

    See <https://www.w3.org/TR/PNG-Structure.html#CRC-algorithm>.
    """

    def __init__(self, fields, *args, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.fields = fields

    def calculate(self, father):
        value = b''
        for field_name in self.fields:
            field = father.get_field(field_name)
            value += field.pack(father.get_value(field_name), father)

        return crc32(value)

    def _update_value(self, father):
        father.set_value(self.name, self.calculate(father))

    def unpack(self, stream, father=None):
        stored = super().unpack(stream, father)
        computed = self.calculate(father)

        if stored != computed:
            raise ChecksumException(expected=computed, found=stored)

        return stored
