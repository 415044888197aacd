import struct
import logging

from .exc import *

LOG = logging.getLogger(__name__)

# A VarInt carries at most 32 bits of data, which is five groups of seven.
VARINT_MAX_BYTES = 5


class Atom(object):
    def decode(self, data):
        return data, b''

    def encode(self, value):
        return value


class Struct(Atom):
    def __init__(self, format):
        self.format = format
        self.size = struct.calcsize(format)
        super(Struct, self).__init__()

    def encode(self, value):
        try:
            return struct.pack(self.format, *value)
        except TypeError:
            return struct.pack(self.format, value)

    def decode(self, data):
        if len(data) < self.size:
            raise NeedMoreData()
        val = struct.unpack(self.format, data[:self.size])
        if len(val) == 1:
            val = val[0]
        return val, data[self.size:]


class Varint(Atom):
    def encode(self, value):
        data = bytearray()
        value &= 0xffffffff

        while True:
            if value > 127:
                # Emit a byte with the most-significant-bit (MSB) set plus 7
                # bits of data from the value.
                data.append((1 << 7) | (value & 0x7f))

                # Shift to the right 7 bits to drop the data we've already
                # encoded.
                value >>= 7
            else:
                # This is either the last byte or only byte for the value, so
                # we don't set the MSB.
                data.append(value)
                break

        return bytes(data)

    def decode(self, data):
        value = 0
        for i, val_byte in enumerate(data):
            if i >= VARINT_MAX_BYTES:
                raise VarIntTooLargeError(
                    'VarInt is longer than %d bytes' % VARINT_MAX_BYTES)

            value |= (val_byte & 0x7f) << (7 * i)
            if not (val_byte & 0x80):
                # The MSB was not set; this was the last byte in the value.
                break
        else:
            if len(data) >= VARINT_MAX_BYTES:
                raise VarIntTooLargeError(
                    'VarInt is longer than %d bytes' % VARINT_MAX_BYTES)
            raise NeedMoreData()

        value &= 0xffffffff
        if value & 0x80000000:
            value -= 1 << 32

        return value, data[i+1:]


class Utf16String(Atom):
    '''An unsigned big-endian short counting UTF-16 code units, followed
    by the text itself encoded as UTF-16BE.  This is how pre-1.7 servers
    encode the reason string of a kick packet.'''

    def __init__(self):
        super(Utf16String, self).__init__()
        self.length = Struct('>H')

    def encode(self, value):
        data = value.encode('utf-16-be')
        return self.length.encode(len(data) // 2) + data

    def decode(self, data):
        units, data = self.length.decode(data)
        if len(data) < units * 2:
            raise NeedMoreData()
        value, data = data[:units * 2], data[units * 2:]
        return bytes(value).decode('utf-16-be'), data


class Field(object):
    fieldcount = 0

    def __init__(self, atom):
        self.atom = atom
        self._id = Field.fieldcount
        Field.fieldcount += 1


class PacketMeta(type):
    def __init__(cls, name, bases, attrs):
        super(PacketMeta, cls).__init__(name, bases, attrs)
        fields = ((fldname, fld)
                  for fldname, fld in attrs.items()
                  if isinstance(fld, Field))

        cls._fields = sorted(fields, key=lambda field: field[1]._id)


class PacketBase(metaclass=PacketMeta):
    @classmethod
    def encode(cls, ctx):
        data = b''
        for fieldname, field in cls._fields:
            data += field.atom.encode(ctx[fieldname])

        return data


# Packet IDs of the legacy (1.4 - 1.5) server list ping.
SERVER_LIST_PING = 0xFE
KICK = 0xFF


class LegacyPing(PacketBase):
    '''Unframed server list ping: the packet id followed by a single
    payload byte that asks for the extended 1.4 response.'''

    id = Field(Struct('>B'))
    payload = Field(Struct('>B'))

