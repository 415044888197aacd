import asyncio
import logging

from .datatypes import Struct, Utf16String, Varint
from .exc import *

LOG = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def hexdump(s):
    return ' '.join('%02X' % c for c in s)


class ByteQueue(object):
    '''FIFO of bytes.  Consumed bytes are only dropped from the underlying
    buffer once they make up more than half of it, so append and consume
    are both amortized O(1).'''

    def __init__(self):
        self._data = bytearray()
        self._offset = 0

    def __len__(self):
        return len(self._data) - self._offset

    def extend(self, chunk):
        self._data.extend(chunk)

    def consume(self, count):
        value = bytes(self._data[self._offset:self._offset + count])
        self._offset += count

        if self._offset * 2 > len(self._data):
            del self._data[:self._offset]
            self._offset = 0

        return value


class ByteStream(object):
    '''Typed reads and writes over an asyncio stream pair.

    Inbound data is pulled from the reader into a ByteQueue only when a
    read needs more bytes than are buffered.  Reads hold a lock while they
    wait, so there is never more than one waiter on the connection.'''

    short = Struct('>H')
    varint = Varint()
    utf16_string = Utf16String()

    def __init__(self, reader, writer):
        self.reader = reader
        self.writer = writer
        self.buffer = ByteQueue()
        self.closed = False
        self._read_lock = asyncio.Lock()

    @classmethod
    async def connect(cls, host, port, timeout):
        '''Open a connection to host:port, giving up after timeout
        milliseconds.'''
        LOG.debug('connecting to %s:%d (timeout %d ms)', host, port, timeout)

        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout / 1000)
        except asyncio.TimeoutError as err:
            raise ConnectError('timed out connecting to %s:%d after %d ms' % (
                host, port, timeout)) from err
        except OSError as err:
            raise ConnectError('failed to connect to %s:%d: %s' % (
                host, port, err)) from err

        LOG.debug('connected to %s:%d', host, port)
        return cls(reader, writer)

    async def _fill(self, count):
        while len(self.buffer) < count:
            try:
                chunk = await self.reader.read(CHUNK_SIZE)
            except OSError as err:
                raise StreamClosedError('connection lost: %s' % err) from err

            if not chunk:
                raise StreamClosedError(
                    'stream ended with %d of %d bytes available' % (
                        len(self.buffer), count))

            LOG.debug('<-- %s', hexdump(chunk))
            self.buffer.extend(chunk)

    async def _read(self, count):
        await self._fill(count)
        return self.buffer.consume(count)

    async def _read_varint(self):
        data = b''
        while True:
            data += await self._read(1)
            try:
                value, _ = self.varint.decode(data)
            except NeedMoreData:
                continue

            return value

    async def read_byte(self):
        async with self._read_lock:
            return (await self._read(1))[0]

    async def read_bytes(self, count):
        async with self._read_lock:
            return await self._read(count)

    async def read_short(self):
        async with self._read_lock:
            value, _ = self.short.decode(await self._read(2))
            return value

    async def read_varint(self):
        async with self._read_lock:
            return await self._read_varint()

    async def read_string(self):
        async with self._read_lock:
            length = await self._read_varint()
            if length < 0:
                raise MalformedPayloadError('string length', length)

            return (await self._read(length)).decode('latin-1')

    async def read_utf16_string(self):
        '''Read a big-endian unsigned short counting UTF-16 code units and
        then the UTF-16BE text itself.'''
        async with self._read_lock:
            header = await self._read(2)
            units, _ = self.short.decode(header)
            data = header + await self._read(units * 2)
            value, _ = self.utf16_string.decode(data)
            return value

    async def write_byte(self, value):
        await self.write_bytes(bytes([value]))

    async def write_bytes(self, data):
        if self.closed:
            raise WriteError('write on closed stream')

        LOG.debug('--> %s', hexdump(data))
        try:
            self.writer.write(bytes(data))
            await self.writer.drain()
        except OSError as err:
            raise WriteError('failed to write %d bytes: %s' % (
                len(data), err)) from err

    def close(self):
        if self.closed:
            return

        self.closed = True
        if self.writer is not None:
            self.writer.transport.abort()
