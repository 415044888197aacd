import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

from .bytestream import ByteStream
from .datatypes import KICK, SERVER_LIST_PING, LegacyPing
from .exc import *
from .formatting import format_result
from .srv import resolve_srv

LOG = logging.getLogger(__name__)

IP_ADDRESS = re.compile(r'[0-9]{1,3}(\.[0-9]{1,3}){3}')

# int() would also accept surrounding whitespace and digit separators.
INTEGER = re.compile(r'[+-]?[0-9]+')

# Decoded kick reasons start with the marker '§1\0' before the first field.
LEGACY_PAYLOAD_PREFIX_LENGTH = 3

PAYLOAD_FIELDS = ('protocol version', 'server version', 'motd',
                  'player count', 'max player count')

# Connection and overall deadlines (ms) when the caller sets no timeout.
DEFAULT_CONNECT_TIMEOUT = 5000
DEFAULT_RACE_TIMEOUT = 15000

TIMEOUT_MESSAGE = 'Failed to retrieve the status of the server within time'


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class StatusOptions:
    port: int = 25565
    protocol_version: int = 47
    timeout: Optional[float] = None
    enable_srv: bool = True

    def validate(self):
        if not _is_int(self.port):
            raise InvalidArgumentError(
                "expected 'port' to be an integer, got %r" % (self.port,))
        if not 0 < self.port < 65536:
            raise InvalidArgumentError(
                "expected 'port' to be between 1 and 65535, got %d" % self.port)
        if not _is_int(self.protocol_version) or self.protocol_version < 0:
            raise InvalidArgumentError(
                "expected 'protocol_version' to be a non-negative integer, "
                "got %r" % (self.protocol_version,))
        if self.timeout is not None and (
                isinstance(self.timeout, bool)
                or not isinstance(self.timeout, (int, float))
                or not self.timeout > 0):
            raise InvalidArgumentError(
                "expected 'timeout' to be a number greater than 0, got %r" % (
                    self.timeout,))
        if not isinstance(self.enable_srv, bool):
            raise InvalidArgumentError(
                "expected 'enable_srv' to be a boolean, got %r" % (
                    self.enable_srv,))


def _parse_int(field, value):
    if not INTEGER.fullmatch(value):
        raise MalformedPayloadError(field, value)
    return int(value, 10)


def parse_payload(data):
    '''Split a decoded kick reason into (protocol version, server version,
    motd, player count, max players).'''
    fields = data[LEGACY_PAYLOAD_PREFIX_LENGTH:].split('\0')
    if len(fields) != len(PAYLOAD_FIELDS):
        raise MalformedPayloadError('payload', data)

    protocol_version, server_version, motd, player_count, max_players = fields

    return (_parse_int('protocol version', protocol_version),
            server_version,
            motd,
            _parse_int('player count', player_count),
            _parse_int('max player count', max_players))


class StatusQuery(object):
    '''A single 1.4 - 1.5 server list ping.  Create a query and run it:

        query = StatusQuery('mc.example.com', StatusOptions(port=25566))
        status = await query.run()

    The exchange is fixed: we send FE 01, the server answers with a kick
    packet (FF) whose reason string holds the status fields, and the
    connection is closed.  Any failure aborts the query; there is no
    partial result.
    '''

    def __init__(self, host, options=None):
        self.host = host
        self.options = options if options is not None else StatusOptions()
        self.srv_record = None
        self.stream = None

    def validate(self):
        if not isinstance(self.host, str):
            raise InvalidArgumentError(
                "expected 'host' to be a string, got %r" % (self.host,))
        if not self.host:
            raise InvalidArgumentError(
                "expected 'host' to have content, got an empty string")
        if not isinstance(self.options, StatusOptions):
            raise InvalidArgumentError(
                "expected 'options' to be StatusOptions, got %r" % (
                    self.options,))
        self.options.validate()

    @property
    def connect_timeout(self):
        if self.options.timeout is None:
            return DEFAULT_CONNECT_TIMEOUT
        return self.options.timeout

    @property
    def race_timeout(self):
        if self.options.timeout is None:
            return DEFAULT_RACE_TIMEOUT
        return self.options.timeout

    @property
    def target(self):
        if self.srv_record is not None:
            return self.srv_record.host, self.srv_record.port
        return self.host, self.options.port

    async def run(self):
        self.validate()

        if self.options.enable_srv and not IP_ADDRESS.fullmatch(self.host):
            self.srv_record = await resolve_srv(self.host)

        host, port = self.target
        self.stream = await ByteStream.connect(host, port, self.connect_timeout)
        try:
            fields = await self.exchange(self.stream)
        finally:
            self.stream.close()

        return format_result(self.host, self.options.port, self.srv_record,
                             *fields)

    async def exchange(self, stream):
        await stream.write_bytes(LegacyPing.encode({
            'id': SERVER_LIST_PING,
            'payload': 0x01}))

        packet_type = await stream.read_byte()
        if packet_type != KICK:
            raise UnexpectedPacketTypeError(packet_type)

        try:
            reason = await stream.read_utf16_string()
        except UnicodeDecodeError as err:
            raise MalformedPayloadError('payload', err.object) from err

        fields = parse_payload(reason)
        LOG.debug('status: %s', ', '.join(
            '%s=%r' % (k, v) for k, v in zip(PAYLOAD_FIELDS, fields)))
        return fields


async def get_status(host, options=None):
    '''Retrieve the status of a server using the 1.4 - 1.5 ping format.

    The whole query is bounded by options.timeout milliseconds, or by
    DEFAULT_RACE_TIMEOUT when no timeout is set.  A query that misses
    the deadline is cancelled, which closes its connection, and
    StatusTimeoutError is raised.'''
    query = StatusQuery(host, options)
    query.validate()

    try:
        return await asyncio.wait_for(query.run(), query.race_timeout / 1000)
    except asyncio.TimeoutError as err:
        raise StatusTimeoutError(TIMEOUT_MESSAGE) from err


status_fe01 = get_status
