__all__ = [
    'PingError',
    'NeedMoreData',
    'InvalidArgumentError',
    'ConnectError',
    'StreamClosedError',
    'WriteError',
    'VarIntTooLargeError',
    'UnexpectedPacketTypeError',
    'MalformedPayloadError',
    'ResolutionError',
    'StatusTimeoutError',
]


class PingError(Exception):
    pass


class NeedMoreData(Exception):
    pass


class InvalidArgumentError(PingError, ValueError):
    pass


class ConnectError(PingError, ConnectionError):
    pass


class StreamClosedError(PingError):
    pass


class WriteError(PingError):
    pass


class VarIntTooLargeError(PingError):
    pass


class UnexpectedPacketTypeError(PingError):
    def __init__(self, packet_type):
        self.packet_type = packet_type
        super(UnexpectedPacketTypeError, self).__init__(
            'packet returned from server was unexpected type 0x%02X' %
            packet_type)


class MalformedPayloadError(PingError):
    def __init__(self, field, value):
        self.field = field
        self.value = value
        super(MalformedPayloadError, self).__init__(
            'server returned an invalid %s: %r' % (field, value))


class ResolutionError(PingError):
    pass


class StatusTimeoutError(PingError, TimeoutError):
    pass
