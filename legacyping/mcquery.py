import argparse
import asyncio
import logging
import sys

from .exc import *
from .protocol import StatusOptions, get_status

LOG = logging.getLogger(__name__)


def print_info(status):
    print(status.host, status.port,
          '%d/%d' % (status.players.online, status.players.max),
          status.version.protocol, status.version.name,
          status.motd.clean)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description='Query a Minecraft 1.4 - 1.5 server for its status.')
    p.add_argument('--protocol-version', '-V',
                   default=47,
                   type=int)
    p.add_argument('--timeout', '-t',
                   type=int,
                   help='timeout in milliseconds (default: 5000 to connect, '
                        '15000 overall)')
    p.add_argument('--no-srv',
                   dest='enable_srv',
                   action='store_false',
                   help='do not look up a Minecraft SRV record')
    p.add_argument('--debug', '-d',
                   action='store_true')
    p.add_argument('remotehost')
    p.add_argument('remoteport',
                   nargs='?',
                   default=25565,
                   type=int)
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING)

    options = StatusOptions(port=args.remoteport,
                            protocol_version=args.protocol_version,
                            timeout=args.timeout,
                            enable_srv=args.enable_srv)

    try:
        status = asyncio.run(get_status(args.remotehost, options))
    except PingError as err:
        LOG.debug('query failed', exc_info=True)
        print('%s: %s' % (args.remotehost, err), file=sys.stderr)
        return 1

    print_info(status)
    return 0


if __name__ == '__main__':
    sys.exit(main())
