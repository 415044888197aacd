import logging
from dataclasses import dataclass
from typing import Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from .exc import *

LOG = logging.getLogger(__name__)

SRV_SERVICE = '_minecraft._tcp'


@dataclass(frozen=True)
class SRVRecord:
    host: str
    port: int


async def resolve_srv(host: str) -> Optional[SRVRecord]:
    '''Look up the Minecraft SRV record for host.  Returns None when the
    name has no such record; any other DNS failure raises ResolutionError.'''
    name = '%s.%s' % (SRV_SERVICE, host)

    try:
        answer = await dns.asyncresolver.resolve(name, 'SRV')
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
        LOG.debug('no SRV record for %s', host)
        return None
    except dns.exception.DNSException as err:
        raise ResolutionError('failed to resolve %s: %s' % (name, err)) from err

    for rdata in answer:
        record = SRVRecord(host=str(rdata.target).rstrip('.'), port=rdata.port)
        LOG.debug('SRV %s -> %s:%d', host, record.host, record.port)
        return record

    return None
