import logging
from dataclasses import dataclass

import dns.asyncresolver
import dns.exception
import dns.resolver

from . import config
from .errors import ResolutionError, ServerTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SRVRecord:
    host: str
    port: int


def pick_srv_record(answers):
    """Lowest priority wins, ties go to the heaviest weight.

    Returns ``None`` when there is nothing usable, including the lone "."
    target that marks the service as unavailable.
    """
    records = sorted(answers, key=lambda rdata: (rdata.priority, -rdata.weight))
    for rdata in records:
        target = str(rdata.target).rstrip(".")
        if target:
            return SRVRecord(target, rdata.port)
    return None


async def resolve_srv(host, timeout=None):
    """Look up ``_minecraft._tcp.<host>``.

    ``None`` means "no record, connect to the original address". Failures of
    the lookup itself are raised, never turned into ``None``.
    """
    name = config.SRV_SERVICE_PREFIX + host
    resolver = dns.asyncresolver.Resolver()
    if timeout is not None:
        resolver.lifetime = timeout

    logger.debug(f"解析SRV记录: {name}")
    try:
        answers = await resolver.resolve(name, "SRV")
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
        logger.debug(f"{name} 没有SRV记录")
        return None
    except dns.exception.Timeout as e:
        raise ServerTimeoutError(f"Timed out while resolving SRV record {name}") from e
    except dns.exception.DNSException as e:
        raise ResolutionError(f"Failed to resolve SRV record {name}: {e}") from e

    record = pick_srv_record(answers)
    if record is not None:
        logger.debug(f"SRV {name} -> {record.host}:{record.port}")
    return record
