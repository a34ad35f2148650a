"""
IP-to-ASN lookup via Team Cymru DNS service
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from ..errors import NoResultsFound
from ..models import AsInfoRecord, IPAddress, MergedResult, OriginRecord
from .encoder import DEFAULT_ZONE, as_ip, asn_query_name, origin_query_name
from .parser import parse_asn_records, parse_origin_records
from .resolver import DnsTxtResolver, TxtResolver


logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CymruLookup:
    """
    IP-to-ASN lookup via Team Cymru DNS service.

    Uses DNS TXT queries to:
    1. Get origin AS(es) from IP: <reversed-ip>.origin.asn.cymru.com
       (<nibbles>.origin6.asn.cymru.com for IPv6)
    2. Get AS description: AS<asn>.asn.cymru.com

    Every call hits the resolver; nothing is cached. Queries run
    sequentially and the first failure aborts the call.
    """

    def __init__(self, resolver: Optional[TxtResolver] = None,
                 zone: str = DEFAULT_ZONE,
                 clock: Optional[Callable[[], datetime]] = None):
        self.zone = zone
        self._resolver = resolver if resolver is not None else DnsTxtResolver()
        self._clock = clock or utc_now

    def _query(self, name: str):
        answer = self._resolver.resolve_txt(name)
        expires = self._clock() + answer.ttl
        return answer.records, expires

    def origin(self, ip: Union[str, IPAddress]) -> list[OriginRecord]:
        """
        Origin ASes announcing the prefix covering ip.

        Raises:
            NoResultsFound: no usable origin rows
            TransportError, ResolutionError: from the resolver
        """
        name = origin_query_name(ip, self.zone)
        rows, expires = self._query(name)
        records = parse_origin_records(rows, expires)
        if not records:
            raise NoResultsFound(name)
        return records

    def asn(self, as_number: int) -> list[AsInfoRecord]:
        """
        Registry information for an AS number.

        Raises:
            NoResultsFound: no usable AS info rows
            TransportError, ResolutionError: from the resolver
        """
        name = asn_query_name(as_number, self.zone)
        rows, expires = self._query(name)
        records = parse_asn_records(rows, expires)
        if not records:
            raise NoResultsFound(name)
        return records

    def ip2asn(self, ip: Union[str, IPAddress]) -> list[MergedResult]:
        """
        Full IP-to-ASN lookup.

        Queries the origin(s) of ip, then AS info once per distinct
        origin AS, and merges both into one result per AS in order of
        first appearance.

        Args:
            ip: IPv4 or IPv6 address

        Returns:
            Non-empty list of MergedResult
        """
        addr = as_ip(ip)
        origins = self.origin(addr)

        # as_number -> first origin record announcing it
        distinct: dict[int, OriginRecord] = {}
        for origin in origins:
            distinct.setdefault(origin.as_number, origin)

        if len(distinct) < len(origins):
            logger.debug("%s: %d origin record(s), %d distinct AS",
                         addr, len(origins), len(distinct))

        results = []
        for as_number, origin in distinct.items():
            info = self.asn(as_number)[0]
            results.append(MergedResult.combine(addr, origin, info))

        if not results:
            raise NoResultsFound(origin_query_name(addr, self.zone))
        return results

    def close(self):
        """Release the underlying resolver"""
        close = getattr(self._resolver, 'close', None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def cymru_asn(as_number: int) -> list[AsInfoRecord]:
    """AS info lookup with the system resolver"""
    with CymruLookup() as lookup:
        return lookup.asn(as_number)


def cymru_ip2asn(ip: Union[str, IPAddress]) -> list[MergedResult]:
    """IP-to-ASN lookup with the system resolver"""
    with CymruLookup() as lookup:
        return lookup.ip2asn(ip)
