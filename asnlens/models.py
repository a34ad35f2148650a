"""
Data models for asnlens
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Union


# AS numbers are unsigned 32-bit integers (RFC 6793)
MAX_AS_NUMBER = 2 ** 32 - 1

IPAddress = Union[IPv4Address, IPv6Address]


@dataclass(frozen=True)
class TxtAnswer:
    """Decoded TXT strings for one query plus their remaining validity"""
    records: list[str] = field(default_factory=list)
    ttl: timedelta = timedelta(0)


@dataclass(frozen=True)
class OriginRecord:
    """One origin AS announcing the prefix that covers an address"""
    as_number: int
    bgp_prefix: str
    country_code: str
    registry: str
    allocated: Optional[date]
    expires: datetime


@dataclass(frozen=True)
class AsInfoRecord:
    """What the registry knows about an AS number"""
    as_number: int
    country_code: str
    registry: str
    allocated: Optional[date]
    as_name: str
    expires: datetime


@dataclass(frozen=True)
class MergedResult:
    """
    IP-to-ASN mapping for one origin AS.

    Prefix, country, registry and allocation date come from the origin
    record; the AS name comes from the AS info record. ``expires`` is the
    earlier of the two source expiries.
    """
    ip_addr: IPAddress
    bgp_prefix: str
    as_number: int
    as_name: str
    country_code: str
    registry: str
    allocated: Optional[date]
    expires: datetime

    @property
    def asn(self) -> str:
        return f"AS{self.as_number}"

    @classmethod
    def combine(cls, ip_addr: IPAddress, origin: OriginRecord,
                info: AsInfoRecord) -> 'MergedResult':
        return cls(
            ip_addr=ip_addr,
            bgp_prefix=origin.bgp_prefix,
            as_number=origin.as_number,
            as_name=info.as_name,
            country_code=origin.country_code,
            registry=origin.registry,
            allocated=origin.allocated,
            expires=min(origin.expires, info.expires),
        )
