"""
DNS query names for Team Cymru's IP-to-ASN service
"""

import ipaddress
from typing import Union

from ..models import IPAddress


DEFAULT_ZONE = "asn.cymru.com"


def as_ip(ip: Union[str, IPAddress]) -> IPAddress:
    """Coerce an address string to an ipaddress object"""
    if isinstance(ip, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return ip
    return ipaddress.ip_address(ip)


def ipv6_nibbles(ip: Union[str, ipaddress.IPv6Address]) -> str:
    """
    Nibble form of an IPv6 address, least-significant nibble first.

    Same ordering as ip6.arpa reverse names, without the suffix.
    """
    addr = ipaddress.IPv6Address(ip)
    return '.'.join(reversed(addr.packed.hex()))


def origin_query_name(ip: Union[str, IPAddress], zone: str = DEFAULT_ZONE) -> str:
    """
    Origin query name for an address.

    IPv4 1.2.3.4   -> 4.3.2.1.origin.asn.cymru.com.
    IPv6 2001:db8:: -> 0.0.0. ... .8.b.d.0.1.0.0.2.origin6.asn.cymru.com.
    """
    addr = as_ip(ip)
    if addr.version == 4:
        octets = '.'.join(str(b) for b in reversed(addr.packed))
        return f"{octets}.origin.{zone}."
    return f"{ipv6_nibbles(addr)}.origin6.{zone}."


def asn_query_name(as_number: int, zone: str = DEFAULT_ZONE) -> str:
    """AS info query name, e.g. AS23028.asn.cymru.com."""
    return f"AS{int(as_number)}.{zone}."
