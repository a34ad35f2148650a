"""
Team Cymru lookup modules for asnlens
"""

from .encoder import DEFAULT_ZONE, asn_query_name, origin_query_name, ipv6_nibbles
from .parser import parse_origin_records, parse_asn_records
from .resolver import TxtResolver, DnsTxtResolver, DohTxtResolver
from .cymru import CymruLookup, cymru_asn, cymru_ip2asn

__all__ = [
    'DEFAULT_ZONE', 'asn_query_name', 'origin_query_name', 'ipv6_nibbles',
    'parse_origin_records', 'parse_asn_records',
    'TxtResolver', 'DnsTxtResolver', 'DohTxtResolver',
    'CymruLookup', 'cymru_asn', 'cymru_ip2asn',
]
