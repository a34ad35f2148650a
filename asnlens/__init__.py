"""
asnlens - IP-to-ASN lookups over DNS

Resolve origin AS, BGP prefix and AS description for IP addresses
using Team Cymru's IP-to-ASN mapping service.
"""

__version__ = "1.0.0"
__author__ = "asnlens"

from .errors import CymruError, NoResultsFound, TransportError, ResolutionError
from .models import OriginRecord, AsInfoRecord, MergedResult
from .lookup import CymruLookup, cymru_asn, cymru_ip2asn

__all__ = [
    'CymruError', 'NoResultsFound', 'TransportError', 'ResolutionError',
    'OriginRecord', 'AsInfoRecord', 'MergedResult',
    'CymruLookup', 'cymru_asn', 'cymru_ip2asn',
]
