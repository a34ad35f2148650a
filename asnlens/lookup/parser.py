"""
Parsers for Team Cymru TXT answers

Origin rows (<reversed-ip>.origin.asn.cymru.com):

    "23028 | 216.90.108.0/24 | US | arin | 1998-09-25"

A prefix announced by several origins lists them space-separated in the
first field:

    "1 23 456 7890 | 203.0.113.0/24 | GB | ripencc | 2006-02-17"

AS info rows (AS<asn>.asn.cymru.com):

    "23028 | US | arin | 2002-01-04 | TEAM-CYMRU - Team Cymru Inc., US"

Malformed rows and fields never raise. Rows without a usable AS number
are dropped, bad dates become None.
"""

import logging
from datetime import date, datetime
from typing import Iterable, Iterator, Optional

from ..models import MAX_AS_NUMBER, AsInfoRecord, OriginRecord


logger = logging.getLogger(__name__)

ORIGIN_FIELDS = 5
ASN_FIELDS = 5


def split_fields(row: str) -> list[str]:
    """Split a pipe-delimited row and trim every field"""
    return [f.strip() for f in row.split('|')]


def parse_as_number(text: str) -> Optional[int]:
    """Parse a bare AS number, None if not a 32-bit unsigned integer"""
    text = text.strip()
    if not text.isascii() or not text.isdigit():
        return None
    value = int(text)
    if value > MAX_AS_NUMBER:
        return None
    return value


def parse_date(text: str) -> Optional[date]:
    """Parse YYYY-MM-DD, None if empty or invalid"""
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _origin_records(row: str, expires: datetime) -> Iterator[OriginRecord]:
    fields = split_fields(row)
    if len(fields) < ORIGIN_FIELDS:
        logger.debug("Skipping short origin row: %r", row)
        return

    tokens = fields[0].split()
    numbers = [parse_as_number(t) for t in tokens]
    skipped = [t for t, n in zip(tokens, numbers) if n is None]
    if skipped and len(skipped) < len(tokens):
        logger.warning("Skipped invalid AS numbers %s in origin row %r",
                       ', '.join(skipped), row)
    elif skipped or not tokens:
        logger.debug("Skipping origin row without AS number: %r", row)

    prefix, country, registry, allocated = fields[1:ORIGIN_FIELDS]
    allocated_date = parse_date(allocated)

    for as_number in numbers:
        if as_number is None:
            continue
        yield OriginRecord(
            as_number=as_number,
            bgp_prefix=prefix,
            country_code=country,
            registry=registry,
            allocated=allocated_date,
            expires=expires,
        )


def _asn_record(row: str, expires: datetime) -> Optional[AsInfoRecord]:
    fields = split_fields(row)
    if len(fields) < ASN_FIELDS:
        logger.debug("Skipping short AS info row: %r", row)
        return None

    as_number = parse_as_number(fields[0])
    if as_number is None:
        logger.debug("Skipping AS info row without AS number: %r", row)
        return None

    # Descriptions may themselves contain '|'
    as_name = ' | '.join(fields[ASN_FIELDS - 1:])

    return AsInfoRecord(
        as_number=as_number,
        country_code=fields[1],
        registry=fields[2],
        allocated=parse_date(fields[3]),
        as_name=as_name,
        expires=expires,
    )


def parse_origin_records(rows: Iterable[str], expires: datetime) -> list[OriginRecord]:
    """
    Parse origin query rows.

    Args:
        rows: TXT strings from one origin query
        expires: Expiry stamped on every record

    Returns:
        One OriginRecord per valid AS number, in row then token order
    """
    return [record for row in rows for record in _origin_records(row, expires)]


def parse_asn_records(rows: Iterable[str], expires: datetime) -> list[AsInfoRecord]:
    """
    Parse AS info query rows.

    Args:
        rows: TXT strings from one AS info query
        expires: Expiry stamped on every record

    Returns:
        One AsInfoRecord per usable row
    """
    records = (_asn_record(row, expires) for row in rows)
    return [record for record in records if record is not None]
