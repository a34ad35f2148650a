import ipaddress
from datetime import timedelta

import pytest

from asnlens.errors import NoResultsFound, ResolutionError, TransportError
from asnlens.lookup import CymruLookup, cymru, cymru_asn, cymru_ip2asn
from .conftest import NOW


ORIGIN_V4 = "31.108.90.216.origin.asn.cymru.com."
AS23028 = "AS23028.asn.cymru.com."


@pytest.fixture
def lookup(fake_resolver, clock):
    return CymruLookup(fake_resolver, clock=clock)


def test_asn(lookup, fake_resolver):
    fake_resolver.add(AS23028, ["23028 | US | arin | 2002-01-04 | TEAMCYMRU - SAUNET"], ttl=600)
    records = lookup.asn(23028)
    assert len(records) == 1
    assert records[0].as_name == "TEAMCYMRU - SAUNET"
    assert records[0].expires == NOW + timedelta(seconds=600)
    assert fake_resolver.queries == [AS23028]


def test_asn_no_results(lookup, fake_resolver):
    fake_resolver.add(AS23028, ["", "not | a | record"])
    with pytest.raises(NoResultsFound) as excinfo:
        lookup.asn(23028)
    assert excinfo.value.query == AS23028


def test_asn_propagates_resolver_error(lookup, fake_resolver):
    error = ResolutionError("Name does not exist", AS23028)
    fake_resolver.fail(AS23028, error)
    with pytest.raises(ResolutionError) as excinfo:
        lookup.asn(23028)
    assert excinfo.value is error


def test_origin_ipv6(lookup, fake_resolver):
    name = ("7.6.5.4.3.2.1.0.f.e.d.c.b.a.9.8.7.6.5.4.3.2.1.0.8.b.d.0.1.0.0.2"
            ".origin6.asn.cymru.com.")
    fake_resolver.add(name, ["64496 | 2001:db8::/32 | ZZ | other | 2005-01-01"])
    records = lookup.origin("2001:db8:123:4567:89ab:cdef:123:4567")
    assert [r.bgp_prefix for r in records] == ["2001:db8::/32"]


def test_ip2asn(lookup, fake_resolver):
    fake_resolver.add(ORIGIN_V4, ["23028 | 216.90.108.0/24 | US | arin | 1998-09-25"], ttl=300)
    fake_resolver.add(AS23028, ["23028 | US | arin | 2002-01-04 | TEAMCYMRU - SAUNET"], ttl=900)

    results = lookup.ip2asn("216.90.108.31")

    assert len(results) == 1
    result = results[0]
    assert result.ip_addr == ipaddress.ip_address("216.90.108.31")
    assert result.as_number == 23028
    assert result.asn == "AS23028"
    assert result.as_name == "TEAMCYMRU - SAUNET"
    assert result.bgp_prefix == "216.90.108.0/24"
    assert result.country_code == "US"
    assert result.registry == "arin"
    assert result.allocated.isoformat() == "1998-09-25"
    assert fake_resolver.queries == [ORIGIN_V4, AS23028]


@pytest.mark.parametrize("origin_ttl, asn_ttl", [(300, 900), (900, 300), (60, 60), (0, 10)])
def test_ip2asn_expires_is_earliest(lookup, fake_resolver, origin_ttl, asn_ttl):
    fake_resolver.add(ORIGIN_V4, ["23028 | 216.90.108.0/24 | US | arin | 1998-09-25"], ttl=origin_ttl)
    fake_resolver.add(AS23028, ["23028 | US | arin | 2002-01-04 | TEAMCYMRU"], ttl=asn_ttl)

    origin = lookup.origin("216.90.108.31")[0]
    info = lookup.asn(23028)[0]
    result = lookup.ip2asn("216.90.108.31")[0]

    assert result.expires == min(origin.expires, info.expires)
    assert result.expires == NOW + timedelta(seconds=min(origin_ttl, asn_ttl))


def test_ip2asn_dedups_in_first_seen_order(lookup, fake_resolver):
    fake_resolver.add(ORIGIN_V4, [
        "64497 64496 | 216.90.108.0/24 | US | arin | 1998-09-25",
        "64496 | 216.90.0.0/16 | CA | arin | 1990-01-01",
    ])
    fake_resolver.add("AS64496.asn.cymru.com.", ["64496 | US | arin | 2002-01-04 | FIRST"])
    fake_resolver.add("AS64497.asn.cymru.com.", ["64497 | US | arin | 2002-01-04 | SECOND"])

    results = lookup.ip2asn("216.90.108.31")

    assert [r.as_number for r in results] == [64497, 64496]
    # First origin row for 64496 wins
    assert results[1].bgp_prefix == "216.90.108.0/24"
    assert results[1].country_code == "US"
    assert fake_resolver.queries.count("AS64496.asn.cymru.com.") == 1


def test_ip2asn_fails_fast_on_asn_error(lookup, fake_resolver):
    fake_resolver.add(ORIGIN_V4, ["23028 | 216.90.108.0/24 | US | arin | 1998-09-25"])
    fake_resolver.fail(AS23028, TransportError("DNS query timed out", AS23028))

    with pytest.raises(TransportError):
        lookup.ip2asn("216.90.108.31")


def test_ip2asn_aborts_on_second_asn_failure(lookup, fake_resolver):
    fake_resolver.add(ORIGIN_V4, ["64496 64497 64498 | 216.90.108.0/24 | US | arin | 1998-09-25"])
    fake_resolver.add("AS64496.asn.cymru.com.", ["64496 | US | arin | 2002-01-04 | OK"])
    fake_resolver.fail("AS64497.asn.cymru.com.", ResolutionError("SERVFAIL"))
    fake_resolver.add("AS64498.asn.cymru.com.", ["64498 | US | arin | 2002-01-04 | NEVER"])

    with pytest.raises(ResolutionError):
        lookup.ip2asn("216.90.108.31")
    assert "AS64498.asn.cymru.com." not in fake_resolver.queries


def test_ip2asn_no_origin(lookup, fake_resolver):
    fake_resolver.add(ORIGIN_V4, ["x | 216.90.108.0/24 | US | arin | 1998-09-25"])
    with pytest.raises(NoResultsFound):
        lookup.ip2asn("216.90.108.31")
    assert fake_resolver.queries == [ORIGIN_V4]


def test_ip2asn_empty_asn_answer(lookup, fake_resolver):
    fake_resolver.add(ORIGIN_V4, ["23028 | 216.90.108.0/24 | US | arin | 1998-09-25"])
    fake_resolver.add(AS23028, [""])
    with pytest.raises(NoResultsFound) as excinfo:
        lookup.ip2asn("216.90.108.31")
    assert excinfo.value.query == AS23028


def test_context_manager_closes_resolver(fake_resolver):
    with CymruLookup(fake_resolver):
        pass
    assert fake_resolver.closed


def test_cymru_asn_helper(monkeypatch, fake_resolver):
    monkeypatch.setattr(cymru, "DnsTxtResolver", lambda: fake_resolver)
    fake_resolver.add(AS23028, ["23028 | US | arin | 2002-01-04 | TEAMCYMRU - SAUNET"])

    records = cymru_asn(23028)

    assert [r.as_name for r in records] == ["TEAMCYMRU - SAUNET"]
    assert fake_resolver.closed


def test_cymru_ip2asn_helper(monkeypatch, fake_resolver):
    monkeypatch.setattr(cymru, "DnsTxtResolver", lambda: fake_resolver)
    fake_resolver.add(ORIGIN_V4, ["23028 | 216.90.108.0/24 | US | arin | 1998-09-25"])
    fake_resolver.add(AS23028, ["23028 | US | arin | 2002-01-04 | TEAMCYMRU - SAUNET"])

    results = cymru_ip2asn("216.90.108.31")

    assert [(r.asn, r.bgp_prefix) for r in results] == [("AS23028", "216.90.108.0/24")]
    assert fake_resolver.queries == [ORIGIN_V4, AS23028]
    assert fake_resolver.closed
