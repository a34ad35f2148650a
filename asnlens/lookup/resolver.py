"""
TXT record resolvers

Plain DNS through dnspython's stub resolver, or DNS-over-HTTPS (RFC 8484)
POSTed with httpx.
"""

import logging
import time
from datetime import timedelta
from typing import Iterable, Optional, Protocol

import dns.exception
import dns.message
import dns.rcode
import dns.rdatatype
import dns.resolver
import httpx

from ..errors import ResolutionError, TransportError
from ..models import TxtAnswer


logger = logging.getLogger(__name__)

DNS_MESSAGE = "application/dns-message"


class TxtResolver(Protocol):
    """Anything that can fetch TXT strings for a fully-qualified name"""

    def resolve_txt(self, name: str) -> TxtAnswer:
        ...


def decode_txt(rdatas: Iterable) -> list[str]:
    """
    Decode TXT rdatas to strings.

    Every character-string is its own record. Strings that are not
    valid UTF-8 are dropped.
    """
    records = []
    for rdata in rdatas:
        for payload in rdata.strings:
            try:
                records.append(payload.decode('utf-8'))
            except UnicodeDecodeError:
                logger.debug("Dropping non UTF-8 TXT payload: %r", payload)
    return records


def unreachable(error: dns.resolver.NoNameservers) -> bool:
    """True when every nameserver failed at the socket level"""
    causes = [
        next((x for x in entry if isinstance(x, BaseException)), None)
        for entry in error.kwargs.get('errors') or []
    ]
    return bool(causes) and all(
        isinstance(c, (OSError, EOFError, dns.exception.Timeout)) for c in causes
    )


class DnsTxtResolver:
    """
    TXT lookups over plain DNS.

    Uses the system resolver configuration unless nameservers are given.
    """

    DEFAULT_TIMEOUT = 3.0

    def __init__(self, nameservers: Optional[list[str]] = None,
                 timeout: float = DEFAULT_TIMEOUT, port: int = 53,
                 resolver: Optional[dns.resolver.Resolver] = None):
        self.timeout = timeout
        if resolver is None:
            try:
                resolver = dns.resolver.Resolver(configure=not nameservers)
            except dns.resolver.NoResolverConfiguration as e:
                raise ResolutionError("No system resolver configuration; "
                                      "pass nameservers explicitly") from e
        if nameservers:
            resolver.nameservers = list(nameservers)
        resolver.port = port
        resolver.timeout = timeout
        resolver.lifetime = timeout
        self._resolver = resolver

    def resolve_txt(self, name: str) -> TxtAnswer:
        """
        Resolve TXT records for name.

        Raises:
            TransportError: timeout or socket failure
            ResolutionError: NXDOMAIN, empty answer, SERVFAIL and friends
        """
        try:
            answer = self._resolver.resolve(name, 'TXT')
        except dns.exception.Timeout as e:
            raise TransportError(f"DNS query timed out after {self.timeout}s", name) from e
        except dns.resolver.NXDOMAIN as e:
            raise ResolutionError("Name does not exist", name) from e
        except dns.resolver.NoAnswer as e:
            raise ResolutionError("No TXT records in answer", name) from e
        except dns.resolver.NoNameservers as e:
            if unreachable(e):
                raise TransportError("No nameserver could be reached", name) from e
            raise ResolutionError(str(e) or type(e).__name__, name) from e
        except dns.exception.DNSException as e:
            raise ResolutionError(str(e) or type(e).__name__, name) from e
        except (OSError, EOFError) as e:
            raise TransportError(str(e), name) from e

        ttl = max(0.0, answer.expiration - time.time())
        records = decode_txt(answer)
        logger.debug("%s: %d TXT record(s), ttl %.0fs", name, len(records), ttl)
        return TxtAnswer(records=records, ttl=timedelta(seconds=ttl))

    def close(self):
        """Nothing to release for plain DNS"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class DohTxtResolver:
    """
    TXT lookups over DNS-over-HTTPS (RFC 8484).

    Queries are POSTed to the given endpoint, e.g.
    https://cloudflare-dns.com/dns-query
    """

    DEFAULT_TIMEOUT = 3.0

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT,
                 client: Optional[httpx.Client] = None):
        self.url = url
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def resolve_txt(self, name: str) -> TxtAnswer:
        """
        Resolve TXT records for name.

        Raises:
            TransportError: HTTP connection failure or timeout
            ResolutionError: HTTP error status or DNS error rcode
        """
        query = dns.message.make_query(name, dns.rdatatype.TXT)
        # RFC 8484 recommends id 0 so responses stay cacheable
        query.id = 0
        try:
            reply = self._client.post(
                self.url,
                content=query.to_wire(),
                headers={"accept": DNS_MESSAGE, "content-type": DNS_MESSAGE},
                timeout=self.timeout,
            )
            reply.raise_for_status()
            response = dns.message.from_wire(reply.content)
        except httpx.TransportError as e:
            raise TransportError(str(e) or type(e).__name__, name) from e
        except httpx.HTTPStatusError as e:
            raise ResolutionError(f"{self.url} answered HTTP {e.response.status_code}",
                                  name) from e
        except dns.exception.DNSException as e:
            raise ResolutionError(f"Malformed DNS message: {e}", name) from e

        rcode = response.rcode()
        if rcode != dns.rcode.NOERROR:
            raise ResolutionError(f"Server answered {dns.rcode.to_text(rcode)}", name)

        rrsets = [r for r in response.answer if r.rdtype == dns.rdatatype.TXT]
        if not rrsets:
            raise ResolutionError("No TXT records in answer", name)

        records = [txt for rrset in rrsets for txt in decode_txt(rrset)]
        ttl = min(rrset.ttl for rrset in rrsets)
        logger.debug("%s: %d TXT record(s) via %s, ttl %ds",
                     name, len(records), self.url, ttl)
        return TxtAnswer(records=records, ttl=timedelta(seconds=ttl))

    def close(self):
        """Close HTTP client"""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
