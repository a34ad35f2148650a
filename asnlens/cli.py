import ipaddress
import logging
import sys
from pathlib import Path
from typing import Optional, Union

import click
from rich.console import Console

from . import __version__
from .errors import CymruError
from .log import setup_logging
from .lookup import CymruLookup, DnsTxtResolver, DohTxtResolver, DEFAULT_ZONE
from .lookup.parser import parse_as_number
from .models import IPAddress
from .output import ConsoleOutput, JsonExporter


console = Console()
logger = logging.getLogger(__name__)

Target = tuple[str, Union[IPAddress, int]]


def parse_target(text: str) -> Target:
    """
    Classify a command line target.

    Returns ('ip', address) for IPv4/IPv6 literals and ('asn', number)
    for '15169' or 'AS15169'.
    """
    try:
        return 'ip', ipaddress.ip_address(text)
    except ValueError:
        pass

    digits = text[2:] if text[:2].upper() == 'AS' else text
    as_number = parse_as_number(digits)
    if as_number is None:
        raise click.BadParameter(
            f"'{text}' is neither an IP address nor an AS number",
            param_hint="TARGET"
        )
    return 'asn', as_number


def build_resolver(nameservers: tuple[str, ...], doh_url: Optional[str], timeout: float):
    """Pick the TXT resolver from the transport options"""
    if doh_url and nameservers:
        raise click.UsageError("--doh and --nameserver cannot be combined")
    if doh_url:
        return DohTxtResolver(doh_url, timeout=timeout)
    return DnsTxtResolver(nameservers=list(nameservers) or None, timeout=timeout)


@click.command()
@click.argument('targets', nargs=-1, required=True, metavar='TARGET...')
@click.option('-w', '--timeout', default=3.0, type=float, envvar='ASNLENS_TIMEOUT',
              help='DNS timeout in seconds (default: 3)')
@click.option('-n', '--nameserver', 'nameservers', multiple=True,
              envvar='ASNLENS_NAMESERVER',
              help='Nameserver to query, repeatable (default: system resolver)')
@click.option('--doh', 'doh_url', envvar='ASNLENS_DOH_URL',
              help='Query over DNS-over-HTTPS at this URL')
@click.option('--zone', default=DEFAULT_ZONE, envvar='ASNLENS_ZONE',
              help=f'Lookup service zone (default: {DEFAULT_ZONE})')
@click.option('--json', 'json_path', type=click.Path(),
              help='Export results to JSON file')
@click.option('-v', '--verbose', count=True,
              help='Log lookups (-v), or lookups and parsing (-vv)')
@click.version_option(version=__version__)
def main(targets: tuple[str, ...], timeout: float, nameservers: tuple[str, ...],
         doh_url: Optional[str], zone: str, json_path: Optional[str], verbose: int):
    """
    asnlens - IP-to-ASN mapping over DNS.

    Look up each TARGET with Team Cymru's IP-to-ASN service. An IP
    address (v4 or v6) gives its BGP prefix and origin AS(es); an AS
    number (15169 or AS15169) gives the registry record for that AS.

    Examples:

        asnlens 8.8.8.8

        asnlens 2001:4860:4860::8888 AS13335

        asnlens 1.1.1.1 --doh https://cloudflare-dns.com/dns-query --json out.json
    """
    setup_logging(verbose)
    parsed = [(text, parse_target(text)) for text in targets]

    output = ConsoleOutput(console)
    exporter = JsonExporter()
    exporter.add_data_source("team_cymru")
    failures = 0

    try:
        resolver = build_resolver(nameservers, doh_url, timeout)
        source = f"{zone} via {doh_url or 'DNS'}"
        output.print_header([text for text, _ in parsed], source)

        with CymruLookup(resolver, zone=zone) as lookup:
            for text, (kind, value) in parsed:
                logger.info("Looking up %s %s", kind, value)
                try:
                    if kind == 'ip':
                        results = lookup.ip2asn(value)
                        output.print_ip_results(text, results)
                    else:
                        results = lookup.asn(value)
                        output.print_asn_results(text, results)
                    exporter.add_results(text, kind, results)
                except CymruError as e:
                    failures += 1
                    output.print_error(f"{text}: {e}")
                    exporter.add_error(text, kind, e)

        if json_path:
            json_file = Path(json_path)
            exporter.export(json_file)
            console.print(f"\n[dim]Results exported to:[/] {json_file.absolute()}")

    except CymruError as e:
        output.print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/]")
        sys.exit(130)

    if failures:
        sys.exit(1)


if __name__ == '__main__':
    main()
