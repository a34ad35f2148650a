"""
Rich console output for asnlens
"""

from datetime import date, datetime, timezone
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..models import AsInfoRecord, MergedResult


class ConsoleOutput:
    """
    Rich console output for lookup results.

    One table per target: merged rows for IP lookups, registry rows
    for AS lookups.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_header(self, targets: list[str], source: str):
        """Print lookup header"""
        content = Text()
        content.append("asnlens", style="bold cyan")
        content.append(f" v{__version__}\n", style="dim")
        content.append("Targets: ", style="dim")
        content.append(", ".join(targets), style="bold")
        content.append("\n")
        content.append(f"Source: {source}", style="dim")

        panel = Panel(content, border_style="cyan", padding=(0, 1))
        self.console.print(panel)

    def print_ip_results(self, target: str, results: list[MergedResult]):
        """Print merged IP-to-ASN rows"""
        table = self._table(f"IP {target}")
        table.add_column("ASN", style="bold", no_wrap=True)
        table.add_column("BGP Prefix", no_wrap=True)
        table.add_column("CC", width=3)
        table.add_column("Registry")
        table.add_column("Allocated")
        table.add_column("AS Name", overflow="fold")
        table.add_column("Expires", style="dim")

        for result in results:
            table.add_row(
                result.asn,
                result.bgp_prefix,
                result.country_code or "-",
                result.registry or "-",
                self._format_date(result.allocated),
                result.as_name or "-",
                self._format_expiry(result.expires),
            )
        self.console.print(table)

    def print_asn_results(self, target: str, records: list[AsInfoRecord]):
        """Print AS info rows"""
        table = self._table(f"AS {target}")
        table.add_column("ASN", style="bold", no_wrap=True)
        table.add_column("CC", width=3)
        table.add_column("Registry")
        table.add_column("Allocated")
        table.add_column("AS Name", overflow="fold")
        table.add_column("Expires", style="dim")

        for record in records:
            table.add_row(
                f"AS{record.as_number}",
                record.country_code or "-",
                record.registry or "-",
                self._format_date(record.allocated),
                record.as_name or "-",
                self._format_expiry(record.expires),
            )
        self.console.print(table)

    def print_error(self, message: str):
        """Print error message"""
        self.console.print(f"[bold red]Error:[/] {message}")

    def _table(self, title: str) -> Table:
        return Table(
            title=title,
            title_justify="left",
            show_header=True,
            header_style="bold magenta",
            box=box.ROUNDED,
            border_style="dim",
            padding=(0, 1),
        )

    def _format_date(self, value: Optional[date]) -> str:
        return value.isoformat() if value else "-"

    def _format_expiry(self, expires: datetime) -> str:
        """Remaining validity, e.g. 'in 3h 20m'"""
        seconds = int((expires - datetime.now(timezone.utc)).total_seconds())
        if seconds <= 0:
            return "expired"
        hours, rest = divmod(seconds, 3600)
        minutes, secs = divmod(rest, 60)
        if hours:
            return f"in {hours}h {minutes}m"
        if minutes:
            return f"in {minutes}m {secs}s"
        return f"in {secs}s"
