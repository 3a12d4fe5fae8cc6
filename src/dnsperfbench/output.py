"""
Output formatting for DNS benchmark results.

Provides two output formats:
- Raw: tab-separated lines for scripts
- Human-readable: rich terminal tables and a recommendation
"""

import math
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import RESOLVER_HIT, BenchmarkResult, HTTPResult, SampleSummary
from .resolvers import display_name, provider_name

FAIL = "FAIL"


def format_duration(ms: float) -> str:
    """
    Round a latency to the millisecond and render it compactly.

    Examples: ``0s``, ``10ms``, ``1.5s``, ``10s``.
    """
    whole = int(math.floor(ms + 0.5))
    if whole == 0:
        return "0s"
    if whole < 1000:
        return f"{whole}ms"
    return f"{whole / 1000:.3f}".rstrip("0").rstrip(".") + "s"


def format_fail(summary: SampleSummary) -> str:
    return f"{summary.fail_pct:.2f}%"


def _rows(result: BenchmarkResult, resolver: str):
    bundle = result.bundles[resolver]
    yield RESOLVER_HIT, bundle[RESOLVER_HIT]
    for operator in result.operators:
        yield operator, bundle[operator]


class RawOutput:
    """Tab-separated output formatter."""

    @staticmethod
    def format(result: BenchmarkResult) -> str:
        """
        Format benchmark result as tab-separated lines.

        One ``Raw`` line per (resolver, probe) in resolver order, one
        ``Score`` line per resolver best first, then ``Recommendation``.
        """
        lines = []
        for resolver in result.resolvers:
            for probe, summary in _rows(result, resolver):
                lines.append(
                    f"Raw\t{resolver}\t{probe}\t{summary.mean_ms:.2f}\t"
                    f"{summary.median_ms:.2f}\t{summary.fail_pct:.2f}"
                )
        for entry in result.ranking:
            lines.append(f"Score\t{entry.resolver}\t{entry.score:.0f}")
        lines.append(f"Recommendation\t{result.recommendation}")
        return "\n".join(lines)


class RichConsoleOutput:
    """Rich library console output with tables."""

    @staticmethod
    def resolver_table(result: BenchmarkResult, resolver: str) -> Table:
        """Build the per-probe table for one resolver."""
        table = Table(box=box.ROUNDED, header_style="bold magenta")
        table.add_column("Auth", style="cyan")
        table.add_column("Mean", justify="right", style="green")
        table.add_column("Median", justify="right", style="green")
        table.add_column("Fail", justify="right", style="red")

        for probe, summary in _rows(result, resolver):
            table.add_row(
                escape(probe),
                format_duration(summary.mean_ms),
                format_duration(summary.median_ms),
                format_fail(summary),
            )
        return table

    @staticmethod
    def summary_table(result: BenchmarkResult) -> Table:
        """Build the ranked score table, best first."""
        table = Table(box=box.ROUNDED, header_style="bold magenta")
        table.add_column("Resolver", style="cyan")
        table.add_column("Performance Score", justify="right")

        for entry in result.ranking:
            table.add_row(escape(display_name(entry.resolver)), f"{entry.score:.0f}")
        return table

    @staticmethod
    def print(result: BenchmarkResult, console: Optional[Console] = None) -> None:
        """Print per-resolver detail, the summary and the recommendation."""
        console = console or Console()

        for resolver in result.resolvers:
            console.print(
                f"========== {escape(resolver)} ({escape(provider_name(resolver))}) ==========="
            )
            console.print(RichConsoleOutput.resolver_table(result, resolver))

        console.print("========== Summary ===========")
        console.print("Scores (lower is better)")
        console.print(RichConsoleOutput.summary_table(result))
        console.print(
            f"You should probably use [bold green]{escape(result.recommendation)}[/bold green] "
            "as your default resolver"
        )


class HTTPTimingOutput:
    """Table of HTTP connection-phase timings per resolver."""

    HEADERS = ("Resolver", "Remote", "DNS", "Connect", "TLS", "TTFB", "Transfer", "TOTAL")

    @staticmethod
    def rows(results: Sequence[HTTPResult], resolvers: Sequence[str]) -> list[list[str]]:
        """
        Build table rows: one per result, then an all-FAIL row for every
        resolver missing from the results.
        """
        rows = []
        found = set()
        for res in results:
            t = res.timing
            rows.append([
                display_name(res.resolver),
                res.remote_addr,
                format_duration(t.dns_ms),
                format_duration(t.connect_ms),
                format_duration(t.tls_ms),
                format_duration(t.ttfb_ms),
                format_duration(t.transfer_ms),
                format_duration(t.total_ms),
            ])
            found.add(res.resolver)

        # For everything else stamp a FAIL
        for server in resolvers:
            if server not in found:
                rows.append([display_name(server)] + [FAIL] * 7)
        return rows

    @staticmethod
    def print(
        results: Sequence[HTTPResult],
        resolvers: Sequence[str],
        console: Optional[Console] = None,
    ) -> None:
        console = console or Console()
        table = Table(box=box.ROUNDED, header_style="bold magenta")
        for header in HTTPTimingOutput.HEADERS:
            table.add_column(header, justify="left" if header in ("Resolver", "Remote") else "right")
        for row in HTTPTimingOutput.rows(results, resolvers):
            table.add_row(*(escape(cell) for cell in row))
        console.print(table)
