"""
Command-line interface for dnsperfbench.

Benchmarks recursive resolvers and recommends the fastest one, or,
with --httptest, times an HTTP fetch through every resolver.
"""

import asyncio
import platform
import sys
from typing import Optional

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .config import DEFAULT_QUERY_LIMIT, BenchmarkConfig
from .httpbench import InvalidURLError, run_http_test, validate_url
from .logging_config import init_logging
from .output import HTTPTimingOutput, RawOutput, RichConsoleOutput
from .resolvers import DEFAULT_RESOLVERS
from .runner import BenchmarkError, TestRunner


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version strings and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(__version__)
    click.echo(f"{platform.python_implementation()} {platform.python_version()}")
    ctx.exit(0)


def create_progress_callback(console: Console):
    """Create a transient rich progress bar and a callback that drives it."""
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
        transient=True,
    )
    task_id = None

    def callback(message: str, current: int, total: int):
        nonlocal task_id
        if task_id is None:
            task_id = progress.add_task(message, total=total)
        progress.update(task_id, description=message, completed=current)

    return progress, callback


@click.command()
@click.option(
    "--resolver",
    "extra_resolvers",
    multiple=True,
    metavar="ADDR",
    help="Additional resolver to test (repeatable). Default: " + ", ".join(DEFAULT_RESOLVERS),
)
@click.option(
    "--raw", "-r",
    is_flag=True,
    help="Output raw tab-separated mode",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of resolvers to test at once (default: all)",
)
@click.option(
    "--queries",
    type=int,
    default=DEFAULT_QUERY_LIMIT,
    show_default=True,
    help="Limit the number of DNS queries in flight at a time",
)
@click.option(
    "--httptest",
    metavar="URL",
    help="Time fetching a URL (http or https) through each resolver instead",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Log every failed query",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Suppress progress output",
)
@click.option(
    "--version",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=print_version,
    help="Print version and exit",
)
def main(
    extra_resolvers: tuple,
    raw: bool,
    workers: Optional[int],
    queries: int,
    httptest: Optional[str],
    verbose: bool,
    quiet: bool,
):
    """
    Benchmark recursive DNS resolvers and recommend the fastest.

    Examples:

    \b
      # Test the built-in resolvers
      dnsperfbench

    \b
      # Add your ISP's resolver, machine-readable output
      dnsperfbench --resolver 192.168.1.1 -r

    \b
      # Time a page fetch through each resolver
      dnsperfbench --httptest https://example.com
    """
    err_console = Console(stderr=True)
    init_logging("debug" if verbose else "warning" if quiet else "info", console=err_console)

    try:
        config = BenchmarkConfig.build(
            extra_resolvers=extra_resolvers,
            workers=workers,
            queries=queries,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    if httptest:
        # Means we are running http test instead of DNS
        try:
            url = validate_url(httptest)
        except InvalidURLError as e:
            raise click.UsageError(str(e))
        results = asyncio.run(run_http_test(url, config.resolvers))
        HTTPTimingOutput.print(results, config.resolvers)
        return

    runner = TestRunner(config)

    progress_ctx, progress_callback = None, None
    if not quiet and not raw:
        progress_ctx, progress_callback = create_progress_callback(err_console)

    try:
        if progress_ctx:
            with progress_ctx:
                result = asyncio.run(runner.run(progress_callback=progress_callback))
        else:
            result = asyncio.run(runner.run())
    except BenchmarkError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if raw:
        click.echo(RawOutput.format(result))
    else:
        RichConsoleOutput.print(result)


if __name__ == "__main__":
    main()
