import logging
import sys
import typing as t

import click
from dotenv import find_dotenv, load_dotenv

from mgcstatus.aggregator import CollectionAggregator
from mgcstatus.config import ErrorPolicy, ReportOptions
from mgcstatus.exception import ChunkStatusError
from mgcstatus.gateway import MetadataGateway
from mgcstatus.reporter import ReportFormatter
from mgcstatus.util.cli import boot_click, error_logger
from mgcstatus.util.format import OutputFormat

logger = logging.getLogger(__name__)


@click.command(context_settings={"max_content_width": 120})
@click.option(
    "--host", envvar="MGCSTATUS_HOST", type=str, default="localhost", show_default=True, help="Server to connect to"
)
@click.option("--port", envvar="MGCSTATUS_PORT", type=int, default=27017, show_default=True, help="Port to connect to")
@click.option(
    "--url", envvar="MGCSTATUS_URL", type=str, required=False, help="MongoDB URI, overrides --host and --port"
)
@click.option(
    "--db", "-d", "database", envvar="MGCSTATUS_DB", default="test", show_default=True, help="Database to check"
)
@click.option("--markdown", "-m", is_flag=True, help="Render table in Markdown format")
@click.option("--extended", "-x", is_flag=True, help="Include the total data size per collection")
@click.option(
    "--format",
    "output_format",
    type=click.Choice([item.value for item in OutputFormat]),
    default=OutputFormat.TABLE.value,
    show_default=True,
    help="Output format",
)
@click.option(
    "--on-error",
    type=click.Choice([item.value for item in ErrorPolicy]),
    default=ErrorPolicy.ABORT.value,
    show_default=True,
    help="Abort the whole report, or skip collections failing analysis",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=10.0,
    show_default=True,
    help="Timeout per metadata query in seconds",
)
@click.option(
    "--max-workers",
    type=click.IntRange(min=1),
    default=8,
    show_default=True,
    help="Number of collections analysed in parallel",
)
@click.option("--legacy-arithmetic", is_flag=True, help="Truncate the average object size like historical reports")
@click.option("--verbose", is_flag=True, required=False, help="Turn on logging")
@click.option("--debug", is_flag=True, required=False, help="Turn on logging with debug level")
@click.version_option(package_name="mgcstatus")
@click.pass_context
def cli(
    ctx: click.Context,
    host: str,
    port: int,
    url: t.Optional[str],
    database: str,
    markdown: bool,
    extended: bool,
    output_format: str,
    on_error: str,
    timeout: float,
    max_workers: int,
    legacy_arithmetic: bool,
    verbose: bool,
    debug: bool,
):
    """
    Report the chunk distribution of each collection of a sharded MongoDB database.
    """
    boot_click(ctx, verbose, debug)
    options = ReportOptions(
        database=database,
        extended=extended,
        markdown=markdown,
        output_format=output_format,
        on_error=on_error,
        legacy_arithmetic=legacy_arithmetic,
        max_workers=max_workers,
        timeout=timeout,
    )

    if url:
        gateway = MetadataGateway(url=url, timeout=options.timeout_ms)
    else:
        gateway = MetadataGateway.from_host(host=host, port=port, timeout=options.timeout_ms)

    try:
        with gateway:
            gateway.ping()
            rows = CollectionAggregator(gateway=gateway, options=options).report()
    except ChunkStatusError as ex:
        error_logger(ctx)(f"Unable to create chunk status report: {ex}")
        sys.exit(1)

    formatter = ReportFormatter(rows, extended=options.extended, markdown=options.markdown)
    click.echo(formatter.format(options.output_format).rstrip("\n"))


def main():
    load_dotenv(find_dotenv(usecwd=True))
    cli()
