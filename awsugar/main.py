"""
awsugar CLI - AWS Working Sugar

Main entry point for the command-line interface.
"""

import logging
import sys
from typing import List, Optional, Tuple

import click
from rich.console import Console

from awsugar import __version__
from awsugar.cleaners.pipeline import CleanupPipeline
from awsugar.core.aws_client import DEFAULT_REGION, AWSClient
from awsugar.core.context import DEFAULT_SNAPSHOT_TIMEOUT, CleanupContext
from awsugar.core.exceptions import (
    AWSClientError,
    ListingError,
    SnapshotCancelledError,
    UnsupportedKindError,
)
from awsugar.core.logging import setup_logging
from awsugar.core.waiter import DEFAULT_POLL_INTERVAL
from awsugar.reporters.cli_reporter import CLIReporter
from awsugar.reporters.json_reporter import JSONReporter
from awsugar.resources import ResourceKind, get_kind

console = Console()
logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_kind(ctx, param, value: str) -> ResourceKind:
    """Resolve the resource kind argument."""
    try:
        return get_kind(value)
    except UnsupportedKindError as e:
        raise click.BadParameter(str(e))


def validate_ids(ctx, param, value: Tuple[str, ...]) -> List[str]:
    """Flatten repeated and comma-separated ID lists."""
    ids: List[str] = []
    for chunk in value:
        ids.extend(i.strip() for i in chunk.split(",") if i.strip())
    return ids


@click.group()
@click.version_option(version=__version__, prog_name="awsugar")
@click.option(
    "--dry-run",
    "-d",
    is_flag=True,
    default=False,
    envvar="AWSUGAR_DRY_RUN",
    help="List-only mode: report what would be done without executing any action",
)
@click.option(
    "--region",
    "-r",
    default=DEFAULT_REGION,
    envvar="AWSUGAR_REGION",
    show_default=True,
    help="AWS region to execute the actions in",
)
@click.option(
    "--profile",
    "-p",
    default=None,
    envvar=["AWSUGAR_PROFILE", "AWS_PROFILE"],
    help="AWS profile name from ~/.aws/credentials",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="AWSUGAR_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity (logs go to stderr)",
)
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False, writable=True),
    help="Also write logs to this file",
)
@click.pass_context
def cli(ctx, dry_run: bool, region: str, profile: Optional[str], log_level: str, log_file: Optional[str]):
    """
    awsugar: AWS Working Sugar

    A set of useful tools for your day to day AWS duties: find and
    remove idle instances, load balancers without instances, and
    unattached volumes and network interfaces.
    """
    setup_logging(level=log_level, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj.update(dry_run=dry_run, region=region, profile=profile)


@cli.command("clean")
@click.argument("kind", metavar="KIND", callback=validate_kind)
@click.option(
    "--sweet-clean/--no-sweet-clean",
    "-s/-S",
    default=True,
    show_default=True,
    help="Snapshot volumes before they are destroyed",
)
@click.option(
    "--ids",
    multiple=True,
    callback=validate_ids,
    help="EC2 instance IDs to clean (repeatable or comma-separated)",
)
@click.option(
    "--poll-interval",
    type=click.FloatRange(min=0),
    default=DEFAULT_POLL_INTERVAL,
    show_default=True,
    help="Seconds between two snapshot status checks",
)
@click.option(
    "--snapshot-timeout",
    type=click.FloatRange(min=0),
    default=DEFAULT_SNAPSHOT_TIMEOUT,
    show_default=True,
    help="Give up on a snapshot after this many seconds (0 waits forever)",
)
@click.option(
    "--output",
    "-o",
    default=None,
    type=click.Path(dir_okay=False, writable=True),
    help="Write a JSON report of the run to this file",
)
@click.pass_context
def clean(
    ctx,
    kind: ResourceKind,
    sweet_clean: bool,
    ids: List[str],
    poll_interval: float,
    snapshot_timeout: float,
    output: Optional[str],
):
    """
    Clean your AWS account of unused resources of KIND.

    KIND is one of: instance (ec2), load-balancer (elb), volume (ebs),
    network-interface (eni).

    \b
    - Soft kill EC2 instances with a snapshot of their volumes first
    - Remove classic ELBs without registered instances
    - Remove available EBS volumes, snapshotting them first
    - Remove unattached network interfaces

    Examples:

        # Preview what would be deleted (safe)
        awsugar --dry-run clean volume

        # Terminate two instances after snapshotting their volumes
        awsugar clean instance --ids i-0abc,i-0def

        # Delete unattached ENIs in another region
        awsugar -r eu-west-1 clean network-interface
    """
    settings = ctx.obj
    dry_run = settings["dry_run"]
    reporter = CLIReporter(console)

    if ids and not kind.accepts_ids:
        reporter.print_warning(f"--ids only applies to instances; ignored for {kind.name}")
        ids = []

    client = AWSClient(region=settings["region"], profile=settings["profile"])
    try:
        client.validate_credentials()
    except AWSClientError as e:
        reporter.print_error(str(e), title="Authentication Error")
        sys.exit(1)

    context = CleanupContext(
        aws_client=client,
        dry_run=dry_run,
        sweet_clean=sweet_clean,
        poll_interval=poll_interval,
        snapshot_timeout=snapshot_timeout or None,
        progress_callback=reporter.update_snapshot_progress,
    )
    pipeline = CleanupPipeline(
        context,
        on_listed=lambda kind, resources: reporter.print_candidates(
            kind, resources, sweet_clean=sweet_clean
        ),
        on_intent=reporter.print_intent,
        on_result=reporter.print_result,
        on_sweetened=reporter.finish_snapshot,
    )

    reporter.print_mode_banner(client.region, dry_run, sweet_clean)

    try:
        summary = pipeline.run(kind, ids=ids or None)
    except ListingError as e:
        reporter.print_error(str(e), title="Listing Error")
        sys.exit(1)
    except SnapshotCancelledError as e:
        reporter.close()
        reporter.print_error(str(e), title="Cancelled")
        sys.exit(130)
    except KeyboardInterrupt:
        context.cancel()
        reporter.close()
        console.print("\n[yellow]Cleanup cancelled by user.[/yellow]")
        sys.exit(130)
    except AWSClientError as e:
        reporter.print_error(str(e), title="AWS Error")
        sys.exit(1)
    except Exception as e:
        reporter.close()
        logger.exception("Cleanup failed")
        reporter.print_error(str(e), title="Unexpected Error")
        sys.exit(1)

    reporter.print_summary(summary, dry_run)

    if output:
        path = JSONReporter(output_path=output).report(summary, dry_run=dry_run)
        console.print(f"[dim]Report saved to: {path}[/dim]")

    if not summary.success:
        logger.error(str(summary.error()))
        sys.exit(1)


@cli.command("kinds")
def list_kinds():
    """List the resource kinds that can be cleaned."""
    CLIReporter(console).print_kinds()


@cli.command("validate")
@click.pass_context
def validate_credentials(ctx):
    """Validate AWS credentials and show account info."""
    settings = ctx.obj
    try:
        client = AWSClient(region=settings["region"], profile=settings["profile"])
        client.validate_credentials()
        account_id = client.get_account_id()

        console.print("\n[green bold]AWS credentials are valid![/green bold]")
        console.print(f"\n  Account ID: {account_id}")
        console.print(f"  Region: {client.region}")
        if client.profile:
            console.print(f"  Profile: {client.profile}")
        console.print()

    except AWSClientError as e:
        console.print(f"\n[red bold]Validation Failed:[/red bold] {e}")
        sys.exit(1)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
