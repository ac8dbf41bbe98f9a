#!/usr/bin/env python3
"""
PlanetFeed - Combined Author Feed Aggregator
============================================

Management CLI for checking configuration, inspecting the roster and
running aggregations by hand.

Usage:
    python main.py --help                          # Show all commands
    python main.py check-config                    # Validate configuration
    python main.py authors                         # List roster authors
    python main.py preview --language en -n 10     # Aggregate one feed and print it
    python main.py run                             # Build and publish every feed once
"""

import sys
import asyncio
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from planetfeed.config.settings import get_settings
from planetfeed.processing.aggregator import FeedAggregator, MIXED_LANGUAGE
from planetfeed.scheduler.feed_scheduler import FeedScheduler
from planetfeed.storage.author_repository import AuthorRepository
from planetfeed.utils.logging import configure_application_logging
from planetfeed.utils.exceptions import PlanetFeedError, get_user_friendly_message

console = Console()


def _report_error(error: PlanetFeedError) -> None:
    console.print(f"[bold red]❌ {escape(get_user_friendly_message(error))}[/bold red]")
    console.print(f"[dim]{escape(str(error))}[/dim]")


def _configure_logging(debug: bool) -> None:
    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, debug):
    """PlanetFeed - combined author feed aggregator."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
def check_config():
    """Validate configuration and environment variables."""
    console.print("[bold blue]🔧 Checking PlanetFeed Configuration[/bold blue]")

    try:
        settings = get_settings()
    except PlanetFeedError as e:
        _report_error(e)
        sys.exit(1)

    table = Table(title="Configuration")
    table.add_column("Section", style="cyan")
    table.add_column("Details")

    table.add_row("Feed", f"{settings.feed.title} <{settings.feed.url}>, marker: '{settings.feed.marker_keyword}'")
    table.add_row("Fetching", f"Timeout: {settings.fetching.request_timeout}s, max concurrent: {settings.fetching.max_concurrent}")
    table.add_row("Retry", f"Retries: {settings.retry.max_retries}, backoff base: {settings.retry.backoff_base}")
    table.add_row("Roster", settings.roster.path)
    table.add_row("Publishing", settings.publishing.output_dir)
    table.add_row("Schedule", f"Every {settings.schedule.interval_minutes} min, on startup: {settings.schedule.run_on_startup}")
    table.add_row("Logging", f"Level: {settings.get_effective_log_level()}, file: {settings.logging.file_path}")

    console.print(table)
    console.print("[bold green]✅ Configuration loaded[/bold green]")


@cli.command()
def authors():
    """List authors in the roster."""
    try:
        roster = AuthorRepository().get_all_authors()
    except PlanetFeedError as e:
        _report_error(e)
        sys.exit(1)

    table = Table(title=f"Authors ({len(roster)})")
    table.add_column("Name", style="cyan")
    table.add_column("Language", style="green")
    table.add_column("Feeds", justify="right")
    table.add_column("Website")

    for author in roster:
        table.add_row(author.full_name, author.language_code, str(len(author.feed_uris)), str(author.website))

    console.print(table)


@cli.command()
@click.option('--language', '-l', default=MIXED_LANGUAGE, show_default=True, help='Language code or "mixed"')
@click.option('--max-items', '-n', type=click.IntRange(min=0), default=None, help='Maximum items to show')
@click.pass_context
def preview(ctx, language, max_items):
    """Aggregate one combined feed and print it without publishing."""
    _configure_logging(ctx.obj.get('debug', False))
    console.print(f"[bold blue]📡 Aggregating {language} feed[/bold blue]")

    async def run_preview():
        roster = AuthorRepository().get_all_authors()
        return await FeedAggregator().aggregate(roster, language, max_items)

    try:
        feed = asyncio.run(run_preview())
    except PlanetFeedError as e:
        _report_error(e)
        sys.exit(1)

    table = Table(title=f"{feed.title} [{feed.language}] - {len(feed.items)} items from {len(feed.contributors)} authors")
    table.add_column("Updated", style="cyan", no_wrap=True)
    table.add_column("Title", style="green")
    table.add_column("Link")

    for item in feed.items:
        updated = item.effective_timestamp.strftime("%Y-%m-%d %H:%M") if item.is_dated else "-"
        table.add_row(updated, item.title or "(untitled)", item.link or "")

    console.print(table)


@cli.command()
@click.pass_context
def run(ctx):
    """Build and publish every combined feed once."""
    _configure_logging(ctx.obj.get('debug', False))

    try:
        result = asyncio.run(FeedScheduler().run_once())
    except PlanetFeedError as e:
        _report_error(e)
        sys.exit(1)

    console.print(FeedScheduler.format_run_summary(result))
    sys.exit(0 if result["success"] else 1)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 PlanetFeed interrupted by user[/yellow]")
        sys.exit(130)
