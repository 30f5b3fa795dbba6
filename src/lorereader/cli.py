"""Command-line interface for the lore archive reader.

Provides commands for configuration validation, listing mailing lists,
paging through a list, and reading threads, search results and messages.

Usage:
    python -m lorereader validate-config
    python -m lorereader lists --filter net
    python -m lorereader browse netdev --pages 2
    python -m lorereader thread 20250714070438.2399153-1-chenhuacai@loongson.cn
    python -m lorereader search "s:folio AND d:1.week.ago.."
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from lorereader.archive.client import ArchiveClient
from lorereader.config import get_config, load_config, set_config, validate_config_file
from lorereader.core.errors import ConfigLoadError, ConfigValidationError, LoreReaderError
from lorereader.core.logging import configure_logging
from lorereader.parser.models import MailingList, MessagePageResult

console = Console()


def _make_client() -> ArchiveClient:
    config = get_config()
    return ArchiveClient(
        base_url=config.archive.base_url,
        timeout=config.archive.timeout_seconds,
        user_agent=config.archive.user_agent,
    )


def _print_forest(title: str, result: MessagePageResult) -> None:
    """Render the two-level forest of a page."""
    if result.is_empty:
        console.print(f"[yellow]No messages found for {escape(title)}.[/yellow]")
        return

    tree = Tree(f"[bold]{escape(title)}[/bold]")
    for index in result.roots:
        root = result.messages[index]
        stamp = root.timestamp.strftime("%Y-%m-%d %H:%M")
        branch = tree.add(f"[cyan]#{root.seq_id}[/cyan] {stamp}  {escape(root.subject)}")
        for reply in result.replies_of(index):
            stamp = reply.timestamp.strftime("%Y-%m-%d %H:%M")
            branch.add(f"[cyan]#{reply.seq_id}[/cyan] {stamp}  {escape(reply.subject)}")
    console.print(tree)


@click.group()
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file (default: config/config.yaml)",
)
def cli(debug: bool, config_path: Path | None) -> None:
    """lorereader - browse public-inbox mailing list archives."""
    configure_logging(log_level="DEBUG" if debug else "WARNING", json_output=False)
    if config_path is None:
        return
    try:
        config = load_config(config_path)
    except (ConfigLoadError, ConfigValidationError) as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)

    set_config(config)
    if not debug:
        configure_logging(
            log_level=config.logging.level,
            json_output=config.logging.json_output,
        )


@cli.command("validate-config")
@click.argument("path", type=click.Path(exists=False, path_type=Path), required=False)
def validate_config(path: Path | None) -> None:
    """Validate the configuration file.

    Checks that the file exists and passes Pydantic schema validation.
    """
    console.print(f"Validating config: [cyan]{path or 'config/config.yaml'}[/cyan]")

    is_valid, message = validate_config_file(path)

    if is_valid:
        console.print(f"\n[green]✓[/green] {message}")
        sys.exit(0)
    else:
        console.print(f"\n[red]✗[/red] {message}")
        sys.exit(1)


@cli.command("lists")
@click.option("--filter", "name_filter", default=None, help="Only lists whose name contains TEXT")
def lists(name_filter: str | None) -> None:
    """List the mailing lists hosted by the archive."""
    from lorereader.parser.directory import parse_directory

    try:
        entries = parse_directory(_make_client().fetch_home_page())
    except LoreReaderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if name_filter:
        entries = [e for e in entries if name_filter.lower() in e.name.lower()]

    table = Table(title=f"Mailing lists ({len(entries)})")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for entry in entries:
        table.add_row(escape(entry.name), escape(entry.description))
    console.print(table)


@cli.command("browse")
@click.argument("list_name")
@click.option("--pages", default=1, type=click.IntRange(min=1), help="Pages to walk (latest first)")
def browse(list_name: str, pages: int) -> None:
    """Show the latest thread listing of LIST_NAME, then older pages."""
    from lorereader.core.errors import NoCursorError
    from lorereader.engine.session import ListSession

    config = get_config()
    session = ListSession(
        _make_client(),
        MailingList(list_name),
        lookback=config.parser.nesting_lookback,
    )

    try:
        window = session.load_latest()
        _print_forest(f"{list_name} (page 1)", window.page)
        for page in range(2, pages + 1):
            if window.end_reached:
                console.print("[dim]End of list reached.[/dim]")
                break
            window = session.load_older()
            _print_forest(f"{list_name} (page {page})", window.page)
    except NoCursorError as e:
        console.print(f"[yellow]{e}[/yellow]")
    except LoreReaderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@cli.command("thread")
@click.argument("message_id")
@click.option("--list", "list_name", default="all", help="List the thread belongs to")
def thread(message_id: str, list_name: str) -> None:
    """Show the thread containing MESSAGE_ID."""
    from lorereader.parser.pages import parse_thread_page

    client = _make_client()
    try:
        html = client.fetch_thread(message_id)
    except LoreReaderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    result = parse_thread_page(
        html,
        client.base_url,
        list_name,
        lookback=get_config().parser.nesting_lookback,
    )
    _print_forest(message_id, result)


@cli.command("search")
@click.argument("query")
@click.option("--page", default=1, type=click.IntRange(min=1), help="Results page")
def search(query: str, page: int) -> None:
    """Search all lists for QUERY."""
    from lorereader.parser.pages import parse_search_results

    client = _make_client()
    try:
        html = client.search(query, page=page)
    except LoreReaderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    result = parse_search_results(html, client.base_url)
    table = Table(title=f"Results for '{query}' (page {page})")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Subject")
    table.add_column("Message")
    for message in result.messages:
        table.add_row(str(message.seq_id), escape(message.subject), escape(message.thread_id))
    console.print(table)
    if result.next_url:
        console.print(f"[dim]More results: --page {page + 1}[/dim]")


@cli.command("show")
@click.argument("message_id")
def show(message_id: str) -> None:
    """Show metadata of a single message page."""
    from lorereader.parser.detail import parse_message_detail

    try:
        html = _make_client().fetch_message(message_id)
    except LoreReaderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    detail = parse_message_detail(html, message_id)
    if detail is None:
        console.print("[red]Could not parse the message page.[/red]")
        sys.exit(1)

    console.print(f"[bold]{escape(detail.subject)}[/bold]")
    console.print(f"From: {escape(detail.author)}")
    if detail.date is not None:
        console.print(f"Date: {detail.date:%Y-%m-%d %H:%M} UTC")
    if detail.recipients:
        console.print(f"To: {escape(', '.join(detail.recipients))}")
    if detail.cc_recipients:
        console.print(f"Cc: {escape(', '.join(detail.cc_recipients))}")
    if detail.raw_url:
        console.print(f"Raw: [cyan]{escape(detail.raw_url)}[/cyan]")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
