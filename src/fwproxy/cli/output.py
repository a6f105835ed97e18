"""
Rich terminal output helpers for CLI.

Messages and tables go to stderr so that ``fwproxy fetch`` can write
response bodies to stdout untouched.
"""

from datetime import datetime, timezone
from typing import Any, Iterable

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fwproxy.core.models import CacheMetadata, ProxyResponse

# Console instance for all output
console = Console(stderr=True)


def format_size(size: int) -> str:
    """Format a byte count for humans."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def print_response_summary(url: str, response: ProxyResponse) -> None:
    """Print where a fetched response came from."""
    source = "[green]cache[/]" if response.from_cache else "[cyan]upstream[/]"
    console.print(f"[bold]URL:[/] {escape(url)}")
    console.print(f"[bold]Content-Type:[/] {escape(response.content_type or '')}")
    console.print(f"[bold]Size:[/] {format_size(len(response.body))}")
    console.print(f"[bold]Source:[/] {source}")


def print_cache_stats(stats: dict[str, Any]) -> None:
    """Print cache statistics."""
    console.print("\n[bold]Cache Statistics:[/]")
    console.print(f"  Directory: {escape(stats['cache_dir'])}")
    if not stats["exists"]:
        console.print("  (not created yet)")
        return
    console.print(f"  Entries: {stats['entries']}")
    console.print(f"  Size: {format_size(stats['size_bytes'])}")

    if stats["entries_by_content_type"]:
        console.print("\n  Entries by content type:")
        for content_type, count in sorted(stats["entries_by_content_type"].items()):
            console.print(f"    {content_type}: {count}")


def print_cache_table(entries: Iterable[tuple[str, CacheMetadata, int]]) -> None:
    """Print a table of cache entries."""
    table = Table(
        title="Cached Responses",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Key", style="cyan", no_wrap=True, min_width=32)
    table.add_column("Content-Type")
    table.add_column("Size", justify="right")
    table.add_column("Fetched", style="dim")

    for key, metadata, size in entries:
        fetched = datetime.fromtimestamp(metadata.fetched_at, tz=timezone.utc)
        table.add_row(
            key,
            escape(metadata.content_type),
            format_size(size),
            fetched.strftime("%Y-%m-%d %H:%M:%S UTC"),
        )

    console.print(table)


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[cyan]Info:[/] {escape(message)}")
