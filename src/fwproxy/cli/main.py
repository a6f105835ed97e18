"""
Main CLI entry point for fwproxy.

Provides commands for running the forwarding server, fetching a single URL
through the cache, and managing the cache directory.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click

from fwproxy import __version__
from fwproxy.cache.filesystem import FileCacheStore
from fwproxy.cli.output import (
    print_cache_stats,
    print_cache_table,
    print_error,
    print_info,
    print_response_summary,
    print_success,
)
from fwproxy.core.config import (
    DEFAULT_ENDPOINT_PATH,
    DEFAULT_HOST,
    DEFAULT_ORIGIN,
    DEFAULT_OWNER,
    DEFAULT_PORT,
    DEFAULT_REPO,
    DEFAULT_TIMEOUT,
    ProxyConfig,
)
from fwproxy.core.exceptions import ProxyError
from fwproxy.core.logging import setup_logging
from fwproxy.core.validation import make_cache_key


@click.group()
@click.version_option(version=__version__, prog_name="fwproxy")
@click.option(
    "--owner",
    envvar="FWPROXY_OWNER",
    default=DEFAULT_OWNER,
    show_default=True,
    help="Owner of the allow-listed GitHub repository.",
)
@click.option(
    "--repo",
    envvar="FWPROXY_REPO",
    default=DEFAULT_REPO,
    show_default=True,
    help="Name of the allow-listed GitHub repository.",
)
@click.option(
    "--cache-dir",
    envvar="FWPROXY_CACHE_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("cache"),
    show_default=True,
    help="Directory for cached responses.",
)
@click.option(
    "--log-level",
    envvar="FWPROXY_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    owner: str,
    repo: str,
    cache_dir: Path,
    log_level: str,
) -> None:
    """Firmware flasher proxy - cached GitHub forwarding for one project.

    Forwards requests for github.com, api.github.com and
    raw.githubusercontent.com URLs of a single repository, caching
    everything except release listings.
    """
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = ProxyConfig(owner=owner, repo=repo, cache_dir=cache_dir)


@cli.command()
@click.option("--host", envvar="FWPROXY_HOST", default=DEFAULT_HOST, show_default=True)
@click.option("--port", envvar="FWPROXY_PORT", type=int, default=DEFAULT_PORT, show_default=True)
@click.option(
    "--path",
    "endpoint_path",
    envvar="FWPROXY_PATH",
    default=DEFAULT_ENDPOINT_PATH,
    show_default=True,
    help="URL path of the forwarding endpoint.",
)
@click.option(
    "--origin",
    envvar="FWPROXY_ORIGIN",
    default=DEFAULT_ORIGIN,
    show_default=True,
    help="Value of Access-Control-Allow-Origin.",
)
@click.option(
    "--timeout",
    envvar="FWPROXY_TIMEOUT",
    type=int,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Upstream request timeout in seconds.",
)
@click.option("--no-cache", is_flag=True, help="Disable caching.")
@click.pass_context
def serve(
    ctx: click.Context,
    host: str,
    port: int,
    endpoint_path: str,
    origin: str,
    timeout: int,
    no_cache: bool,
) -> None:
    """Run the forwarding server.

    \b
    Examples:
        fwproxy serve                       # 127.0.0.1:8080/proxy.php
        fwproxy serve --host 0.0.0.0 --port 9000
        fwproxy --cache-dir /var/cache/fwproxy serve
    """
    from fwproxy.server.app import run

    config: ProxyConfig = ctx.obj["config"]
    config.host = host
    config.port = port
    config.endpoint_path = endpoint_path if endpoint_path.startswith("/") else f"/{endpoint_path}"
    config.allowed_origin = origin
    config.timeout = timeout
    config.cache_enabled = not no_cache

    run(config)


@cli.command()
@click.argument("url")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the body to a file instead of stdout.",
)
@click.option("--no-cache", is_flag=True, help="Disable caching.")
@click.pass_context
def fetch(ctx: click.Context, url: str, output: Optional[Path], no_cache: bool) -> None:
    """Fetch URL through the forwarding cache.

    Applies the same allow-list and caching rules as the server.

    \b
    Examples:
        fwproxy fetch https://api.github.com/repos/netham45/esp32-scream-receiver/releases
        fwproxy fetch -o fw.bin \\
            https://raw.githubusercontent.com/netham45/esp32-scream-receiver/main/firmware.bin
    """
    from fwproxy.api import fetch as fetch_url

    config: ProxyConfig = ctx.obj["config"]

    try:
        response = asyncio.run(fetch_url(url, use_cache=not no_cache, config=config))
    except ProxyError as e:
        print_error(f"{e} (HTTP {e.status_code})")
        sys.exit(1)

    if output:
        output.write_bytes(response.body)
        print_response_summary(url, response)
        print_success(f"Body written to {output}")
    else:
        print_response_summary(url, response)
        stdout = click.get_binary_stream("stdout")
        stdout.write(response.body)
        stdout.flush()


@cli.command()
@click.option("--clear", is_flag=True, help="Delete all cached responses.")
@click.option("--stats", is_flag=True, help="Show cache statistics.")
@click.option("--list", "list_entries", is_flag=True, help="List cached responses.")
@click.option("--delete", "delete_url", metavar="URL", help="Delete the cached response for URL.")
@click.pass_context
def cache(
    ctx: click.Context,
    clear: bool,
    stats: bool,
    list_entries: bool,
    delete_url: Optional[str],
) -> None:
    """Manage the local cache.

    Entries never expire; clearing the cache is the only way to force
    fresh copies of previously fetched files.

    \b
    Examples:
        fwproxy cache --stats       # Show cache statistics
        fwproxy cache --list        # List entries
        fwproxy cache --clear       # Delete every entry
        fwproxy cache --delete URL  # Delete the entry for one URL
    """
    config: ProxyConfig = ctx.obj["config"]
    store = FileCacheStore(config.cache_dir)

    try:
        if delete_url:
            if store.delete(make_cache_key(delete_url)):
                print_success(f"Deleted cached response for {delete_url}")
            else:
                print_info(f"No cached response for {delete_url}")
        elif clear:
            count = store.clear()
            print_success(f"Cache cleared. Removed {count} entries.")
        elif list_entries:
            entries = list(store.describe())
            if not entries:
                print_info(f"No cached responses in {config.cache_dir}.")
                return
            print_cache_table(entries)
        elif stats:
            print_cache_stats(store.stats())
        else:
            click.echo(ctx.get_help())
    except ProxyError as e:
        print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    cli()
