"""feedscout CLI - Typer-based command line interface."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from feedscout import __version__
from feedscout.config import load_config
from feedscout.discovery.finder import find_feeds
from feedscout.discovery.url_utils import is_valid_url
from feedscout.errors import FeedScoutError
from feedscout.logging_config import setup_logging
from feedscout.models import DiscoveryOptions, FeedCandidate

app = typer.Typer(
    name="feedscout",
    help="Discover RSS, Atom and JSON feeds advertised by a web page.",
    add_completion=False,
)
console = Console(emoji=False)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"feedscout v{__version__}", highlight=False)
        raise typer.Exit()


def format_feed(feed: FeedCandidate, with_attributes: bool = False) -> str:
    """Render a feed as one output line."""
    if not with_attributes:
        return feed.url

    line = feed.url
    if feed.title:
        line += f" title={feed.title}"
    return line + f" type={feed.kind.value}"


@app.command()
def main(
    url: Annotated[str, typer.Argument(help="URL of the page to inspect")],
    with_attributes: Annotated[
        bool, typer.Option("--with-attributes", help="Show feed title and type")
    ] = False,
    scan_common_paths: Annotated[
        bool,
        typer.Option("--scan-common-paths", help="Probe common feed paths if the page links none"),
    ] = False,
    max_concurrency: Annotated[
        int | None, typer.Option("--max-concurrency", help="Concurrent path probes")
    ] = None,
    timeout: Annotated[
        float | None, typer.Option("--timeout", help="Request timeout in seconds")
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("--config", help="Custom config file")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
) -> None:
    """Find the feeds for URL and print one per line."""
    try:
        config = load_config(config_file)
    except Exception as e:
        console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise typer.Exit(1)

    setup_logging("DEBUG" if verbose else config.get("logging", {}).get("level", "WARNING"))

    # Normalize target URL
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"

    if not is_valid_url(url):
        console.print(f"[red]Error:[/] invalid URL {escape(url)}")
        raise typer.Exit(1)

    try:
        options = DiscoveryOptions.from_config(
            config,
            scan_common_paths=scan_common_paths or None,
            max_concurrency=max_concurrency,
            timeout=timeout,
        )
    except ValueError as e:
        console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise typer.Exit(1)

    try:
        feeds = asyncio.run(find_feeds(url, options))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")
        raise typer.Exit(130)
    except FeedScoutError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}", emoji=False)
        raise typer.Exit(1)

    for feed in feeds:
        console.print(
            format_feed(feed, with_attributes),
            markup=False,
            emoji=False,
            highlight=False,
            soft_wrap=True,
        )


if __name__ == "__main__":
    app()
