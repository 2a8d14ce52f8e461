"""
Command-line interface for spotlight search.
"""

import os
import sys
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .config import load_config
from .searcher import FileSearcher
from .session import InteractiveSession
from .store import IndexStore
from .terminal import TerminalIO, open_with_default_app
from .traversal import build_index


console = Console()
err_console = Console(stderr=True)


@click.command()
@click.argument('root', required=False, type=click.Path())
@click.option('--limit', '-l', type=click.IntRange(min=1), help='Maximum number of results shown')
@click.option('--no-progress', is_flag=True, help='Disable progress display while indexing')
@click.option('--verbose-errors', is_flag=True, help='Report every path that could not be read')
@click.option('--clear-on-cancel', is_flag=True, help='Clear the query after an invalid selection')
@click.option('--query', '-q', help='Run one search, print the matches and exit')
@click.option('--stats', is_flag=True, help='Print index statistics and exit')
@click.version_option(version=__version__)
def cli(root: Optional[str], limit: Optional[int], no_progress: bool, verbose_errors: bool,
        clear_on_cancel: bool, query: Optional[str], stats: bool):
    """Index every file under ROOT (default: current directory) and search it by name."""
    if root is None:
        try:
            root = os.getcwd()
        except OSError as e:
            err_console.print(f"[red]x Cannot determine the current directory: {e}[/red]")
            sys.exit(1)

    config = load_config()
    if limit:
        config.search.max_results = limit
    if verbose_errors:
        config.indexing.verbose_errors = True
    if clear_on_cancel:
        config.session.clear_query_on_cancel = True

    store = IndexStore(config.indexing.table_size)
    build_index(root, store, config, show_progress=not no_progress, console=err_console)

    if stats:
        info = store.stats()
        console.print("[bold]Index Statistics:[/bold]")
        console.print(f"  Files: {info['total_files']:,}")
        console.print(f"  Buckets used: {info['used_buckets']:,} of {info['table_size']:,}")
        console.print(f"  Longest bucket: {info['longest_bucket']:,}")
        return

    if query is not None:
        searcher = FileSearcher(store, config)
        searcher.display_results(searcher.search(query))
        return

    if not sys.stdin.isatty():
        err_console.print("[red]x Interactive search needs a terminal; use --query instead[/red]")
        sys.exit(1)

    with TerminalIO(config) as terminal:
        session = InteractiveSession(store, terminal, open_with_default_app, config)
        session.run()


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
