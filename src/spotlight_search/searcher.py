"""
Search functionality for querying indexed filenames.
"""

import time
from dataclasses import dataclass, field
from itertools import islice
from typing import Iterator, List, Optional

from rich.console import Console
from rich.table import Table

from .config import Config
from .store import FileRecord, IndexStore, ascii_fold


def iter_matches(store: IndexStore, query: str) -> Iterator[FileRecord]:
    """Lazily yield records whose filename contains ``query``, in scan order."""
    if not query:
        return
    needle = ascii_fold(query)
    for record in store:
        if needle in ascii_fold(record.filename):
            yield record


def search(store: IndexStore, query: str, limit: int) -> List[FileRecord]:
    """
    Collect the first ``limit`` matches for ``query``.

    Results follow table/bucket order and are truncated, never ranked.
    An empty query returns no results.
    """
    if not query or limit <= 0:
        return []
    return list(islice(iter_matches(store, query), limit))


@dataclass
class SearchOutcome:
    """Matches for one query plus the wall-clock time it took."""
    query: str
    records: List[FileRecord] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def count(self) -> int:
        return len(self.records)


class FileSearcher:
    """Runs timed searches against an index store."""

    def __init__(self, store: IndexStore, config: Optional[Config] = None):
        self.store = store
        self.config = config or Config()
        self.console = Console()

    def search(self, query: str, limit: Optional[int] = None) -> SearchOutcome:
        if limit is None:
            limit = self.config.search.max_results
        start = time.perf_counter()
        records = search(self.store, query, limit)
        return SearchOutcome(query, records, time.perf_counter() - start)

    def display_results(self, outcome: SearchOutcome):
        """Display search results in a formatted table."""
        if not outcome.records:
            self.console.print("[yellow]No matches found.[/yellow]")
            return

        table = Table(
            title=f"Search Results ({outcome.count} found in {outcome.elapsed:.4f}s)"
        )
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Filename", style="bold", no_wrap=True)
        table.add_column("Path", style="dim", no_wrap=False)

        for number, record in enumerate(outcome.records, start=1):
            table.add_row(str(number), record.filename, record.fullpath)

        self.console.print(table)
