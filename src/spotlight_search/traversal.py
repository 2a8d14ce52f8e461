"""
Directory traversal that feeds every file under a root into the index.
"""

import os
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional

import pathspec
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from .config import Config
from .store import IndexStore

PSEUDO_ENTRIES = (".", "..")
PROGRESS_EVERY = 256


class DirectoryEntry(NamedTuple):
    """One listed entry and whether it is a real (non-symlinked) directory."""
    name: str
    is_directory: bool


def scan_entries(path: str) -> Iterator[DirectoryEntry]:
    """List the entries of ``path`` using the type reported by the OS.

    Symlinks are never followed, so a link to a directory is a leaf.
    Entries whose type cannot be determined are skipped.
    """
    with os.scandir(path) as it:
        for entry in it:
            try:
                is_directory = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            yield DirectoryEntry(entry.name, is_directory)


Lister = Callable[[str], Iterable[DirectoryEntry]]


class DirectoryTraverser:
    """Walks a directory tree depth-first and inserts every non-directory."""

    def __init__(
        self,
        store: IndexStore,
        config: Optional[Config] = None,
        lister: Lister = scan_entries,
        console: Optional[Console] = None,
    ):
        self.store = store
        self.config = config or Config()
        self.lister = lister
        self.console = console or Console(stderr=True)
        self.skipped: List[str] = []
        self._spec = None
        if self.config.indexing.ignore_patterns:
            self._spec = pathspec.PathSpec.from_lines(
                'gitwildmatch', self.config.indexing.ignore_patterns
            )

    def _should_ignore(self, root: str, path: str, is_directory: bool) -> bool:
        """Check if a path should be ignored based on patterns."""
        if not self.config.indexing.include_hidden and os.path.basename(path).startswith('.'):
            return True
        if self._spec is None:
            return False
        relative = os.path.relpath(path, root)
        if is_directory:
            relative += "/"
        return self._spec.match_file(relative)

    def _skip(self, path: str, error: OSError) -> None:
        self.skipped.append(path)
        if self.config.indexing.verbose_errors:
            self.console.print(f"[yellow]Warning: Skipping {escape(path)}: {escape(str(error))}[/yellow]")

    def _open(self, path: str) -> Optional[Iterator[DirectoryEntry]]:
        try:
            return iter(self.lister(path))
        except OSError as e:
            self._skip(path, e)
            return None

    def traverse(self, root: str, on_progress: Optional[Callable[[int], None]] = None) -> int:
        """Index everything under ``root``; returns the number of records added.

        Unreadable directories and entries are skipped and the walk continues.
        """
        before = self.store.size()
        top = self._open(root)
        if top is None:
            return 0

        # Each frame is (directory path, its pending entries); a subdirectory
        # is pushed and fully drained before its parent's next sibling.
        stack = [(root, top)]
        while stack:
            directory, entries = stack[-1]
            try:
                entry = next(entries)
            except StopIteration:
                stack.pop()
                continue
            except OSError as e:
                self._skip(directory, e)
                stack.pop()
                continue

            if entry.name in PSEUDO_ENTRIES:
                continue
            full_path = os.path.join(directory, entry.name)
            if self._should_ignore(root, full_path, entry.is_directory):
                continue

            if entry.is_directory:
                children = self._open(full_path)
                if children is not None:
                    stack.append((full_path, children))
            else:
                self.store.insert(entry.name, full_path)
                if on_progress is not None:
                    on_progress(self.store.size() - before)

        return self.store.size() - before


def build_index(
    root: str,
    store: IndexStore,
    config: Optional[Config] = None,
    show_progress: bool = True,
    console: Optional[Console] = None,
    lister: Lister = scan_entries,
) -> int:
    """Run the blocking startup scan of ``root`` into ``store``."""
    console = console or Console(stderr=True)
    traverser = DirectoryTraverser(store, config, lister=lister, console=console)

    if show_progress:
        console.print(f"[cyan]  Index >[/cyan] Scanning {escape(root)} ...")

    with Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
        disable=not show_progress,
    ) as progress:
        task = progress.add_task("Indexed 0 files", total=None)

        def report(count: int) -> None:
            if count % PROGRESS_EVERY == 0:
                progress.update(task, description=f"Indexed {count:,} files")

        count = traverser.traverse(root, on_progress=report if show_progress else None)

    if show_progress:
        console.print(f"[green]Indexed {count:,} files from {escape(root)}[/green]")
        if traverser.skipped and not traverser.config.indexing.verbose_errors:
            console.print(
                f"[yellow]Skipped {len(traverser.skipped):,} unreadable paths "
                f"(use --verbose-errors for details)[/yellow]"
            )

    return count
