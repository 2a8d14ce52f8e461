"""
Configuration management for spotlight search.
"""

import tomllib
from pathlib import Path
from typing import List
from dataclasses import dataclass, field

from rich.console import Console


@dataclass
class IndexingConfig:
    """Configuration for indexing behavior."""
    table_size: int = 16384  # power of two, never resized
    ignore_patterns: List[str] = field(default_factory=list)
    include_hidden: bool = True
    verbose_errors: bool = False  # Report paths skipped during traversal


@dataclass
class SearchConfig:
    """Configuration for search behavior."""
    max_results: int = 12


@dataclass
class SessionConfig:
    """Configuration for the interactive session."""
    max_query_length: int = 255
    filename_width: int = 35
    path_width: int = 55
    clear_query_on_cancel: bool = False


@dataclass
class Config:
    """Main configuration container."""
    indexing: IndexingConfig = field(default_factory=IndexingConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    session: SessionConfig = field(default_factory=SessionConfig)


def config_paths() -> List[Path]:
    """Candidate configuration files, highest priority first."""
    return [
        Path.home() / ".spotlight-search.toml",
        Path.cwd() / ".spotlight-search.toml",
        Path.cwd() / "spotlight-search.toml",
    ]


def load_config(paths: List[Path] = None) -> Config:
    """Load configuration from file or use defaults."""
    config_data = {}

    # Find and load the first available config file
    for config_path in paths if paths is not None else config_paths():
        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)
                break
            except (OSError, tomllib.TOMLDecodeError) as e:
                Console(stderr=True).print(
                    f"[yellow]Warning: Failed to load config from {config_path}: {e}[/yellow]"
                )

    indexing_data = config_data.get("indexing", {})
    search_data = config_data.get("search", {})
    session_data = config_data.get("session", {})

    indexing_config = IndexingConfig(
        table_size=indexing_data.get("table_size", IndexingConfig().table_size),
        ignore_patterns=indexing_data.get("ignore_patterns", IndexingConfig().ignore_patterns),
        include_hidden=indexing_data.get("include_hidden", IndexingConfig().include_hidden),
        verbose_errors=indexing_data.get("verbose_errors", IndexingConfig().verbose_errors),
    )

    search_config = SearchConfig(
        max_results=search_data.get("max_results", SearchConfig().max_results),
    )

    session_config = SessionConfig(
        max_query_length=session_data.get("max_query_length", SessionConfig().max_query_length),
        filename_width=session_data.get("filename_width", SessionConfig().filename_width),
        path_width=session_data.get("path_width", SessionConfig().path_width),
        clear_query_on_cancel=session_data.get(
            "clear_query_on_cancel", SessionConfig().clear_query_on_cancel
        ),
    )

    return Config(indexing=indexing_config, search=search_config, session=session_config)
