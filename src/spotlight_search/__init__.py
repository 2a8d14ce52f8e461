"""
Spotlight Search - an in-memory filename index with interactive substring search.
"""

__version__ = "0.1.0"

from .store import FileRecord, IndexStore
from .traversal import DirectoryTraverser, build_index
from .searcher import FileSearcher, search
from .session import InteractiveSession

__all__ = [
    "FileRecord",
    "IndexStore",
    "DirectoryTraverser",
    "build_index",
    "FileSearcher",
    "search",
    "InteractiveSession",
]
