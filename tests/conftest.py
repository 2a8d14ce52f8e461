"""
Test configuration and utilities.
"""

import tempfile
import shutil
from pathlib import Path
import pytest

from spotlight_search.config import Config, IndexingConfig, SearchConfig, SessionConfig
from spotlight_search.store import IndexStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_files(temp_dir):
    """Create an empty-file tree: 6 files across 3 directory levels."""
    (temp_dir / "subdir" / "nested").mkdir(parents=True)

    for file_path in [
        "test.txt",
        "data.json",
        "script.py",
        "README.md",
        "subdir/file.txt",
        "subdir/nested/deep.txt",
    ]:
        (temp_dir / file_path).touch()

    return temp_dir


@pytest.fixture
def test_config():
    """Create a test configuration."""
    return Config(
        indexing=IndexingConfig(
            table_size=64,
            ignore_patterns=[],
            include_hidden=True
        ),
        search=SearchConfig(
            max_results=5
        ),
        session=SessionConfig(
            max_query_length=20
        )
    )


@pytest.fixture
def store(test_config):
    """An empty index sized from the test configuration."""
    return IndexStore(test_config.indexing.table_size)
