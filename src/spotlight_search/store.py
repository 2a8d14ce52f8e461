"""
In-memory filename index: a fixed-size hash table of file records.
"""

import os
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterator, List, Tuple

DEFAULT_TABLE_SIZE = 16384
DJB2_SEED = 5381
_WORD_MASK = (1 << 64) - 1

_ASCII_FOLD = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def ascii_fold(text: str) -> str:
    """Lowercase ASCII letters only; other characters are left untouched."""
    return text.translate(_ASCII_FOLD)


def bucket_for(filename: str, table_size: int = DEFAULT_TABLE_SIZE) -> int:
    """DJB2 hash of the case-folded filename, reduced to a bucket index.

    The accumulator wraps at 64 bits and mixes the filesystem encoding of the
    name byte by byte, so the bucket for a name is stable across runs.
    """
    acc = DJB2_SEED
    for byte in os.fsencode(filename):
        if 65 <= byte <= 90:
            byte += 32
        acc = (acc * 33 + byte) & _WORD_MASK
    return acc % table_size


@dataclass(frozen=True)
class FileRecord:
    """A single indexed file."""
    filename: str
    fullpath: str


class IndexStore:
    """Owns every indexed record, bucketed by filename hash.

    Buckets never grow past what was inserted and the table is never
    rehashed; many files sharing a name simply make a longer bucket.
    Not safe for mutation while another thread iterates.
    """

    def __init__(self, table_size: int = DEFAULT_TABLE_SIZE):
        if table_size <= 0:
            raise ValueError(f"table_size must be positive, got {table_size}")
        self.table_size = table_size
        self._buckets: List[Deque[FileRecord]] = [deque() for _ in range(table_size)]
        self.total_files = 0

    def insert(self, filename: str, fullpath: str) -> None:
        """Add a record at the head of its bucket."""
        try:
            record = FileRecord(filename, fullpath)
            self._buckets[bucket_for(filename, self.table_size)].appendleft(record)
        except MemoryError:
            # The file is dropped; the index stays consistent.
            return
        self.total_files += 1

    def clear(self) -> None:
        """Release every record and reset the counter."""
        for bucket in self._buckets:
            bucket.clear()
        self.total_files = 0

    def size(self) -> int:
        return self.total_files

    def __len__(self) -> int:
        return self.total_files

    def bucket(self, index: int) -> Tuple[FileRecord, ...]:
        """Snapshot of one bucket in stored order."""
        return tuple(self._buckets[index])

    def __iter__(self) -> Iterator[FileRecord]:
        """Yield records in table order, then in bucket order."""
        for bucket in self._buckets:
            yield from bucket

    def stats(self) -> Dict[str, int]:
        """Summarize how records are spread over the table."""
        lengths = [len(bucket) for bucket in self._buckets]
        return {
            'total_files': self.total_files,
            'table_size': self.table_size,
            'used_buckets': sum(1 for length in lengths if length),
            'longest_bucket': max(lengths, default=0),
        }
