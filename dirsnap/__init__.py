"""
dirsnap: dated, compressed snapshots of a directory tree.

Features:

- One ZIP archive per snapshot, written into the directory itself and named
  ``snapshot YYYY-MM-DD[ N].zip``; same-day snapshots get a numeric suffix
  unless overwriting is requested.
- Empty directories are preserved as placeholder entries.
- Files locked by other processes are retried for a bounded number of passes.
- A reserved metadata entry records the format version and a user comment,
  which listing reads back together with the payload file count.
- Listing tolerates damaged archives: they are skipped, never fatal.
"""

__version__ = "1.0.1"

from .builder import SnapshotBuilder, create_snapshot
from .catalog import CatalogScan, SkippedArchive, enumerate_snapshots, scan_snapshots, sorted_by_date
from .descriptor import SnapshotDescriptor
from .errors import (
    BuildCancelledError,
    CorruptEntryError,
    DirectoryNotFoundError,
    InvalidArgumentError,
    NameSpaceExhaustedError,
    RetriesExceededError,
    SnapshotError,
)
from .version import FormatVersion

__all__ = [
    "SnapshotBuilder",
    "create_snapshot",
    "CatalogScan",
    "SkippedArchive",
    "enumerate_snapshots",
    "scan_snapshots",
    "sorted_by_date",
    "SnapshotDescriptor",
    "FormatVersion",
    "SnapshotError",
    "InvalidArgumentError",
    "DirectoryNotFoundError",
    "NameSpaceExhaustedError",
    "RetriesExceededError",
    "BuildCancelledError",
    "CorruptEntryError",
]
