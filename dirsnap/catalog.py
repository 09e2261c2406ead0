"""
Enumeration of existing snapshots.

A directory is scanned (non-recursively) for files named like snapshots. Each
candidate is opened and its metadata entry parsed; candidates that fail any
step are skipped and reported in ``CatalogScan.skipped`` instead of failing the
whole listing.
"""

from __future__ import annotations

import datetime
import io
import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from .archive import ArchiveReader
from .constants import METADATA_ENTRY_NAME
from .descriptor import SnapshotDescriptor
from .errors import CorruptEntryError
from .naming import parse_snapshot_date, snapshot_index
from .pathutil import require_directory
from .strings import decode_metadata
from .version import FormatVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedArchive:
    location: str
    reason: str


@dataclass(frozen=True)
class CatalogScan:
    snapshots: Tuple[SnapshotDescriptor, ...]
    skipped: Tuple[SkippedArchive, ...]


def read_descriptor(path: str, creation_date: datetime.date) -> SnapshotDescriptor:
    """Open one snapshot archive and describe it.

    Raises:
        CorruptEntryError: The archive or its metadata entry is unreadable.
    """
    with ArchiveReader(path) as r:
        raw = r.read_entry(METADATA_ENTRY_NAME)
        entries = r.list()
    version_text, comment = decode_metadata(io.BytesIO(raw))
    try:
        version = FormatVersion.parse(version_text)
    except ValueError as exc:
        raise CorruptEntryError(str(exc)) from exc
    # The metadata entry is never a placeholder; drop it from the count.
    file_count = sum(1 for e in entries if not e.is_placeholder) - 1
    return SnapshotDescriptor(
        location=path,
        format_version=version,
        comment=comment,
        creation_date=creation_date,
        file_count=file_count,
    )


def _check_candidate(path: str) -> Optional[SnapshotDescriptor]:
    try:
        creation_date = parse_snapshot_date(path)
    except ValueError as exc:
        raise CorruptEntryError(f"invalid date in file name: {exc}") from exc
    if creation_date is None:
        return None
    return read_descriptor(path, creation_date)


def scan_snapshots(directory: Union[str, os.PathLike]) -> CatalogScan:
    """Scan ``directory`` and return valid snapshots plus skipped candidates.

    Raises:
        InvalidArgumentError: ``directory`` is None or empty.
        DirectoryNotFoundError: ``directory`` does not exist.
    """
    directory = require_directory(directory)
    found = []
    skipped = []
    for fn in os.listdir(directory):
        path = os.path.join(directory, fn)
        if not os.path.isfile(path):
            continue
        try:
            snap = _check_candidate(path)
        except (CorruptEntryError, OSError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            skipped.append(SkippedArchive(location=path, reason=str(exc)))
            continue
        if snap is not None:
            logger.debug("Found snapshot %s (%d files)", path, snap.file_count)
            found.append(snap)
    return CatalogScan(snapshots=tuple(found), skipped=tuple(skipped))


def enumerate_snapshots(directory: Union[str, os.PathLike]) -> Tuple[SnapshotDescriptor, ...]:
    """Return descriptors for every valid snapshot in ``directory``.

    Order follows the directory listing. Corrupt candidates are left out.
    """
    return scan_snapshots(directory).snapshots


def sorted_by_date(snapshots: Iterable[SnapshotDescriptor]) -> Tuple[SnapshotDescriptor, ...]:
    return tuple(sorted(snapshots, key=lambda s: (s.creation_date, snapshot_index(s.location), s.display_name)))
