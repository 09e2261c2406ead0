from __future__ import annotations

import datetime
import os
import re
from typing import Optional

from .constants import ARCHIVE_EXTENSION, SNAPSHOT_PREFIX

# "snapshot YYYY-M-D[ N]", matched against the base name without extension
_NAME_RE = re.compile(
    rf"^{SNAPSHOT_PREFIX} (\d{{4}})-(\d{{1,2}})-(\d{{1,2}})(?: (\d+))?$",
    re.IGNORECASE,
)


def is_snapshot_name(filename: str) -> bool:
    """True when ``filename`` follows the snapshot naming pattern.

    Only the shape is checked; the date groups may still form an invalid date.
    """
    stem, _ext = os.path.splitext(os.path.basename(filename))
    return _NAME_RE.match(stem) is not None


def parse_snapshot_date(filename: str) -> Optional[datetime.date]:
    """Return the date encoded in a snapshot file name.

    Returns None if the name does not follow the pattern. Raises ValueError if
    it does but the groups do not form a valid calendar date.
    """
    stem, _ext = os.path.splitext(os.path.basename(filename))
    m = _NAME_RE.match(stem)
    if m is None:
        return None
    return datetime.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def format_snapshot_name(day: datetime.date, index: Optional[int] = None) -> str:
    name = f"{SNAPSHOT_PREFIX} {day.year:04d}-{day.month:02d}-{day.day:02d}"
    if index is not None:
        name += f" {index}"
    return name + ARCHIVE_EXTENSION


def snapshot_index(filename: str) -> int:
    """Disambiguator of a snapshot name; 1 for the first snapshot of a day."""
    stem, _ext = os.path.splitext(os.path.basename(filename))
    m = _NAME_RE.match(stem)
    if m is None or m.group(4) is None:
        return 1
    return int(m.group(4))
