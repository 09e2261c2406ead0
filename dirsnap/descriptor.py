from __future__ import annotations

import datetime
import os
from dataclasses import dataclass
from typing import Any, Dict

from .errors import InvalidArgumentError
from .version import FormatVersion


@dataclass(frozen=True)
class SnapshotDescriptor:
    """Describes an existing snapshot archive.

    Attributes:
        location: Path to the archive file.
        format_version: Metadata layout version the archive was written with.
        comment: User comment; empty string when none was given.
        creation_date: Date taken from the file name (not the file timestamps).
        file_count: Number of payload files, excluding directory placeholders
            and the metadata entry.
    """

    location: str
    format_version: FormatVersion
    comment: str
    creation_date: datetime.date
    file_count: int

    def __post_init__(self):
        if self.file_count < 0:
            raise InvalidArgumentError(f"file_count must be >= 0, got {self.file_count}")

    @property
    def display_name(self) -> str:
        return os.path.basename(self.location)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": str(self.location),
            "name": self.display_name,
            "format_version": str(self.format_version),
            "comment": self.comment,
            "creation_date": self.creation_date.isoformat(),
            "file_count": self.file_count,
        }
