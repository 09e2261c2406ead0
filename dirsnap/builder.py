"""
Snapshot creation.

A snapshot is a ZIP archive written into the source directory itself, named
``snapshot YYYY-MM-DD[ N].zip``. It holds an empty entry per subdirectory, one
entry per file, and a trailing metadata entry with the format version and the
user comment. Files that are locked by another process are retried for a
bounded number of passes before the build fails.
"""

from __future__ import annotations

import datetime
import logging
import os
import re
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional, Pattern, Tuple, Union

from .archive import ArchiveWriter
from .constants import (
    FORMAT_VERSION,
    MAX_DISAMBIGUATOR,
    METADATA_ENTRY_NAME,
    RETRIES,
    RETRY_DELAY_SECONDS,
)
from .errors import (
    BuildCancelledError,
    InvalidArgumentError,
    NameSpaceExhaustedError,
    RetriesExceededError,
)
from .naming import format_snapshot_name, is_snapshot_name
from .pathutil import archive_name, dir_entry_name, require_directory
from .strings import write_string
from .version import FormatVersion

logger = logging.getLogger(__name__)

ExcludePattern = Union[str, Pattern[str], None]


def compile_exclude(pattern: ExcludePattern) -> Optional[Pattern[str]]:
    """Compile an exclusion pattern; strings are treated as regular expressions."""
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidArgumentError(f"Invalid exclude pattern {pattern!r}: {exc}") from exc


def _raise(exc: OSError) -> None:
    raise exc


def collect_sources(root: str, exclude: Optional[Pattern[str]] = None) -> Tuple[List[str], List[str]]:
    """Walk ``root`` and return ``(directories, files)`` as absolute paths.

    ``directories`` starts with ``root`` itself. Files named like snapshots and
    files whose base name matches ``exclude`` are left out. An unreadable
    subdirectory raises its OSError.
    """
    root = os.path.abspath(root)
    dirs: List[str] = []
    files: List[str] = []
    for cur, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        dirs.append(cur)
        for fn in sorted(filenames):
            if is_snapshot_name(fn):
                continue
            if exclude is not None and exclude.search(fn):
                logger.debug("Excluded %s", os.path.join(cur, fn))
                continue
            files.append(os.path.join(cur, fn))
    return dirs, files


class SnapshotBuilder:
    """Creates dated snapshot archives of a directory tree.

    Attributes:
        retries: Maximum number of copy passes over locked files.
        retry_delay: Seconds to wait between passes.
        sleep: Callable used to wait between passes.
        today: Callable returning the date used for naming.
        writer_factory: Callable taking the target path and returning an
            ArchiveWriter-compatible context manager.
        max_disambiguator: Exclusive upper bound of the same-day name counter.
        cancel: Optional event; when set, the build stops at the next file or wait.

    Example:
        >>> SnapshotBuilder().create("/projects/site", comment="before upgrade")
        PosixPath('/projects/site/snapshot 2024-05-01.zip')
    """

    def __init__(
        self,
        *,
        retries: int = RETRIES,
        retry_delay: float = RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        today: Callable[[], datetime.date] = datetime.date.today,
        writer_factory: Callable[[str], ArchiveWriter] = ArchiveWriter,
        max_disambiguator: int = MAX_DISAMBIGUATOR,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        if retries < 1:
            raise InvalidArgumentError("retries must be at least 1")
        self.retries = retries
        self.retry_delay = retry_delay
        self.sleep = sleep
        self.today = today
        self.writer_factory = writer_factory
        self.max_disambiguator = max_disambiguator
        self.cancel = cancel

    def _check_cancel(self) -> None:
        if self.cancel is not None and self.cancel.is_set():
            raise BuildCancelledError("Snapshot cancelled")

    def target_path(self, directory: str, overwrite: bool) -> Tuple[str, bool]:
        """Pick the archive path for today.

        Returns:
            ``(path, replaces_existing)``.

        Raises:
            NameSpaceExhaustedError: Every disambiguator below the bound is taken.
        """
        day = self.today()
        path = os.path.join(directory, format_snapshot_name(day))
        if not os.path.exists(path):
            return path, False
        if overwrite:
            return path, True
        for index in range(2, self.max_disambiguator):
            path = os.path.join(directory, format_snapshot_name(day, index))
            if not os.path.exists(path):
                return path, False
        raise NameSpaceExhaustedError("Maximum number of snapshots exceeded")

    def _copy_files(self, writer: ArchiveWriter, root: str, files: List[str]) -> None:
        pending = list(files)
        for attempt in range(1, self.retries + 1):
            locked: List[str] = []
            for path in pending:
                self._check_cancel()
                try:
                    writer.add_file(archive_name(path, root), path)
                except PermissionError as exc:
                    logger.debug("File locked, will retry: %s (%s)", path, exc)
                    locked.append(path)
            pending = locked
            if not pending:
                return
            logger.info("Pass %d/%d: %d file(s) still locked", attempt, self.retries, len(pending))
            if attempt < self.retries:
                self._check_cancel()
                self.sleep(self.retry_delay)
        raise RetriesExceededError(pending, self.retries)

    def create(
        self,
        directory: Union[str, os.PathLike],
        format_version: FormatVersion = FORMAT_VERSION,
        comment: Optional[str] = None,
        exclude_pattern: ExcludePattern = None,
        overwrite: bool = False,
    ) -> Path:
        """Write a new snapshot of ``directory`` into ``directory``.

        Args:
            directory: Root of the tree to snapshot.
            format_version: Version recorded in the metadata entry.
            comment: Free-text comment; None is stored as "".
            exclude_pattern: Regex matched against file base names to skip.
            overwrite: Replace an existing snapshot from today instead of
                adding a numbered one.

        Returns:
            Path of the written archive.

        Raises:
            InvalidArgumentError, DirectoryNotFoundError: Bad ``directory``.
            NameSpaceExhaustedError: No free name for today.
            RetriesExceededError: Files stayed locked; the partial archive is kept.
            BuildCancelledError: ``cancel`` was set; the partial archive is kept.
        """
        root = os.path.abspath(require_directory(directory))
        self._check_cancel()
        if isinstance(format_version, str):
            try:
                format_version = FormatVersion.parse(format_version)
            except ValueError as exc:
                raise InvalidArgumentError(str(exc)) from exc
        if not isinstance(format_version, FormatVersion):
            raise InvalidArgumentError(f"format_version must be a FormatVersion, got {format_version!r}")
        exclude = compile_exclude(exclude_pattern)

        target, replacing = self.target_path(root, overwrite)
        dirs, files = collect_sources(root, exclude)
        if replacing:
            logger.info("Overwriting existing snapshot %s", target)
        else:
            logger.info("Writing snapshot %s", target)
        logger.info("Found %d file(s) in %d director(ies)", len(files), len(dirs))

        # The writer truncates an existing target before writing.
        with self.writer_factory(target) as w:
            for d in dirs:
                if d == root:
                    continue
                w.add_dir(dir_entry_name(d, root))
            self._copy_files(w, root, files)
            with w.open_entry(METADATA_ENTRY_NAME) as meta:
                write_string(meta, str(format_version))
                write_string(meta, comment or "")

        logger.info("Snapshot complete: %s (%d files)", target, len(files))
        return Path(target)


def create_snapshot(
    directory: Union[str, os.PathLike],
    format_version: FormatVersion = FORMAT_VERSION,
    comment: Optional[str] = None,
    exclude_pattern: ExcludePattern = None,
    overwrite: bool = False,
) -> Path:
    """Create a snapshot with the default builder settings."""
    return SnapshotBuilder().create(directory, format_version, comment, exclude_pattern, overwrite)
