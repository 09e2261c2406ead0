from __future__ import annotations

import shutil
import struct
import time
import zipfile
import zlib
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from .constants import COMPRESSION
from .errors import CorruptEntryError

_COPY_BUFSIZE = 1024 * 1024

# Errors zipfile raises for damaged containers or members
# (RuntimeError: encrypted member; NotImplementedError: unknown compression;
# ValueError: undecodable UTF-8 names; IndexError, struct.error: bad extra fields)
_ZIP_READ_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
    ValueError,
    IndexError,
    struct.error,
)


@dataclass(frozen=True)
class ArchiveEntry:
    name: str
    size: int  # uncompressed length

    @property
    def basename(self) -> str:
        return self.name.rsplit("/", 1)[-1]

    @property
    def is_placeholder(self) -> bool:
        """Zero-length entry with an empty base name (directory marker)."""
        return self.basename == "" and self.size == 0


class ArchiveReader:
    """Read-only view of a ZIP archive."""

    def __init__(self, path: str):
        self.path = path
        self.zf: Optional[zipfile.ZipFile] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self.zf is not None:
            return
        try:
            self.zf = zipfile.ZipFile(self.path, "r")
        except _ZIP_READ_ERRORS as exc:
            raise CorruptEntryError(f"not a readable archive: {exc}") from exc

    def close(self):
        if self.zf is not None:
            self.zf.close()
            self.zf = None

    def _require_open(self) -> zipfile.ZipFile:
        if self.zf is None:
            raise RuntimeError("Archive not open")
        return self.zf

    def list(self) -> List[ArchiveEntry]:
        return [ArchiveEntry(name=info.filename, size=info.file_size) for info in self._require_open().infolist()]

    def open_entry(self, name: str) -> BinaryIO:
        zf = self._require_open()
        try:
            return zf.open(name, "r")
        except KeyError as exc:
            raise CorruptEntryError(f"missing entry: {name!r}") from exc
        except _ZIP_READ_ERRORS as exc:
            raise CorruptEntryError(f"unreadable entry {name!r}: {exc}") from exc

    def read_entry(self, name: str) -> bytes:
        """Read a whole entry; CRC and decompression failures become CorruptEntryError."""
        try:
            with self.open_entry(name) as fh:
                return fh.read()
        except _ZIP_READ_ERRORS as exc:
            raise CorruptEntryError(f"unreadable entry {name!r}: {exc}") from exc


class ArchiveWriter:
    """Create a new ZIP archive, truncating any existing file at ``out_path``."""

    def __init__(self, out_path: str, compression: int = COMPRESSION):
        self.out_path = out_path
        self.compression = compression
        self.f: Optional[BinaryIO] = None
        self.zf: Optional[zipfile.ZipFile] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self.f is not None:
            return
        self.f = open(self.out_path, "wb")
        self.zf = zipfile.ZipFile(self.f, "w", compression=self.compression)

    def close(self):
        if self.zf is not None:
            self.zf.close()
            self.zf = None
        if self.f is not None:
            self.f.close()
            self.f = None

    def _require_open(self) -> zipfile.ZipFile:
        if self.zf is None:
            raise RuntimeError("Archive not open")
        return self.zf

    def add_dir(self, arc_name: str):
        """Record an empty directory entry; ``arc_name`` must end with '/'."""
        zf = self._require_open()
        if not arc_name.endswith("/"):
            raise ValueError(f"directory entry name must end with '/': {arc_name!r}")
        zf.writestr(arc_name, b"")

    def add_file(self, arc_name: str, fs_path: str):
        """Copy a filesystem file into the archive.

        The source is opened before the entry is started, so a PermissionError
        from a locked file leaves the archive untouched.
        """
        zf = self._require_open()
        with open(fs_path, "rb") as src:
            info = zipfile.ZipInfo.from_file(fs_path, arc_name, strict_timestamps=False)
            info.compress_type = self.compression
            with zf.open(info, "w") as dst:
                shutil.copyfileobj(src, dst, _COPY_BUFSIZE)

    def open_entry(self, arc_name: str) -> BinaryIO:
        zf = self._require_open()
        info = zipfile.ZipInfo(arc_name, date_time=time.localtime(time.time())[:6])
        info.compress_type = self.compression
        return zf.open(info, "w")
