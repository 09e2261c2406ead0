"""
Length-prefixed string codec for the snapshot metadata entry.

Encoding
- Length: unsigned LEB128 varint of the UTF-8 byte count (at most 5 bytes)
- Payload: UTF-8 bytes

Metadata entry payload
- string: format version (e.g. "1.0.0")
- string: comment ("" when none was given)

Trailing bytes after the comment are ignored.
"""

from __future__ import annotations

from typing import BinaryIO, Tuple

from .errors import CorruptEntryError

_MAX_PREFIX_BYTES = 5


def _varint_encode(n: int) -> bytes:
    if n < 0:
        raise ValueError("varint: negative not supported")
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(b | 0x80)
        else:
            out.append(b)
            break
    return bytes(out)


def _varint_read(f: BinaryIO) -> int:
    shift = 0
    result = 0
    for _ in range(_MAX_PREFIX_BYTES):
        raw = f.read(1)
        if not raw:
            raise CorruptEntryError("string length prefix truncated")
        b = raw[0]
        result |= (b & 0x7F) << shift
        if not (b & 0x80):
            return result
        shift += 7
    raise CorruptEntryError("string length prefix too large")


def encode_string(s: str) -> bytes:
    data = s.encode("utf-8")
    return _varint_encode(len(data)) + data


def write_string(f: BinaryIO, s: str) -> None:
    f.write(encode_string(s))


def read_string(f: BinaryIO) -> str:
    n = _varint_read(f)
    data = f.read(n)
    if len(data) != n:
        raise CorruptEntryError(f"string truncated: expected {n} bytes, got {len(data)}")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptEntryError(f"string is not valid UTF-8: {exc}") from exc


def encode_metadata(version: str, comment: str) -> bytes:
    return encode_string(version) + encode_string(comment)


def decode_metadata(f: BinaryIO) -> Tuple[str, str]:
    version = read_string(f)
    comment = read_string(f)
    return version, comment
