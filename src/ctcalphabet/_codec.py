"""
Binary serialization of label tables.

Layout, all integers little-endian:

    [count: u16]
    count x ([label: u16] [length: u16] [length bytes of UTF-8 token])

There is no magic number or version field.
"""

import logging
import struct
from collections.abc import Iterable
from typing import Final

from .errors import AlphabetError, MalformedBufferError
from .types import Label, Token

U16: Final = struct.Struct("<H")
MAX_U16: Final[int] = 0xFFFF

log = logging.getLogger(__name__)


class ByteCursor:
    """
    Forward-only reader over a bounded byte buffer.

    Every read is checked against the remaining length first; a short read
    raises ``MalformedBufferError`` and leaves the cursor where it was.
    """

    def __init__(self, buffer: bytes | bytearray | memoryview) -> None:
        self._view = memoryview(buffer).cast("B")
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._view) - self._offset

    def _take(self, n: int, what: str) -> memoryview:
        if self.remaining < n:
            raise MalformedBufferError(
                f"buffer too short to read {what}",
                offset=self._offset,
                needed=n,
                remaining=self.remaining,
            )
        chunk = self._view[self._offset : self._offset + n]
        self._offset += n
        return chunk

    def read_u16(self, what: str = "u16") -> int:
        return U16.unpack(self._take(U16.size, what))[0]

    def read_bytes(self, n: int, what: str = "bytes") -> bytes:
        return bytes(self._take(n, what))


def _check_u16(value: int, what: str) -> None:
    if not 0 <= value <= MAX_U16:
        raise AlphabetError(f"{what} does not fit in 16 bits ({what}: {value}) ")


def serialize_entries(size: int, entries: Iterable[tuple[Label, Token]]) -> bytes:
    """Pack a declared size and (label, token) pairs into the wire layout."""
    _check_u16(size, "size")
    out = bytearray(U16.pack(size))
    for label, token in entries:
        _check_u16(label, "label")
        _check_u16(len(token), "token length")
        out += U16.pack(label)
        out += U16.pack(len(token))
        out += token
    return bytes(out)


def deserialize_entries(
    buffer: bytes | bytearray | memoryview,
) -> tuple[int, list[tuple[Label, Token]]]:
    """
    Unpack a serialized table.

    Returns the declared count and the decoded pairs in buffer order.

    :raises MalformedBufferError: If any field runs past the end of the buffer.
    """
    cursor = ByteCursor(buffer)
    count = cursor.read_u16("entry count")
    entries: list[tuple[Label, Token]] = []
    for i in range(count):
        label = cursor.read_u16(f"label of entry {i}")
        length = cursor.read_u16(f"token length of entry {i}")
        token = cursor.read_bytes(length, f"token of entry {i}")
        entries.append((label, token))

    if cursor.remaining:
        log.warning(f"ignoring {cursor.remaining} trailing bytes after {count} entries")

    return count, entries


__all__ = [
    "U16",
    "MAX_U16",
    "ByteCursor",
    "serialize_entries",
    "deserialize_entries",
]
