"""
Cross-platform line reading for alphabet config sources.

Accepts ``\\n``, ``\\r`` and ``\\r\\n`` as equivalent terminators regardless of
the platform the config was written on.
"""

from collections.abc import Iterator
from typing import BinaryIO, Final

import regex as re

from .errors import ConfigLoadError

READ_CHUNK_SIZE: Final[int] = 8192

_TERMINATOR_RE: Final = re.compile(rb"[\r\n]")


class LineReader:
    """
    Read logical lines from a binary stream.

    ``readline`` returns the line without its terminator, ``b""`` for an empty
    line and ``None`` once the stream is exhausted.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = READ_CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._stream = stream
        self._chunk_size = chunk_size
        self._buf = bytearray()
        self._eof = False

    def _fill(self) -> bool:
        """Append one chunk to the buffer; return False once the stream is drained."""
        if self._eof:
            return False
        chunk = self._stream.read(self._chunk_size)
        if isinstance(chunk, str):
            raise ConfigLoadError("config stream must be opened in binary mode")
        if not chunk:
            self._eof = True
            return False
        self._buf += chunk
        return True

    def readline(self) -> bytes | None:
        """Return the next line, or None when no line remains."""
        scan = 0
        while True:
            m = _TERMINATOR_RE.search(self._buf, scan)
            if m is None:
                scan = len(self._buf)
                if self._fill():
                    continue
                if not self._buf:
                    return None
                # last line has no terminator
                line = bytes(self._buf)
                self._buf.clear()
                return line

            end = m.start()
            # a trailing \r may be the first half of \r\n
            if self._buf[end] == 0x0D and end + 1 == len(self._buf):
                scan = end
                if self._fill():
                    continue

            width = 2 if self._buf[end : end + 2] == b"\r\n" else 1
            line = bytes(self._buf[:end])
            del self._buf[: end + width]
            return line

    def __iter__(self) -> Iterator[bytes]:
        while (line := self.readline()) is not None:
            yield line


def iter_lines(stream: BinaryIO, chunk_size: int = READ_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield every logical line of ``stream``."""
    yield from LineReader(stream, chunk_size)
