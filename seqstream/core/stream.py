"""
Buffered byte stream over an opaque binary source.

ByteStream pulls fixed-size chunks from any object with a read(size)
method (a plain file, a gzip.GzipFile, sys.stdin.buffer, io.BytesIO)
and hands them out either one byte at a time or as delimiter-bounded
spans appended into a GrowableBuffer. Refills happen only when the
current chunk is exhausted, and read failures go through the fail-fast
helpers in seqstream.utils.files.
"""

import logging
import re
from enum import Enum
from typing import NamedTuple, Optional, Union

from seqstream.core.buffer import GrowableBuffer
from seqstream.utils.files import xclose, xread

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 16384

NEWLINE = ord("\n")
CARRIAGE_RETURN = ord("\r")


class Delimiter(Enum):
    """Classes of stop bytes for ByteStream.scan_until."""
    # C isspace(): space, \t, \n, \v, \f, \r
    WHITESPACE = 0
    WHITESPACE_NOT_SPACE = 1
    NEWLINE = 2


_WHITESPACE_PATTERNS = {
    Delimiter.WHITESPACE: re.compile(rb"[ \t\n\v\f\r]"),
    Delimiter.WHITESPACE_NOT_SPACE: re.compile(rb"[\t\n\v\f\r]"),
}


class ScanResult(NamedTuple):
    """
    Outcome of a delimiter-bounded scan.

    Attributes:
        length: Length of the target buffer after the scan, or None when
            the stream was already at end of input and nothing was read
        delimiter: Byte value that stopped the scan, or None at end of input
    """
    length: Optional[int]
    delimiter: Optional[int]

    @property
    def exhausted(self) -> bool:
        return self.length is None


EXHAUSTED = ScanResult(None, None)


def _make_finder(delimiter: Union[Delimiter, int, bytes]):
    """Build a function (buf, begin, end) -> index of first stop byte or end."""
    if isinstance(delimiter, Delimiter):
        if delimiter is Delimiter.NEWLINE:
            needle = b"\n"
        else:
            pattern = _WHITESPACE_PATTERNS[delimiter]

            def find(buf, begin, end):
                match = pattern.search(buf, begin, end)
                return match.start() if match else end

            return find
    elif isinstance(delimiter, (bytes, bytearray)):
        if len(delimiter) != 1:
            raise ValueError(f"Literal delimiter must be a single byte, got {delimiter!r}")
        needle = bytes(delimiter)
    elif isinstance(delimiter, int) and 0 <= delimiter <= 255:
        needle = bytes([delimiter])
    else:
        raise ValueError(f"Invalid delimiter: {delimiter!r}")

    def find(buf, begin, end):
        i = buf.find(needle, begin, end)
        return end if i < 0 else i

    return find


_FINDERS = {delimiter: _make_finder(delimiter) for delimiter in Delimiter}


class ByteStream:
    """
    Chunked reader with single-byte and scan-until-delimiter access.

    Attributes:
        source: Underlying binary source
        chunk_size: Maximum number of bytes fetched per refill
        begin: Read cursor into the current chunk
        end: Number of valid bytes in the current chunk
        is_eof: True once the source has returned no data

    Example:
        >>> import io
        >>> stream = ByteStream(io.BytesIO(b"ACGT\\nTT"))
        >>> target = GrowableBuffer()
        >>> stream.scan_until(Delimiter.NEWLINE, target)
        ScanResult(length=4, delimiter=10)
        >>> target.value
        b'ACGT'
    """

    def __init__(self, source, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.source = source
        self.chunk_size = chunk_size
        self.buf = b""
        self.begin = 0
        self.end = 0
        self.is_eof = False

    def _refill(self) -> bool:
        """Fetch the next chunk; returns False when the source is exhausted."""
        self.begin = 0
        self.buf = xread(self.source, self.chunk_size)
        self.end = len(self.buf)
        if self.end == 0:
            self.is_eof = True
            logger.debug("Byte source exhausted")
            return False
        return True

    def at_end(self) -> bool:
        return self.is_eof and self.begin >= self.end

    def next_byte(self) -> Optional[int]:
        """
        Consume one byte.

        Returns:
            The byte value, or None at end of input
        """
        if self.begin >= self.end:
            if self.is_eof or not self._refill():
                return None
        c = self.buf[self.begin]
        self.begin += 1
        return c

    def scan_until(
        self,
        delimiter: Union[Delimiter, int, bytes],
        target: GrowableBuffer,
        append: bool = False
    ) -> ScanResult:
        """
        Consume bytes up to and including the next delimiter.

        The bytes before the delimiter are copied into target, which is
        cleared first unless append is set. With Delimiter.NEWLINE a
        trailing carriage return is dropped so that CRLF files read the
        same as LF files.

        Args:
            delimiter: A Delimiter class or a literal byte
            target: Buffer receiving the span
            append: Keep the current content of target

        Returns:
            ScanResult; length is None only when no bytes at all were
            available, which distinguishes end of stream from an empty field
        """
        if isinstance(delimiter, Delimiter):
            find = _FINDERS[delimiter]
        else:
            find = _make_finder(delimiter)
        if not append:
            target.reset()

        got_any = False
        stop = None
        while True:
            if self.begin >= self.end:
                if self.is_eof or not self._refill():
                    break
            i = find(self.buf, self.begin, self.end)
            target.append(self.buf[self.begin:i])
            got_any = True
            if i < self.end:
                stop = self.buf[i]
                self.begin = i + 1
                break
            self.begin = self.end

        if not got_any and self.at_end():
            return EXHAUSTED

        if (delimiter is Delimiter.NEWLINE and target.length >= 1
                and target.last_byte() == CARRIAGE_RETURN):
            target.truncate(target.length - 1)
        target.terminate()
        return ScanResult(target.length, stop)

    def skip_line(self) -> bool:
        """
        Discard everything up to and including the next newline.

        Returns:
            False if input ended before a newline was found
        """
        while True:
            if self.begin >= self.end:
                if self.is_eof or not self._refill():
                    return False
            i = self.buf.find(b"\n", self.begin, self.end)
            if i >= 0:
                self.begin = i + 1
                return True
            self.begin = self.end

    def close(self) -> None:
        """Close the underlying source."""
        xclose(self.source)
        self.buf = b""
        self.begin = self.end = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
