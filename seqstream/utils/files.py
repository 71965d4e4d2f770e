"""
Fail-fast file helpers.

Each helper either succeeds or terminates the process through fatal()
with a one-line diagnostic. Callers never receive an I/O error as a
return value, so the parsing code built on top of them only has to deal
with end of input.
"""

import gzip
import io
import logging
import os
import stat
import sys
import zlib
from pathlib import Path
from typing import BinaryIO, NoReturn, Tuple, Union

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
GZIP_MAGIC = b"\x1f\x8b"

# Errors a (possibly compressed) byte source can raise while reading
READ_ERRORS = (OSError, EOFError, zlib.error)

PathLike = Union[str, Path]


def fatal(func: str, message: str) -> NoReturn:
    """
    Report an unrecoverable error and terminate the process.

    Args:
        func: Name of the failing operation, shown in brackets
        message: Human readable reason
    """
    logger.error(f"[{func}] {message}")
    sys.exit(EXIT_FAILURE)


def _standard_stream(mode: str) -> BinaryIO:
    stream = sys.stdin if "r" in mode else sys.stdout
    return getattr(stream, "buffer", stream)


def _is_standard_stream(handle) -> bool:
    return handle is _standard_stream("r") or handle is _standard_stream("w")


def xopen(path: PathLike, mode: str = "rb") -> BinaryIO:
    """
    Open a file in binary mode or exit.

    "-" stands for standard input when reading and standard output
    when writing.
    """
    if str(path) == "-":
        return _standard_stream(mode)
    if "b" not in mode:
        mode += "b"
    try:
        return open(path, mode)
    except OSError as e:
        fatal("xopen", f"fail to open file '{path}' : {e.strerror or e}")


class _ReplayReader(io.RawIOBase):
    """Raw reader that returns already consumed bytes before the rest of a handle."""

    def __init__(self, head: bytes, handle):
        self._head = head
        self._handle = handle

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self._head:
            data, self._head = self._head[:len(b)], self._head[len(b):]
        else:
            data = self._handle.read(len(b)) or b""
        b[:len(data)] = data
        return len(data)

    def close(self) -> None:
        if not self.closed and not _is_standard_stream(self._handle):
            self._handle.close()
        super().close()


def _sniff_gzip(handle) -> Tuple[bool, BinaryIO]:
    """
    Check a handle for the gzip magic bytes without losing them.

    Pipes may hand out fewer bytes than asked for, and some handles have
    no peek() at all, so the magic is read byte by byte when peeking does
    not show enough of it.

    Returns:
        Whether the data is gzip, and the handle to read it from
    """
    size = len(GZIP_MAGIC)
    try:
        head = handle.peek(size) if hasattr(handle, "peek") else b""
        if len(head) >= size:
            return head[:size] == GZIP_MAGIC, handle
        head = b""
        while len(head) < size:
            data = handle.read(size - len(head))
            if not data:
                break
            head += data
    except OSError as e:
        fatal("xzopen", str(e))
    return head == GZIP_MAGIC, io.BufferedReader(_ReplayReader(head, handle))


def xzopen(path: PathLike, mode: str = "rb") -> BinaryIO:
    """
    Open possibly gzip-compressed data or exit.

    Reading sniffs the gzip magic bytes and falls back to the plain
    bytes when they are absent, so the same call serves .fa and .fa.gz
    files alike. Writing always compresses.

    Args:
        path: File path, or "-" for stdin/stdout
        mode: "r"/"rb" or "w"/"wb"/"a"/"ab"

    Returns:
        Binary file object
    """
    if "b" not in mode:
        mode += "b"

    if "r" not in mode:
        if str(path) == "-":
            return gzip.GzipFile(fileobj=_standard_stream(mode), mode=mode)
        try:
            return gzip.open(path, mode)
        except OSError as e:
            fatal("xzopen", f"fail to open file '{path}' : {e.strerror or e}")

    is_gzip, handle = _sniff_gzip(xopen(path, "rb"))
    if not is_gzip:
        return handle
    if str(path) == "-":
        return gzip.GzipFile(fileobj=handle, mode="rb")

    handle.close()
    try:
        return gzip.open(path, "rb")
    except OSError as e:
        fatal("xzopen", f"fail to open file '{path}' : {e.strerror or e}")


def xread(handle, size: int) -> bytes:
    """Read up to size bytes; an empty result means end of input."""
    try:
        return handle.read(size)
    except READ_ERRORS as e:
        fatal("read", str(e) or type(e).__name__)


def xwrite(handle, data: bytes) -> int:
    try:
        written = handle.write(data)
    except OSError as e:
        fatal("write", e.strerror or str(e))
    if written is not None and written != len(data):
        fatal("write", f"short write: {written} of {len(data)} bytes")
    return len(data)


def xflush(handle) -> None:
    """
    Flush a handle and, for regular files, fsync it.

    Flushing only hands data to the kernel; on network filesystems the
    write can still fail afterwards, which fsync surfaces.
    """
    try:
        handle.flush()
    except OSError as e:
        fatal("flush", e.strerror or str(e))

    # In-memory handles have no descriptor to sync
    try:
        fd = handle.fileno()
    except (io.UnsupportedOperation, AttributeError):
        return

    try:
        if stat.S_ISREG(os.fstat(fd).st_mode):
            os.fsync(fd)
    except OSError as e:
        fatal("fsync", e.strerror or str(e))


def xclose(handle) -> None:
    """Close a handle or exit. Standard streams are flushed, not closed."""
    if _is_standard_stream(handle):
        if handle.writable():
            xflush(handle)
        return
    try:
        handle.close()
    except OSError as e:
        fatal("close", e.strerror or str(e))
