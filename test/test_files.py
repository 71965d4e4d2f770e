import gzip
import io
import logging
import sys
import types

import pytest

from seqstream.utils import (
    cputime,
    fatal,
    realtime,
    xclose,
    xflush,
    xopen,
    xread,
    xwrite,
    xzopen,
)


class TrickleReader(io.RawIOBase):
    """Pipe-like source that hands out one byte per read and cannot peek."""

    def __init__(self, data):
        self.data = data

    def readable(self):
        return True

    def readinto(self, b):
        chunk, self.data = self.data[:1], self.data[1:]
        b[:len(chunk)] = chunk
        return len(chunk)


class ShortPeekReader(TrickleReader):
    def peek(self, size=0):
        return self.data[:1]


class ShortWriter(io.RawIOBase):
    def writable(self):
        return True

    def write(self, data):
        return 1


def test_fatal_logs_and_exits(caplog):
    with caplog.at_level(logging.ERROR):
        with pytest.raises(SystemExit) as excinfo:
            fatal("gzread", "unexpected end of file")
    assert excinfo.value.code == 1
    assert "[gzread] unexpected end of file" in caplog.text


def test_xopen_missing_file_exits(tmp_path, caplog):
    with pytest.raises(SystemExit):
        xopen(tmp_path / "nope.fa")
    assert "fail to open file" in caplog.text


def test_xzopen_plain_and_gzip(tmp_path):
    plain = tmp_path / "a.fa"
    plain.write_bytes(b">a\nACGT\n")
    packed = tmp_path / "b.fa.gz"
    packed.write_bytes(gzip.compress(b">b\nTTTT\n"))
    # gzip detection is by content, not by suffix
    misnamed = tmp_path / "c.fa"
    misnamed.write_bytes(gzip.compress(b">c\nGG\n"))

    for path, expected in [(plain, b">a\nACGT\n"), (packed, b">b\nTTTT\n"), (misnamed, b">c\nGG\n")]:
        handle = xzopen(path)
        assert xread(handle, 1024) == expected
        assert xread(handle, 1024) == b""
        xclose(handle)


def test_xzopen_write(tmp_path):
    path = tmp_path / "out.gz"
    handle = xzopen(path, "w")
    xwrite(handle, b"ACGT\n")
    xflush(handle)
    xclose(handle)
    assert gzip.decompress(path.read_bytes()) == b"ACGT\n"


def test_xzopen_stdin(monkeypatch):
    data = gzip.compress(b">s\nA\n")
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BufferedReader(io.BytesIO(data))))
    handle = xzopen("-")
    assert handle.read() == b">s\nA\n"


@pytest.mark.parametrize("reader_type", [TrickleReader, ShortPeekReader])
@pytest.mark.parametrize("payload, compress", [
    (b">s1\nACGT\n", True),
    (b">s1\nACGT\n", False),
    (b">", False),
])
def test_xzopen_stdin_short_reads(monkeypatch, reader_type, payload, compress):
    source = reader_type(gzip.compress(payload) if compress else payload)
    monkeypatch.setattr(sys, "stdin", types.SimpleNamespace(buffer=source))
    handle = xzopen("-")
    assert handle.read() == payload
    xclose(handle)
    assert not source.closed


def test_xread_failure_exits():
    handle = gzip.GzipFile(fileobj=io.BytesIO(b"\x1f\x8bnot really gzip"))
    with pytest.raises(SystemExit):
        xread(handle, 100)


def test_short_write_exits():
    with pytest.raises(SystemExit):
        xwrite(ShortWriter(), b"ACGT")


def test_xflush_regular_and_memory(tmp_path):
    handle = xopen(tmp_path / "f.txt", "w")
    xwrite(handle, b"data")
    xflush(handle)
    xclose(handle)
    assert (tmp_path / "f.txt").read_bytes() == b"data"
    xflush(io.BytesIO())


def test_timers():
    wall = realtime()
    cpu = cputime()
    sum(i * i for i in range(10000))
    assert cputime() >= cpu >= 0
    assert realtime() >= wall
