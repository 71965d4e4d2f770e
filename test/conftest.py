import gzip
import io

import pytest

from seqstream.core import RecordReader


@pytest.fixture()
def make_reader():
    def _make(data: bytes, chunk_size: int = 16384) -> RecordReader:
        return RecordReader(io.BytesIO(data), chunk_size=chunk_size)

    return _make


@pytest.fixture(scope="module")
def fasta_bytes():
    return b">s1\nACGT\nACGT\n>s2\nTTTT\n"


@pytest.fixture(scope="module")
def fastq_bytes():
    return b"@r1 lane=1\nACGT\n+\nIIII\n@r2\nACGTA\nC\n+r2\nIIIII\n#\n"


@pytest.fixture(scope="module")
def mixed_bytes():
    return (
        b"# leading junk is skipped\n"
        b">chr1 first contig\nACGTACGTAC\nGTAC\n\nGG\n"
        b"@read1\nAC\nGT\n+\nII\nII\n"
        b">chr2\nTT\r\n"
        b"@read2 sample=x\r\nACG\r\n+\r\n@I#\r\n"
    )


@pytest.fixture()
def fasta_file(tmp_path, fasta_bytes):
    path = tmp_path / "seqs.fa"
    path.write_bytes(fasta_bytes)
    return path


@pytest.fixture()
def fastq_gz_file(tmp_path, fastq_bytes):
    path = tmp_path / "reads.fq.gz"
    path.write_bytes(gzip.compress(fastq_bytes))
    return path


class FailingSource:
    """Byte source whose reads always fail."""

    def read(self, size):
        raise OSError("Input/output error")


@pytest.fixture()
def failing_source():
    return FailingSource()
