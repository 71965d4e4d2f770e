"""
SeqStream: Streaming FASTA/FASTQ reader

This package provides tools for:
- Incremental parsing of FASTA and FASTQ records from plain or
  gzip-compressed byte streams, reusing record buffers between reads
- Record snapshots, writers and Phred quality helpers
- Fail-fast file helpers and process timers

The parsing core is pure Python; NumPy is used for quality scores
and length statistics.
"""

__version__ = "0.1.0"
__author__ = "SeqStream Contributors"

from seqstream.core import (
    GrowableBuffer,
    ByteStream,
    Delimiter,
    SequenceRecord,
    RecordReader,
    read_record,
    ResultKind,
    Success,
    EndOfStream,
    TruncatedQuality,
    TruncatedQualityError,
)

from seqstream.io import (
    read_fasta,
    read_fastq,
    read_fastx,
    write_fasta,
    write_fastq,
    FastaRecord,
    FastqRecord,
)

from seqstream.utils import (
    xzopen,
    cputime,
    realtime,
)

__all__ = [
    # Core
    "GrowableBuffer",
    "ByteStream",
    "Delimiter",
    "SequenceRecord",
    "RecordReader",
    "read_record",
    "ResultKind",
    "Success",
    "EndOfStream",
    "TruncatedQuality",
    "TruncatedQualityError",
    # I/O
    "read_fasta",
    "read_fastq",
    "read_fastx",
    "write_fasta",
    "write_fastq",
    "FastaRecord",
    "FastqRecord",
    # Utilities
    "xzopen",
    "cputime",
    "realtime",
]
