"""
Streaming FASTA/FASTQ parsing core.

This module provides:
- GrowableBuffer: reusable byte buffer with power-of-two growth
- ByteStream: chunked byte source with delimiter-bounded scans
- SequenceRecord: reusable record carrying the parser position
- RecordReader / read_record: the record state machine
"""

from seqstream.core.buffer import (
    GrowableBuffer,
    next_power_of_two,
)

from seqstream.core.stream import (
    ByteStream,
    Delimiter,
    ScanResult,
    DEFAULT_CHUNK_SIZE,
)

from seqstream.core.record import (
    SequenceRecord,
    AwaitingHeader,
    HeaderConsumed,
    ParserPosition,
    AWAITING_HEADER,
)

from seqstream.core.reader import (
    RecordReader,
    read_record,
    ReadResult,
    ResultKind,
    Success,
    EndOfStream,
    TruncatedQuality,
    TruncatedQualityError,
    END_OF_STREAM,
)

__all__ = [
    # Buffers
    "GrowableBuffer",
    "next_power_of_two",
    # Byte stream
    "ByteStream",
    "Delimiter",
    "ScanResult",
    "DEFAULT_CHUNK_SIZE",
    # Records
    "SequenceRecord",
    "AwaitingHeader",
    "HeaderConsumed",
    "ParserPosition",
    "AWAITING_HEADER",
    # Reader
    "RecordReader",
    "read_record",
    "ReadResult",
    "ResultKind",
    "Success",
    "EndOfStream",
    "TruncatedQuality",
    "TruncatedQualityError",
    "END_OF_STREAM",
]
