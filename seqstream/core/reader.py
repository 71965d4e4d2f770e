"""
Streaming FASTA/FASTQ record reader.

The reader pulls one record per call from a ByteStream into a reusable
SequenceRecord. Wrapped sequence lines are accumulated until the next
header marker, a '+' line, or end of input. Detecting the end of a
FASTA record therefore consumes the next record's marker byte; it is
remembered in the record's parser position so the next call starts
reading the name directly instead of scanning for a marker.

Each call returns one of three results:
- Success(length): a record was read
- EndOfStream(): no more records (repeated calls keep returning it)
- TruncatedQuality(...): a FASTQ record whose quality string is missing
  or does not match the sequence length

Read failures of the underlying source are not results: they terminate
the process through seqstream.utils.files.fatal.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, Iterator, Optional, Union

from seqstream.core.buffer import GrowableBuffer
from seqstream.core.record import (
    AWAITING_HEADER,
    HEADER_MARKERS,
    HeaderConsumed,
    SequenceRecord,
)
from seqstream.core.stream import (
    DEFAULT_CHUNK_SIZE,
    NEWLINE,
    ByteStream,
    Delimiter,
)
from seqstream.utils.files import xzopen

logger = logging.getLogger(__name__)

PLUS = ord("+")


class ResultKind(Enum):
    SUCCESS = "success"
    END_OF_STREAM = "end_of_stream"
    TRUNCATED_QUALITY = "truncated_quality"


@dataclass(frozen=True)
class Success:
    """A record was read; length is its sequence length."""
    length: int
    kind: ClassVar[ResultKind] = ResultKind.SUCCESS

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class EndOfStream:
    """No further records."""
    kind: ClassVar[ResultKind] = ResultKind.END_OF_STREAM

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class TruncatedQuality:
    """A FASTQ record whose quality length differs from its sequence length."""
    sequence_length: int
    quality_length: int
    kind: ClassVar[ResultKind] = ResultKind.TRUNCATED_QUALITY

    def __bool__(self) -> bool:
        return False


ReadResult = Union[Success, EndOfStream, TruncatedQuality]

END_OF_STREAM = EndOfStream()


class TruncatedQualityError(ValueError):
    """Raised by iterator interfaces on a truncated FASTQ record."""

    def __init__(self, name: str, result: TruncatedQuality):
        self.name = name
        self.result = result
        super().__init__(
            f"Truncated quality for record '{name}': "
            f"{result.quality_length} quality bytes for "
            f"{result.sequence_length} sequence bytes"
        )


def _locate_header(stream: ByteStream) -> Optional[int]:
    """Skip bytes up to and including the next '>' or '@'."""
    while True:
        c = stream.next_byte()
        if c is None or c in HEADER_MARKERS:
            return c


def _read_body(stream: ByteStream, sequence: GrowableBuffer) -> Optional[int]:
    """
    Accumulate sequence lines.

    Returns:
        The byte that ended the body ('>', '@' or '+'), or None at end of input
    """
    while True:
        c = stream.next_byte()
        if c is None or c in HEADER_MARKERS or c == PLUS:
            return c
        # Only a newline right at the start of a line counts as blank
        if c == NEWLINE:
            continue
        sequence.append_byte(c)
        stream.scan_until(Delimiter.NEWLINE, sequence, append=True)


def _truncated(record: SequenceRecord) -> TruncatedQuality:
    result = TruncatedQuality(len(record.sequence), len(record.quality))
    logger.debug(
        f"Truncated quality for record {record.name.decode()!r}: "
        f"{result.quality_length} of {result.sequence_length} bytes"
    )
    return result


def read_record(stream: ByteStream, record: SequenceRecord) -> ReadResult:
    """
    Read the next record from stream into record.

    The record must be the same object on every call for a given stream,
    since it carries the parser position between calls.

    Args:
        stream: Source of bytes
        record: Reusable record; its buffers are reset, not reallocated

    Returns:
        Success, EndOfStream or TruncatedQuality
    """
    if isinstance(record.position, HeaderConsumed):
        marker = record.position.marker
    else:
        marker = _locate_header(stream)
        if marker is None:
            return END_OF_STREAM
        record.position = HeaderConsumed(marker)

    record.clear()
    record.marker = marker

    name = stream.scan_until(Delimiter.WHITESPACE, record.name)
    if name.exhausted:
        # Normal exit once every record has been read
        record.position = AWAITING_HEADER
        return END_OF_STREAM
    if name.delimiter != NEWLINE:
        stream.scan_until(Delimiter.NEWLINE, record.comment)

    sequence = record.sequence
    c = _read_body(stream, sequence)
    sequence.terminate()

    if c != PLUS:
        record.position = AWAITING_HEADER if c is None else HeaderConsumed(c)
        return Success(len(sequence))

    record.has_quality = True
    record.position = AWAITING_HEADER
    if not stream.skip_line():
        return _truncated(record)

    quality = record.quality
    # At least one quality line is consumed, even for an empty sequence
    while not stream.scan_until(Delimiter.NEWLINE, quality, append=True).exhausted:
        if len(quality) >= len(sequence):
            break
    if len(quality) != len(sequence):
        return _truncated(record)
    return Success(len(sequence))


class RecordReader:
    """
    Pull records one at a time from a byte source.

    Args:
        source: Binary file object or an existing ByteStream
        record: Record to fill; a new one is created if omitted
        chunk_size: Refill size when a ByteStream has to be created

    Example:
        >>> import io
        >>> reader = RecordReader(io.BytesIO(b">s1\\nACGT\\nACGT\\n>s2\\nTTTT\\n"))
        >>> reader.read()
        Success(length=8)
        >>> reader.record.name.value
        b's1'
    """

    def __init__(
        self,
        source,
        record: Optional[SequenceRecord] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ):
        if isinstance(source, ByteStream):
            self.stream = source
        else:
            self.stream = ByteStream(source, chunk_size)
        self._owns_record = record is None
        self.record = SequenceRecord() if record is None else record
        self._owns_source = False

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        record: Optional[SequenceRecord] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> "RecordReader":
        """Open a plain or gzip-compressed file ("-" for stdin)."""
        reader = cls(xzopen(path, "rb"), record, chunk_size)
        reader._owns_source = True
        logger.debug(f"Opened {path} for reading")
        return reader

    def read(self) -> ReadResult:
        """Read the next record into self.record."""
        return read_record(self.stream, self.record)

    def __iter__(self) -> Iterator[SequenceRecord]:
        """
        Yield self.record after each successful read.

        The same object is yielded every time; copy what you need before
        advancing.

        Raises:
            TruncatedQualityError: On a FASTQ record with bad quality length
        """
        while True:
            result = self.read()
            if result.kind is ResultKind.END_OF_STREAM:
                return
            if result.kind is ResultKind.TRUNCATED_QUALITY:
                raise TruncatedQualityError(self.record.name.decode(), result)
            yield self.record

    def close(self) -> None:
        """Release the record buffers and the source if we created them."""
        if self._owns_record:
            self.record.release()
        if self._owns_source:
            self.stream.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
