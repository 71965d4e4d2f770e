"""
Reusable sequence record and the parser position carried between reads.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from seqstream.core.buffer import GrowableBuffer

FASTA_MARKER = ord(">")
FASTQ_MARKER = ord("@")
HEADER_MARKERS = (FASTA_MARKER, FASTQ_MARKER)


@dataclass(frozen=True)
class AwaitingHeader:
    """The stream sits before the next header marker, which must be scanned for."""

    @property
    def marker(self) -> int:
        return 0


@dataclass(frozen=True)
class HeaderConsumed:
    """The next record's header marker was already consumed from the stream."""
    marker: int


ParserPosition = Union[AwaitingHeader, HeaderConsumed]

AWAITING_HEADER = AwaitingHeader()


@dataclass(eq=False)
class SequenceRecord:
    """
    A FASTA/FASTQ record whose buffers are reused from one read to the next.

    The reader resets the buffers at the start of every record but keeps
    their storage, so after the first few records no further allocation
    happens for typical inputs. Keep one SequenceRecord per stream: the
    parser position it carries belongs to that stream.

    Attributes:
        name: Record identifier (first word of the header)
        comment: Rest of the header line
        sequence: Concatenated sequence lines
        quality: Concatenated quality lines (FASTQ only)
        position: Where the reader left the stream
        marker: Header marker byte of the current record
        has_quality: True if the current record had a '+' section
    """
    name: GrowableBuffer = field(default_factory=GrowableBuffer)
    comment: GrowableBuffer = field(default_factory=GrowableBuffer)
    sequence: GrowableBuffer = field(default_factory=GrowableBuffer)
    quality: GrowableBuffer = field(default_factory=GrowableBuffer)
    position: ParserPosition = AWAITING_HEADER
    marker: Optional[int] = None
    has_quality: bool = False

    @property
    def pending_marker(self) -> int:
        """Integer view of position: 0, or the already consumed marker byte."""
        return self.position.marker

    def clear(self) -> None:
        """Empty the record buffers while keeping their storage."""
        self.name.reset()
        self.comment.reset()
        self.sequence.reset()
        self.quality.reset()
        self.marker = None
        self.has_quality = False

    def release(self) -> None:
        for buffer in (self.name, self.comment, self.sequence, self.quality):
            buffer.release()
        self.position = AWAITING_HEADER

    def __len__(self) -> int:
        return len(self.sequence)

    def __str__(self) -> str:
        header = self.name.decode()
        if self.comment:
            header += " " + self.comment.decode()
        if self.has_quality:
            return f"@{header}\n{self.sequence.decode()}\n+\n{self.quality.decode()}"
        return f">{header}\n{self.sequence.decode()}"
