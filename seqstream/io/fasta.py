import io
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Union

from seqstream.core import RecordReader, SequenceRecord
from seqstream.utils.files import xclose, xopen, xwrite, xzopen

DEFAULT_LINE_WIDTH = 60


@dataclass
class FastaRecord:
    """
    Represents a single FASTA record.

    Attributes:
        id: Sequence identifier (first word after '>')
        sequence: The nucleotide/protein sequence
        description: Rest of the header line after the identifier
    """
    id: str
    sequence: str
    description: str = ""

    def __len__(self) -> int:
        return len(self.sequence)

    def __str__(self) -> str:
        return f"{self.header}\n{self.sequence}"

    @property
    def header(self) -> str:
        if self.description:
            return f">{self.id} {self.description}"
        return f">{self.id}"

    @classmethod
    def from_record(cls, record: SequenceRecord, uppercase: bool = False) -> "FastaRecord":
        """Copy the current content of a reusable record."""
        sequence = record.sequence.decode()
        return cls(
            id=record.name.decode(),
            sequence=sequence.upper() if uppercase else sequence,
            description=record.comment.decode()
        )

    def to_fasta(self, line_width: int = DEFAULT_LINE_WIDTH) -> str:
        """Format as FASTA string with wrapped sequence lines."""
        lines = [self.header]
        for i in range(0, len(self.sequence), line_width):
            lines.append(self.sequence[i:i + line_width])
        return "\n".join(lines)


def read_fasta(
    filepath: Union[str, Path],
    uppercase: bool = False
) -> Iterator[FastaRecord]:
    """
    Read sequences from a FASTA (or FASTQ) file.

    Supports both plain text and gzip-compressed files. Quality strings
    of FASTQ records are dropped.

    Args:
        filepath: Path to FASTA file (.fasta, .fa, .fna, or .gz), or "-"
        uppercase: Convert sequences to uppercase

    Yields:
        FastaRecord objects

    Example:
        >>> for record in read_fasta("sequences.fasta"):
        ...     print(f"{record.id}: {len(record)} bp")
    """
    with RecordReader.open(filepath) as reader:
        for record in reader:
            yield FastaRecord.from_record(record, uppercase=uppercase)


def parse_fasta_string(
    content: str,
    uppercase: bool = False
) -> Iterator[FastaRecord]:
    """
    Parse FASTA format from a string.

    Args:
        content: FASTA formatted string
        uppercase: Convert sequences to uppercase

    Yields:
        FastaRecord objects
    """
    reader = RecordReader(io.BytesIO(content.encode()))
    for record in reader:
        yield FastaRecord.from_record(record, uppercase=uppercase)


def write_fasta(
    records: Union[FastaRecord, List[FastaRecord], Iterator[FastaRecord]],
    filepath: Union[str, Path],
    line_width: int = DEFAULT_LINE_WIDTH,
    compress: bool = False
) -> None:
    """
    Write sequences to a FASTA file.

    Args:
        records: Single record or iterable of FastaRecord objects
        filepath: Output file path, or "-" for stdout
        line_width: Number of characters per sequence line
        compress: If True, write gzip-compressed file

    Example:
        >>> records = [FastaRecord("seq1", "ACGT", "example")]
        >>> write_fasta(records, "output.fasta")
    """
    if isinstance(records, FastaRecord):
        records = [records]

    if str(filepath) != "-":
        filepath = Path(filepath)
        if compress and not filepath.suffix == ".gz":
            filepath = Path(str(filepath) + ".gz")
        compress = compress or filepath.suffix == ".gz"

    handle = xzopen(filepath, "wb") if compress else xopen(filepath, "wb")
    try:
        for record in records:
            xwrite(handle, (record.to_fasta(line_width) + "\n").encode())
    finally:
        xclose(handle)


def load_fasta_dict(
    filepath: Union[str, Path],
    uppercase: bool = False
) -> Dict[str, str]:
    """
    Load FASTA file as dictionary mapping IDs to sequences.

    Args:
        filepath: Path to FASTA file
        uppercase: Convert sequences to uppercase

    Returns:
        Dictionary mapping sequence IDs to sequences
    """
    return {
        record.id: record.sequence
        for record in read_fasta(filepath, uppercase=uppercase)
    }
