"""
FASTQ file format reader and writer.

FASTQ is a text-based format for storing nucleotide sequences
along with quality scores. Each record consists of:
1. Header line starting with '@' followed by sequence ID
2. Sequence line(s)
3. '+' line (optionally followed by the ID again)
4. Quality line(s) (ASCII-encoded Phred scores), as many characters
   as the sequence has bases
"""

import itertools
import numpy as np
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from seqstream.core import RecordReader, SequenceRecord
from seqstream.io.fasta import FastaRecord
from seqstream.utils.files import xclose, xopen, xwrite, xzopen

# Phred quality score encoding offsets
PHRED33_OFFSET = 33  # Sanger/Illumina 1.8+
PHRED64_OFFSET = 64  # Illumina 1.3-1.7


def quality_scores(quality: Union[str, bytes], offset: int = PHRED33_OFFSET) -> np.ndarray:
    """
    Convert an encoded quality string to numeric Phred scores.

    Args:
        quality: ASCII-encoded quality string or bytes
        offset: ASCII offset (33 for Phred+33, 64 for Phred+64)

    Returns:
        numpy array of integer quality scores
    """
    if isinstance(quality, str):
        quality = quality.encode("ascii")
    return np.frombuffer(quality, dtype=np.uint8).astype(np.int32) - offset


@dataclass
class FastqRecord:
    """
    Represents a single FASTQ record.

    Attributes:
        id: Sequence identifier
        sequence: The nucleotide sequence
        quality: Quality string (ASCII-encoded)
        description: Optional description after the ID
    """
    id: str
    sequence: str
    quality: str
    description: str = ""

    def __len__(self) -> int:
        return len(self.sequence)

    def __str__(self) -> str:
        header = f"@{self.id}"
        if self.description:
            header += f" {self.description}"
        return f"{header}\n{self.sequence}\n+\n{self.quality}"

    @classmethod
    def from_record(cls, record: SequenceRecord, uppercase: bool = False) -> "FastqRecord":
        """Copy the current content of a reusable record."""
        sequence = record.sequence.decode()
        return cls(
            id=record.name.decode(),
            sequence=sequence.upper() if uppercase else sequence,
            quality=record.quality.decode(),
            description=record.comment.decode()
        )

    def to_fasta_record(self) -> FastaRecord:
        return FastaRecord(id=self.id, sequence=self.sequence, description=self.description)

    def quality_scores(self, offset: int = PHRED33_OFFSET) -> np.ndarray:
        """
        Convert quality string to numeric Phred scores.

        Args:
            offset: ASCII offset (33 for Phred+33, 64 for Phred+64)

        Returns:
            numpy array of integer quality scores
        """
        return quality_scores(self.quality, offset)

    def mean_quality(self, offset: int = PHRED33_OFFSET) -> float:
        """Calculate mean quality score."""
        scores = self.quality_scores(offset)
        return float(np.mean(scores)) if len(scores) else 0.0

    def error_probabilities(self, offset: int = PHRED33_OFFSET) -> np.ndarray:
        """
        Convert quality scores to error probabilities.

        P(error) = 10^(-Q/10)

        Returns:
            numpy array of error probabilities
        """
        scores = self.quality_scores(offset)
        return np.power(10.0, -scores / 10)

    def trim_quality(
        self,
        min_quality: int = 20,
        offset: int = PHRED33_OFFSET,
        window_size: int = 4
    ) -> "FastqRecord":
        """
        Trim low-quality bases from the 3' end.

        Uses a sliding window approach to find where quality drops.

        Args:
            min_quality: Minimum average quality in window
            offset: Phred offset
            window_size: Size of sliding window

        Returns:
            New FastqRecord with trimmed sequence
        """
        scores = self.quality_scores(offset)

        # Find trim position
        trim_pos = len(scores)
        for i in range(len(scores) - window_size, -1, -1):
            window_mean = np.mean(scores[i:i + window_size])
            if window_mean >= min_quality:
                trim_pos = i + window_size
                break
            trim_pos = i

        return FastqRecord(
            id=self.id,
            sequence=self.sequence[:trim_pos],
            quality=self.quality[:trim_pos],
            description=self.description
        )


def quality_to_phred(quality_string: str, offset: int = PHRED33_OFFSET) -> List[int]:
    """
    Convert quality string to Phred scores.

    Args:
        quality_string: ASCII-encoded quality string
        offset: Phred offset (33 or 64)

    Returns:
        List of integer Phred scores
    """
    return [ord(c) - offset for c in quality_string]


def phred_to_quality(phred_scores: List[int], offset: int = PHRED33_OFFSET) -> str:
    """
    Convert Phred scores to quality string.

    Args:
        phred_scores: List of integer Phred scores
        offset: Phred offset (33 or 64)

    Returns:
        ASCII-encoded quality string
    """
    return "".join(chr(score + offset) for score in phred_scores)


def read_fastq(
    filepath: Union[str, Path],
    uppercase: bool = False
) -> Iterator[FastqRecord]:
    """
    Read sequences from a FASTQ file.

    Supports both plain text and gzip-compressed files, and sequence
    and quality strings wrapped over several lines.

    Args:
        filepath: Path to FASTQ file (.fastq, .fq, or .gz), or "-"
        uppercase: Convert sequences to uppercase

    Yields:
        FastqRecord objects

    Raises:
        TruncatedQualityError: If a record's quality length differs from
            its sequence length
        ValueError: If a record has no quality section

    Example:
        >>> for record in read_fastq("reads.fastq.gz"):
        ...     if record.mean_quality() > 20:
        ...         print(record.id)
    """
    with RecordReader.open(filepath) as reader:
        for record in reader:
            if not record.has_quality:
                raise ValueError(f"Invalid FASTQ record without quality: {record.name.decode()}")
            yield FastqRecord.from_record(record, uppercase=uppercase)


def read_fastx(
    filepath: Union[str, Path],
    uppercase: bool = False
) -> Iterator[Union[FastaRecord, FastqRecord]]:
    """
    Read a file that may mix FASTA and FASTQ records.

    Yields:
        FastqRecord for records with a quality section, FastaRecord otherwise
    """
    with RecordReader.open(filepath) as reader:
        for record in reader:
            if record.has_quality:
                yield FastqRecord.from_record(record, uppercase=uppercase)
            else:
                yield FastaRecord.from_record(record, uppercase=uppercase)


def write_fastq(
    records: Union[FastqRecord, List[FastqRecord], Iterator[FastqRecord]],
    filepath: Union[str, Path],
    compress: bool = False
) -> None:
    """
    Write sequences to a FASTQ file.

    Args:
        records: Single record or iterable of FastqRecord objects
        filepath: Output file path, or "-" for stdout
        compress: If True, write gzip-compressed file

    Example:
        >>> records = [FastqRecord("read1", "ACGT", "IIII")]
        >>> write_fastq(records, "output.fastq")
    """
    if isinstance(records, FastqRecord):
        records = [records]

    if str(filepath) != "-":
        filepath = Path(filepath)
        if compress and not filepath.suffix == ".gz":
            filepath = Path(str(filepath) + ".gz")
        compress = compress or filepath.suffix == ".gz"

    handle = xzopen(filepath, "wb") if compress else xopen(filepath, "wb")
    try:
        for record in records:
            xwrite(handle, (str(record) + "\n").encode())
    finally:
        xclose(handle)


def filter_by_quality(
    records: Iterator[FastqRecord],
    min_mean_quality: float = 20.0,
    min_length: int = 0,
    offset: int = PHRED33_OFFSET
) -> Iterator[FastqRecord]:
    """
    Filter FASTQ records by quality and length.

    Args:
        records: Iterator of FastqRecord objects
        min_mean_quality: Minimum mean quality score
        min_length: Minimum sequence length
        offset: Phred offset for quality calculation

    Yields:
        FastqRecord objects passing the filters
    """
    for record in records:
        if len(record) < min_length:
            continue
        if record.mean_quality(offset) < min_mean_quality:
            continue
        yield record


def paired_end_reader(
    filepath1: Union[str, Path],
    filepath2: Union[str, Path],
    uppercase: bool = False
) -> Iterator[Tuple[FastqRecord, FastqRecord]]:
    """
    Read paired-end FASTQ files simultaneously.

    Each file gets its own reader and record, so the two streams keep
    independent parser positions.

    Args:
        filepath1: Path to R1 (forward) reads
        filepath2: Path to R2 (reverse) reads
        uppercase: Convert sequences to uppercase

    Yields:
        Tuples of (R1 record, R2 record)

    Raises:
        ValueError: If one file runs out of reads before the other
    """
    r1_reader = read_fastq(filepath1, uppercase)
    r2_reader = read_fastq(filepath2, uppercase)

    missing = object()
    for r1, r2 in itertools.zip_longest(r1_reader, r2_reader, fillvalue=missing):
        if r1 is missing or r2 is missing:
            shorter, other = (filepath1, r2) if r1 is missing else (filepath2, r1)
            raise ValueError(
                f"Paired files differ in length: {shorter} ended before read '{other.id}'"
            )
        yield (r1, r2)
