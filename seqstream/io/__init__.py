"""
Sequence file I/O built on the streaming record reader.

This module provides functions for reading and writing common
genomic file formats:
- FASTA: Sequence storage format
- FASTQ: Sequence + quality scores (NGS data)
"""

from seqstream.io.fasta import (
    read_fasta,
    write_fasta,
    FastaRecord,
    parse_fasta_string,
    load_fasta_dict,
)

from seqstream.io.fastq import (
    read_fastq,
    read_fastx,
    write_fastq,
    FastqRecord,
    filter_by_quality,
    paired_end_reader,
    quality_scores,
    quality_to_phred,
    phred_to_quality,
)

__all__ = [
    "read_fasta",
    "write_fasta",
    "FastaRecord",
    "parse_fasta_string",
    "load_fasta_dict",
    "read_fastq",
    "read_fastx",
    "write_fastq",
    "FastqRecord",
    "filter_by_quality",
    "paired_end_reader",
    "quality_scores",
    "quality_to_phred",
    "phred_to_quality",
]
