"""
Command line entry point: `seqstream stats` and `seqstream convert`.
"""

import logging
import pathlib
from typing import List

import click
import numpy as np

from seqstream.core import RecordReader, ResultKind, SequenceRecord, TruncatedQualityError
from seqstream.io.fasta import DEFAULT_LINE_WIDTH
from seqstream.utils.files import xclose, xopen, xwrite, xzopen
from seqstream.utils.timer import cputime, realtime

logger = logging.getLogger(__name__)


def n50(lengths: np.ndarray) -> int:
    """Length L such that records of length >= L cover half of all bases."""
    if not len(lengths):
        return 0
    ordered = np.sort(lengths)[::-1]
    covered = np.cumsum(ordered)
    return int(ordered[np.searchsorted(covered, covered[-1] / 2)])


def _format_record(record: SequenceRecord, fasta: bool, line_width: int) -> bytes:
    header = record.name.value
    if record.comment:
        header += b" " + record.comment.value
    sequence = record.sequence.value
    if record.has_quality and not fasta:
        return b"@" + header + b"\n" + sequence + b"\n+\n" + record.quality.value + b"\n"
    if line_width > 0:
        lines = [sequence[i:i + line_width] for i in range(0, len(sequence), line_width)]
    else:
        lines = [sequence]
    return b">" + header + b"\n" + b"".join(line + b"\n" for line in lines if line)


@click.group()
@click.option("-v", "--verbose", count=True, help="increase log verbosity (-v info, -vv debug)")
def main(verbose):
    level = logging.WARNING - 10 * min(verbose, 2)
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@main.command()
@click.argument("inputs", nargs=-1, required=True, type=click.Path(path_type=pathlib.Path, allow_dash=True))
def stats(inputs: List[pathlib.Path]):
    """Print record count, base count and length summary per file."""
    click.echo("file\trecords\tbases\tmin\tmean\tmax\tN50\ttruncated")
    for path in inputs:
        t_real, t_cpu = realtime(), cputime()
        lengths = []
        truncated = 0
        with RecordReader.open(path) as reader:
            while True:
                result = reader.read()
                if result.kind is ResultKind.END_OF_STREAM:
                    break
                if result.kind is ResultKind.TRUNCATED_QUALITY:
                    truncated += 1
                    logger.warning(
                        f"{path}: record {reader.record.name.decode()!r} has "
                        f"{result.quality_length} quality bytes for {result.sequence_length} bases"
                    )
                    continue
                lengths.append(result.length)

        arr = np.asarray(lengths, dtype=np.int64)
        if len(arr):
            summary = f"{arr.min()}\t{arr.mean():.2f}\t{arr.max()}\t{n50(arr)}"
        else:
            summary = "0\t0.00\t0\t0"
        click.echo(f"{path}\t{len(arr)}\t{int(arr.sum())}\t{summary}\t{truncated}")
        logger.info(
            f"{path}: {len(arr)} records in {realtime() - t_real:.3f} s real, "
            f"{cputime() - t_cpu:.3f} s CPU"
        )


@main.command()
@click.argument("input_path", type=click.Path(path_type=pathlib.Path, allow_dash=True))
@click.argument("output_path", type=click.Path(path_type=pathlib.Path, allow_dash=True))
@click.option("--fasta", is_flag=True, default=False, help="drop quality strings and write FASTA")
@click.option(
    "--line-width",
    type=click.INT,
    default=DEFAULT_LINE_WIDTH,
    help="wrap FASTA sequence lines; 0 disables wrapping",
)
def convert(input_path, output_path, fasta, line_width):
    """Re-write INPUT_PATH to OUTPUT_PATH (gzip if it ends in .gz)."""
    compress = output_path.suffix == ".gz"
    out = xzopen(output_path, "wb") if compress else xopen(output_path, "wb")
    count = 0
    try:
        with RecordReader.open(input_path) as reader:
            for record in reader:
                xwrite(out, _format_record(record, fasta, line_width))
                count += 1
    except TruncatedQualityError as e:
        raise click.ClickException(str(e))
    finally:
        xclose(out)
    logger.info(f"Wrote {count} records to {output_path}")


if __name__ == "__main__":
    main()
