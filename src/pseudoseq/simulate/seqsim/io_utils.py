"""
Input/output utilities

- FASTA reading
- FASTQ writing (single file, interleaved or split R1/R2)
"""

import gzip
import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Tuple, Union

import numpy as np

from .models import summarize_tags
from .seq_utils import quality_string, random_bases, unique_kmers

logger = logging.getLogger(__name__)

VALID_BASES = set('ACGTN')

# Length of the synthetic barcode prepended to tagged R1 reads
TAG_LENGTH = 16
# Length of the random spacer between barcode and insert
SPACER_LENGTH = 7


def validate_sequence(seq: str, seq_id: str) -> str:
    """
    Validate and clean a sequence

    Args:
        seq: sequence string
        seq_id: sequence id (for the warning message)

    Returns:
        uppercase sequence with non-ACGTN characters replaced by N
    """
    seq = seq.upper().strip()

    invalid_chars = set(seq) - VALID_BASES
    if invalid_chars:
        logger.warning(
            f"Sequence '{seq_id}' contains non-standard bases: {invalid_chars}. "
            f"These will be converted to 'N'."
        )
        seq = ''.join(c if c in VALID_BASES else 'N' for c in seq)

    return seq


def _open_text(path: Path, mode: str) -> TextIO:
    if path.suffix == '.gz':
        return gzip.open(path, mode + 't')
    return open(path, mode)


def parse_fasta(path: Union[str, Path]) -> List[Tuple[str, str]]:
    """
    Parse a FASTA file

    Supports .fa, .fasta, .fa.gz, .fasta.gz

    Args:
        path: FASTA file path

    Returns:
        list of (name, sequence) in file order
    """
    path = Path(path)
    records = []
    current_id = None
    current_seq: List[str] = []

    def _flush():
        seq = validate_sequence("".join(current_seq), current_id)
        if seq:
            records.append((current_id, seq))
        else:
            logger.warning(f"Skipping empty sequence: {current_id}")

    with _open_text(path, 'r') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            if line.startswith('>'):
                if current_id is not None:
                    _flush()
                current_id = line[1:].split()[0] if len(line) > 1 else f"seq_{len(records) + 1}"
                current_seq = []
            else:
                current_seq.append(line)

    if current_id is not None:
        _flush()

    if not records:
        logger.warning(f"No valid sequences found in {path}")

    return records


# =============================================================================
# FASTQ
# =============================================================================

class FastqWriter:
    """FASTQ record writer"""

    def __init__(self, path: Union[str, Path], compress: bool = False):
        """
        Args:
            path: output path (".gz" is appended when compressing)
            compress: gzip the output
        """
        path = Path(path)
        if compress and path.suffix != '.gz':
            path = Path(str(path) + '.gz')
        self.path = path
        self.compress = compress
        self.count = 0
        self._file: Optional[TextIO] = None

    def open(self):
        if self.compress:
            self._file = gzip.open(self.path, 'wt')
        else:
            self._file = open(self.path, 'w')

    def close(self):
        if self._file:
            self._file.close()
            self._file = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def write(self, name: str, sequence: str, quality: Optional[str] = None):
        """Write one record; quality defaults to the constant placeholder"""
        if self._file is None:
            raise RuntimeError("Writer not opened")
        if quality is None:
            quality = quality_string(len(sequence))
        self._file.write(f"@{name}\n{sequence}\n+\n{quality}\n")
        self.count += 1


def read_name(reads, i: int) -> str:
    """
    Name of read i.

    Single-end reads are named after their reference sequence (1-based
    ordinal); both mates of a pair share the name readpair_<pair number>.
    """
    if reads.is_paired:
        return f"readpair_{i // 2 + 1}"
    return f"Refseq_{reads.views[i].seqid + 1}"


def prepare_tags(
    reads,
    rng: Optional[np.random.Generator] = None
) -> Dict[int, str]:
    """Assign a distinct random barcode to every tag present in the reads"""
    tags = sorted(summarize_tags(reads.views))
    barcodes = unique_kmers(len(tags), TAG_LENGTH, rng=rng)
    return dict(zip(tags, barcodes))


def _is_tagged(reads) -> bool:
    return any(v.tag is not None for v in reads.views)


def _write_reads(
    reads,
    r1: FastqWriter,
    r2: FastqWriter,
    rng: Optional[np.random.Generator] = None
) -> int:
    """Write reads, sending R2 mates to ``r2``; returns the record count"""
    tagged = reads.is_paired and _is_tagged(reads)
    if tagged:
        tag_seqs = prepare_tags(reads, rng=rng)
        spacer = random_bases(SPACER_LENGTH, rng=rng)
    n = 0
    for i, v in enumerate(reads.views):
        seq = reads.sequence(i)
        is_r1 = not reads.is_paired or i % 2 == 0
        if tagged and is_r1 and v.tag is not None:
            seq = tag_seqs[v.tag] + spacer + seq
        writer = r1 if is_r1 else r2
        writer.write(read_name(reads, i), seq)
        n += 1
    return n


def generate(
    reads,
    path: Union[str, Path],
    compress: bool = False,
    rng: Optional[np.random.Generator] = None
):
    """
    Write reads to one FASTQ file.

    Paired reads are interleaved: R1 records are odd, R2 records even.

    Args:
        reads: Reads
        path: output path
        compress: gzip the output
        rng: random generator for tag barcodes

    Returns:
        the reads, unchanged
    """
    with FastqWriter(path, compress) as w:
        n = _write_reads(reads, w, w, rng=rng)
    logger.info(f"Wrote {n} {reads.pairing.value} reads to {w.path}")
    return reads


def generate_paired(
    reads,
    path_r1: Union[str, Path],
    path_r2: Union[str, Path],
    compress: bool = False,
    rng: Optional[np.random.Generator] = None
):
    """
    Write paired reads to separate R1 and R2 FASTQ files.

    Both files are opened together and always closed together, including
    when writing fails part way.

    Returns:
        the reads, unchanged
    """
    if not reads.is_paired:
        raise ValueError("Splitting into R1/R2 files requires paired reads")
    with ExitStack() as stack:
        w1 = stack.enter_context(FastqWriter(path_r1, compress))
        w2 = stack.enter_context(FastqWriter(path_r2, compress))
        n = _write_reads(reads, w1, w2, rng=rng)
    logger.info(f"Wrote {n} paired reads to {w1.path} and {w2.path}")
    return reads
