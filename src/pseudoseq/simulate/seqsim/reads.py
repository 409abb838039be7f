"""
Read generation

Implements:
- paired-end reads from both ends of each molecule
- single-end reads from a random end of each molecule
- substitution (sequencing error) editing

Molecules too short for the requested read lengths are skipped.
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np

from .models import (
    Pairing, SequencingView, Substitution,
    extract_sequence, summarize_lengths
)
from .molecules import MoleculePool
from .randomness import get_rng

logger = logging.getLogger(__name__)

SubstitutionMap = Dict[int, List[Substitution]]
SubstitutionEditor = Callable[[List[Substitution], str], object]


@dataclass(frozen=True)
class Reads:
    """
    Reads derived from a molecule pool.

    For paired reads views alternate R1, R2: ``views[2k]`` and
    ``views[2k + 1]`` are the mates of pair k.

    Attributes:
        pairing: paired or unpaired layout
        genome: genome shared with the source pool
        views: one view per read
        substitutions: index into ``views`` -> substitutions of that read,
            absent if none. Keys are 0-based so ``substitutions[i]`` belongs
            to ``views[i]``; the 1-based coordinate is Substitution.pos
    """
    pairing: Pairing
    genome: object
    views: Tuple[SequencingView, ...]
    substitutions: SubstitutionMap = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.views)

    @property
    def nreads(self) -> int:
        return len(self.views)

    @property
    def is_paired(self) -> bool:
        return self.pairing is Pairing.PAIRED

    @property
    def nsubstitutions(self) -> int:
        return sum(len(s) for s in self.substitutions.values())

    def reference_sequence(self, i: int) -> str:
        """Bases of read i without sequencing errors"""
        return extract_sequence(self.genome, self.views[i])

    def sequence(self, i: int) -> str:
        """Bases of read i with its substitutions applied"""
        seq = self.reference_sequence(i)
        subs = self.substitutions.get(i)
        if not subs:
            return seq
        bases = list(seq)
        for sub in subs:
            bases[sub.pos - 1] = sub.base
        return "".join(bases)

    def pairs(self) -> Iterator[Tuple[SequencingView, SequencingView]]:
        """(R1, R2) view tuples of paired reads"""
        if not self.is_paired:
            raise ValueError("Reads are not paired")
        return zip(self.views[0::2], self.views[1::2])

    def substitution_hist(self) -> np.ndarray:
        """Number of substitutions at each read position (index 0 = position 1)"""
        mx, _, _ = summarize_lengths(self.views)
        hist = np.zeros(mx, dtype=np.int64)
        for subs in self.substitutions.values():
            for sub in subs:
                hist[sub.pos - 1] += 1
        return hist

    def summary(self) -> str:
        mx, av, mn = summarize_lengths(self.views)
        return (
            f"{self.nreads} {self.pairing.value} reads, "
            f"Length: {mn}-{mx}bp (mean {av:.1f}bp), "
            f"Errors: {self.nsubstitutions}"
        )


# =============================================================================
# Read derivation
# =============================================================================

def paired_reads(pool: MoleculePool, flen: int, rlen: Optional[int] = None) -> Reads:
    """
    Paired-end reads from a pool of molecules.

    R1 covers the first ``flen`` bases of a molecule in its read direction;
    R2 covers the last ``rlen`` bases, read in the opposite direction.
    Molecules shorter than ``flen + rlen`` are skipped, so mates never
    overlap.

    Args:
        pool: molecule pool
        flen: forward (R1) read length
        rlen: reverse (R2) read length, defaults to flen

    Returns:
        paired Reads
    """
    if rlen is None:
        rlen = flen
    if flen < 1 or rlen < 1:
        raise ValueError(f"Read lengths must be >= 1, got {flen}, {rlen}")
    views: List[SequencingView] = []
    skipped = 0
    for v in pool.views:
        if v.length < flen + rlen:
            skipped += 1
            continue
        views.append(v.head(flen))
        views.append(v.tail(rlen, strand=v.strand.opposite()))
    _log_skipped(skipped, len(pool))
    logger.info(f"Generated {len(views) // 2} read pairs ({flen}+{rlen}bp)")
    return Reads(Pairing.PAIRED, pool.genome, tuple(views), {})


def unpaired_reads(
    pool: MoleculePool,
    length: Optional[int] = None,
    rng: Optional[np.random.Generator] = None
) -> Reads:
    """
    Single-end reads from a pool of molecules.

    Each molecule is read from one of its two ends, chosen with equal
    probability. Without ``length`` the whole molecule is read; otherwise
    molecules shorter than ``length`` are skipped.

    Args:
        pool: molecule pool
        length: read length, None to read whole molecules
        rng: random generator

    Returns:
        unpaired Reads
    """
    if length is not None and length < 1:
        raise ValueError(f"Read length must be >= 1, got {length}")
    rng = get_rng(rng)
    views: List[SequencingView] = []
    skipped = 0
    for v in pool.views:
        if length is not None and v.length < length:
            skipped += 1
            continue
        from_start = rng.random() < 0.5
        n = v.length if length is None else length
        if from_start:
            views.append(v.head(n))
        else:
            views.append(v.tail(n, strand=v.strand.opposite()))
    _log_skipped(skipped, len(pool))
    logger.info(f"Generated {len(views)} single-end reads")
    return Reads(Pairing.UNPAIRED, pool.genome, tuple(views), {})


def _log_skipped(skipped: int, total: int) -> None:
    if skipped:
        logger.info(f"Skipped {skipped}/{total} molecules too short for the read length")


# =============================================================================
# Substitutions
# =============================================================================

def edit_substitutions_inplace(f: SubstitutionEditor, reads: Reads) -> Reads:
    """
    Add or remove substitutions of every read, modifying ``reads``.

    ``f`` receives the read's substitution list (edited in place) and the
    read's reference bases. Reads left without substitutions are dropped
    from the map.

    Single writer only: callers sharing a Reads value across threads must
    synchronize around this function.
    """
    subs = reads.substitutions
    buf: List[Substitution] = []
    for i in range(reads.nreads):
        readseq = reads.reference_sequence(i)
        readsubs = subs.get(i, buf)
        f(readsubs, readseq)
        if not readsubs:
            subs.pop(i, None)
        elif readsubs is buf:
            subs[i] = buf
            buf = []
        else:
            subs[i] = readsubs
    logger.info(f"Reads now carry {reads.nsubstitutions} substitutions")
    return reads


def edit_substitutions(f: SubstitutionEditor, reads: Reads) -> Reads:
    """
    Add or remove substitutions, returning new Reads.

    The substitution map is deep-copied so ``reads`` is left untouched.
    See edit_substitutions_inplace for the contract of ``f``.
    """
    new = replace(reads, substitutions=copy.deepcopy(reads.substitutions))
    return edit_substitutions_inplace(f, new)
