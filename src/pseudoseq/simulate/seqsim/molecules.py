"""
Molecule pool and library preparation transforms

Every transform takes a pool and returns a new pool; the input is never
modified and no bases are materialized:
- amplify: duplicate (a subset of) molecules
- fragment: shear molecules into smaller pieces
- tag: attach random molecular tags
- subsample / subsample_coverage: draw molecules without replacement
- select: keep molecules matching a predicate
- flip: reverse the read direction of every molecule
"""

import logging
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .coverage import needed_sample_size
from .errors import OversampleError
from .models import SequencingView, Strand, extract_sequence, summarize_lengths
from .randomness import get_rng

logger = logging.getLogger(__name__)

ViewPredicate = Callable[[SequencingView], bool]


class MoleculePool:
    """
    A population of DNA molecules, each a view over the genome.

    The order of views is irrelevant for coverage but fixes the outcome of
    seeded random transforms.
    """

    __slots__ = ("genome", "views")

    def __init__(self, genome, views: Sequence[SequencingView]):
        self.genome = genome
        self.views: Tuple[SequencingView, ...] = tuple(views)

    def __len__(self) -> int:
        return len(self.views)

    def __iter__(self) -> Iterator[SequencingView]:
        return iter(self.views)

    def __getitem__(self, i: int) -> SequencingView:
        return self.views[i]

    def __repr__(self) -> str:
        return f"MoleculePool({len(self)} molecules)"

    def sequence(self, i: int) -> str:
        """Bases of the i-th molecule"""
        return extract_sequence(self.genome, self.views[i])

    @property
    def total_length(self) -> int:
        return sum(v.length for v in self.views)

    def summary(self) -> str:
        mx, av, mn = summarize_lengths(self.views)
        return (
            f"Molecules: {len(self)}, "
            f"Length: {mn}-{mx}bp (mean {av:.0f}bp)"
        )


def seed(genome, ncopies: int = 1) -> MoleculePool:
    """
    Starting pool: ``ncopies`` full length forward molecules per sequence.

    Args:
        genome: GenomeStore (or any sequence of strings)
        ncopies: copies of each genome sequence

    Returns:
        MoleculePool
    """
    if ncopies < 1:
        raise ValueError(f"ncopies must be >= 1, got {ncopies}")
    views = []
    for seqid, seq in enumerate(genome):
        if len(seq) == 0:
            logger.warning(f"Skipping empty sequence {seqid}")
            continue
        views.extend([SequencingView(seqid, 1, len(seq))] * ncopies)
    pool = MoleculePool(genome, views)
    logger.info(f"Seeded pool with {len(pool)} molecules ({ncopies} per sequence)")
    return pool


def _log_transform(name: str, before: MoleculePool, after: MoleculePool) -> None:
    logger.info(f"{name}: {len(before)} -> {len(after)} molecules")


# =============================================================================
# Transforms
# =============================================================================

def amplify(
    pool: MoleculePool,
    n: int,
    predicate: Optional[ViewPredicate] = None
) -> MoleculePool:
    """
    Amplify molecules.

    Each molecule for which ``predicate`` holds is present ``n`` times in the
    result (the copies directly follow each other); other molecules are kept
    once. Without a predicate every molecule is amplified.

    Args:
        pool: input pool
        n: copies per amplified molecule (>= 1)
        predicate: selects the molecules to amplify

    Returns:
        new MoleculePool
    """
    if n < 1:
        raise ValueError(f"Amplification factor must be >= 1, got {n}")
    views: List[SequencingView] = []
    for v in pool.views:
        if predicate is None or predicate(v):
            views.extend([v] * n)
        else:
            views.append(v)
    result = MoleculePool(pool.genome, views)
    _log_transform(f"amplify(x{n})", pool, result)
    return result


def _fragment_view(
    v: SequencingView,
    meansize: int,
    rng: np.random.Generator
) -> List[SequencingView]:
    """Tile one view with fragments of exponentially distributed length"""
    frags = []
    start = v.start
    while True:
        remaining = v.stop - start + 1
        size = max(1, int(round(rng.exponential(meansize))))
        if size >= remaining:
            frags.append(SequencingView(v.seqid, start, v.stop, v.strand, v.tag))
            break
        frags.append(SequencingView(v.seqid, start, start + size - 1, v.strand, v.tag))
        start += size
    return frags


def fragment(
    pool: MoleculePool,
    meansize: int,
    rng: Optional[np.random.Generator] = None
) -> MoleculePool:
    """
    Shear every molecule into fragments.

    Fragment lengths are drawn from an exponential distribution with mean
    ``meansize`` (rounded, at least 1bp). The fragments of a molecule tile it
    exactly, in genome order, and keep its strand and tag. A molecule shorter
    than the first drawn length stays whole.

    Args:
        pool: input pool
        meansize: mean fragment length (bp)
        rng: random generator

    Returns:
        new MoleculePool
    """
    if meansize < 1:
        raise ValueError(f"Mean fragment size must be >= 1, got {meansize}")
    rng = get_rng(rng)
    views: List[SequencingView] = []
    for v in pool.views:
        views.extend(_fragment_view(v, meansize, rng))
    result = MoleculePool(pool.genome, views)
    _log_transform(f"fragment(mean {meansize}bp)", pool, result)
    return result


def tag(
    pool: MoleculePool,
    ntags: int,
    rng: Optional[np.random.Generator] = None
) -> MoleculePool:
    """
    Give every molecule a tag drawn uniformly from 1..ntags.

    Args:
        pool: input pool
        ntags: number of distinct tags
        rng: random generator

    Returns:
        new MoleculePool
    """
    if ntags < 1:
        raise ValueError(f"Number of tags must be >= 1, got {ntags}")
    rng = get_rng(rng)
    tags = rng.integers(1, ntags + 1, size=len(pool))
    views = [v.with_tag(int(t)) for v, t in zip(pool.views, tags)]
    result = MoleculePool(pool.genome, views)
    logger.info(f"tag: {len(result)} molecules with {ntags} possible tags")
    return result


def subsample(
    pool: MoleculePool,
    nsamples: int,
    rng: Optional[np.random.Generator] = None
) -> MoleculePool:
    """
    Draw ``nsamples`` molecules without replacement.

    Sampled molecules keep their relative order from the input pool.

    Raises:
        OversampleError: if nsamples exceeds the pool size
    """
    if nsamples < 0:
        raise ValueError(f"Number of samples must be >= 0, got {nsamples}")
    if nsamples > len(pool):
        raise OversampleError(nsamples, len(pool))
    rng = get_rng(rng)
    idx = np.sort(rng.choice(len(pool), size=nsamples, replace=False))
    result = MoleculePool(pool.genome, [pool.views[i] for i in idx])
    _log_transform("subsample", pool, result)
    return result


def subsample_coverage(
    pool: MoleculePool,
    coverage: Union[int, float],
    readlen: Union[int, Sequence[int]],
    rng: Optional[np.random.Generator] = None
) -> MoleculePool:
    """
    Subsample enough molecules to reach an expected sequencing coverage.

    Args:
        pool: input pool
        coverage: target coverage (X)
        readlen: read length, or (forward, reverse) lengths for paired reads
        rng: random generator

    Raises:
        OversampleError: if the pool holds fewer molecules than needed
    """
    needed = needed_sample_size(coverage, sum(len(s) for s in pool.genome), readlen)
    logger.info(f"{coverage}X coverage needs {needed} molecules")
    if needed > len(pool):
        raise OversampleError(
            needed, len(pool),
            context=f"{coverage}X coverage with read length {readlen}"
        )
    return subsample(pool, needed, rng=rng)


def select(pool: MoleculePool, predicate: ViewPredicate) -> MoleculePool:
    """Keep the molecules for which ``predicate`` holds"""
    result = MoleculePool(pool.genome, [v for v in pool.views if predicate(v)])
    _log_transform("select", pool, result)
    return result


def flip(pool: MoleculePool) -> MoleculePool:
    """Reverse the read direction of every molecule"""
    return MoleculePool(pool.genome, [v.flipped() for v in pool.views])


def is_forward(v: SequencingView) -> bool:
    return v.strand is Strand.FORWARD


def is_tagged(v: SequencingView) -> bool:
    return v.tag is not None
