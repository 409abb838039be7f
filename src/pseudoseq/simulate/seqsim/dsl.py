"""
Pipeline composition

Each stage is a small immutable object holding an operator's parameters;
calling it on a pool (or reads) delegates to the operator. Stages combine
left to right with ``>>`` or Pipeline:

    protocol = Amplifier(1000) >> Fragmenter(700) >> CoverageSubSampler(50, (250, 250))
    reads = (protocol >> makereads(250, 250))(seed(genome))
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np

from . import molecules
from .io_utils import generate, generate_paired
from .reads import (
    SubstitutionEditor, edit_substitutions,
    paired_reads, unpaired_reads
)


class Stage:
    """Base class for pipeline stages"""

    def __call__(self, x):
        raise NotImplementedError

    def __rshift__(self, other: Callable) -> "Pipeline":
        return Pipeline(self, other)


class Pipeline(Stage):
    """Stages applied left to right"""

    def __init__(self, *stages: Callable):
        flat = []
        for s in stages:
            if isinstance(s, Pipeline):
                flat.extend(s.stages)
            else:
                flat.append(s)
        self.stages: Tuple[Callable, ...] = tuple(flat)

    def __call__(self, x):
        for stage in self.stages:
            x = stage(x)
        return x

    def __len__(self) -> int:
        return len(self.stages)

    def __repr__(self) -> str:
        return " >> ".join(repr(s) for s in self.stages)


@dataclass(frozen=True)
class Amplifier(Stage):
    n: int
    predicate: Optional[Callable] = None

    def __call__(self, pool):
        return molecules.amplify(pool, self.n, self.predicate)

    def __repr__(self) -> str:
        return f"Amplifier(x{self.n})"


@dataclass(frozen=True)
class Fragmenter(Stage):
    meansize: int
    rng: Optional[np.random.Generator] = None

    def __call__(self, pool):
        return molecules.fragment(pool, self.meansize, rng=self.rng)

    def __repr__(self) -> str:
        return f"Fragmenter(mean size: {self.meansize}bp)"


@dataclass(frozen=True)
class Tagger(Stage):
    ntags: int
    rng: Optional[np.random.Generator] = None

    def __call__(self, pool):
        return molecules.tag(pool, self.ntags, rng=self.rng)

    def __repr__(self) -> str:
        return f"Tagger({self.ntags} molecular tags)"


@dataclass(frozen=True)
class CountSubSampler(Stage):
    nsamples: int
    rng: Optional[np.random.Generator] = None

    def __call__(self, pool):
        return molecules.subsample(pool, self.nsamples, rng=self.rng)


@dataclass(frozen=True)
class CoverageSubSampler(Stage):
    coverage: Union[int, float]
    readlen: Union[int, Tuple[int, ...]]
    rng: Optional[np.random.Generator] = None

    def __call__(self, pool):
        return molecules.subsample_coverage(pool, self.coverage, self.readlen, rng=self.rng)

    def __repr__(self) -> str:
        return f"CoverageSubSampler({self.coverage}X, length: {self.readlen})"


@dataclass(frozen=True)
class Selector(Stage):
    predicate: Callable

    def __call__(self, pool):
        return molecules.select(pool, self.predicate)


@dataclass(frozen=True)
class Flipper(Stage):

    def __call__(self, pool):
        return molecules.flip(pool)


@dataclass(frozen=True)
class PairedReadMaker(Stage):
    flen: int
    rlen: Optional[int] = None

    def __call__(self, pool):
        return paired_reads(pool, self.flen, self.rlen)


@dataclass(frozen=True)
class UnpairedReadMaker(Stage):
    length: Optional[int] = None
    rng: Optional[np.random.Generator] = None

    def __call__(self, pool):
        return unpaired_reads(pool, self.length, rng=self.rng)


@dataclass(frozen=True)
class SubstitutionMaker(Stage):
    strategy: SubstitutionEditor

    def __call__(self, reads):
        return edit_substitutions(self.strategy, reads)

    def __repr__(self) -> str:
        return f"SubstitutionMaker({self.strategy!r})"


@dataclass(frozen=True)
class FileGenerator(Stage):
    path: Union[str, Path]
    compress: bool = False

    def __call__(self, reads):
        return generate(reads, self.path, compress=self.compress)


@dataclass(frozen=True)
class FilePairGenerator(Stage):
    path_r1: Union[str, Path]
    path_r2: Union[str, Path]
    compress: bool = False

    def __call__(self, reads):
        return generate_paired(reads, self.path_r1, self.path_r2, compress=self.compress)


def makereads(*lens: Optional[int], rng: Optional[np.random.Generator] = None) -> Stage:
    """
    Read maker for the given lengths.

    No length: whole-molecule single-end reads; one length: single-end reads;
    two lengths: paired-end reads.
    """
    if len(lens) == 1 and isinstance(lens[0], Sequence):
        lens = tuple(lens[0])
    if len(lens) == 0:
        return UnpairedReadMaker(None, rng=rng)
    if len(lens) == 1:
        return UnpairedReadMaker(lens[0], rng=rng)
    if len(lens) == 2:
        return PairedReadMaker(lens[0], lens[1])
    raise ValueError(f"Expected at most two read lengths, got {len(lens)}")
