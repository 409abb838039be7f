"""
Reference genome store

Loaded once and shared read-only by every pool and read set derived from it.
"""

import collections.abc
import logging
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple, Union

from .io_utils import parse_fasta, validate_sequence

logger = logging.getLogger(__name__)


class GenomeStore(collections.abc.Sequence):
    """
    Ordered, immutable collection of reference sequences.

    Sequence ids are the 0-based position of a record in the store.
    """

    __slots__ = ("_names", "_sequences")

    def __init__(self, names: Sequence[str], sequences: Sequence[str]):
        if len(names) != len(sequences):
            raise ValueError(
                f"Got {len(names)} names for {len(sequences)} sequences"
            )
        self._names: Tuple[str, ...] = tuple(names)
        self._sequences: Tuple[str, ...] = tuple(sequences)

    @classmethod
    def from_sequences(
        cls,
        sequences: Sequence[str],
        names: Optional[Sequence[str]] = None
    ) -> "GenomeStore":
        """Build a store from in-memory sequences (names default to seq_<n>)"""
        if names is None:
            names = [f"seq_{i + 1}" for i in range(len(sequences))]
        seqs = [validate_sequence(s, n) for n, s in zip(names, sequences)]
        return cls(names, seqs)

    @classmethod
    def from_fasta(cls, path: Union[str, Path]) -> "GenomeStore":
        """Load every record of a (optionally gzipped) FASTA file"""
        records = parse_fasta(path)
        if not records:
            raise ValueError(f"No sequences found in {path}")
        names = [name for name, _ in records]
        seqs = [seq for _, seq in records]
        store = cls(names, seqs)
        logger.info(
            f"Loaded {len(store)} sequences, total length: {store.total_length:,} bp"
        )
        return store

    def __len__(self) -> int:
        return len(self._sequences)

    def __getitem__(self, seqid):
        return self._sequences[seqid]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sequences)

    def __repr__(self) -> str:
        return f"GenomeStore({len(self)} sequences, {self.total_length} bp)"

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def lengths(self) -> Tuple[int, ...]:
        return tuple(len(s) for s in self._sequences)

    @property
    def total_length(self) -> int:
        return sum(len(s) for s in self._sequences)
