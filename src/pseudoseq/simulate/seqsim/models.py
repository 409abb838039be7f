"""
Core data structures

Design:
1. A view describes an interval of a genome sequence and never holds bases
2. Coordinates are 1-based and inclusive, start <= stop always
3. Orientation is an explicit Strand rather than an ordering of the ends
"""

from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from .errors import InvalidIntervalError
from .seq_utils import reverse_complement


class Strand(Enum):
    """Read direction of a view"""
    FORWARD = "+"
    REVERSE = "-"

    def opposite(self) -> "Strand":
        return Strand.REVERSE if self is Strand.FORWARD else Strand.FORWARD


class Pairing(Enum):
    """Read layout"""
    PAIRED = "paired"
    UNPAIRED = "unpaired"


# =============================================================================
# Views
# =============================================================================

@dataclass(frozen=True)
class SequencingView:
    """
    An interval on one genome sequence.

    Attributes:
        seqid: 0-based index of the sequence in the genome store
        start: first covered position (1-based)
        stop: last covered position (1-based, inclusive)
        strand: direction in which the bases are read
        tag: molecular tag id, None if untagged
    """
    seqid: int
    start: int
    stop: int
    strand: Strand = Strand.FORWARD
    tag: Optional[int] = None

    def __post_init__(self):
        if self.start < 1:
            raise InvalidIntervalError(self.seqid, self.start, self.stop, "start < 1")
        if self.start > self.stop:
            raise InvalidIntervalError(self.seqid, self.start, self.stop, "start > stop")

    @property
    def length(self) -> int:
        return self.stop - self.start + 1

    @property
    def is_reverse(self) -> bool:
        return self.strand is Strand.REVERSE

    @property
    def first(self) -> int:
        """Position of the first base read"""
        return self.stop if self.is_reverse else self.start

    @property
    def last(self) -> int:
        """Position of the last base read"""
        return self.start if self.is_reverse else self.stop

    def flipped(self) -> "SequencingView":
        return replace(self, strand=self.strand.opposite())

    def with_tag(self, tag: Optional[int]) -> "SequencingView":
        return replace(self, tag=tag)

    def subview(
        self,
        offset: int,
        length: int,
        strand: Optional[Strand] = None
    ) -> "SequencingView":
        """
        ``length`` bases starting ``offset`` bases into the view, in read direction.

        Raises:
            InvalidIntervalError: if the bases do not lie within this view
        """
        if offset < 0 or length < 1 or offset + length > self.length:
            raise InvalidIntervalError(
                self.seqid, self.start, self.stop,
                f"no {length}bp subview at offset {offset}"
            )
        if self.is_reverse:
            stop = self.stop - offset
            start = stop - length + 1
        else:
            start = self.start + offset
            stop = start + length - 1
        return replace(self, start=start, stop=stop, strand=strand or self.strand)

    def head(self, length: int, strand: Optional[Strand] = None) -> "SequencingView":
        """
        The first ``length`` bases in read direction.

        Args:
            length: number of bases, must not exceed the view length
            strand: strand of the new view (default: this view's strand)
        """
        return self.subview(0, length, strand)

    def tail(self, length: int, strand: Optional[Strand] = None) -> "SequencingView":
        """The last ``length`` bases in read direction"""
        return self.subview(self.length - length, length, strand)


@dataclass(frozen=True)
class Substitution:
    """A single base sequencing error, ``pos`` is 1-based within the read"""
    pos: int
    base: str


def check_view(genome: Sequence[str], view: SequencingView) -> None:
    """Raise InvalidIntervalError if the view does not fit its genome sequence"""
    if not 0 <= view.seqid < len(genome):
        raise InvalidIntervalError(view.seqid, view.start, view.stop, "unknown sequence id")
    seqlen = len(genome[view.seqid])
    if view.stop > seqlen:
        raise InvalidIntervalError(
            view.seqid, view.start, view.stop, f"sequence length is {seqlen}"
        )


def extract_sequence(genome: Sequence[str], view: SequencingView) -> str:
    """
    Materialize the bases of a view.

    Args:
        genome: indexable collection of sequences (e.g. GenomeStore)
        view: the view

    Returns:
        bases in read direction (reverse complemented for reverse views)
    """
    check_view(genome, view)
    seq = genome[view.seqid]
    sub = seq[view.start - 1:view.stop]
    if view.is_reverse:
        sub = reverse_complement(sub)
    return sub


# =============================================================================
# Summaries
# =============================================================================

def summarize_lengths(views: Iterable[SequencingView]) -> Tuple[int, float, int]:
    """
    Length statistics of a set of views.

    Returns:
        (max, mean, min); (0, 0.0, 0) for no views
    """
    lengths = [v.length for v in views]
    if not lengths:
        return 0, 0.0, 0
    return max(lengths), sum(lengths) / len(lengths), min(lengths)


def summarize_tags(views: Iterable[SequencingView]) -> Counter:
    """Number of views carrying each tag (untagged views are not counted)"""
    return Counter(v.tag for v in views if v.tag is not None)
