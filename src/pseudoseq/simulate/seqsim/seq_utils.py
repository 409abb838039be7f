"""
Sequence helper functions
"""

from typing import Dict, List, Optional, Tuple
import numpy as np

from .randomness import get_rng

DNA_BASES = "ACGT"

_COMPLEMENT = str.maketrans("ACGTNacgtn", "TGCANtgcan")

# Reference base -> the three bases it may be miscalled as.
# Ambiguous bases can only be miscalled as N.
SUBSTITUTION_TABLE: Dict[str, Tuple[str, str, str]] = {
    'A': ('C', 'G', 'T'),
    'C': ('A', 'G', 'T'),
    'G': ('A', 'C', 'T'),
    'T': ('A', 'C', 'G'),
}
AMBIGUOUS_SUBSTITUTIONS: Tuple[str, str, str] = ('N', 'N', 'N')

# Placeholder Phred score written for every base
DEFAULT_QUALITY = 30


def reverse_complement(seq: str) -> str:
    """Reverse complement; bases outside ACGTN are kept as-is."""
    return seq.translate(_COMPLEMENT)[::-1]


def substitution_targets(base: str) -> Tuple[str, str, str]:
    """Bases a reference base can be substituted with"""
    return SUBSTITUTION_TABLE.get(base.upper(), AMBIGUOUS_SUBSTITUTIONS)


def random_bases(length: int, rng: Optional[np.random.Generator] = None) -> str:
    """Uniform random ACGT sequence"""
    rng = get_rng(rng)
    idx = rng.integers(0, 4, size=length)
    return "".join(DNA_BASES[i] for i in idx)


def int_to_kmer(value: int, k: int) -> str:
    """
    Decode an integer into a k-mer, two bits per base.

    The most significant base comes first, so ``int_to_kmer(0, 4) == "AAAA"``.
    """
    bases = []
    for shift in range(2 * (k - 1), -1, -2):
        bases.append(DNA_BASES[(value >> shift) & 0b11])
    return "".join(bases)


def unique_kmers(
    n: int,
    k: int = 16,
    rng: Optional[np.random.Generator] = None
) -> List[str]:
    """
    Draw ``n`` distinct random k-mers.

    Values are sampled without replacement from the lower 32 bits, which is
    plenty for molecular barcodes.

    Args:
        n: number of k-mers
        k: k-mer length
        rng: random generator

    Returns:
        list of k-mers
    """
    rng = get_rng(rng)
    space = min(4 ** k, 2 ** 32)
    if n > space:
        raise ValueError(f"Cannot draw {n} distinct {k}-mers")
    values = rng.choice(space, size=n, replace=False)
    return [int_to_kmer(int(v), k) for v in values]


def quality_string(length: int, qual: int = DEFAULT_QUALITY) -> str:
    """Constant Phred+33 quality string"""
    return chr(qual + 33) * length
