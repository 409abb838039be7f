"""
Fixed probability substitution model

Every base of a read is miscalled independently with the same probability;
the erroneous base is one of the three other bases, chosen uniformly.
Ambiguous reference bases are miscalled as N.
"""

from typing import List, Optional
import numpy as np

from ..models import Substitution
from ..seq_utils import substitution_targets
from .base import BaseSubstitutionModel


class FixedProbSubstitutions(BaseSubstitutionModel):
    """Uniform per-base substitution errors"""

    def __init__(self, prob: float, rng: Optional[np.random.Generator] = None):
        """
        Args:
            prob: per-base substitution probability (0-1)
        """
        if not 0.0 <= prob <= 1.0:
            raise ValueError(f"Substitution probability must be in [0, 1], got {prob}")
        super().__init__(rng)
        self.prob = prob

    def __call__(self, substitutions: List[Substitution], readseq: str) -> None:
        rng = self.rng
        length = len(readseq)
        errors = rng.random(length) < self.prob
        positions = np.flatnonzero(errors)
        if len(positions) == 0:
            return
        choices = rng.integers(0, 3, size=len(positions))
        for pos, c in zip(positions, choices):
            base = substitution_targets(readseq[pos])[c]
            substitutions.append(Substitution(int(pos) + 1, base))

    @property
    def name(self) -> str:
        return "fixed"

    def __repr__(self) -> str:
        return f"FixedProbSubstitutions(prob={self.prob})"
