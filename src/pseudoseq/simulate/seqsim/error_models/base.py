"""
Substitution model base class

A substitution model is called once per read with the read's substitution
list and its bases, and edits the list in place. Its return value is ignored.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import numpy as np

from ..models import Substitution
from ..randomness import get_rng


class BaseSubstitutionModel(ABC):
    """Base class for substitution models"""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self._rng = rng

    @property
    def rng(self) -> np.random.Generator:
        return get_rng(self._rng)

    @abstractmethod
    def __call__(self, substitutions: List[Substitution], readseq: str) -> None:
        """
        Edit the substitutions of one read.

        Args:
            substitutions: the read's current substitutions, edited in place
            readseq: the read's reference bases
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Model name"""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ClearSubstitutions(BaseSubstitutionModel):
    """Remove every substitution of a read"""

    def __call__(self, substitutions: List[Substitution], readseq: str) -> None:
        substitutions.clear()

    @property
    def name(self) -> str:
        return "clear"
