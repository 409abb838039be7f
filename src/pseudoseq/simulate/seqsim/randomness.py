"""Process-wide random source shared by every random operator."""

from typing import Optional

import numpy as np

_rng: np.random.Generator = np.random.default_rng()


def get_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return ``rng`` if given, otherwise the process-wide generator."""
    return rng if rng is not None else _rng


def set_seed(seed: Optional[int]) -> np.random.Generator:
    """Reseed the process-wide generator and return it."""
    global _rng
    _rng = np.random.default_rng(seed)
    return _rng
