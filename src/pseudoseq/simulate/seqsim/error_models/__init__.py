"""
Substitution (sequencing error) models

Models are plain callables; any function with the same signature works too.
"""

from .base import BaseSubstitutionModel, ClearSubstitutions
from .fixed import FixedProbSubstitutions


def get_substitution_model(name: str, **kwargs) -> BaseSubstitutionModel:
    """
    Look up a substitution model by name

    Args:
        name: model name (clear, fixed)
        **kwargs: passed to the model constructor

    Returns:
        model instance
    """
    models = {
        "clear": ClearSubstitutions,
        "fixed": FixedProbSubstitutions,
    }

    if name not in models:
        raise ValueError(f"Unknown substitution model: {name}. Available: {list(models.keys())}")

    return models[name](**kwargs)


__all__ = [
    'BaseSubstitutionModel',
    'ClearSubstitutions',
    'FixedProbSubstitutions',
    'get_substitution_model'
]
