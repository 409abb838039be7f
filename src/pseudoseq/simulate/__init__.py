"""Simulation of sequencing experiments and their coverage."""

from pseudoseq.simulate.coverage import run_coverage_analysis
from pseudoseq.simulate.reads import run_read_simulation

__all__ = [
    "run_coverage_analysis",
    "run_read_simulation",
]
