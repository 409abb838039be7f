"""
pseudoseq: simulation of DNA sequencing experiments.

This package provides tools for:
- Modelling a pool of DNA molecules as lightweight views over a reference
- Library preparation: amplification, fragmentation, tagging, subsampling
- Paired-end and single-end read generation with substitution errors
- FASTQ output
- Depth of coverage and uncovered region analysis
"""

__version__ = "0.3.0"
__author__ = "pseudoseq Team"
