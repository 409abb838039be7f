"""
Sequencing experiment simulator.

Starting from reference sequences, a pool of molecule views goes through
library preparation (amplify, fragment, tag, subsample, select, flip), is
read into paired or single-end reads, receives substitution errors and is
written to FASTQ or analysed for coverage. Bases are only materialized when
reads are written or edited.
"""

from .config import SimConfig, get_default_config
from .coverage import (
    CoverageReport, coverage_report, expected_coverage, needed_sample_size,
    summarize, uncovered_positions, uncovered_regions
)
from .dsl import makereads
from .error_models import ClearSubstitutions, FixedProbSubstitutions
from .errors import InvalidIntervalError, OversampleError, SimulationError
from .genome import GenomeStore
from .io_utils import generate, generate_paired, parse_fasta
from .models import Pairing, SequencingView, Strand, Substitution, extract_sequence
from .molecules import (
    MoleculePool, amplify, flip, fragment, seed, select,
    subsample, subsample_coverage, tag
)
from .randomness import set_seed
from .reads import Reads, edit_substitutions, paired_reads, unpaired_reads

__all__ = [
    'SimConfig',
    'get_default_config',
    'CoverageReport',
    'coverage_report',
    'expected_coverage',
    'needed_sample_size',
    'summarize',
    'uncovered_positions',
    'uncovered_regions',
    'makereads',
    'ClearSubstitutions',
    'FixedProbSubstitutions',
    'InvalidIntervalError',
    'OversampleError',
    'SimulationError',
    'GenomeStore',
    'generate',
    'generate_paired',
    'parse_fasta',
    'Pairing',
    'SequencingView',
    'Strand',
    'Substitution',
    'extract_sequence',
    'MoleculePool',
    'amplify',
    'flip',
    'fragment',
    'seed',
    'select',
    'subsample',
    'subsample_coverage',
    'tag',
    'set_seed',
    'Reads',
    'edit_substitutions',
    'paired_reads',
    'unpaired_reads',
]
