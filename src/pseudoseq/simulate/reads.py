"""
Simulate sequencing reads from a reference genome.

Pipeline:
1. Seed a molecule pool with copies of every reference sequence
2. Library preparation - amplify, fragment, optionally tag
3. Subsample molecules by count or target coverage
4. Derive paired-end or single-end reads
5. Add substitution errors
6. Write FASTQ and, optionally, coverage reports
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from .seqsim import coverage as cov
from .seqsim.config import SimConfig, get_default_config
from .seqsim.dsl import (
    Amplifier, CountSubSampler, CoverageSubSampler, Fragmenter,
    Pipeline, SubstitutionMaker, Tagger, makereads
)
from .seqsim.error_models import get_substitution_model
from .seqsim.errors import SimulationError
from .seqsim.genome import GenomeStore
from .seqsim.io_utils import generate, generate_paired
from .seqsim.molecules import MoleculePool, seed as seed_pool
from .seqsim.reads import Reads
from ..utils.io import save_bed

logger = logging.getLogger(__name__)


def load_config(
    config_file: Optional[str] = None,
    seed: Optional[int] = None,
    **overrides
) -> SimConfig:
    """
    Load a configuration and apply command line overrides.

    Args:
        config_file: YAML/JSON config file, default config if None
        seed: random seed
        **overrides: "section.param" style names with "." replaced by "__",
                     e.g. ``reads__flen=150``; None values are ignored

    Returns:
        SimConfig
    """
    config = SimConfig.from_file(config_file) if config_file else get_default_config()
    if seed is not None:
        config.seed = seed
    for key, value in overrides.items():
        if value is None:
            continue
        section, _, param = key.partition("__")
        target = getattr(config, section, None)
        if target is None or not param or not hasattr(target, param):
            raise ValueError(f"Unknown config parameter: {section}.{param}")
        setattr(target, param, value)
    return config


def library_pipeline(config: SimConfig, rng: np.random.Generator) -> Pipeline:
    """Library preparation and sampling stages described by ``config``"""
    lib = config.library
    stages = [Amplifier(lib.amplify), Fragmenter(lib.fragment_mean, rng=rng)]
    if lib.ntags is not None:
        stages.append(Tagger(lib.ntags, rng=rng))
    if config.sampling.mode == "coverage":
        if config.reads.lengths is None:
            raise SimulationError(
                "Coverage sampling needs a read length; set reads.length "
                "or use sampling.mode: count for whole-molecule reads"
            )
        stages.append(
            CoverageSubSampler(config.sampling.coverage, config.reads.lengths, rng=rng)
        )
    else:
        stages.append(CountSubSampler(config.sampling.nmolecules, rng=rng))
    return Pipeline(*stages)


def sequencing_pipeline(config: SimConfig, rng: np.random.Generator) -> Pipeline:
    """Read derivation and error stages described by ``config``"""
    r = config.reads
    if r.paired:
        stages = [makereads(r.flen, r.rlen if r.rlen is not None else r.flen)]
    elif r.length is None:
        stages = [makereads(rng=rng)]
    else:
        stages = [makereads(r.length, rng=rng)]
    if config.errors.model != "none":
        model = get_substitution_model(config.errors.model, prob=config.errors.prob, rng=rng)
        stages.append(SubstitutionMaker(model))
    return Pipeline(*stages)


def simulate(
    genome: GenomeStore,
    config: SimConfig,
    rng: Optional[np.random.Generator] = None
) -> Tuple[MoleculePool, Reads]:
    """
    Run the in-memory part of the simulation.

    Returns:
        (sampled molecule pool, reads with errors)
    """
    if rng is None:
        rng = np.random.default_rng(config.seed)
    problems = config.validate()
    for p in problems:
        logger.warning(f"Config: {p}")

    pool = seed_pool(genome, config.pool.ncopies)
    pool = library_pipeline(config, rng)(pool)
    logger.info(pool.summary())
    reads = sequencing_pipeline(config, rng)(pool)
    logger.info(reads.summary())
    return pool, reads


def write_coverage(
    reads: Reads,
    output_dir: Path,
    prefix: str,
    threshold: int
) -> None:
    """Write coverage summary TSV and uncovered regions BED for reads"""
    report = cov.coverage_report(reads)
    summary = cov.summarize(report, by_chromosome=True)
    summary_path = output_dir / f"{prefix}coverage_summary.tsv"
    summary.to_csv(summary_path, sep="\t", index=False)
    logger.info(f"Coverage summary written to {summary_path}")
    logger.debug("\n" + cov.format_summary(cov.summarize(report)))

    regions = cov.uncovered_regions(report, threshold)
    frame = cov.regions_to_frame(report, regions)
    save_bed(frame, output_dir / f"{prefix}uncovered_regions.bed")
    n_bases = sum(stop - start + 1 for seq in regions for start, stop in seq)
    logger.info(
        f"{n_bases:,} of {report.total_positions:,} bases below depth {threshold} "
        f"in {len(frame)} regions"
    )


def run_read_simulation(
    reference: str,
    output_dir: str,
    config_file: Optional[str] = None,
    seed: Optional[int] = None,
    sample: str = "",
    **overrides,
) -> Reads:
    """
    Simulate sequencing reads from a reference FASTA.

    Args:
        reference: reference genome FASTA
        output_dir: output directory
        config_file: YAML/JSON config file
        seed: random seed
        sample: prefix for output files
        **overrides: config overrides, see load_config

    Outputs:
        - reads_R1.fastq, reads_R2.fastq: paired-end reads (split_pairs)
        - reads.fastq: single-end or interleaved paired-end reads
        - coverage_summary.tsv, uncovered_regions.bed (coverage_report)
        - config_used.yaml
    """
    config = load_config(config_file, seed=seed, **overrides)
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    prefix = f"{sample}_" if sample else ""

    logger.info("Read simulation")
    logger.info(f"Reference: {reference}")
    logger.info(f"Output: {output_dir}")

    rng = np.random.default_rng(config.seed)
    genome = GenomeStore.from_fasta(reference)
    _, reads = simulate(genome, config, rng)

    compress = config.output.compress
    if reads.is_paired and config.output.split_pairs:
        generate_paired(
            reads,
            out / f"{prefix}reads_R1.fastq",
            out / f"{prefix}reads_R2.fastq",
            compress=compress,
            rng=rng,
        )
    else:
        generate(reads, out / f"{prefix}reads.fastq", compress=compress, rng=rng)

    if config.output.coverage_report:
        write_coverage(reads, out, prefix, config.output.uncovered_threshold)

    config.to_yaml(str(out / f"{prefix}config_used.yaml"))
    logger.info("Read simulation complete")
    return reads
