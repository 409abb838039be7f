"""
pseudoseq CLI - Command Line Interface for sequencing experiment simulation.

Usage:
    pseudoseq <command> [options]
"""

import logging

import click

from pseudoseq import __version__


def _setup_logging(verbose: bool, log_file=None) -> None:
    from pseudoseq.utils.logging_utils import setup_logger
    setup_logger(log_file=log_file, level=logging.DEBUG if verbose else logging.INFO)


@click.group()
@click.version_option(version=__version__, prog_name="pseudoseq")
def main():
    """pseudoseq - simulate DNA sequencing experiments.

    Models a pool of DNA molecules over a reference genome, prepares a
    library (amplify, fragment, tag, subsample), derives paired or
    single-end reads with substitution errors, and reports coverage.
    """
    pass


# ============================================================================
# Simulation Commands
# ============================================================================

@main.command("sim-reads")
@click.option("-r", "--reference", required=True, help="Reference genome FASTA")
@click.option("-o", "--output", required=True, help="Output directory")
@click.option("--config", "config_file", help="Config file (YAML/JSON)")
@click.option("--seed", type=int, help="Random seed")
@click.option("--ncopies", type=int, help="Copies of each reference sequence in the starting pool")
@click.option("--amplify", type=int, help="Copies per molecule after amplification")
@click.option("--fragment-mean", type=int, help="Mean fragment length (bp)")
@click.option("--tags", "ntags", type=int, help="Number of molecular tags")
@click.option("--sampling", type=click.Choice(["coverage", "count"]),
              help="Subsample by target coverage or molecule count")
@click.option("--coverage", type=float, help="Target coverage (X)")
@click.option("--nmolecules", type=int, help="Molecules to sample (count mode)")
@click.option("--paired/--single", default=None, help="Paired-end or single-end reads")
@click.option("--flen", type=int, help="R1 read length")
@click.option("--rlen", type=int, help="R2 read length (default: R1 length)")
@click.option("--read-length", type=int, help="Single-end read length")
@click.option("--error-rate", type=float, help="Per-base substitution probability")
@click.option("--no-errors", is_flag=True, help="Do not add sequencing errors")
@click.option("--compress", is_flag=True, help="Compress output (gzip)")
@click.option("--interleaved", is_flag=True, help="Write paired reads to one interleaved FASTQ")
@click.option("--no-coverage-report", is_flag=True, help="Skip coverage summary and uncovered regions")
@click.option("-sample", "--sample", default="", help="Sample prefix for output files")
@click.option("--log-file", help="Also write the log to this file")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def sim_reads(reference, output, config_file, seed, ncopies, amplify, fragment_mean,
              ntags, sampling, coverage, nmolecules, paired, flen, rlen, read_length,
              error_rate, no_errors, compress, interleaved, no_coverage_report,
              sample, log_file, verbose):
    """Simulate sequencing reads from a reference genome.

    Seeds a molecule pool with the reference sequences, runs library
    preparation and writes FASTQ files (R1/R2 for paired-end reads).

    Command line options override values from --config.
    """
    from pseudoseq.simulate.reads import run_read_simulation
    from pseudoseq.simulate.seqsim.errors import SimulationError

    _setup_logging(verbose, log_file)
    try:
        run_read_simulation(
            reference=reference,
            output_dir=output,
            config_file=config_file,
            seed=seed,
            sample=sample,
            pool__ncopies=ncopies,
            library__amplify=amplify,
            library__fragment_mean=fragment_mean,
            library__ntags=ntags,
            sampling__mode=sampling,
            sampling__coverage=coverage,
            sampling__nmolecules=nmolecules,
            reads__paired=paired,
            reads__flen=flen,
            reads__rlen=rlen,
            reads__length=read_length,
            errors__model="none" if no_errors else None,
            errors__prob=error_rate,
            output__compress=True if compress else None,
            output__split_pairs=False if interleaved else None,
            output__coverage_report=False if no_coverage_report else None,
        )
    except SimulationError as e:
        raise click.ClickException(str(e))


@main.command("coverage")
@click.option("-r", "--reference", required=True, help="Reference genome FASTA")
@click.option("-o", "--output", required=True, help="Output directory")
@click.option("--config", "config_file", help="Config file (YAML/JSON)")
@click.option("--seed", type=int, help="Random seed")
@click.option("--source", type=click.Choice(["reads", "molecules"]), default="reads",
              help="Measure coverage of reads or of sampled molecules")
@click.option("--threshold", type=int, help="Depth below which a base is uncovered")
@click.option("--pooled", is_flag=True, help="Single summary row for the whole genome")
@click.option("--coverage", type=float, help="Target coverage (X)")
@click.option("-sample", "--sample", default="", help="Sample prefix for output files")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def coverage_cmd(reference, output, config_file, seed, source, threshold, pooled,
                 coverage, sample, verbose):
    """Report depth of coverage of a simulated experiment.

    Writes a per-sequence min/mean/max depth table and a BED file of the
    regions below --threshold.
    """
    from pseudoseq.simulate.coverage import run_coverage_analysis
    from pseudoseq.simulate.seqsim.errors import SimulationError

    _setup_logging(verbose)
    try:
        run_coverage_analysis(
            reference=reference,
            output_dir=output,
            config_file=config_file,
            seed=seed,
            source=source,
            threshold=threshold,
            by_chromosome=not pooled,
            sample=sample,
            sampling__coverage=coverage,
        )
    except SimulationError as e:
        raise click.ClickException(str(e))


@main.command("init-config")
@click.option("-o", "--output", required=True, help="Output config file (.yaml/.json)")
@click.option("--preset", type=click.Choice(["default", "single-end", "long-read"]),
              default="default", help="Configuration preset")
def init_config(output, preset):
    """Write a configuration file to edit and pass to --config."""
    from pseudoseq.simulate.seqsim.config import (
        get_default_config, get_long_read_config, get_single_end_config
    )

    presets = {
        "default": get_default_config,
        "single-end": get_single_end_config,
        "long-read": get_long_read_config,
    }
    config = presets[preset]()
    if output.endswith(".json"):
        config.to_json(output)
    else:
        config.to_yaml(output)
    click.echo(f"Wrote {preset} configuration to {output}")


if __name__ == "__main__":
    main()
