"""Tests for the simulation drivers and the command line interface."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from click.testing import CliRunner

from pseudoseq.cli import main


class TestSimulateImports:
    """Test that simulate module can be imported."""

    def test_import_reads(self):
        """Test reads module import."""
        from pseudoseq.simulate.reads import run_read_simulation
        assert callable(run_read_simulation)

    def test_import_module(self):
        """Test module-level imports."""
        from pseudoseq.simulate import run_coverage_analysis, run_read_simulation
        assert callable(run_coverage_analysis)
        assert callable(run_read_simulation)


class TestCLICommands:
    """Test CLI command availability."""

    def test_main_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "sim-reads" in result.output
        assert "coverage" in result.output
        assert "init-config" in result.output

    def test_sim_reads_help(self):
        """Test sim-reads --help."""
        result = CliRunner().invoke(main, ["sim-reads", "--help"])
        assert result.exit_code == 0
        assert "Simulate sequencing reads" in result.output
        assert "--reference" in result.output
        assert "--fragment-mean" in result.output

    def test_coverage_help(self):
        result = CliRunner().invoke(main, ["coverage", "--help"])
        assert result.exit_code == 0
        assert "--threshold" in result.output

    def test_version(self):
        from pseudoseq import __version__
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


@pytest.fixture
def test_reference(tmp_path):
    """Create a temporary test reference genome."""
    rng = np.random.default_rng(42)
    ref_path = tmp_path / "test_ref.fa"

    with open(ref_path, 'w') as f:
        for chrom, length in [('chr1', 5000), ('chr2', 3000)]:
            f.write(f'>{chrom}\n')
            seq = ''.join(rng.choice(list('ACGT'), size=length))
            for i in range(0, length, 80):
                f.write(seq[i:i + 80] + '\n')

    return ref_path


def count_records(path):
    with open(path) as f:
        return sum(1 for _ in f) // 4


class TestLoadConfig:

    def test_overrides(self):
        from pseudoseq.simulate.reads import load_config
        config = load_config(seed=3, reads__flen=100, library__ntags=None)
        assert config.seed == 3
        assert config.reads.flen == 100
        assert config.library.ntags is None

    def test_unknown_override(self):
        from pseudoseq.simulate.reads import load_config
        with pytest.raises(ValueError):
            load_config(reads__nonsense=1)
        with pytest.raises(ValueError):
            load_config(nonsense__flen=1)

    def test_config_file(self, tmp_path):
        from pseudoseq.simulate.reads import load_config
        from pseudoseq.simulate.seqsim.config import get_single_end_config
        path = tmp_path / "se.yaml"
        get_single_end_config().to_yaml(str(path))
        config = load_config(str(path), reads__length=80)
        assert config.reads.paired is False
        assert config.reads.length == 80


class TestReadSimulation:
    """Test the read simulation driver."""

    def test_paired(self, test_reference, tmp_path):
        from pseudoseq.simulate.reads import run_read_simulation
        out = tmp_path / "out"
        reads = run_read_simulation(
            str(test_reference), str(out), seed=1,
            library__amplify=100, library__fragment_mean=500,
            sampling__coverage=5, reads__flen=100,
        )
        assert reads.is_paired
        n = count_records(out / "reads_R1.fastq")
        assert n == count_records(out / "reads_R2.fastq")
        assert n * 2 == reads.nreads
        assert (out / "coverage_summary.tsv").exists()
        assert (out / "uncovered_regions.bed").exists()
        assert (out / "config_used.yaml").exists()

        summary = pd.read_csv(out / "coverage_summary.tsv", sep="\t")
        assert summary["sequence"].tolist() == ["chr1", "chr2"]

    def test_reproducible(self, test_reference, tmp_path):
        from pseudoseq.simulate.reads import run_read_simulation
        kwargs = dict(
            seed=5, library__amplify=50, library__fragment_mean=400,
            sampling__coverage=2, reads__flen=80, output__coverage_report=False,
        )
        run_read_simulation(str(test_reference), str(tmp_path / "a"), **kwargs)
        run_read_simulation(str(test_reference), str(tmp_path / "b"), **kwargs)
        a = (tmp_path / "a" / "reads_R1.fastq").read_text()
        b = (tmp_path / "b" / "reads_R1.fastq").read_text()
        assert a == b
        assert not (tmp_path / "a" / "coverage_summary.tsv").exists()

    def test_single_end_compressed(self, test_reference, tmp_path):
        from pseudoseq.simulate.reads import run_read_simulation
        out = tmp_path / "se"
        reads = run_read_simulation(
            str(test_reference), str(out), seed=2, sample="s1",
            library__amplify=50, sampling__coverage=3,
            reads__paired=False, reads__length=150, output__compress=True,
        )
        assert not reads.is_paired
        assert (out / "s1_reads.fastq.gz").exists()

    def test_oversample(self, test_reference, tmp_path):
        from pseudoseq.simulate.reads import run_read_simulation
        from pseudoseq.simulate.seqsim.errors import OversampleError
        with pytest.raises(OversampleError):
            run_read_simulation(
                str(test_reference), str(tmp_path), seed=1,
                library__amplify=1, library__fragment_mean=5000,
                sampling__coverage=100,
            )

    def test_coverage_sampling_needs_read_length(self):
        from pseudoseq.simulate.reads import library_pipeline
        from pseudoseq.simulate.seqsim.config import SimConfig
        from pseudoseq.simulate.seqsim.errors import SimulationError
        config = SimConfig()
        config.reads.paired = False
        config.reads.length = None
        with pytest.raises(SimulationError, match="read length"):
            library_pipeline(config, np.random.default_rng(0))


class TestCoverageAnalysis:

    def test_molecules(self, test_reference, tmp_path):
        from pseudoseq.simulate.coverage import run_coverage_analysis
        summary = run_coverage_analysis(
            str(test_reference), str(tmp_path), seed=1, source="molecules",
            library__amplify=100, sampling__coverage=5,
        )
        assert summary["sequence"].tolist() == ["chr1", "chr2"]
        assert (summary["max"] > 0).all()
        assert (tmp_path / "uncovered_regions.bed").exists()

    def test_pooled(self, test_reference, tmp_path):
        from pseudoseq.simulate.coverage import run_coverage_analysis
        summary = run_coverage_analysis(
            str(test_reference), str(tmp_path), seed=1, by_chromosome=False,
            threshold=0, library__amplify=100, sampling__coverage=5,
        )
        assert summary["sequence"].tolist() == ["all"]
        # Nothing is below depth 0
        assert (tmp_path / "uncovered_regions.bed").read_text().strip() == ""

    def test_unknown_source(self, test_reference, tmp_path):
        from pseudoseq.simulate.coverage import run_coverage_analysis
        with pytest.raises(ValueError):
            run_coverage_analysis(str(test_reference), str(tmp_path), source="bases")


class TestCLIRuns:
    """Test CLI end to end."""

    def test_init_config(self, tmp_path):
        from pseudoseq.simulate.seqsim.config import SimConfig
        path = tmp_path / "config.yaml"
        result = CliRunner().invoke(main, ["init-config", "-o", str(path), "--preset", "single-end"])
        assert result.exit_code == 0
        assert SimConfig.from_yaml(str(path)).reads.paired is False

    def test_sim_reads(self, test_reference, tmp_path):
        out = tmp_path / "cli"
        result = CliRunner().invoke(main, [
            "sim-reads", "-r", str(test_reference), "-o", str(out),
            "--seed", "1", "--amplify", "100", "--fragment-mean", "500",
            "--coverage", "3", "--flen", "100", "--tags", "10",
        ])
        assert result.exit_code == 0, result.output
        assert count_records(out / "reads_R1.fastq") > 0
        r1 = Path(out / "reads_R1.fastq").read_text().splitlines()
        # barcode (16) + spacer (7) + read (100)
        assert len(r1[1]) == 123

    def test_sim_reads_config(self, test_reference, tmp_path):
        config_path = tmp_path / "config.yaml"
        CliRunner().invoke(main, ["init-config", "-o", str(config_path), "--preset", "single-end"])
        out = tmp_path / "cli"
        result = CliRunner().invoke(main, [
            "sim-reads", "-r", str(test_reference), "-o", str(out),
            "--config", str(config_path), "--seed", "1", "--amplify", "50",
            "--coverage", "2", "--no-errors",
        ])
        assert result.exit_code == 0, result.output
        assert (out / "reads.fastq").exists()

    def test_sim_reads_oversample(self, test_reference, tmp_path):
        result = CliRunner().invoke(main, [
            "sim-reads", "-r", str(test_reference), "-o", str(tmp_path),
            "--seed", "1", "--amplify", "1", "--fragment-mean", "5000",
            "--coverage", "100",
        ])
        assert result.exit_code == 1
        assert "Cannot sample" in result.output

    def test_sim_reads_whole_molecule_coverage(self, test_reference, tmp_path):
        from pseudoseq.simulate.seqsim.config import SimConfig
        config = SimConfig()
        config.reads.paired = False
        config.reads.length = None
        config_path = tmp_path / "config.yaml"
        config.to_yaml(str(config_path))
        result = CliRunner().invoke(main, [
            "sim-reads", "-r", str(test_reference), "-o", str(tmp_path / "out"),
            "--config", str(config_path), "--seed", "1",
        ])
        assert result.exit_code == 1
        assert "read length" in result.output
        assert not isinstance(result.exception, TypeError)

    def test_coverage_cmd(self, test_reference, tmp_path):
        result = CliRunner().invoke(main, [
            "coverage", "-r", str(test_reference), "-o", str(tmp_path),
            "--seed", "1", "--coverage", "3", "--source", "molecules",
        ])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "coverage_summary.tsv").exists()
