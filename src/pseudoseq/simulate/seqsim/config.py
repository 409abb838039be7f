"""
Simulation configuration

Parameter groups:
A. Starting pool: ncopies
B. Library preparation: amplify, fragment_mean, ntags
C. Sampling: mode, coverage, nmolecules
D. Reads: paired, flen, rlen, length
E. Errors: model, prob
F. Output: compress, split_pairs, coverage_report, uncovered_threshold
"""

from dataclasses import asdict, dataclass, field
from typing import Literal, Optional
import json
import yaml


@dataclass
class PoolParams:
    """A. Starting molecule pool"""
    ncopies: int = 1               # copies of each genome sequence


@dataclass
class LibraryParams:
    """B. Library preparation"""
    amplify: int = 1000            # copies per molecule after amplification
    fragment_mean: int = 700       # mean fragment length (bp)
    ntags: Optional[int] = None    # molecular tags, None disables tagging


@dataclass
class SamplingParams:
    """
    C. Subsampling of the prepared library

    - coverage: draw enough molecules for the target coverage
    - count: draw a fixed number of molecules
    """
    mode: Literal["coverage", "count"] = "coverage"
    coverage: float = 50.0
    nmolecules: int = 10000


@dataclass
class ReadParams:
    """D. Reads"""
    paired: bool = True
    flen: int = 250                # R1 length (paired)
    rlen: Optional[int] = None     # R2 length, defaults to flen
    length: Optional[int] = 250    # single-end length, None reads whole molecules

    @property
    def lengths(self):
        """Bases read per molecule, as used for coverage subsampling"""
        if self.paired:
            return (self.flen, self.rlen if self.rlen is not None else self.flen)
        return self.length


@dataclass
class ErrorParams:
    """E. Sequencing errors"""
    model: Literal["none", "fixed"] = "fixed"
    prob: float = 0.001            # per-base substitution probability


@dataclass
class OutputParams:
    """F. Output"""
    compress: bool = False
    split_pairs: bool = True                 # R1/R2 in separate files
    coverage_report: bool = True             # write coverage summary and gaps
    uncovered_threshold: int = 1             # depth below which a base is uncovered


@dataclass
class SimConfig:
    """Complete simulation configuration"""
    pool: PoolParams = field(default_factory=PoolParams)
    library: LibraryParams = field(default_factory=LibraryParams)
    sampling: SamplingParams = field(default_factory=SamplingParams)
    reads: ReadParams = field(default_factory=ReadParams)
    errors: ErrorParams = field(default_factory=ErrorParams)
    output: OutputParams = field(default_factory=OutputParams)

    seed: Optional[int] = None

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> 'SimConfig':
        config = cls()

        if "pool" in d:
            config.pool = PoolParams(**d["pool"])
        if "library" in d:
            config.library = LibraryParams(**d["library"])
        if "sampling" in d:
            config.sampling = SamplingParams(**d["sampling"])
        if "reads" in d:
            config.reads = ReadParams(**d["reads"])
        if "errors" in d:
            config.errors = ErrorParams(**d["errors"])
        if "output" in d:
            config.output = OutputParams(**d["output"])
        if "seed" in d:
            config.seed = d["seed"]

        return config

    @classmethod
    def from_yaml(cls, path: str) -> 'SimConfig':
        with open(path, 'r') as f:
            d = yaml.safe_load(f)
        return cls.from_dict(d or {})

    def to_yaml(self, path: str):
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_json(cls, path: str) -> 'SimConfig':
        with open(path, 'r') as f:
            d = json.load(f)
        return cls.from_dict(d)

    def to_json(self, path: str):
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_file(cls, path: str) -> 'SimConfig':
        """Load YAML (.yaml/.yml) or JSON by extension"""
        if str(path).endswith(('.yaml', '.yml')):
            return cls.from_yaml(path)
        return cls.from_json(path)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> list:
        """Check the configuration, returning a list of problems"""
        warnings = []

        if self.pool.ncopies < 1:
            warnings.append("pool.ncopies must be >= 1")

        if self.library.amplify < 1:
            warnings.append("library.amplify must be >= 1")
        if self.library.fragment_mean < 1:
            warnings.append("library.fragment_mean must be >= 1")
        if self.library.ntags is not None and self.library.ntags < 1:
            warnings.append("library.ntags must be >= 1 when set")

        if self.sampling.mode not in ["coverage", "count"]:
            warnings.append(f"Unknown sampling.mode: {self.sampling.mode}")
        elif self.sampling.mode == "coverage" and self.sampling.coverage <= 0:
            warnings.append("sampling.coverage must be > 0")
        elif self.sampling.mode == "count" and self.sampling.nmolecules < 0:
            warnings.append("sampling.nmolecules must be >= 0")

        if self.reads.paired:
            if self.reads.flen < 1:
                warnings.append("reads.flen must be >= 1")
            if self.reads.rlen is not None and self.reads.rlen < 1:
                warnings.append("reads.rlen must be >= 1")
            if self.library.fragment_mean < sum(self.reads.lengths):
                warnings.append(
                    f"library.fragment_mean ({self.library.fragment_mean}) is shorter than "
                    f"a read pair ({sum(self.reads.lengths)}bp); most molecules will be skipped"
                )
        else:
            if self.reads.length is None and self.sampling.mode == "coverage":
                warnings.append("Coverage sampling needs reads.length for single-end reads")
            if self.reads.length is not None and self.reads.length < 1:
                warnings.append("reads.length must be >= 1")
        if self.library.ntags is not None and not self.reads.paired:
            warnings.append("Tags are only written for paired reads")

        if self.errors.model not in ["none", "fixed"]:
            warnings.append(f"Unknown errors.model: {self.errors.model}")
        if not 0 <= self.errors.prob <= 1:
            warnings.append("errors.prob must be in [0, 1]")

        if self.output.uncovered_threshold < 0:
            warnings.append("output.uncovered_threshold must be >= 0")

        return warnings


# =============================================================================
# Presets
# =============================================================================

def get_default_config() -> SimConfig:
    """Default configuration: 50X paired-end 2x250bp"""
    return SimConfig()


def get_single_end_config() -> SimConfig:
    """Single-end 150bp reads"""
    config = SimConfig()
    config.reads.paired = False
    config.reads.length = 150
    return config


def get_long_read_config() -> SimConfig:
    """Whole-molecule single-end reads from long fragments, higher error rate"""
    config = SimConfig()
    config.library.fragment_mean = 40000
    config.library.amplify = 1
    config.pool.ncopies = 5000
    config.reads.paired = False
    config.reads.length = None
    config.sampling.mode = "count"
    config.sampling.nmolecules = 5000
    config.errors.prob = 0.1
    return config
