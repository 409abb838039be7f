"""
Coverage analysis

Depth of coverage of a set of views (a molecule pool or reads) over the
genome, plus the positions and regions left uncovered.

Building a report costs O(total bases covered): every view increments the
depth of each position it spans. For deep sequencing of large genomes this
dominates the runtime of an analysis.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .models import check_view

logger = logging.getLogger(__name__)

Region = Tuple[int, int]


def needed_sample_size(
    coverage: Union[int, float],
    genome_length: int,
    lens: Union[int, Iterable[int]]
) -> int:
    """
    Number of molecules to sequence to reach ``coverage``.

    Args:
        coverage: expected coverage (X)
        genome_length: summed length of the genome (bp)
        lens: read length, or the lengths read from each molecule
              (e.g. (150, 150) for paired reads)

    Returns:
        floor(coverage * genome_length / sum(lens))

    Raises:
        ValueError: if no read length is given or it is not positive
    """
    if lens is None:
        raise ValueError(
            "Coverage sampling needs a read length; whole-molecule reads have none, "
            "set a read length or sample a fixed number of molecules"
        )
    total = int(lens) if isinstance(lens, numbers.Integral) else sum(lens)
    if total <= 0:
        raise ValueError(f"Read length must be > 0, got {lens}")
    return int(math.floor(coverage * genome_length / total))


def expected_coverage(genome_length: int, read_length: int, nreads: int) -> int:
    """Expected coverage of ``nreads`` reads of ``read_length`` bp"""
    return (read_length * nreads) // genome_length


@dataclass(frozen=True)
class CoverageReport:
    """Per-position depth for every genome sequence"""
    genome: Sequence[str]
    depths: Tuple[np.ndarray, ...]

    @property
    def total_positions(self) -> int:
        return sum(len(d) for d in self.depths)


def coverage_report(source) -> CoverageReport:
    """
    Count, for every genome position, the views overlapping it.

    Args:
        source: MoleculePool or Reads (anything with ``genome`` and ``views``)

    Returns:
        CoverageReport

    Raises:
        InvalidIntervalError: if a view falls outside its sequence
    """
    genome = source.genome
    depths = [np.zeros(len(seq), dtype=np.uint64) for seq in genome]
    for v in source.views:
        check_view(genome, v)
        depths[v.seqid][v.start - 1:v.stop] += 1
    for depth in depths:
        depth.flags.writeable = False
    return CoverageReport(genome, tuple(depths))


def uncovered_positions(report: CoverageReport, threshold: int = 0) -> List[List[int]]:
    """
    Positions whose depth is below ``threshold``.

    Returns:
        one sorted list of 1-based positions per sequence
    """
    return [(np.flatnonzero(d < threshold) + 1).tolist() for d in report.depths]


def merge_positions(positions: Sequence[int]) -> List[Region]:
    """Merge sorted positions into maximal runs of consecutive positions"""
    regions: List[Region] = []
    if len(positions) == 0:
        return regions
    start = stop = positions[0]
    for pos in positions[1:]:
        if pos == stop + 1:
            stop = pos
        else:
            regions.append((start, stop))
            start = stop = pos
    regions.append((start, stop))
    return regions


def uncovered_regions(report: CoverageReport, threshold: int = 0) -> List[List[Region]]:
    """
    Maximal runs of positions with depth below ``threshold``.

    Returns:
        one list of closed (start, stop) intervals per sequence, 1-based
    """
    return [merge_positions(p) for p in uncovered_positions(report, threshold)]


def _sequence_names(report: CoverageReport) -> List[str]:
    names = getattr(report.genome, "names", None)
    if names is None:
        names = [f"seq_{i + 1}" for i in range(len(report.depths))]
    return list(names)


def summarize(report: CoverageReport, by_chromosome: bool = False) -> pd.DataFrame:
    """
    Minimum, mean and maximum depth.

    Args:
        report: coverage report
        by_chromosome: one row per sequence instead of a single pooled row

    Returns:
        DataFrame with columns sequence, min, mean, max
    """
    names = _sequence_names(report)
    if by_chromosome:
        rows = []
        for name, d in zip(names, report.depths):
            if len(d) == 0:
                rows.append({"sequence": name, "min": 0, "mean": 0.0, "max": 0})
                continue
            rows.append({
                "sequence": name,
                "min": int(d.min()),
                "mean": float(d.mean()),
                "max": int(d.max()),
            })
        return pd.DataFrame(rows, columns=["sequence", "min", "mean", "max"])

    non_empty = [d for d in report.depths if len(d) > 0]
    if not non_empty:
        row = {"sequence": "all", "min": 0, "mean": 0.0, "max": 0}
    else:
        total = sum(int(d.sum()) for d in non_empty)
        row = {
            "sequence": "all",
            "min": min(int(d.min()) for d in non_empty),
            "mean": total / report.total_positions,
            "max": max(int(d.max()) for d in non_empty),
        }
    return pd.DataFrame([row], columns=["sequence", "min", "mean", "max"])


def format_summary(summary: pd.DataFrame) -> str:
    """Plain text rendering of a coverage summary"""
    lines = ["Coverage Summary:"]
    per_sequence = not (len(summary) == 1 and summary.iloc[0]["sequence"] == "all")
    for _, row in summary.iterrows():
        if per_sequence:
            lines.append(f"{row['sequence']}:")
        lines.append(f"\tmin: {row['min']}")
        lines.append(f"\tmean: {row['mean']}")
        lines.append(f"\tmax: {row['max']}")
    return "\n".join(lines)


def regions_to_frame(report: CoverageReport, regions: List[List[Region]]) -> pd.DataFrame:
    """
    BED-style table of regions.

    Start is converted to 0-based half-open as BED requires.
    """
    names = _sequence_names(report)
    rows = []
    for name, seq_regions in zip(names, regions):
        for start, stop in seq_regions:
            rows.append({"chrom": name, "start": start - 1, "end": stop})
    return pd.DataFrame(rows, columns=["chrom", "start", "end"])
