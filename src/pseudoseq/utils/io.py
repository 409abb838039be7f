"""File I/O utilities for pseudoseq."""

import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

BED_COLS = ["chrom", "start", "end", "name", "score", "strand"]


def save_bed(
    df: pd.DataFrame,
    filepath: Union[str, Path],
    cols: Optional[List[str]] = None,
    header: bool = False,
) -> None:
    """
    Save DataFrame to BED format.

    Args:
        df: DataFrame to save
        filepath: Output file path
        cols: Columns to write (default: the BED columns present in df)
        header: Write header row
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if cols is None:
        cols = [c for c in BED_COLS if c in df.columns]
        if not cols:
            cols = df.columns[:3].tolist()

    df[cols].to_csv(filepath, sep="\t", index=False, header=header)
    logger.info(f"Saved {len(df)} records to {filepath.name}")
