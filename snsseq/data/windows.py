"""Tile origins into overlapping windows and count signal per window.

Windows follow `bedtools makewindows -w 50 -s 25` within each origin:
starts at origin_start, origin_start + step, ... and the last window is
truncated at the origin end. The tiled table already carries the origin
columns, i.e. the `bedtools intersect -wa -wb` join of origins and windows.

Counting from bigWig expects read-start tracks (deeptools
`bamCoverage --Offset 1 --binSize 1`), so the per-window sum is a read count.
"""

import logging
from typing import Dict

import numpy as np
import pandas as pd
import pyBigWig
from tqdm import tqdm

from snsseq.data.count_table import KEY_COLUMNS

logger = logging.getLogger(__name__)


def validate_window_params(width: int, step: int):
    if width <= 0 or step <= 0:
        raise ValueError(f"window width and step must be positive, got {width}/{step}")
    if step > width:
        raise ValueError(f"step {step} > width {width} would leave gaps between windows")


def tile_origin(start: int, end: int, width: int = 50, step: int = 25) -> list:
    """(window_start, window_end) pairs covering [start, end)."""
    validate_window_params(width, step)
    tiles = []
    pos = start
    while pos < end:
        w_end = min(pos + width, end)
        tiles.append((pos, w_end))
        if w_end == end:
            break
        pos += step
    return tiles


def tile_origins(origins: pd.DataFrame, width: int = 50, step: int = 25) -> pd.DataFrame:
    """Tile every origin into windows.

    Args:
        origins: DataFrame with chrom, start, end, name.
        width: Window width in bp.
        step: Distance between consecutive window starts.

    Returns:
        DataFrame with KEY_COLUMNS, one row per window.
    """
    validate_window_params(width, step)

    records = []
    for row in origins.itertuples(index=False):
        for w_start, w_end in tile_origin(int(row.start), int(row.end), width, step):
            records.append((row.chrom, int(row.start), int(row.end), row.name,
                            row.chrom, w_start, w_end))

    windows = pd.DataFrame(records, columns=KEY_COLUMNS)
    logger.info("Tiled %d origins into %d windows (%d bp, step %d)",
                len(origins), len(windows), width, step)
    return windows


def window_signal(bw, chrom: str, start: int, end: int) -> float:
    """Sum of bigWig values over [start, end).

    0 for chromosomes absent from the track; windows running past the
    chromosome end are clipped to its length.
    """
    chrom_len = bw.chroms(chrom)
    if chrom_len is None:
        return 0.0
    start, end = max(0, start), min(end, chrom_len)
    if start >= end:
        return 0.0
    values = np.asarray(bw.values(chrom, start, end), dtype=np.float64)
    return float(np.nan_to_num(values, nan=0.0).sum())


def count_windows_bigwig(
    windows: pd.DataFrame,
    bigwig_paths: Dict[str, str],
) -> pd.DataFrame:
    """Add one count column per sample by summing its bigWig over each window.

    Args:
        windows: Tiled window table (KEY_COLUMNS).
        bigwig_paths: Ordered mapping sample name -> bigWig path.

    Returns:
        Count table: KEY_COLUMNS plus one column per sample.
    """
    table = windows[KEY_COLUMNS].copy()
    for sample, path in bigwig_paths.items():
        bw = pyBigWig.open(path)
        try:
            counts = np.zeros(len(table), dtype=np.float64)
            rows = zip(table["window_chrom"], table["window_start"], table["window_end"])
            for i, (chrom, start, end) in enumerate(
                tqdm(rows, total=len(table), desc=f"Counting {sample}")
            ):
                counts[i] = window_signal(bw, chrom, int(start), int(end))
        finally:
            bw.close()
        table[sample] = counts
        logger.info("%s: %.0f reads across %d windows", sample, counts.sum(), len(table))
    return table
