"""Define replication origins from MACS2 and SICER peak sets.

An origin is a peak supported by both callers: intervals from the first set
that overlap at least one interval from the second are kept, nearby
survivors are merged, short ones dropped, and the rest named HO1, HO2, ...
in genomic order.

Pure Python/numpy implementation (no bedtools dependency).
"""

import logging
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

ORIGIN_COLUMNS = ["chrom", "start", "end", "name"]


def load_peaks(path: str) -> pd.DataFrame:
    """Load chrom/start/end from a BED-like peak file (narrowPeak, SICER islands)."""
    peaks = pd.read_csv(
        path,
        sep="\t",
        header=None,
        usecols=[0, 1, 2],
        names=["chrom", "start", "end"],
        dtype={"chrom": str, "start": np.int64, "end": np.int64},
        comment="#",
    )
    bad = peaks["end"] <= peaks["start"]
    if bad.any():
        raise ValueError(f"{path}: {int(bad.sum())} interval(s) with end <= start")
    return peaks


def overlap_mask(query: pd.DataFrame, subject: pd.DataFrame) -> np.ndarray:
    """Boolean mask of query intervals overlapping at least one subject interval.

    Binary search over subject starts per chromosome, O(n log m).
    """
    mask = np.zeros(len(query), dtype=bool)
    query = query.reset_index(drop=True)

    for chrom in query["chrom"].unique():
        s = subject[subject["chrom"] == chrom]
        if len(s) == 0:
            continue

        order = np.argsort(s["start"].values, kind="stable")
        s_starts = s["start"].values[order]
        s_ends = s["end"].values[order]
        # Running max of ends lets one lookup answer "any earlier interval reaches q_start"
        reach = np.maximum.accumulate(s_ends)

        q_idx = np.where(query["chrom"].values == chrom)[0]
        q_starts = query["start"].values[q_idx]
        q_ends = query["end"].values[q_idx]

        # Subjects with s_start < q_end; overlap if any of them has s_end > q_start
        n_before = np.searchsorted(s_starts, q_ends, side="left")
        has_candidate = n_before > 0
        last = np.clip(n_before - 1, 0, None)
        mask[q_idx] = has_candidate & (reach[last] > q_starts)

    return mask


def merge_intervals(peaks: pd.DataFrame, merge_distance: int = 0) -> pd.DataFrame:
    """Merge intervals that overlap or lie within merge_distance bp."""
    rows = sorted(zip(peaks["chrom"], peaks["start"], peaks["end"]),
                  key=lambda x: (x[0], x[1]))

    merged = []
    for chrom, start, end in rows:
        if merged and merged[-1][0] == chrom and start <= merged[-1][2] + merge_distance:
            merged[-1] = (chrom, merged[-1][1], max(merged[-1][2], end))
        else:
            merged.append((chrom, int(start), int(end)))

    return pd.DataFrame(merged, columns=["chrom", "start", "end"])


def define_origins(
    primary: pd.DataFrame,
    secondary: pd.DataFrame,
    merge_distance: int = 0,
    min_width: int = 50,
    name_prefix: str = "HO",
) -> pd.DataFrame:
    """Origins = primary peaks confirmed by the secondary caller.

    Args:
        primary: Peaks from the first caller (e.g. MACS2 narrowPeak).
        secondary: Peaks from the second caller (e.g. SICER islands).
        merge_distance: Merge confirmed peaks closer than this many bp.
        min_width: Drop origins narrower than this (one window by default).
        name_prefix: Prefix for the 1-based origin names.

    Returns:
        DataFrame with chrom, start, end, name sorted by position.
    """
    confirmed = primary[overlap_mask(primary, secondary)]
    logger.info("%d/%d primary peaks confirmed by secondary set",
                len(confirmed), len(primary))

    origins = merge_intervals(confirmed, merge_distance=merge_distance)
    n_merged = len(origins)
    origins = origins[(origins["end"] - origins["start"]) >= min_width].reset_index(drop=True)
    if len(origins) < n_merged:
        logger.info("Dropped %d origins narrower than %d bp",
                    n_merged - len(origins), min_width)

    origins["name"] = [f"{name_prefix}{i + 1}" for i in range(len(origins))]
    return origins[ORIGIN_COLUMNS]


def write_origins(origins: pd.DataFrame, output_path: str) -> int:
    """Write origins as BED4 without header."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    origins[ORIGIN_COLUMNS].to_csv(output_path, sep="\t", header=False, index=False)
    return len(origins)


def load_origins(path: str) -> pd.DataFrame:
    """Load a BED4 origin file written by write_origins."""
    return pd.read_csv(
        path,
        sep="\t",
        header=None,
        usecols=[0, 1, 2, 3],
        names=ORIGIN_COLUMNS,
        dtype={"chrom": str, "start": np.int64, "end": np.int64, "name": str},
        comment="#",
    )


def origin_names(origins: pd.DataFrame) -> List[str]:
    return origins["name"].tolist()
