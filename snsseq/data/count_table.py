"""Read window count tables and write summit BED files.

The count table is what `bedtools intersect -wa -wb` (origins x windows)
followed by `bedtools multicov` produces:

    chrom  origin_start  origin_end  origin_name  window_chrom  window_start  window_end  count_1 ... count_n

A header line is accepted when present; the number of count columns is
inferred from the table width.
"""

from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from snsseq.data.summits import OriginSummit, WindowCount
from snsseq.utils.exceptions import SummitError


KEY_COLUMNS = [
    "chrom", "origin_start", "origin_end", "origin_name",
    "window_chrom", "window_start", "window_end",
]

SUMMIT_COLUMNS = ["chrom", "summit_start", "summit_end", "origin_name"]


def _has_header(path: str) -> bool:
    with open(path) as f:
        for line in f:
            if not line.strip() or line.startswith("#"):
                continue
            fields = line.rstrip("\n").split("\t")
            return len(fields) < 2 or not fields[1].strip().lstrip("-").isdigit()
    return False


def read_window_counts(
    path: str,
    sample_names: Optional[List[str]] = None,
) -> pd.DataFrame:
    """Load a window count table.

    Args:
        path: Tab-separated count table.
        sample_names: Names for the count columns. Defaults to the header
            names when the file has one, otherwise count_1 .. count_n.

    Returns:
        DataFrame with KEY_COLUMNS followed by one column per sample.
    """
    header = 0 if _has_header(path) else None
    try:
        df = pd.read_csv(path, sep="\t", header=header, comment="#",
                         dtype={0: str, 3: str, 4: str} if header is None else None)
    except pd.errors.EmptyDataError:
        # nothing to count, e.g. no origins survived peak intersection
        return pd.DataFrame(columns=KEY_COLUMNS + list(sample_names or []))

    if df.shape[1] < len(KEY_COLUMNS):
        raise ValueError(
            f"{path}: expected at least {len(KEY_COLUMNS)} columns, got {df.shape[1]}"
        )

    n_counts = df.shape[1] - len(KEY_COLUMNS)
    if sample_names is None:
        if header is not None:
            sample_names = [str(c) for c in df.columns[len(KEY_COLUMNS):]]
        else:
            sample_names = [f"count_{i + 1}" for i in range(n_counts)]
    elif len(sample_names) != n_counts:
        raise ValueError(
            f"{path}: {n_counts} count columns but {len(sample_names)} sample names"
        )

    df.columns = KEY_COLUMNS + list(sample_names)
    for col in ["chrom", "origin_name", "window_chrom"]:
        df[col] = df[col].astype(str)
    return df


def count_columns(df: pd.DataFrame) -> List[str]:
    """Per-sample count columns of a count table."""
    return [c for c in df.columns if c not in KEY_COLUMNS]


def frame_to_windows(df: pd.DataFrame) -> List[WindowCount]:
    """Convert a count table into WindowCount records."""
    samples = count_columns(df)
    counts = df[samples].to_numpy(dtype=np.float64) if samples else np.empty((len(df), 0))

    windows = []
    for i, row in enumerate(df[KEY_COLUMNS].itertuples(index=False)):
        windows.append(WindowCount(
            origin_name=row.origin_name,
            origin_start=int(row.origin_start),
            origin_end=int(row.origin_end),
            window_start=int(row.window_start),
            window_end=int(row.window_end),
            sample_counts=tuple(float(v) for v in counts[i]),
            chrom=row.chrom,
            window_chrom=row.window_chrom,
        ))
    return windows


def summits_to_frame(summits: Iterable[OriginSummit]) -> pd.DataFrame:
    records = [
        {
            "chrom": s.chrom,
            "summit_start": s.summit_start,
            "summit_end": s.summit_end,
            "origin_name": s.origin_name,
        }
        for s in summits
    ]
    return pd.DataFrame(records, columns=SUMMIT_COLUMNS)


def write_summits_bed(summits: Iterable[OriginSummit], output_path: str) -> int:
    """Write summits as BED4 (chrom, start, end, name), no header."""
    df = summits_to_frame(summits)
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, sep="\t", header=False, index=False)
    return len(df)


def write_failures(failures: Iterable[SummitError], output_path: str) -> int:
    """Write failing origins as a TSV report (origin_name, error, reason)."""
    df = pd.DataFrame(
        [
            {"origin_name": f.origin_name, "error": type(f).__name__, "reason": f.reason}
            for f in failures
        ],
        columns=["origin_name", "error", "reason"],
    )
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, sep="\t", index=False)
    return len(df)
