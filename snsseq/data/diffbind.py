"""Build the DiffBind sample sheet for differential origin usage.

DiffBind re-counts reads from the BAM files over the summit intervals, so
every sample points at the same summit BED.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

import pandas as pd


SHEET_COLUMNS = ["SampleID", "Condition", "Replicate", "bamReads", "Peaks", "PeakCaller"]


@dataclass(frozen=True)
class Sample:
    sample_id: str
    condition: str
    replicate: int
    bam: str


def samples_from_config(entries: Iterable[dict]) -> List[Sample]:
    """Parse the `samples` section of the pipeline config."""
    samples = []
    for i, entry in enumerate(entries):
        missing = [k for k in ("id", "condition", "replicate", "bam") if k not in entry]
        if missing:
            raise ValueError(f"sample #{i + 1} is missing {', '.join(missing)}")
        samples.append(Sample(
            sample_id=str(entry["id"]),
            condition=str(entry["condition"]),
            replicate=int(entry["replicate"]),
            bam=str(entry["bam"]),
        ))

    ids = [s.sample_id for s in samples]
    duplicated = sorted({x for x in ids if ids.count(x) > 1})
    if duplicated:
        raise ValueError(f"duplicate sample ids: {', '.join(duplicated)}")
    return samples


def build_sample_sheet(samples: Iterable[Sample], summits_bed: str) -> pd.DataFrame:
    sheet = pd.DataFrame(
        [
            {
                "SampleID": s.sample_id,
                "Condition": s.condition,
                "Replicate": s.replicate,
                "bamReads": s.bam,
                "Peaks": summits_bed,
                "PeakCaller": "bed",
            }
            for s in samples
        ],
        columns=SHEET_COLUMNS,
    )
    if sheet.empty:
        raise ValueError("no samples given for the DiffBind sample sheet")
    return sheet


def write_sample_sheet(samples: Iterable[Sample], summits_bed: str, output_path: str) -> int:
    sheet = build_sample_sheet(samples, summits_bed)
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    sheet.to_csv(output_path, index=False)
    return len(sheet)
