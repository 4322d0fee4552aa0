#!/usr/bin/env python
"""Resolve one summit per origin from the window count table.

Usage:
    python scripts/04_resolve_summits.py \
        --counts data/counts/window_counts.tsv \
        --origins data/origins/origins.bed \
        --output data/summits/origin_summits.bed
"""

import argparse
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from snsseq.data.count_table import (
    frame_to_windows, read_window_counts, write_failures, write_summits_bed,
)
from snsseq.data.origins import load_origins, origin_names
from snsseq.data.summits import resolve_with_report
from snsseq.utils.config import load_config
from snsseq.utils.logger_config import configure_logger


def main():
    parser = argparse.ArgumentParser(description="Resolve origin summits")
    parser.add_argument("--config", type=str, default="configs/pipeline.yaml")
    parser.add_argument("--counts", type=str, required=True)
    parser.add_argument("--origins", type=str, default=None,
                        help="Origin BED; origins without windows are reported")
    parser.add_argument("--output", type=str, default="data/summits/origin_summits.bed")
    parser.add_argument("--failures", type=str, default=None,
                        help="TSV report of origins that could not be resolved")
    parser.add_argument("--strict", action="store_true",
                        help="Exit non-zero if any origin fails")
    args = parser.parse_args()

    configure_logger()
    config = load_config(args.config)
    strict = args.strict or config["summits"]["strict"]

    counts = read_window_counts(args.counts)
    windows = frame_to_windows(counts)
    names = origin_names(load_origins(args.origins)) if args.origins else None
    print(f"Windows: {len(windows):,}")

    result = resolve_with_report(windows, origin_names=names,
                                 offset=config["summits"]["offset"])

    n = write_summits_bed(result.summits, args.output)
    print(f"Saved {n:,} summits to {args.output}")

    if result.failures:
        print(f"\n{len(result.failures):,} origin(s) failed:")
        for failure in result.failures[:20]:
            print(f"  {type(failure).__name__}: {failure}")
        if len(result.failures) > 20:
            print("  ...")
        failures_path = args.failures or str(Path(args.output).with_suffix(".failures.tsv"))
        write_failures(result.failures, failures_path)
        print(f"Failure report: {failures_path}")
        if strict:
            sys.exit(1)


if __name__ == "__main__":
    main()
