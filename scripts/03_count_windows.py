#!/usr/bin/env python
"""Tile origins into overlapping windows and count reads per sample.

Counts come from `bedtools multicov` over the sample BAMs in the config, or
from per-sample read-start bigWig tracks with --bigwig-dir.

Usage:
    python scripts/03_count_windows.py \
        --config configs/pipeline.yaml \
        --origins data/origins/origins.bed \
        --output data/counts/window_counts.tsv

    python scripts/03_count_windows.py \
        --origins data/origins/origins.bed \
        --bigwig-dir data/bigwig \
        --output data/counts/window_counts.tsv
"""

import argparse
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from snsseq.data.count_table import count_columns
from snsseq.data.diffbind import samples_from_config
from snsseq.data.external import run_multicov
from snsseq.data.origins import load_origins
from snsseq.data.windows import count_windows_bigwig, tile_origins
from snsseq.utils.config import load_config
from snsseq.utils.logger_config import configure_logger


def main():
    parser = argparse.ArgumentParser(description="Count reads in origin windows")
    parser.add_argument("--config", type=str, default="configs/pipeline.yaml")
    parser.add_argument("--origins", type=str, required=True)
    parser.add_argument("--output", type=str, default="data/counts/window_counts.tsv")
    parser.add_argument("--bigwig-dir", type=str, default=None,
                        help="Count from <sample>.bw tracks instead of BAMs")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--step", type=int, default=None)
    args = parser.parse_args()

    configure_logger()
    config = load_config(args.config)
    width = args.width or config["windows"]["width"]
    step = args.step or config["windows"]["step"]

    samples = samples_from_config(config["samples"])
    if not samples:
        parser.error("no samples configured")

    origins = load_origins(args.origins)
    windows = tile_origins(origins, width=width, step=step)
    print(f"Origins: {len(origins):,}")
    print(f"Windows: {len(windows):,} ({width} bp, step {step})")

    if args.bigwig_dir is not None:
        bigwigs = {}
        for s in samples:
            bw_path = Path(args.bigwig_dir) / f"{s.sample_id}.bw"
            if not bw_path.exists():
                print(f"WARNING: bigWig not found for {s.sample_id}: {bw_path}")
                continue
            bigwigs[s.sample_id] = str(bw_path)
        if not bigwigs:
            print("ERROR: no bigWig tracks found")
            sys.exit(1)
        table = count_windows_bigwig(windows, bigwigs)
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(args.output, sep="\t", index=False)
    else:
        table = run_multicov(
            windows,
            [s.bam for s in samples],
            args.output,
            sample_names=[s.sample_id for s in samples],
        )

    print(f"\nSaved window counts ({len(count_columns(table))} samples) to {args.output}")


if __name__ == "__main__":
    main()
