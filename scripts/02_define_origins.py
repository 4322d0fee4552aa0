#!/usr/bin/env python
"""Call peaks with MACS2 and SICER and keep the peaks both callers support.

Either run the callers on a pooled alignment file, or pass existing peak
files with --macs2-peaks / --sicer-peaks.

Usage:
    python scripts/02_define_origins.py \
        --config configs/pipeline.yaml \
        --treatment data/bam/pooled.bam --treatment-bed data/bed/pooled.bed \
        --output-dir data/origins

    python scripts/02_define_origins.py \
        --macs2-peaks data/peaks/sns_peaks.narrowPeak \
        --sicer-peaks data/peaks/sns-W200-G600-FDR0.01-island.bed \
        --output-dir data/origins
"""

import argparse
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from snsseq.data.external import run_macs2, run_sicer
from snsseq.data.origins import define_origins, load_peaks, write_origins
from snsseq.utils.config import load_config
from snsseq.utils.logger_config import configure_logger


def _find_sicer_islands(sicer_dir: Path) -> str:
    islands = sorted(sicer_dir.glob("*island.bed"))
    if not islands:
        raise FileNotFoundError(f"no SICER island BED found in {sicer_dir}")
    return str(islands[0])


def main():
    parser = argparse.ArgumentParser(description="Define replication origins")
    parser.add_argument("--config", type=str, default="configs/pipeline.yaml")
    parser.add_argument("--treatment", type=str, default=None,
                        help="Pooled alignment file for MACS2")
    parser.add_argument("--treatment-bed", type=str, default=None,
                        help="Pooled reads in BED format for SICER")
    parser.add_argument("--macs2-peaks", type=str, default=None)
    parser.add_argument("--sicer-peaks", type=str, default=None)
    parser.add_argument("--output-dir", type=str, default="data/origins")
    parser.add_argument("--name", type=str, default="sns")
    args = parser.parse_args()

    configure_logger()
    config = load_config(args.config)
    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    print("=" * 60)
    print("Step 1: Peak calling")
    print("=" * 60)

    macs2_peaks = args.macs2_peaks
    if macs2_peaks is None:
        if args.treatment is None:
            parser.error("--treatment is required when --macs2-peaks is not given")
        macs2_cfg = config["macs2"]
        macs2_peaks = run_macs2(
            args.treatment,
            str(out_dir / "macs2"),
            name=args.name,
            genome_size=macs2_cfg["genome_size"],
            qvalue=macs2_cfg["qvalue"],
            input_format=macs2_cfg["format"],
        )

    sicer_peaks = args.sicer_peaks
    if sicer_peaks is None:
        if args.treatment_bed is None:
            parser.error("--treatment-bed is required when --sicer-peaks is not given")
        sicer_cfg = config["sicer"]
        sicer_dir = run_sicer(
            args.treatment_bed,
            str(out_dir / "sicer"),
            species=sicer_cfg["species"],
            window_size=sicer_cfg["window_size"],
            gap_size=sicer_cfg["gap_size"],
            fdr=sicer_cfg["fdr"],
        )
        sicer_peaks = _find_sicer_islands(Path(sicer_dir))

    print(f"  MACS2: {macs2_peaks}")
    print(f"  SICER: {sicer_peaks}")

    print()
    print("=" * 60)
    print("Step 2: Intersect peak sets")
    print("=" * 60)

    macs2 = load_peaks(macs2_peaks)
    sicer = load_peaks(sicer_peaks)
    origin_cfg = config["origins"]
    origins = define_origins(
        macs2,
        sicer,
        merge_distance=origin_cfg["merge_distance"],
        min_width=origin_cfg["min_width"],
        name_prefix=origin_cfg["name_prefix"],
    )

    output = out_dir / "origins.bed"
    n = write_origins(origins, str(output))
    print(f"  {'MACS2 peaks':20s}: {len(macs2):>8,d}")
    print(f"  {'SICER islands':20s}: {len(sicer):>8,d}")
    print(f"  {'Origins':20s}: {n:>8,d}")
    print(f"\nSaved origins to {output}")


if __name__ == "__main__":
    main()
