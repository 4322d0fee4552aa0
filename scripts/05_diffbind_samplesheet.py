#!/usr/bin/env python
"""Write the DiffBind sample sheet pointing every sample at the origin summits.

Usage:
    python scripts/05_diffbind_samplesheet.py \
        --config configs/pipeline.yaml \
        --summits data/summits/origin_summits.bed \
        --output data/diffbind/samplesheet.csv
"""

import argparse
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from snsseq.data.diffbind import samples_from_config, write_sample_sheet
from snsseq.utils.config import load_config


def main():
    parser = argparse.ArgumentParser(description="DiffBind sample sheet")
    parser.add_argument("--config", type=str, default="configs/pipeline.yaml")
    parser.add_argument("--summits", type=str, required=True)
    parser.add_argument("--output", type=str, default="data/diffbind/samplesheet.csv")
    args = parser.parse_args()

    config = load_config(args.config)
    samples = samples_from_config(config["samples"])
    n = write_sample_sheet(samples, args.summits, args.output)

    conditions = sorted({s.condition for s in samples})
    print(f"Samples: {n} ({', '.join(conditions)})")
    print(f"Saved sample sheet to {args.output}")


if __name__ == "__main__":
    main()
