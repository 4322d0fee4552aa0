#!/usr/bin/env python
"""Align SNS-seq reads with bowtie2, then sort and index with samtools.

The sorted, indexed BAM is what the `samples` entries of the config point
at for window counting (step 03) and DiffBind (step 05).

Usage:
    python scripts/01_align_reads.py \
        --config configs/pipeline.yaml \
        --fastq data/fastq/ctrl_1_R1.fastq.gz data/fastq/ctrl_1_R2.fastq.gz \
        --output data/bam/ctrl_1.bam
"""

import argparse
import os
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from snsseq.data.external import run_bowtie2, run_samtools_sort_index
from snsseq.utils.config import load_config
from snsseq.utils.logger_config import configure_logger


def main():
    parser = argparse.ArgumentParser(description="Align reads with bowtie2")
    parser.add_argument("--config", type=str, default="configs/pipeline.yaml")
    parser.add_argument("--fastq", nargs="+", required=True,
                        help="One FASTQ (single-end) or two (paired-end)")
    parser.add_argument("--output", type=str, required=True,
                        help="Sorted BAM to write (indexed alongside as .bai)")
    parser.add_argument("--index", type=str, default=None,
                        help="bowtie2 index prefix (overrides config)")
    parser.add_argument("--threads", type=int, default=None)
    parser.add_argument("--keep-sam", action="store_true",
                        help="Keep the intermediate bowtie2 SAM file")
    args = parser.parse_args()

    configure_logger()
    config = load_config(args.config)
    bt2 = config["bowtie2"]
    threads = args.threads or bt2["threads"]

    index = args.index or bt2["index"]
    if index is None:
        parser.error("no bowtie2 index given (--index or bowtie2.index in config)")

    sam_path = str(Path(args.output).with_suffix(".sam"))

    print("=" * 60)
    print(f"Step 1: Aligning {', '.join(args.fastq)}")
    print("=" * 60)
    result = run_bowtie2(
        index,
        args.fastq,
        sam_path,
        threads=threads,
        extra_args=bt2["extra_args"],
    )
    # bowtie2 writes its alignment summary to stderr
    print(result.stderr)

    print("=" * 60)
    print("Step 2: Sorting and indexing")
    print("=" * 60)
    run_samtools_sort_index(sam_path, args.output, threads=threads)
    if not args.keep_sam:
        os.remove(sam_path)

    print(f"Saved sorted alignments to {args.output} (+ .bai)")


if __name__ == "__main__":
    main()
