"""Wrappers around the external tools of the SNS-seq protocol.

bowtie2 alignment, samtools sort/index, MACS2 and SICER peak calling,
bedtools multicov window counting. Each wrapper builds the argument list,
runs the tool and raises RuntimeError with its stderr on a non-zero exit.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from snsseq.data.count_table import KEY_COLUMNS, read_window_counts

logger = logging.getLogger(__name__)


def _run(cmd: List[str], name: str, stdout_path: Optional[str] = None):
    logger.info("Running: %s", " ".join(cmd))
    if stdout_path is not None:
        with open(stdout_path, "w") as out:
            result = subprocess.run(cmd, stdout=out, stderr=subprocess.PIPE, text=True)
    else:
        result = subprocess.run(cmd, capture_output=True, text=True)

    if result.returncode != 0:
        logger.error("%s stderr:\n%s", name, result.stderr)
        raise RuntimeError(f"{name} failed with exit code {result.returncode}")
    return result


def run_bowtie2(
    index: str,
    fastq: Sequence[str],
    output_sam: str,
    threads: int = 4,
    extra_args: Sequence[str] = (),
):
    """Align single-end (one file) or paired-end (two files) reads."""
    if len(fastq) == 1:
        reads = ["-U", fastq[0]]
    elif len(fastq) == 2:
        reads = ["-1", fastq[0], "-2", fastq[1]]
    else:
        raise ValueError(f"expected 1 or 2 FASTQ files, got {len(fastq)}")

    Path(output_sam).parent.mkdir(parents=True, exist_ok=True)
    cmd = ["bowtie2", "-p", str(threads), "-x", index, *reads,
           "-S", output_sam, *extra_args]
    return _run(cmd, "bowtie2")


def run_macs2(
    treatment: str,
    output_dir: str,
    name: str,
    control: Optional[str] = None,
    genome_size: str = "hs",
    qvalue: float = 0.05,
    input_format: str = "BAM",
    call_summits: bool = False,
):
    """Run MACS2 callpeak and return the narrowPeak path."""
    os.makedirs(output_dir, exist_ok=True)

    cmd = [
        "macs2", "callpeak",
        "-t", treatment,
        "-f", input_format,
        "-g", genome_size,
        "-n", name,
        "--outdir", output_dir,
        "-q", str(qvalue),
    ]
    if control is not None:
        cmd += ["-c", control]
    if call_summits:
        cmd.append("--call-summits")

    _run(cmd, f"MACS2 ({name})")

    narrowpeak = os.path.join(output_dir, f"{name}_peaks.narrowPeak")
    if not os.path.exists(narrowpeak):
        raise RuntimeError(f"MACS2 produced no narrowPeak file for {name}")
    return narrowpeak


def run_sicer(
    treatment_bed: str,
    output_dir: str,
    species: str = "hg38",
    control_bed: Optional[str] = None,
    window_size: int = 200,
    gap_size: int = 600,
    fdr: float = 0.01,
):
    """Run SICER2 on a BED of reads and return the output directory."""
    os.makedirs(output_dir, exist_ok=True)

    cmd = [
        "sicer",
        "-t", treatment_bed,
        "-s", species,
        "-w", str(window_size),
        "-g", str(gap_size),
        "-fdr", str(fdr),
        "-o", output_dir,
    ]
    if control_bed is not None:
        cmd += ["-c", control_bed]

    _run(cmd, "SICER")
    return output_dir


# multicov counts over BED columns 1-3, so the window interval goes first
MULTICOV_COLUMNS = [
    "window_chrom", "window_start", "window_end",
    "chrom", "origin_start", "origin_end", "origin_name",
]


def run_samtools_sort_index(sam_path: str, bam_path: str, threads: int = 4) -> str:
    """Coordinate-sort an alignment file into BAM and build its .bai index."""
    Path(bam_path).parent.mkdir(parents=True, exist_ok=True)
    _run(["samtools", "sort", "-@", str(threads), "-o", bam_path, sam_path],
         "samtools sort")
    _run(["samtools", "index", bam_path], "samtools index")
    return bam_path


def run_multicov(
    windows: pd.DataFrame,
    bams: Sequence[str],
    output_path: str,
    sample_names: Optional[List[str]] = None,
) -> pd.DataFrame:
    """Count reads per window with `bedtools multicov`.

    Args:
        windows: Tiled window table (KEY_COLUMNS).
        bams: Sorted, indexed BAM files, one per sample.
        output_path: Where the count table (KEY_COLUMNS + samples, with
            header) is written.
        sample_names: Count column names (default: BAM file stems).

    Returns:
        Count table as read back by read_window_counts.
    """
    if not bams:
        raise ValueError("at least one BAM file is required")
    if sample_names is None:
        sample_names = [Path(b).stem for b in bams]
    if len(sample_names) != len(bams):
        raise ValueError(f"{len(bams)} BAM files but {len(sample_names)} sample names")

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    if len(windows) == 0:
        logger.warning("No windows to count; writing an empty count table")
        table = pd.DataFrame(columns=KEY_COLUMNS + list(sample_names))
    else:
        bed_path = output.with_suffix(".windows.bed")
        windows[MULTICOV_COLUMNS].to_csv(bed_path, sep="\t", header=False, index=False)

        raw_path = output.with_suffix(".multicov.tsv")
        cmd = ["bedtools", "multicov", "-bams", *bams, "-bed", str(bed_path)]
        _run(cmd, "bedtools multicov", stdout_path=str(raw_path))

        raw = pd.read_csv(raw_path, sep="\t", header=None,
                          names=MULTICOV_COLUMNS + list(sample_names),
                          dtype={"window_chrom": str, "chrom": str, "origin_name": str})
        table = raw[KEY_COLUMNS + list(sample_names)]

    table.to_csv(output, sep="\t", index=False)
    return read_window_counts(str(output))
