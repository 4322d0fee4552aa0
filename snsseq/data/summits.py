"""Resolve one summit coordinate per replication origin.

Each origin is tiled into overlapping fixed-width windows (50 bp, 25 bp step)
and every window carries one read count per SNS-seq sample. For each origin:
  1. Mean count per window across samples
  2. Window with the highest mean wins; ties go to the smallest window_start
  3. Summit = 2 bp interval at the window midpoint (window_start + 24 for 50 bp)

Failures are collected per origin so a single pass reports every problem.
"""

import logging
import math
from dataclasses import dataclass, field
from itertools import groupby
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from snsseq.utils.exceptions import (
    DuplicateOriginError,
    InvalidInputError,
    SummitError,
    SummitResolutionError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowCount:
    """Per-sample read counts for one window of one origin."""

    origin_name: str
    origin_start: int
    origin_end: int
    window_start: int
    window_end: int
    sample_counts: Tuple[float, ...]
    chrom: str = ""
    window_chrom: str = ""

    @property
    def width(self) -> int:
        return self.window_end - self.window_start

    @property
    def mean_count(self) -> float:
        if len(self.sample_counts) == 0:
            raise InvalidInputError(
                self.origin_name,
                f"window {self.window_start}-{self.window_end} has no sample counts",
            )
        # fsum keeps the mean independent of sample order, so ties stay ties
        return math.fsum(self.sample_counts) / len(self.sample_counts)


@dataclass(frozen=True)
class OriginSummit:
    origin_name: str
    summit_start: int
    summit_end: int
    chrom: str = ""


@dataclass
class SummitResult:
    """Summits for every resolvable origin plus the origins that failed."""

    summits: List[OriginSummit] = field(default_factory=list)
    failures: List[SummitError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def summit_offset(window_width: int) -> int:
    """Offset of the summit start from the window start.

    The summit is the 2 bp interval around the window midpoint, so a 50 bp
    window gives 24 (summit at window_start + 24 .. window_start + 25).
    """
    if window_width < 2:
        raise ValueError(f"window width must be >= 2, got {window_width}")
    return window_width // 2 - 1


def _check_window(window: WindowCount):
    counts = window.sample_counts
    if len(counts) == 0:
        raise InvalidInputError(
            window.origin_name,
            f"window {window.window_start}-{window.window_end} has no sample counts",
        )
    for value in counts:
        if value is None or math.isnan(value) or value < 0:
            raise InvalidInputError(
                window.origin_name,
                f"window {window.window_start}-{window.window_end} has invalid "
                f"count {value!r}",
            )
    if window.width < 2:
        raise InvalidInputError(
            window.origin_name,
            f"window {window.window_start}-{window.window_end} is narrower than 2 bp",
        )
    if window.window_start < window.origin_start or window.window_end > window.origin_end:
        raise InvalidInputError(
            window.origin_name,
            f"window {window.window_start}-{window.window_end} lies outside origin "
            f"{window.origin_start}-{window.origin_end}",
        )
    if window.window_chrom and window.chrom and window.window_chrom != window.chrom:
        raise InvalidInputError(
            window.origin_name,
            f"window on {window.window_chrom} joined to origin on {window.chrom}",
        )


def _check_origin_coordinates(name: str, windows: Sequence[WindowCount]):
    spans = sorted({(w.chrom, w.origin_start, w.origin_end) for w in windows})
    if len(spans) > 1:
        listed = ", ".join(f"{c}:{s}-{e}" if c else f"{s}-{e}" for c, s, e in spans)
        raise DuplicateOriginError(
            name, f"inconsistent origin coordinates across rows ({listed})"
        )


def select_window(windows: Sequence[WindowCount]) -> WindowCount:
    """Pick the window with the highest mean count, leftmost on ties."""
    return min(windows, key=lambda w: (-w.mean_count, w.window_start, w.window_end))


def resolve_origin(
    name: str,
    windows: Sequence[WindowCount],
    offset: Optional[int] = None,
) -> OriginSummit:
    """Resolve the summit of a single origin, raising on invalid input."""
    if len(windows) == 0:
        raise InvalidInputError(name, "origin has no associated windows")
    for window in windows:
        _check_window(window)
    _check_origin_coordinates(name, windows)

    best = select_window(windows)
    shift = summit_offset(best.width) if offset is None else offset
    summit_start = best.window_start + shift
    summit_end = summit_start + 1
    if shift < 0 or summit_end > best.window_end:
        raise InvalidInputError(
            name,
            f"summit offset {shift} falls outside window "
            f"{best.window_start}-{best.window_end}",
        )
    return OriginSummit(
        origin_name=name,
        summit_start=summit_start,
        summit_end=summit_end,
        chrom=best.chrom,
    )


def resolve_with_report(
    windows: Iterable[WindowCount],
    origin_names: Optional[Iterable[str]] = None,
    offset: Optional[int] = None,
) -> SummitResult:
    """Resolve every origin, collecting failures instead of stopping.

    Args:
        windows: WindowCount rows in any order.
        origin_names: Full origin set. Origins listed here without any window
            are reported as InvalidInputError rather than silently dropped.
        offset: Fixed summit offset from the window start. Defaults to
            floor(width / 2) - 1 of the winning window.

    Returns:
        SummitResult with summits and failures, both sorted by origin name.
    """
    grouped: Dict[str, List[WindowCount]] = {}
    by_name = sorted(windows, key=lambda w: w.origin_name)
    for name, group in groupby(by_name, key=lambda w: w.origin_name):
        grouped[name] = list(group)

    if origin_names is not None:
        for name in origin_names:
            grouped.setdefault(name, [])

    result = SummitResult()
    for name in sorted(grouped):
        try:
            result.summits.append(resolve_origin(name, grouped[name], offset=offset))
        except SummitError as e:
            logger.warning("Skipping origin %s", e)
            result.failures.append(e)

    logger.info(
        "Resolved %d/%d origins (%d failed)",
        len(result.summits), len(grouped), len(result.failures),
    )
    return result


def resolve(
    windows: Iterable[WindowCount],
    origin_names: Optional[Iterable[str]] = None,
    offset: Optional[int] = None,
    strict: bool = True,
) -> List[OriginSummit]:
    """Map window counts to exactly one summit per origin.

    With strict=True (default) any failing origin aborts the run with a
    SummitResolutionError listing every failure found in the pass. With
    strict=False failing origins are logged and left out of the output.
    """
    result = resolve_with_report(windows, origin_names=origin_names, offset=offset)
    if strict and not result.ok:
        raise SummitResolutionError(result.failures)
    return result.summits
