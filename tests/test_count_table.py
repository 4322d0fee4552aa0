import pandas as pd
import pytest

from snsseq.data.count_table import (
    KEY_COLUMNS,
    count_columns,
    frame_to_windows,
    read_window_counts,
    write_failures,
    write_summits_bed,
)
from snsseq.data.summits import OriginSummit, resolve
from snsseq.utils.exceptions import (
    DuplicateOriginError,
    InvalidInputError,
    SummitResolutionError,
)


def test_read_headerless_table(count_table_path):
    df = read_window_counts(str(count_table_path))
    assert list(df.columns) == KEY_COLUMNS + ["count_1", "count_2"]
    assert len(df) == 4
    assert df["origin_name"].tolist() == ["HO1", "HO1", "HO1", "HO2"]


def test_read_table_with_sample_names(count_table_path):
    df = read_window_counts(str(count_table_path), sample_names=["ctrl_1", "ctrl_2"])
    assert count_columns(df) == ["ctrl_1", "ctrl_2"]


def test_sample_name_count_mismatch(count_table_path):
    with pytest.raises(ValueError):
        read_window_counts(str(count_table_path), sample_names=["only_one"])


def test_read_table_with_header(tmp_path):
    path = tmp_path / "counts.tsv"
    path.write_text(
        "chrom\torigin_start\torigin_end\torigin_name\twindow_chrom\twindow_start\twindow_end\ts1\n"
        "chr1\t0\t50\tHO1\tchr1\t0\t50\t7\n"
    )
    df = read_window_counts(str(path))
    assert count_columns(df) == ["s1"]
    assert df.loc[0, "s1"] == 7


def test_table_too_narrow(tmp_path):
    path = tmp_path / "counts.tsv"
    path.write_text("chr1\t0\t50\tHO1\n")
    with pytest.raises(ValueError):
        read_window_counts(str(path))


def test_numeric_origin_names_stay_strings(tmp_path):
    path = tmp_path / "counts.tsv"
    path.write_text("chr1\t0\t50\t17\tchr1\t0\t50\t1\n")
    windows = frame_to_windows(read_window_counts(str(path)))
    assert windows[0].origin_name == "17"


def test_frame_to_windows(count_table_path):
    windows = frame_to_windows(read_window_counts(str(count_table_path)))
    assert len(windows) == 4
    first = windows[0]
    assert first.chrom == "chr1"
    assert first.window_chrom == "chr1"
    assert (first.origin_start, first.origin_end) == (1000, 1100)
    assert (first.window_start, first.window_end) == (1000, 1050)
    assert first.sample_counts == (4.0, 6.0)
    assert first.mean_count == 5


def test_table_without_count_columns_is_invalid(tmp_path):
    path = tmp_path / "counts.tsv"
    path.write_text("chr1\t0\t50\tHO1\tchr1\t0\t50\n")
    windows = frame_to_windows(read_window_counts(str(path)))
    assert windows[0].sample_counts == ()
    with pytest.raises(SummitResolutionError) as exc_info:
        resolve(windows)
    assert isinstance(exc_info.value.failures[0], InvalidInputError)


def test_resolve_from_table(count_table_path):
    summits = resolve(frame_to_windows(read_window_counts(str(count_table_path))))
    assert summits == [
        OriginSummit("HO1", 1049, 1050, "chr1"),
        OriginSummit("HO2", 524, 525, "chr2"),
    ]


def test_write_summits_bed(tmp_path):
    summits = [OriginSummit("HO1", 1049, 1050, "chr1"), OriginSummit("HO2", 524, 525, "chr2")]
    output = tmp_path / "out" / "summits.bed"
    assert write_summits_bed(summits, str(output)) == 2
    assert output.read_text().splitlines() == [
        "chr1\t1049\t1050\tHO1",
        "chr2\t524\t525\tHO2",
    ]


def test_write_failures(tmp_path):
    failures = [
        InvalidInputError("HO3", "origin has no associated windows"),
        DuplicateOriginError("HO7", "inconsistent origin coordinates"),
    ]
    output = tmp_path / "failures.tsv"
    assert write_failures(failures, str(output)) == 2
    report = pd.read_csv(output, sep="\t")
    assert report["origin_name"].tolist() == ["HO3", "HO7"]
    assert report["error"].tolist() == ["InvalidInputError", "DuplicateOriginError"]


def test_empty_table_reads_as_empty_frame(tmp_path):
    path = tmp_path / "counts.tsv"
    path.write_text("")
    df = read_window_counts(str(path), sample_names=["s1", "s2"])
    assert df.empty
    assert list(df.columns) == KEY_COLUMNS + ["s1", "s2"]
    assert frame_to_windows(df) == []


def test_empty_table_resolves_to_empty_summit_bed(tmp_path):
    path = tmp_path / "counts.tsv"
    path.write_text("")
    summits = resolve(frame_to_windows(read_window_counts(str(path))))
    output = tmp_path / "summits.bed"
    assert write_summits_bed(summits, str(output)) == 0
    assert output.read_text() == ""


def test_header_only_table_is_empty(tmp_path):
    path = tmp_path / "counts.tsv"
    path.write_text("\t".join(KEY_COLUMNS + ["s1"]) + "\n")
    df = read_window_counts(str(path))
    assert df.empty
    assert count_columns(df) == ["s1"]
