import pandas as pd
import pytest

from snsseq.data.origins import (
    define_origins,
    load_origins,
    load_peaks,
    merge_intervals,
    origin_names,
    overlap_mask,
    write_origins,
)


def _frame(rows):
    return pd.DataFrame(rows, columns=["chrom", "start", "end"])


# ---------------- Overlap ----------------

def test_overlap_mask_basic():
    query = _frame([("chr1", 100, 200), ("chr1", 300, 400), ("chr2", 100, 200)])
    subject = _frame([("chr1", 150, 160), ("chr2", 500, 600)])
    assert overlap_mask(query, subject).tolist() == [True, False, False]


def test_overlap_mask_half_open_intervals():
    query = _frame([("chr1", 100, 200)])
    assert overlap_mask(query, _frame([("chr1", 200, 300)])).tolist() == [False]
    assert overlap_mask(query, _frame([("chr1", 0, 100)])).tolist() == [False]
    assert overlap_mask(query, _frame([("chr1", 199, 300)])).tolist() == [True]


def test_overlap_mask_long_earlier_subject():
    # A long subject starting early still covers a later query
    query = _frame([("chr1", 500, 600)])
    subject = _frame([("chr1", 0, 1000), ("chr1", 100, 150)])
    assert overlap_mask(query, subject).tolist() == [True]


def test_overlap_mask_missing_chromosome():
    query = _frame([("chrX", 0, 10)])
    assert overlap_mask(query, _frame([("chr1", 0, 10)])).tolist() == [False]


# ---------------- Merge and define ----------------

def test_merge_intervals():
    peaks = _frame([("chr1", 300, 400), ("chr1", 100, 200), ("chr1", 150, 250), ("chr2", 0, 10)])
    merged = merge_intervals(peaks)
    assert merged.values.tolist() == [["chr1", 100, 250], ["chr1", 300, 400], ["chr2", 0, 10]]


def test_merge_intervals_with_distance():
    peaks = _frame([("chr1", 100, 200), ("chr1", 250, 300)])
    assert len(merge_intervals(peaks, merge_distance=49)) == 2
    assert len(merge_intervals(peaks, merge_distance=50)) == 1


def test_define_origins_names_in_genomic_order():
    macs2 = _frame([
        ("chr2", 1000, 1200),
        ("chr1", 500, 700),
        ("chr1", 5000, 5100),   # no SICER support
        ("chr1", 100, 300),
    ])
    sicer = _frame([("chr1", 0, 800), ("chr2", 1100, 1500)])
    origins = define_origins(macs2, sicer)
    assert origins.values.tolist() == [
        ["chr1", 100, 300, "HO1"],
        ["chr1", 500, 700, "HO2"],
        ["chr2", 1000, 1200, "HO3"],
    ]


def test_define_origins_min_width_and_prefix():
    macs2 = _frame([("chr1", 0, 30), ("chr1", 100, 200)])
    sicer = _frame([("chr1", 0, 1000)])
    origins = define_origins(macs2, sicer, min_width=50, name_prefix="ORI")
    assert origins["name"].tolist() == ["ORI1"]
    assert origins["start"].tolist() == [100]


def test_define_origins_empty():
    origins = define_origins(_frame([("chr1", 0, 100)]), _frame([("chr2", 0, 100)]))
    assert origins.empty
    assert list(origins.columns) == ["chrom", "start", "end", "name"]


# ---------------- I/O ----------------

def test_load_peaks_reads_first_three_columns(tmp_path):
    path = tmp_path / "peaks.narrowPeak"
    path.write_text("chr1\t100\t200\tpeak_1\t50\t.\t3.2\t5.1\t4.0\t60\n")
    peaks = load_peaks(str(path))
    assert peaks.values.tolist() == [["chr1", 100, 200]]


def test_load_peaks_rejects_empty_intervals(tmp_path):
    path = tmp_path / "peaks.bed"
    path.write_text("chr1\t200\t200\n")
    with pytest.raises(ValueError):
        load_peaks(str(path))


def test_origins_round_trip(tmp_path):
    origins = define_origins(_frame([("chr1", 100, 300)]), _frame([("chr1", 0, 500)]))
    path = tmp_path / "origins" / "origins.bed"
    assert write_origins(origins, str(path)) == 1
    assert path.read_text() == "chr1\t100\t300\tHO1\n"
    assert load_origins(str(path)).values.tolist() == [["chr1", 100, 300, "HO1"]]


def test_origin_names_from_bed(tmp_path):
    path = tmp_path / "origins.bed"
    path.write_text("chr1\t0\t100\tHO1\nchr2\t0\t50\tHO2\n")
    assert origin_names(load_origins(str(path))) == ["HO1", "HO2"]
