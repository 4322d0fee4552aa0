# tests/conftest.py
import pytest

from tests.helpers import make_window


@pytest.fixture
def two_origin_windows():
    """
    HO1: windows at 0/25/50 with means 5/9/5.
    HO2: a single window at 0 with mean 3.
    """
    return [
        make_window("HO1", 0, [4, 6]),
        make_window("HO1", 25, [8, 10]),
        make_window("HO1", 50, [5, 5]),
        make_window("HO2", 0, [3, 3], origin=(0, 50), chrom="chr2"),
    ]


@pytest.fixture
def count_table_path(tmp_path):
    """
    Headerless count table as written by bedtools multicov.
    """
    rows = [
        "chr1\t1000\t1100\tHO1\tchr1\t1000\t1050\t4\t6",
        "chr1\t1000\t1100\tHO1\tchr1\t1025\t1075\t8\t10",
        "chr1\t1000\t1100\tHO1\tchr1\t1050\t1100\t5\t5",
        "chr2\t500\t550\tHO2\tchr2\t500\t550\t3\t3",
    ]
    path = tmp_path / "window_counts.tsv"
    path.write_text("\n".join(rows) + "\n")
    return path
