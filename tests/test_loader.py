"""Tests for the CSV row loader."""
import pytest

from ekmagrid.config import DEFAULT_GRID_PATH
from ekmagrid.pre.loader import load_grid, parse_cell, read_rows, sniff_delimiter


def write(path, text, encoding="utf-8"):
    path.write_text(text, encoding=encoding)
    return str(path)


class TestParseCell:

    @pytest.mark.parametrize("text, expected", [
        ("1.5", 1.5), (" 2 ", 2.0), ("0,25", 0.25), ("-3e2", -300.0),
        ("", None), ("   ", None), (None, None), ("MONG_KOK", "MONG_KOK"), (" a b ", "a b"),
    ])
    def test_dynamic_typing(self, text, expected):
        assert parse_cell(text) == expected

    def test_delimiter_sniffing(self):
        assert sniff_delimiter("VOC;NOX;24NOX;M1M1O3\n") == ";"
        assert sniff_delimiter("VOC,NOX,24NOX,M1M1O3\n") == ","


class TestReadRows:

    def test_comma_file(self, tmp_path):
        path = write(tmp_path / "grid.csv", "VOC,NOX,24NOX,M1M1O3\n0,1,1.8,19.4\n0.5,1,1.85,21.95\n")
        rows = read_rows(path)
        assert rows == [
            {"VOC": 0.0, "NOX": 1.0, "24NOX": 1.8, "M1M1O3": 19.4},
            {"VOC": 0.5, "NOX": 1.0, "24NOX": 1.85, "M1M1O3": 21.95},
        ]

    def test_semicolon_with_decimal_comma(self, tmp_path):
        path = write(tmp_path / "grid.csv", "VOC;NOX;24NOX;M1M1O3\n0,5;1;1,85;21,95\n")
        assert read_rows(path) == [{"VOC": 0.5, "NOX": 1.0, "24NOX": 1.85, "M1M1O3": 21.95}]

    def test_bom_and_padded_header(self, tmp_path):
        path = write(tmp_path / "grid.csv", " VOC , NOX \n1,2\n", encoding="utf-8-sig")
        assert read_rows(path) == [{"VOC": 1.0, "NOX": 2.0}]

    def test_blank_lines_skipped(self, tmp_path):
        path = write(tmp_path / "grid.csv", "VOC,NOX\n\n1,2\n , \n3,4\n")
        assert [r["VOC"] for r in read_rows(path)] == [1.0, 3.0]

    def test_empty_and_text_cells_kept(self, tmp_path):
        path = write(tmp_path / "sites.csv", "Station,Year,24NOX\nTAP_MUN,2020,\n")
        assert read_rows(path) == [{"Station": "TAP_MUN", "Year": 2020.0, "24NOX": None}]

    def test_explicit_delimiter(self, tmp_path):
        path = write(tmp_path / "grid.tsv", "VOC\tNOX\n1\t2\n")
        assert read_rows(path, delimiter="\t") == [{"VOC": 1.0, "NOX": 2.0}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_rows(str(tmp_path / "nope.csv"))

    def test_empty_file(self, tmp_path):
        with pytest.raises(OSError):
            read_rows(write(tmp_path / "empty.csv", ""))


class TestLoadGrid:

    def test_load_from_file(self, tmp_path):
        path = write(tmp_path / "grid.csv", "VOC;NOX;24NOX;M1M1O3\n0;0;0;0\n1;0;1;0\n0;1;0;1\n1;1;1;1\n")
        grid = load_grid(path)
        assert len(grid) == 4
        assert grid.shape == (2, 2)

    def test_bundled_grid(self):
        grid = load_grid(DEFAULT_GRID_PATH)
        assert grid.shape == (21, 20)
        assert grid.a_step == pytest.approx(0.5)
        assert grid.b_step == pytest.approx(1.0)
