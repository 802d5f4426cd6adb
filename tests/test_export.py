"""
Tests for spreadsheet and CSV export of the point table.
"""
import csv
import io
import math

import openpyxl
import pytest

from plot_digitizer.export_csv import points_csv_string, write_points_csv
from plot_digitizer.export_xlsx import DEFAULT_FILENAME, DEFAULT_SHEET, points_to_workbook, write_points_xlsx

ROWS = [(1, 0.5, 2.25), (2, 31.622776601683793, -1.0), (3, 10.0, 1e-6)]


def test_workbook_layout():
    wb = points_to_workbook(ROWS)
    ws = wb.active
    assert ws.title == DEFAULT_SHEET
    values = list(ws.iter_rows(values_only=True))
    assert values[0] == ("Point", "X", "Y")
    assert values[1:] == ROWS


def test_write_xlsx_roundtrip(tmp_path):
    path = write_points_xlsx(tmp_path / DEFAULT_FILENAME, ROWS)
    assert path.name == "plot_data.xlsx"
    wb = openpyxl.load_workbook(path)
    ws = wb["Plot Data"]
    values = list(ws.iter_rows(values_only=True))
    assert values[0] == ("Point", "X", "Y")
    assert [v[0] for v in values[1:]] == [1, 2, 3]
    assert values[2][1] == pytest.approx(31.622776601683793)


def test_write_xlsx_adds_suffix(tmp_path):
    path = write_points_xlsx(tmp_path / "points", ROWS[:1], sheet_name="Run A")
    assert path.suffix == ".xlsx"
    assert openpyxl.load_workbook(path).sheetnames == ["Run A"]


def test_non_finite_values_become_empty_cells():
    wb = points_to_workbook([(1, math.nan, 2.0), (2, 1.0, math.inf)])
    values = list(wb.active.iter_rows(values_only=True))
    assert values[1] == (1, None, 2.0)
    assert values[2] == (2, 1.0, None)


def test_empty_table_has_header_only():
    values = list(points_to_workbook([]).active.iter_rows(values_only=True))
    assert values == [("Point", "X", "Y")]


def test_csv_string():
    text = points_csv_string(ROWS[:2])
    assert text.splitlines() == [
        "Point,X,Y",
        "1,0.5,2.25",
        "2,31.622776601683793,-1.0",
    ]


def test_csv_string_delimiter():
    assert points_csv_string([(1, 1.5, 2.0)], delimiter=";").splitlines()[1] == "1;1.5;2.0"


def test_write_csv(tmp_path):
    path = tmp_path / "plot_data.csv"
    write_points_csv(str(path), ROWS)
    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Point", "X", "Y"]
    assert [(int(a), float(b), float(c)) for a, b, c in rows[1:]] == ROWS


def test_csv_matches_file_output(tmp_path):
    path = tmp_path / "out.csv"
    write_points_csv(str(path), ROWS)
    file_rows = list(csv.reader(io.StringIO(path.read_text(encoding="utf-8"))))
    str_rows = list(csv.reader(io.StringIO(points_csv_string(ROWS))))
    assert file_rows == str_rows
