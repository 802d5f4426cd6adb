from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Sequence, Union

import openpyxl
from openpyxl.workbook import Workbook

from .export_csv import HEADERS
from .model import PointRow

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "plot_data.xlsx"
DEFAULT_SHEET = "Plot Data"


def _cell(v: float) -> Optional[float]:
    # nan/inf are not valid spreadsheet numbers; leave the cell empty
    v = float(v)
    return v if math.isfinite(v) else None


def points_to_workbook(rows: Sequence[PointRow], sheet_name: str = DEFAULT_SHEET) -> Workbook:
    """
    One header row (Point, X, Y) then one row per digitized point.

    Values are written as numbers, unrounded; the table view is the only
    place where decimals are trimmed.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_name
    ws.append(HEADERS)
    for idx, x, y in rows:
        ws.append([int(idx), _cell(x), _cell(y)])
    return wb


def write_points_xlsx(path: Union[str, Path], rows: Sequence[PointRow], sheet_name: str = DEFAULT_SHEET) -> Path:
    path = Path(path)
    if path.suffix.lower() != ".xlsx":
        path = path.with_suffix(".xlsx")
    wb = points_to_workbook(rows, sheet_name=sheet_name)
    wb.save(path)
    logger.info("Wrote %d points to %s", len(rows), path)
    return path
