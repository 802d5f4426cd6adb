from __future__ import annotations

import csv
import io
import logging
from typing import Sequence

from .model import PointRow

logger = logging.getLogger(__name__)

HEADERS = ["Point", "X", "Y"]


def _write_rows(w, rows: Sequence[PointRow]) -> None:
    w.writerow(HEADERS)
    for idx, x, y in rows:
        w.writerow([idx, x, y])


def write_points_csv(path: str, rows: Sequence[PointRow], delimiter: str = ",") -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f, delimiter=delimiter)
        _write_rows(w, rows)
    logger.info("Wrote %d points to %s", len(rows), path)


def points_csv_string(rows: Sequence[PointRow], delimiter: str = ",") -> str:
    buf = io.StringIO()
    w = csv.writer(buf, delimiter=delimiter, lineterminator="\n")
    _write_rows(w, rows)
    return buf.getvalue().rstrip()

