from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest
from openpyxl import Workbook
import xlwt

from toll_summary_pipeline.config import RECORD_COLUMNS

JANUARY_LABEL = "Movimientos - 01/01/2024 al 31/01/2024"
FEBRUARY_LABEL = "Movimientos - 01/02/2024 al 29/02/2024"


def toll_row(plate: str, fecha: object = 45292.5, monto: object = 12345) -> list:
    """A row in RECORD_COLUMNS order."""
    return ["Peaje", fecha, "Estación Norte", plate, "1", "TAG", monto, "1000", "C-1", ""]


def _write_toll_workbook(
    path: Path,
    title: Optional[Sequence[object]],
    rows: Sequence[Sequence[object]],
    header: Sequence[object] = RECORD_COLUMNS,
) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = "Movimientos"
    ws.append(list(title) if title else [])
    ws.append([])
    ws.append(list(header))
    for row in rows:
        ws.append(list(row))
    wb.save(path)
    return path


@pytest.fixture
def make_toll_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a toll-operator export into tmp_path."""

    def _make(
        name: str,
        rows: Sequence[Sequence[object]],
        title: Optional[Sequence[object]] = (JANUARY_LABEL,),
        header: Sequence[object] = RECORD_COLUMNS,
    ) -> Path:
        return _write_toll_workbook(tmp_path / name, title, rows, header)

    return _make


def _write_legacy_toll_workbook(
    path: Path,
    title: Optional[Sequence[object]],
    rows: Sequence[Sequence[object]],
) -> Path:
    wb = xlwt.Workbook()
    ws = wb.add_sheet("Movimientos")
    grid = [list(title) if title else [], [], list(RECORD_COLUMNS), *rows]
    for row_idx, row in enumerate(grid):
        for col_idx, value in enumerate(row):
            if value is not None and value != "":
                ws.write(row_idx, col_idx, value)
    wb.save(str(path))
    return path


@pytest.fixture
def make_legacy_toll_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Same layout as make_toll_workbook, saved as a BIFF8 .xls file."""

    def _make(
        name: str,
        rows: Sequence[Sequence[object]],
        title: Optional[Sequence[object]] = (JANUARY_LABEL,),
    ) -> Path:
        return _write_legacy_toll_workbook(tmp_path / name, title, rows)

    return _make
