from __future__ import annotations

"""
Stage 2 – read one toll-operator export into a SourceBatch.

Expected layout of the first sheet:

  row 1   title / date range, e.g. 'Movimientos - 01/01/2024 al 31/01/2024'
  row 2   blank (or free text)
  row 3   field names: Operación, Fecha, Estación, Matrícula, ...
  row 4.. one toll transaction per row
"""

from datetime import date, datetime, time, timedelta
import io
import numbers
from pathlib import Path
from typing import BinaryIO, Union

from openpyxl.utils.datetime import to_excel
import pandas as pd

from .config import HEADER_LABEL_COLUMNS, PLATE_COLUMN, RECORD_HEADER_ROW
from .logger import log
from .models import (
    EMPTY_CELL,
    CellValue,
    Numeric,
    ParseError,
    Record,
    SourceBatch,
    Text,
)

SourceFile = Union[Path, str, bytes, BinaryIO]

_EMPTY_HEADER = "__EMPTY"


def _source_name(source: SourceFile, name: str | None) -> str:
    if name:
        return name
    if isinstance(source, (str, Path)):
        return Path(source).name
    handle_name = getattr(source, "name", None)
    if isinstance(handle_name, str) and handle_name:
        return Path(handle_name).name
    return "<upload>"


def _read_excel_no_header(source: SourceFile) -> pd.DataFrame:
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))
    elif not isinstance(source, (str, Path)):
        source = io.BytesIO(source.read())
    # na_filter=False keeps blank cells as "" instead of NaN
    return pd.read_excel(
        source, sheet_name=0, header=None, dtype=object, na_filter=False
    )


def to_cell_value(value: object) -> CellValue:
    """Decide once whether a raw spreadsheet value is a number or text."""
    if value is None or value is pd.NaT:
        return EMPTY_CELL

    if isinstance(value, bool):
        return Text("TRUE" if value else "FALSE", original=value)

    if isinstance(value, numbers.Real):
        number = float(value)
        if number != number:  # NaN
            return EMPTY_CELL
        return Numeric(number)

    # Date-formatted cells arrive decoded; store the serial the sheet holds
    if isinstance(value, (datetime, date, time, timedelta)):
        return Numeric(float(to_excel(value)))

    return Text(str(value))


def _is_blank(cells: list[CellValue]) -> bool:
    return all(cell == EMPTY_CELL for cell in cells)


def _unique_headers(cells: list[CellValue]) -> list[str]:
    """Field names from the header row; blanks and repeats get suffixes."""
    headers: list[str] = []
    seen: dict[str, int] = {}
    for cell in cells:
        base = cell.text.strip() or _EMPTY_HEADER
        name = base
        if name in seen:
            seen[base] += 1
            name = f"{base}_{seen[base]}"
            while name in seen:
                seen[base] += 1
                name = f"{base}_{seen[base]}"
        seen.setdefault(name, 0)
        headers.append(name)
    return headers


def _header_label(grid: list[list[CellValue]]) -> str:
    if not grid:
        return ""
    first_row = grid[0][:HEADER_LABEL_COLUMNS]
    return " ".join(cell.text for cell in first_row).strip()


def _build_records(
    grid: list[list[CellValue]],
) -> tuple[tuple[str, ...], tuple[Record, ...]]:
    if len(grid) <= RECORD_HEADER_ROW:
        return (), ()

    header_cells = grid[RECORD_HEADER_ROW]
    data_rows = [row for row in grid[RECORD_HEADER_ROW + 1 :] if not _is_blank(row)]
    headers = _unique_headers(header_cells)

    # Columns with neither a field name nor any data are layout padding
    keep = [
        idx
        for idx, cell in enumerate(header_cells)
        if cell != EMPTY_CELL
        or any(row[idx] != EMPTY_CELL for row in data_rows)
    ]
    columns = tuple(headers[idx] for idx in keep)

    records: list[Record] = []
    for row in data_rows:
        fields = {headers[idx]: row[idx] for idx in keep}
        records.append(Record(fields=fields))
    return columns, tuple(records)


def read_source_batch(source: SourceFile, name: str | None = None) -> SourceBatch:
    """
    Parse the first sheet of one .xlsx/.xls file.

    Raises ParseError when the file is not a readable spreadsheet or its
    header row has no plate column. A sheet without data rows gives an empty
    batch.
    """
    source_name = _source_name(source, name)
    log.debug("Stage 2 – reading %s", source_name)

    try:
        df = _read_excel_no_header(source)
    except Exception as exc:  # noqa: BLE001
        raise ParseError(source_name, f"failed to read spreadsheet: {exc}") from exc

    grid = [[to_cell_value(value) for value in row] for row in df.itertuples(index=False)]
    header_label = _header_label(grid)
    columns, records = _build_records(grid)

    if records and PLATE_COLUMN not in columns:
        raise ParseError(
            source_name,
            f"header row {RECORD_HEADER_ROW + 1} has no '{PLATE_COLUMN}' column",
        )

    log.debug(
        "Stage 2 – %s: label %r, %d record(s).",
        source_name,
        header_label,
        len(records),
    )
    return SourceBatch(
        source=source_name,
        header_label=header_label,
        columns=columns,
        records=records,
    )


__all__ = [
    "SourceFile",
    "read_source_batch",
    "to_cell_value",
]
