from __future__ import annotations

from datetime import timedelta

from openpyxl.utils.datetime import from_excel

from .config import OUTPUT_DATE_FORMAT
from .models import CellValue, Numeric


def normalize_date(cell: CellValue) -> str:
    """
    Render a Fecha cell for the output workbook.

    Numeric cells are spreadsheet date serials (1900 system) and come out as
    ``dd/mm/yyyy hh:mm:ss``; text is returned unchanged. A serial outside the
    calendar range is left as its plain number.
    """
    if not isinstance(cell, Numeric):
        return cell.text

    try:
        moment = from_excel(cell.value)
        # from_excel keeps milliseconds; round to the nearest second
        moment = (moment + timedelta(microseconds=500_000)).replace(microsecond=0)
    except (OverflowError, ValueError):
        return cell.text
    return moment.strftime(OUTPUT_DATE_FORMAT)


def normalize_amount(cell: CellValue) -> str:
    """
    Render a Monto cell for the output workbook.

    Numeric cells hold cents: 12345 -> "123.45". Text (e.g. "1,50", already
    formatted by the operator) passes through unchanged.
    """
    if isinstance(cell, Numeric):
        return f"{cell.value / 100:.2f}"
    return cell.text


__all__ = [
    "normalize_date",
    "normalize_amount",
]
