from __future__ import annotations

"""
Stage 4 – build the output workbook from a SummaryState.

Sheet 1 is the per-plate summary (Resumen); every partition follows as its
own sheet, in the order it was ingested. Exporting only reads the state.
"""

from dataclasses import dataclass
from datetime import datetime
import io
from pathlib import Path

import pandas as pd

from .cell_normalizer import normalize_amount, normalize_date
from .config import (
    AMOUNT_COLUMN,
    DATE_COLUMN,
    OUTPUT_DIR,
    OUTPUT_EXTENSION,
    OUTPUT_FILENAME_PREFIX,
    SOURCES_SEPARATOR,
    SUMMARY_COLUMNS,
    SUMMARY_SHEET_NAME,
)
from .logger import log
from .models import Partition, SummaryState
from .sheet_names import SheetNameRegistry


@dataclass(frozen=True)
class ExportResult:
    payload: bytes
    filename: str
    sheet_names: tuple[str, ...]


def summary_rows(state: SummaryState) -> list[dict[str, object]]:
    """One row per plate, in the order plates were first seen."""
    plate_col, count_col, sources_col = SUMMARY_COLUMNS
    return [
        {
            plate_col: plate,
            count_col: count,
            sources_col: SOURCES_SEPARATOR.join(state.sources.get(plate, [])),
        }
        for plate, count in state.counts.items()
    ]


def _partition_frame(partition: Partition) -> pd.DataFrame:
    """Copy of the partition's rows with Fecha / Monto made readable."""
    rows: list[dict[str, object]] = []
    for record in partition.records:
        row: dict[str, object] = {}
        for column in partition.columns:
            cell = record.get(column)
            if column == DATE_COLUMN:
                row[column] = normalize_date(cell)
            elif column == AMOUNT_COLUMN:
                row[column] = normalize_amount(cell)
            else:
                row[column] = cell.raw
        rows.append(row)
    return pd.DataFrame(rows, columns=list(partition.columns))


def export_filename(now: datetime | None = None) -> str:
    """Resumen_YYYY-MM-DD_HH-MM.xlsx, local time."""
    now = now or datetime.now()
    return f"{OUTPUT_FILENAME_PREFIX}_{now:%Y-%m-%d_%H-%M}.{OUTPUT_EXTENSION}"


def export(state: SummaryState, now: datetime | None = None) -> ExportResult:
    registry = SheetNameRegistry()
    summary_df = pd.DataFrame(summary_rows(state), columns=SUMMARY_COLUMNS)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        summary_df.to_excel(writer, index=False, sheet_name=SUMMARY_SHEET_NAME)
        for partition in state.partitions:
            sheet_name = registry.assign(partition.plate, partition.header_label)
            _partition_frame(partition).to_excel(
                writer, index=False, sheet_name=sheet_name
            )

    result = ExportResult(
        payload=buffer.getvalue(),
        filename=export_filename(now),
        sheet_names=(SUMMARY_SHEET_NAME, *registry.assigned),
    )
    log.info(
        "Stage 4 – workbook %s built: %d plate(s), %d partition sheet(s).",
        result.filename,
        len(summary_df),
        len(registry.assigned),
    )
    return result


def save_export(result: ExportResult, output_dir: Path | None = None) -> Path:
    """Write the exported workbook to ``output_dir`` under its own filename."""
    output_dir = Path(output_dir) if output_dir is not None else OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / result.filename
    out_path.write_bytes(result.payload)
    log.info(
        "Stage 4 – Creating file %s DONE (written to %s with %d sheet(s)).",
        result.filename,
        output_dir,
        len(result.sheet_names),
    )
    return out_path


__all__ = [
    "ExportResult",
    "summary_rows",
    "export_filename",
    "export",
    "save_export",
]
