from __future__ import annotations

import os
from pathlib import Path

# Root for all toll work (override with TOLL_SUMMARY_ROOT)
TOLLS_ROOT = Path(os.environ.get("TOLL_SUMMARY_ROOT", Path.cwd() / "tolls"))

# ---- Input folders ---------------------------------------------------------

# Toll-operator movement exports (Excel)
INPUT_DIR = TOLLS_ROOT / "Inputs"

ALLOWED_SUFFIXES = {".xls", ".xlsx"}

# ---- Outputs ---------------------------------------------------------------

OUTPUT_DIR = TOLLS_ROOT / "outputs"

OUTPUT_EXTENSION = "xlsx"
OUTPUT_FILENAME_PREFIX = "Resumen"

# ---- Source sheet layout ---------------------------------------------------

# Row 1, columns A..J hold the title / date range of the export
HEADER_LABEL_COLUMNS = 10

# Rows 1-2 are the title block; row 3 carries the field names
RECORD_HEADER_ROW = 2

PLATE_COLUMN = "Matrícula"
DATE_COLUMN = "Fecha"
AMOUNT_COLUMN = "Monto"

RECORD_COLUMNS = [
    "Operación",
    DATE_COLUMN,
    "Estación",
    PLATE_COLUMN,
    "Categoría",
    "Tipo lectura",
    AMOUNT_COLUMN,
    "Saldo",
    "Cuenta",
    "Observación",
]

# ---- Output workbook -------------------------------------------------------

SUMMARY_SHEET_NAME = "Resumen"
SUMMARY_COLUMNS = ["Matrícula", "Peajes", "Fuente"]
SOURCES_SEPARATOR = " | "

SHEET_NAME_MAX_LENGTH = 31

OUTPUT_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"
