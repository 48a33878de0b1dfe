from __future__ import annotations

from pathlib import Path

from .config import ALLOWED_SUFFIXES, INPUT_DIR
from .logger import log


# ---------------------------------------------------------------------------
# Stage 1 – input folder checks
# ---------------------------------------------------------------------------

def _discover_spreadsheets(folder: Path, allowed_suffixes: set[str]) -> list[Path]:
    """
    Stage 1 helper – Ensure folder exists and holds at least one spreadsheet.
    Files of any other type are left out with a warning; lock files written
    by Excel while a workbook is open (``~$...``) are ignored.
    """
    if not folder.exists():
        msg = f"Stage 1 FAILED – input folder missing: {folder}"
        log.error(msg)
        raise FileNotFoundError(msg)

    files = [
        p
        for p in sorted(folder.iterdir())
        if p.is_file() and not p.name.startswith("~$")
    ]

    skipped = [p for p in files if p.suffix.lower() not in allowed_suffixes]
    if skipped:
        names = ", ".join(p.name for p in skipped)
        log.warning(
            "Stage 1 – skipping non-spreadsheet file(s); allowed types %s: %s",
            sorted(allowed_suffixes),
            names,
        )

    spreadsheets = [p for p in files if p.suffix.lower() in allowed_suffixes]
    if not spreadsheets:
        msg = f"Stage 1 FAILED – no spreadsheet files found in input folder: {folder}"
        log.error(msg)
        raise FileNotFoundError(msg)

    log.info(
        "Stage 1 – %d spreadsheet(s) found, PASS to Stage 2",
        len(spreadsheets),
    )
    return spreadsheets


def stage1_discover_toll_excels(folder: Path | None = None) -> list[Path]:
    return _discover_spreadsheets(
        Path(folder) if folder is not None else INPUT_DIR,
        ALLOWED_SUFFIXES,
    )
