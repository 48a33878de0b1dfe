from __future__ import annotations

"""
Master runner for the toll summary pipeline.

4-stage view
------------
Stage 1 – checksums.py
    • Discover the toll exports in the input folder

Stage 2 – source_reader.py
    • Read each export (header label + records)

Stage 3 – aggregator.py
    • Group records by Matrícula into one SummaryState

Stage 4 – exporter.py
    • Build Resumen_<timestamp>.xlsx and save it to the output folder
"""

import sys

from toll_summary_pipeline.config import SUMMARY_COLUMNS
from toll_summary_pipeline.logger import log
from toll_summary_pipeline.checksums import stage1_discover_toll_excels
from toll_summary_pipeline.aggregator import ingest_files
from toll_summary_pipeline.exporter import export, save_export, summary_rows
from toll_summary_pipeline.models import FileOutcome, SummaryState


def main() -> None:
    """Run one session over the input folder and exit with proper status code."""
    log.info("Toll summary pipeline starting.")
    try:
        files = stage1_discover_toll_excels()
    except Exception:  # noqa: BLE001
        sys.exit(1)

    state = SummaryState()
    outcomes = ingest_files(state, files)
    _log_outcomes(outcomes)
    _log_summary(state)

    result = export(state)
    save_export(result)

    log.info("Stage 4 – Completed Pipeline – %s finished successfully.", result.filename)


def _log_outcomes(outcomes: list[FileOutcome]) -> None:
    """Print an aligned line per input file."""

    name_width = max((len(outcome.source) for outcome in outcomes), default=0)
    log.info("Stage 3 – Files processed:")
    for outcome in outcomes:
        log.info(
            "  • %s | %-8s | %4d record(s) %s",
            outcome.source.ljust(name_width),
            outcome.status.value,
            outcome.records,
            outcome.message,
        )


def _log_summary(state: SummaryState) -> None:
    """Print the per-plate table (Matrícula | Peajes | Fuente)."""

    rows = summary_rows(state)
    if not rows:
        log.warning("Stage 3 – no plates collected; Resumen will be empty.")
        return

    plate_col, count_col, sources_col = SUMMARY_COLUMNS
    plate_width = max(len(str(row[plate_col])) for row in rows)
    log.info("Stage 3 – Resumen por Matrícula:")
    for row in rows:
        log.info(
            "  • %s | %4d | %s",
            str(row[plate_col]).ljust(plate_width),
            row[count_col],
            row[sources_col],
        )


if __name__ == "__main__":
    main()
