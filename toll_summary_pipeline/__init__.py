from __future__ import annotations

"""
Toll summary pipeline package.

Stages overview
---------------
Stage 1 – checksums.py
    • Discover & validate the input spreadsheets

Stage 2 – source_reader.py
    • Read each export: header label (row 1) + toll records (row 3 onwards)

Stage 3 – aggregator.py
    • Group records by Matrícula into the caller's SummaryState
      (counts, source labels, per-plate partitions)

Stage 4 – exporter.py
    • Build Resumen + one sheet per plate/range, save the workbook

toll_summary_pipeline_orchestrator.py runs all four stages.
"""
from .models import ParseError, SummaryState
from .aggregator import ingest, ingest_files
from .exporter import export, save_export
from .source_reader import read_source_batch
