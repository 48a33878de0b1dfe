from __future__ import annotations

"""
Stage 3 – fold SourceBatches into the caller's SummaryState.

``ingest`` is the only function that writes to a SummaryState. It is
additive: counts only grow, labels and partitions are only appended.
"""

from typing import Iterable

from .config import PLATE_COLUMN
from .logger import log
from .models import (
    FileOutcome,
    IngestStatus,
    ParseError,
    Partition,
    SourceBatch,
    SummaryState,
)
from .source_reader import SourceFile, read_source_batch


def _plates_in_order(batch: SourceBatch) -> list[str]:
    """Distinct non-empty plates, in order of first appearance."""
    return list(dict.fromkeys(record.plate for record in batch.records if record.plate))


def ingest(state: SummaryState, batch: SourceBatch) -> list[Partition]:
    """
    Add one batch to ``state`` and return the partitions it created.

    Steps:
      1. empty batch -> nothing happens
      2. one Partition per distinct plate (records keep their batch order)
      3. the batch label is added to each plate's sources once
      4. every record with a plate adds 1 to that plate's count

    Everything is computed before ``state`` is touched, so a batch is either
    applied whole or not at all.
    """
    if batch.is_empty:
        return []

    new_partitions: list[Partition] = []
    added_counts: dict[str, int] = {}
    for plate in _plates_in_order(batch):
        matching = tuple(record for record in batch.records if record.plate == plate)
        new_partitions.append(
            Partition(
                plate=plate,
                header_label=batch.header_label,
                columns=batch.columns,
                records=matching,
            )
        )
        added_counts[plate] = len(matching)

    for partition in new_partitions:
        labels = state.sources.setdefault(partition.plate, [])
        if partition.header_label not in labels:
            labels.append(partition.header_label)
        state.partitions.append(partition)

    for plate, added in added_counts.items():
        state.counts[plate] = state.counts.get(plate, 0) + added

    return new_partitions


def ingest_files(
    state: SummaryState,
    sources: Iterable[SourceFile],
) -> list[FileOutcome]:
    """
    Read and ingest one upload batch, a file at a time, in the given order.

    A file that cannot be parsed is logged and skipped: it never blocks the
    files after it and leaves what earlier files added untouched.
    """
    outcomes: list[FileOutcome] = []

    for source in sources:
        try:
            batch = read_source_batch(source)
        except ParseError as exc:
            log.error("Stage 2 ERROR – %s", exc)
            outcomes.append(
                FileOutcome(
                    source=exc.source,
                    status=IngestStatus.FAILED,
                    message=exc.message,
                )
            )
            continue

        if batch.is_empty:
            log.warning("Stage 3 – %s has no records; skipped.", batch.source)
            outcomes.append(FileOutcome(source=batch.source, status=IngestStatus.EMPTY))
            continue

        partitions = ingest(state, batch)
        counted = sum(len(partition.records) for partition in partitions)
        dropped = len(batch.records) - counted
        if dropped:
            log.warning(
                "Stage 3 – %s: %d record(s) without '%s' left out of the summary.",
                batch.source,
                dropped,
                PLATE_COLUMN,
            )
        log.info(
            "Stage 3 – %s ingested: %d record(s), %d plate(s), label %r.",
            batch.source,
            counted,
            len(partitions),
            batch.header_label,
        )
        outcomes.append(
            FileOutcome(
                source=batch.source,
                status=IngestStatus.INGESTED,
                records=counted,
                plates=len(partitions),
            )
        )

    failed = [outcome for outcome in outcomes if outcome.status is IngestStatus.FAILED]
    if failed:
        log.error(
            "Stage 3 – %d of %d file(s) could not be read; see messages above.",
            len(failed),
            len(outcomes),
        )
    else:
        log.info("Stage 3 PASS – all %d file(s) processed.", len(outcomes))

    return outcomes


__all__ = [
    "ingest",
    "ingest_files",
]
