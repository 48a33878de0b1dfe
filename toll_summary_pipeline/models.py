from __future__ import annotations

"""Typed shapes shared by the reader, aggregator and exporter."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union

from .config import PLATE_COLUMN


# ---------------------------------------------------------------------------
# Cell values – a number or a piece of text, decided once by the reader
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Numeric:
    value: float

    @property
    def text(self) -> str:
        if float(self.value).is_integer():
            return str(int(self.value))
        return str(self.value)

    @property
    def raw(self) -> float:
        return self.value


@dataclass(frozen=True)
class Text:
    value: str
    # non-string source value (e.g. a boolean cell) written back on export
    original: object = field(default=None, compare=False, repr=False)

    @property
    def text(self) -> str:
        return self.value

    @property
    def raw(self) -> object:
        return self.value if self.original is None else self.original


CellValue = Union[Numeric, Text]

EMPTY_CELL = Text("")


# ---------------------------------------------------------------------------
# Records / batches / partitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Record:
    """One toll-transaction row keyed by the source sheet's field names."""

    fields: Mapping[str, CellValue]

    def get(self, column: str) -> CellValue:
        return self.fields.get(column, EMPTY_CELL)

    @property
    def plate(self) -> str:
        """Plate identifier; empty string when the row has none."""
        return self.get(PLATE_COLUMN).text


@dataclass(frozen=True)
class SourceBatch:
    """Everything read from one input file."""

    source: str
    header_label: str
    columns: tuple[str, ...]
    records: tuple[Record, ...]

    @property
    def is_empty(self) -> bool:
        return not self.records


@dataclass(frozen=True)
class Partition:
    plate: str
    header_label: str
    columns: tuple[str, ...]
    records: tuple[Record, ...]


@dataclass
class SummaryState:
    """
    Session state owned by the caller.

    Created empty, grown only through ``aggregator.ingest`` and read by
    ``exporter.export``. Drop the reference to discard it.
    """

    counts: dict[str, int] = field(default_factory=dict)
    sources: dict[str, list[str]] = field(default_factory=dict)
    partitions: list[Partition] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.counts and not self.partitions


# ---------------------------------------------------------------------------
# Errors / outcomes
# ---------------------------------------------------------------------------


class ParseError(Exception):
    """An input file is not a readable toll spreadsheet."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class IngestStatus(str, Enum):
    """What happened to one input file."""

    INGESTED = "INGESTED"
    EMPTY = "EMPTY"
    FAILED = "FAILED"


@dataclass(frozen=True)
class FileOutcome:
    source: str
    status: IngestStatus
    records: int = 0
    plates: int = 0
    message: str = ""
