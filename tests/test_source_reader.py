import io
from datetime import datetime
from pathlib import Path

import pytest

from conftest import JANUARY_LABEL, toll_row
from toll_summary_pipeline.config import RECORD_COLUMNS
from toll_summary_pipeline.models import EMPTY_CELL, Numeric, ParseError, Text
from toll_summary_pipeline.source_reader import read_source_batch, to_cell_value


def test_reads_label_and_records(make_toll_workbook) -> None:
    path = make_toll_workbook(
        "enero.xlsx",
        [toll_row("ABC123"), toll_row("XYZ999", fecha="02/01/2024 10:00:00", monto="1,50")],
    )

    batch = read_source_batch(path)

    assert batch.source == "enero.xlsx"
    assert batch.header_label == JANUARY_LABEL
    assert batch.columns == tuple(RECORD_COLUMNS)
    assert len(batch.records) == 2

    first, second = batch.records
    assert first.plate == "ABC123"
    assert first.get("Fecha") == Numeric(45292.5)
    assert first.get("Monto") == Numeric(12345.0)
    assert first.get("Saldo") == Text("1000")
    assert second.get("Fecha") == Text("02/01/2024 10:00:00")
    assert second.get("Monto") == Text("1,50")


def test_header_label_joins_first_ten_cells(make_toll_workbook) -> None:
    title = ["Movimientos", "-", "Enero", 2024] + [""] * 6 + ["ignored"]
    path = make_toll_workbook("title.xlsx", [toll_row("ABC123")], title=title)

    assert read_source_batch(path).header_label == "Movimientos - Enero 2024"


def test_missing_title_row_gives_empty_label(make_toll_workbook) -> None:
    path = make_toll_workbook("untitled.xlsx", [toll_row("ABC123")], title=None)

    assert read_source_batch(path).header_label == ""


def test_missing_cells_default_to_empty_text(make_toll_workbook) -> None:
    path = make_toll_workbook("short.xlsx", [["Peaje", 45292.5, "Norte", "ABC123"]])

    record = read_source_batch(path).records[0]

    assert record.plate == "ABC123"
    assert record.get("Observación") == EMPTY_CELL
    assert record.get("Monto") == EMPTY_CELL


def test_blank_rows_are_skipped(make_toll_workbook) -> None:
    path = make_toll_workbook(
        "gaps.xlsx",
        [toll_row("ABC123"), [None] * 10, toll_row("XYZ999")],
    )

    plates = [record.plate for record in read_source_batch(path).records]

    assert plates == ["ABC123", "XYZ999"]


def test_rows_without_plate_are_kept_in_the_batch(make_toll_workbook) -> None:
    path = make_toll_workbook("noplate.xlsx", [toll_row(""), toll_row("ABC123")])

    batch = read_source_batch(path)

    assert [record.plate for record in batch.records] == ["", "ABC123"]


def test_sheet_without_records_gives_empty_batch(make_toll_workbook) -> None:
    path = make_toll_workbook("empty.xlsx", [])

    batch = read_source_batch(path)

    assert batch.is_empty
    assert batch.header_label == JANUARY_LABEL


def test_date_formatted_cells_become_serials(make_toll_workbook) -> None:
    path = make_toll_workbook(
        "dates.xlsx", [toll_row("ABC123", fecha=datetime(2024, 1, 1, 12, 0))]
    )

    record = read_source_batch(path).records[0]

    assert record.get("Fecha") == Numeric(45292.5)


def test_repeated_and_blank_header_names_are_made_unique(make_toll_workbook) -> None:
    header = ["Matrícula", "Monto", "Monto", None, "Saldo"]
    path = make_toll_workbook("dup.xlsx", [["ABC123", 1, 2, "x", 3]], header=header)

    batch = read_source_batch(path)

    assert batch.columns == ("Matrícula", "Monto", "Monto_1", "__EMPTY", "Saldo")


def test_reads_bytes_and_file_objects(make_toll_workbook) -> None:
    path = make_toll_workbook("upload.xlsx", [toll_row("ABC123")])

    from_bytes = read_source_batch(path.read_bytes(), name="upload.xlsx")
    with path.open("rb") as handle:
        from_handle = read_source_batch(handle)

    assert from_bytes.source == "upload.xlsx"
    assert from_bytes.records == from_handle.records
    assert from_handle.source == "upload.xlsx"


def test_unreadable_file_raises_parse_error(tmp_path: Path) -> None:
    bogus = tmp_path / "notes.xlsx"
    bogus.write_text("this is not a spreadsheet", encoding="utf-8")

    with pytest.raises(ParseError) as excinfo:
        read_source_batch(bogus)

    assert excinfo.value.source == "notes.xlsx"


def test_header_without_plate_column_raises_parse_error(make_toll_workbook) -> None:
    path = make_toll_workbook("other.xlsx", [["a", "b"]], header=["Fecha", "Monto"])

    with pytest.raises(ParseError):
        read_source_batch(path)


def test_to_cell_value_tags_raw_values() -> None:
    assert to_cell_value(12) == Numeric(12.0)
    assert to_cell_value(1.5) == Numeric(1.5)
    assert to_cell_value("ABC") == Text("ABC")
    assert to_cell_value("") == EMPTY_CELL
    assert to_cell_value(None) == EMPTY_CELL
    assert to_cell_value(float("nan")) == EMPTY_CELL
    assert to_cell_value(True) == Text("TRUE")
    assert to_cell_value(False).raw is False
    assert to_cell_value(datetime(2024, 1, 1)) == Numeric(45292.0)


def test_reads_legacy_xls_files(make_legacy_toll_workbook) -> None:
    path = make_legacy_toll_workbook(
        "enero.xls",
        [toll_row("ABC123"), toll_row("XYZ999", fecha="02/01/2024 10:00:00", monto="1,50")],
    )

    batch = read_source_batch(path)

    assert batch.source == "enero.xls"
    assert batch.header_label == JANUARY_LABEL
    assert batch.columns == tuple(RECORD_COLUMNS)

    first, second = batch.records
    assert first.get("Matrícula") == Text("ABC123")
    assert first.get("Fecha") == Numeric(45292.5)
    assert first.get("Monto") == Numeric(12345.0)
    assert second.get("Monto") == Text("1,50")


def test_file_object_without_name_is_an_upload(make_toll_workbook) -> None:
    path = make_toll_workbook("anon.xlsx", [toll_row("ABC123")])

    batch = read_source_batch(io.BytesIO(path.read_bytes()))

    assert batch.source == "<upload>"
    assert batch.records[0].plate == "ABC123"
