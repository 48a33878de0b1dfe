from __future__ import annotations

"""Worksheet names for the per-plate sheets of the output workbook."""

import re

from .config import SHEET_NAME_MAX_LENGTH, SUMMARY_SHEET_NAME

# "Movimientos - ", "MOVIMIENTOS – " ... at the start of the range label
_MOVEMENTS_PREFIX_RE = re.compile(r"^\s*Movimientos\s*[-–]?\s*", re.IGNORECASE)

# dd/mm/yyyy -> dd/mm/yy
_FOUR_DIGIT_YEAR_RE = re.compile(r"(\d{2}/\d{2}/)\d{2}(\d{2})")

# Characters a spreadsheet refuses in a sheet name
_FORBIDDEN_CHARS_RE = re.compile(r"[/\\:*?\[\]]")


def shorten_range_label(range_label: str) -> str:
    """'Movimientos - 01/01/2024 al 31/01/2024' -> '01/01/24 al 31/01/24'."""
    label = _MOVEMENTS_PREFIX_RE.sub("", range_label, count=1).strip()
    return _FOUR_DIGIT_YEAR_RE.sub(r"\1\2", label)


def clean_sheet_name(name: str) -> str:
    return _FORBIDDEN_CHARS_RE.sub("", name)[:SHEET_NAME_MAX_LENGTH]


def sanitize(plate: str, range_label: str) -> str:
    """Base (not yet deduplicated) sheet name for a plate / range pair."""
    return clean_sheet_name(f"{plate} - {shorten_range_label(range_label)}")


class SheetNameRegistry:
    """
    Hands out distinct sheet names for one export.

    Names are compared case-insensitively, the way spreadsheet applications
    compare them. The summary sheet name is taken from the start.
    """

    def __init__(self, reserved: tuple[str, ...] = (SUMMARY_SHEET_NAME,)) -> None:
        self._taken: set[str] = {name.casefold() for name in reserved}
        self.assigned: list[str] = []

    def __contains__(self, name: str) -> bool:
        return name.casefold() in self._taken

    def assign(self, plate: str, range_label: str) -> str:
        base = sanitize(plate, range_label)
        name = base
        attempt = 1
        while name in self:
            suffix = f" ({attempt})"
            # keep the suffix inside the length limit
            name = base[: SHEET_NAME_MAX_LENGTH - len(suffix)] + suffix
            attempt += 1

        self._taken.add(name.casefold())
        self.assigned.append(name)
        return name


__all__ = [
    "shorten_range_label",
    "clean_sheet_name",
    "sanitize",
    "SheetNameRegistry",
]
