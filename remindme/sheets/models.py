# remindme/sheets/models.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from ..errors import CellTypeError


@dataclass(frozen=True)
class TextCell:
    """A non-empty text value"""

    value: str


@dataclass(frozen=True)
class EmptyCell:
    """A blank cell"""


@dataclass(frozen=True)
class UnsupportedCell:
    """A value the Sheets API returned that is not text"""

    raw: Any


Cell = Union[TextCell, EmptyCell, UnsupportedCell]
Row = list[Cell]


def to_cell(raw: Any) -> Cell:
    """Type a raw API value once, at the fetch boundary"""
    if raw is None or raw == "":
        return EmptyCell()
    if isinstance(raw, str):
        return TextCell(raw)
    return UnsupportedCell(raw)


def to_row(raw_row: list[Any]) -> Row:
    return [to_cell(v) for v in raw_row]


def cell_text(cell: Cell, sheet: str) -> str:
    """Text of a cell, "" when empty"""
    if isinstance(cell, TextCell):
        return cell.value
    if isinstance(cell, EmptyCell):
        return ""
    raise CellTypeError(sheet, cell.raw)


def is_blank(row: Row) -> bool:
    return all(isinstance(cell, EmptyCell) for cell in row)


class SheetKind(str, Enum):
    """How the rows of a sheet are read"""

    SCHEDULED = "scheduled"
    RECURRING = "recurring"
    MONTHLY = "monthly"
