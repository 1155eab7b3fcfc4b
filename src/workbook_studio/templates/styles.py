"""Shared openpyxl styling helpers for the template builders."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional

from openpyxl.cell.cell import Cell
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.datavalidation import DataValidation
from openpyxl.worksheet.worksheet import Worksheet

from workbook_studio.config import DATE_FORMAT

WHITE = "FFFFFFFF"
HEADER_BORDER = "FFD0D0D0"
DATA_BORDER = "FFE0E0E0"

CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")


def argb(color: str) -> str:
    """Convert ``#RRGGBB`` (or ``RRGGBB``) to an opaque ``FFRRGGBB`` string."""
    value = color.lstrip("#").upper()
    return value if len(value) == 8 else f"FF{value}"


def solid_fill(color: str) -> PatternFill:
    rgb = argb(color)
    return PatternFill(fill_type="solid", start_color=rgb, end_color=rgb)


def thin_border(color: str = DATA_BORDER, style: str = "thin") -> Border:
    side = Side(style=style, color=argb(color))
    return Border(left=side, right=side, top=side, bottom=side)


def write_text(sheet: Worksheet, row: int, column: int, value: Any) -> Cell:
    """Write ``value`` so that a leading ``=`` stays literal text, never a formula."""
    cell = sheet.cell(row=row, column=column, value=value)
    if isinstance(value, str) and value.startswith("="):
        cell.data_type = "s"
    return cell


def apply_header_style(
    cell: Cell,
    bg_color: str,
    font_color: str = WHITE,
    size: int = 11,
    border_style: str = "thin",
) -> None:
    cell.fill = solid_fill(bg_color)
    cell.font = Font(name="Calibri", bold=True, color=argb(font_color), size=size)
    cell.border = thin_border(HEADER_BORDER, border_style)


def apply_data_style(
    cell: Cell,
    bg_color: Optional[str] = None,
    size: int = 10,
    border_color: str = DATA_BORDER,
) -> None:
    if bg_color:
        cell.fill = solid_fill(bg_color)
    cell.font = Font(name="Calibri", size=size)
    cell.border = thin_border(border_color)


def merge_title(
    sheet: Worksheet,
    row: int,
    last_col: int,
    value: str,
    bg_color: str,
    size: int = 11,
    height: Optional[float] = None,
    first_col: int = 1,
) -> Cell:
    """Merge ``row`` across ``first_col..last_col`` and style it as a banner."""
    if last_col > first_col:
        sheet.merge_cells(start_row=row, start_column=first_col, end_row=row, end_column=last_col)
    cell = write_text(sheet, row, first_col, value)
    apply_header_style(cell, bg_color, size=size)
    cell.alignment = CENTER
    if height is not None:
        sheet.row_dimensions[row].height = height
    return cell


def set_column_widths(sheet: Worksheet, widths: Iterable[float], start: int = 1) -> None:
    for offset, width in enumerate(widths):
        sheet.column_dimensions[get_column_letter(start + offset)].width = width


def add_list_validation(
    sheet: Worksheet,
    values: Iterable[str],
    cell_range: str,
    allow_blank: bool = True,
    error_title: Optional[str] = None,
    error: Optional[str] = None,
) -> DataValidation:
    """Attach an in-cell dropdown over ``values`` to ``cell_range``."""
    formula = '"' + ",".join(values) + '"'
    return _attach_list(sheet, formula, cell_range, allow_blank, error_title, error)


def add_range_validation(
    sheet: Worksheet,
    source: str,
    cell_range: str,
    allow_blank: bool = True,
) -> DataValidation:
    """Attach a dropdown whose options are read from the cells in ``source``."""
    return _attach_list(sheet, source, cell_range, allow_blank)


def sheet_range(title: str, first_col: int, first_row: int, last_col: int, last_row: int) -> str:
    """Absolute cross-sheet reference such as ``'Epics'!$B$3:$B$7``."""
    quoted = title.replace("'", "''")
    first = f"${get_column_letter(first_col)}${first_row}"
    last = f"${get_column_letter(last_col)}${last_row}"
    return f"'{quoted}'!{first}:{last}"


def _attach_list(
    sheet: Worksheet,
    formula: str,
    cell_range: str,
    allow_blank: bool,
    error_title: Optional[str] = None,
    error: Optional[str] = None,
) -> DataValidation:
    validation = DataValidation(type="list", formula1=formula, allow_blank=allow_blank)
    if error:
        validation.showErrorMessage = True
        validation.errorTitle = error_title
        validation.error = error
    validation.add(cell_range)
    sheet.add_data_validation(validation)
    return validation


def generated_stamp(today: Optional[date] = None) -> str:
    """Today's date as ``DD/MM/YYYY``."""
    return (today or date.today()).strftime(DATE_FORMAT)
