"""Table layout builder - ``w:tbl`` into rows, grid columns, spans and borders."""

from __future__ import annotations

import logging
from typing import List, Optional

from lxml import etree

from docxlayout.docx_parser.context import BuildContext
from docxlayout.docx_parser.runs import build_paragraph
from docxlayout.docx_parser.units import parse_length, twips_to_px
from docxlayout.exceptions import NodeError
from docxlayout.ir import LayoutNode, Placeholder, Table, TableCell, TableRow

logger = logging.getLogger(__name__)

# w:tcBorders side values that remove the border
NO_BORDER_VALUES = frozenset({"nil", "none"})

# Word's own column limit; caps skipped slots and spans when a table has no grid
MAX_GRID_COLUMNS = 63


def build_table(tbl: etree._Element, ctx: BuildContext) -> Table:
    """Build a Table from a ``w:tbl`` element.

    Column widths come from ``w:tblGrid`` and are shared by every row. The
    declared column count is the grid size, or the widest row when the table
    has no grid. Each row is then fitted to that count so its spans add up
    exactly.

    Args:
        tbl: The w:tbl XML element.
        ctx: Build context of the owning part.

    Returns:
        Table with rows in document order.
    """
    column_widths = _grid_column_widths(tbl, ctx)
    max_columns = len(column_widths) or MAX_GRID_COLUMNS
    rows = [_build_row(tr, max_columns, ctx) for tr in tbl.findall(ctx.w("tr"))]

    if column_widths:
        column_count = len(column_widths)
    else:
        column_count = max((row.span_total for row in rows), default=0)

    for index, row in enumerate(rows):
        _fit_row(row, column_count, index, ctx)

    logger.debug(f"Table with {len(rows)} rows x {column_count} columns")
    return Table(rows=rows, column_widths_px=column_widths, column_count=column_count)


def _grid_column_widths(tbl: etree._Element, ctx: BuildContext) -> List[float]:
    grid = tbl.find(ctx.w("tblGrid"))
    if grid is None:
        return []
    widths: List[float] = []
    for col in grid.findall(ctx.w("gridCol")):
        twips = parse_length(col.get(ctx.w("w")))
        widths.append(twips_to_px(twips) if twips is not None else 0.0)
    return widths


def _build_row(tr: etree._Element, max_columns: int, ctx: BuildContext) -> TableRow:
    """Cells of one row. Skipped slots and spans never exceed ``max_columns``."""
    row = TableRow(min_height_px=_row_min_height(tr, ctx))

    trpr = tr.find(ctx.w("trPr"))
    grid_before = _clamp(_int_val(trpr, "gridBefore", ctx) or 0, 0, max_columns)
    grid_after = _int_val(trpr, "gridAfter", ctx) or 0

    column = 0
    for _ in range(grid_before):
        row.cells.append(TableCell(column=column, borderless=True))
        column += 1

    for tc in tr.findall(ctx.w("tc")):
        cell = _build_cell(tc, column, max_columns, ctx)
        row.cells.append(cell)
        # A spanning cell consumes span - 1 extra slots
        column += cell.column_span

    for _ in range(_clamp(grid_after, 0, max_columns - column)):
        row.cells.append(TableCell(column=column, borderless=True))
        column += 1

    return row


def _build_cell(tc: etree._Element, column: int, max_columns: int, ctx: BuildContext) -> TableCell:
    tcpr = tc.find(ctx.w("tcPr"))

    span = _clamp(_int_val(tcpr, "gridSpan", ctx) or 1, 1, max_columns)

    return TableCell(
        content=_cell_content(tc, ctx),
        column_span=span,
        borderless=_is_borderless(tcpr, ctx),
        column=column,
    )


def _cell_content(tc: etree._Element, ctx: BuildContext) -> Optional[LayoutNode]:
    """First paragraph of the cell, or None for a cell without one."""
    p = tc.find(ctx.w("p"))
    if p is None:
        return None
    try:
        return build_paragraph(p, ctx)
    except NodeError as exc:
        ctx.warn(f"table cell replaced by placeholder: {exc}")
        return Placeholder(reason=exc.code)


def _is_borderless(tcpr: Optional[etree._Element], ctx: BuildContext) -> bool:
    """True when any declared border side is nil/none.

    Border styling is reduced to present/absent for the whole cell.
    """
    if tcpr is None:
        return False
    borders = tcpr.find(ctx.w("tcBorders"))
    if borders is None:
        return False
    val_attr = ctx.w("val")
    return any(side.get(val_attr) in NO_BORDER_VALUES for side in borders)


def _row_min_height(tr: etree._Element, ctx: BuildContext) -> Optional[float]:
    trpr = tr.find(ctx.w("trPr"))
    twips = _int_val(trpr, "trHeight", ctx)
    if twips is None:
        return None
    return twips_to_px(twips)


def _fit_row(row: TableRow, column_count: int, index: int, ctx: BuildContext) -> None:
    """Pad or clamp ``row`` so its spans cover exactly ``column_count`` slots."""
    total = row.span_total
    if total < column_count:
        for column in range(total, column_count):
            row.cells.append(TableCell(column=column, borderless=True))
        return

    if total > column_count:
        ctx.warn(f"table row {index} spans {total} columns, grid has {column_count}; clamping")
        kept: List[TableCell] = []
        for cell in row.cells:
            if cell.column >= column_count:
                break
            cell.column_span = min(cell.column_span, column_count - cell.column)
            kept.append(cell)
        row.cells = kept


def _int_val(parent: Optional[etree._Element], name: str, ctx: BuildContext) -> Optional[int]:
    """Integer ``w:val`` of ``parent/w:<name>``, None when absent or invalid."""
    if parent is None:
        return None
    elem = parent.find(ctx.w(name))
    if elem is None:
        return None
    return parse_length(elem.get(ctx.w("val")))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))
