"""
Row stripe baking.
Table styles paint alternating rows at render time; after the tables are
stripped the stripes must exist as explicit cell fills.
"""

import numpy as np
from copy import copy
from typing import List, Optional, Sequence

from openpyxl.styles import PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from .constants import STRIPE_COLORS


def has_solid_fill(cell) -> bool:
    """Check whether a cell already has an explicit solid fill."""
    fill = cell.fill
    return fill is not None and getattr(fill, 'fill_type', None) == 'solid'


def plan_stripes(flags: Sequence[bool], colors: Sequence[str] = STRIPE_COLORS) -> List[Optional[str]]:
    """
    Stripe color per row, None for flagged rows.

    Parity counts every row, flagged or not.
    """
    parity = np.arange(len(flags)) % 2
    palette = np.where(parity == 0, colors[0], colors[1])
    return [None if flag else str(color) for flag, color in zip(flags, palette)]


def _restyle(cell, color: str):
    # Assign every style part so no reference to the old style record survives
    cell.font = copy(cell.font)
    cell.alignment = copy(cell.alignment)
    cell.border = copy(cell.border)
    cell.fill = PatternFill(fill_type='solid', start_color=color, end_color=color)


def bake_table_stripes(ws: Worksheet, start_row: int, end_row: int, col_count: int,
                       colors: Sequence[str] = STRIPE_COLORS):
    """
    Apply alternating fills to rows start_row..end_row across col_count columns.

    Rows whose first cell already has a solid fill are template header or
    subtotal rows and keep their style.
    """
    if end_row < start_row:
        return

    rows = range(start_row, end_row + 1)

    # Phase 1: flag pre-filled rows before any cell is modified
    flags = [has_solid_fill(ws.cell(row=r, column=1)) for r in rows]

    # Phase 2: restyle the remaining rows
    for r, color in zip(rows, plan_stripes(flags, colors)):
        if color is None:
            continue
        for c in range(1, col_count + 1):
            _restyle(ws.cell(row=r, column=c), color)
