"""
Cell addressing.
The template rows are fixed but not indexed, so rows are found by scanning a column.
"""

import re
from typing import Callable, Dict, List

from openpyxl.worksheet.worksheet import Worksheet


SECTION_CODE = re.compile(r'^\d+\.\d+$')


def _cell_text(value) -> str:
    return '' if value is None else str(value)


def build_row_map(ws: Worksheet, column: int, matches: Callable[[str], bool]) -> Dict[str, int]:
    """
    Scan one column top to bottom and map every matching key to its row.

    Args:
        ws: Worksheet to scan
        column: 1-based column holding the keys
        matches: Predicate on the stripped cell text

    Returns:
        Dict of key -> row number, empty when nothing matches
    """
    mapping = {}
    for (cell,) in ws.iter_rows(min_col=column, max_col=column):
        key = _cell_text(cell.value).strip()
        if matches(key):
            mapping[key] = cell.row
    return mapping


def build_code_to_row_map(ws: Worksheet, column: int = 1) -> Dict[str, int]:
    """Map dotted section codes like "3.12" to their rows."""
    return build_row_map(ws, column, lambda key: SECTION_CODE.match(key) is not None)


def find_marker_rows(ws: Worksheet, column: int, prefix: str) -> List[int]:
    """Rows whose text in `column` starts with `prefix`, in document order."""
    return [
        cell.row
        for (cell,) in ws.iter_rows(min_col=column, max_col=column)
        if _cell_text(cell.value).startswith(prefix)
    ]
