"""
Sheet fillers.
Each filler writes cell values into the template and never touches styles.
"""

import pandas as pd
from typing import Dict, Any, List

from openpyxl.cell.cell import MergedCell
from openpyxl.worksheet.worksheet import Worksheet

from . import constants
from .addressing import build_code_to_row_map, find_marker_rows
from .dc_tree import dc_tree_frame


def is_blank(value: Any) -> bool:
    """True for values that must not overwrite a template cell."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ''
    return bool(pd.isna(value))


def _writable_cell(ws: Worksheet, row: int, column: int):
    cell = ws.cell(row=row, column=column)
    if isinstance(cell, MergedCell):
        # Merged ranges keep their value in the top-left cell
        for merged in ws.merged_cells.ranges:
            if cell.coordinate in merged:
                return ws.cell(row=merged.min_row, column=merged.min_col)
    return cell


def set_cell(ws: Worksheet, row: int, column: int, value: Any):
    """Set a cell value, keeping the existing style. Blank values are skipped."""
    if is_blank(value):
        return
    _writable_cell(ws, row, column).value = value


def fill_checklist_sheet(ws: Worksheet, inspection: Dict[str, Any]):
    """Header cells plus status/notes for every checklist item found in column A."""
    meta = inspection['meta']

    # Row 2: site name, inspection date. Row 3: inspector, signature
    set_cell(ws, *constants.CHECKLIST_SITE_CELL, meta.get('site_name'))
    set_cell(ws, *constants.CHECKLIST_DATE_CELL, meta.get('inspection_date'))
    set_cell(ws, *constants.CHECKLIST_INSPECTOR_CELL, meta.get('inspector_name'))
    if meta.get('signature_text'):
        set_cell(ws, *constants.CHECKLIST_SIGNATURE_CELL, meta['signature_text'])

    code_to_row = build_code_to_row_map(ws, constants.CHECKLIST_CODE_COL)

    for item in inspection['checklist']:
        row = code_to_row.get(item['section_code'])
        if row is None:
            continue
        set_cell(ws, row, constants.CHECKLIST_STATUS_COL, item.get('status'))
        set_cell(ws, row, constants.CHECKLIST_NOTES_COL, item.get('notes'))


def fill_dc_sheet(ws: Worksheet, inspection: Dict[str, Any]) -> int:
    """
    Write an inverter header row followed by its measurement tree, per inverter.

    Header row 1 is kept from the template; data starts at row 2.

    Returns:
        Last row written (1 when there is nothing to write)
    """
    current_row = 2

    for config in inspection['inverter_configs']:
        set_cell(ws, current_row, constants.DC_INVERTER_COL, config['index'])
        current_row += 1

        frame = dc_tree_frame(inspection['dc_measurements'], config['index'])
        for record in frame.itertuples(index=False):
            for field, column in constants.DC_FIELD_COLUMNS:
                set_cell(ws, current_row, column, getattr(record, field))
            current_row += 1

    return current_row - 1


def fill_ac_sheet(ws: Worksheet, inspection: Dict[str, Any]):
    """AC results by item code, then inverter serials into the marker rows."""
    code_to_row = build_code_to_row_map(ws, constants.AC_CODE_COL)

    for m in inspection['ac_measurements']:
        row = code_to_row.get(m['item_code'])
        if row is None:
            continue
        set_cell(ws, row, constants.AC_RESULT_COL, m.get('result'))
        set_cell(ws, row, constants.AC_NOTES_COL, m.get('notes'))

    # Serial rows carry no code, only a label prefix; match them by position
    serial_rows = find_marker_rows(ws, constants.SERIAL_MARKER_COL, constants.SERIAL_MARKER)
    for serial_row, serial in zip(serial_rows, inspection['inverter_serials']):
        set_cell(ws, serial_row, constants.SERIAL_VALUE_COL, serial.get('serial_number'))


def fill_defects_sheet(ws: Worksheet, defects: List[Dict[str, Any]]):
    """Defects by list position, first one on row 2."""
    for i, defect in enumerate(defects):
        row = constants.DEFECT_FIRST_ROW + i
        for field, column in constants.DEFECT_COLUMNS:
            set_cell(ws, row, column, defect.get(field))
