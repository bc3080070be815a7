"""Unit tests for addressing module."""

import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from openpyxl import Workbook

from inspection import constants
from inspection.addressing import build_code_to_row_map, build_row_map, find_marker_rows
from template_factory import build_template


class TestCodeToRowMap(unittest.TestCase):
    """Test section code scanning."""

    def setUp(self):
        self.wb = build_template()

    def test_codes_mapped_to_rows(self):
        ws = self.wb[constants.SHEET_CHECKLIST]
        mapping = build_code_to_row_map(ws)

        self.assertEqual(mapping['1.1'], 5)
        self.assertEqual(mapping['1.3'], 7)
        self.assertEqual(mapping['2.2'], 10)

    def test_surrounding_whitespace_is_ignored(self):
        ws = self.wb[constants.SHEET_CHECKLIST]
        self.assertEqual(build_code_to_row_map(ws)['2.1'], 9)

    def test_section_headers_and_labels_not_mapped(self):
        ws = self.wb[constants.SHEET_CHECKLIST]
        mapping = build_code_to_row_map(ws)

        self.assertNotIn('1', mapping)
        self.assertNotIn('2', mapping)
        self.assertNotIn('סעיף', mapping)
        self.assertEqual(len(mapping), 5)

    def test_empty_sheet_gives_empty_map(self):
        ws = Workbook().active
        self.assertEqual(build_code_to_row_map(ws), {})

    def test_custom_predicate_and_column(self):
        ws = self.wb[constants.SHEET_AC]
        mapping = build_row_map(ws, 2, lambda key: key.endswith('2'))
        self.assertEqual(mapping, {f'{constants.SERIAL_MARKER} 2': 7})


class TestMarkerRows(unittest.TestCase):
    """Test prefix-marker scanning."""

    def test_serial_rows_in_document_order(self):
        ws = build_template()[constants.SHEET_AC]
        rows = find_marker_rows(ws, constants.SERIAL_MARKER_COL, constants.SERIAL_MARKER)
        self.assertEqual(rows, [6, 7])

    def test_no_marker_rows(self):
        ws = build_template()[constants.SHEET_DEFECTS]
        self.assertEqual(find_marker_rows(ws, 2, constants.SERIAL_MARKER), [])


if __name__ == '__main__':
    unittest.main()
