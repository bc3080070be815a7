"""Unit tests for stripe baking."""

import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from inspection.constants import STRIPE_COLORS
from inspection.stripes import bake_table_stripes, has_solid_fill, plan_stripes


EVEN, ODD = STRIPE_COLORS
GRAY = 'FFBFBFBF'


def fill_color(cell):
    return cell.fill.fgColor.rgb


class TestPlanStripes(unittest.TestCase):
    """Test stripe color planning."""

    def test_alternates_without_flags(self):
        self.assertEqual(plan_stripes([False] * 4), [EVEN, ODD, EVEN, ODD])

    def test_flagged_rows_keep_global_parity(self):
        plan = plan_stripes([False, True, False, False, True, False])
        self.assertEqual(plan, [EVEN, None, EVEN, ODD, None, ODD])

    def test_empty_range(self):
        self.assertEqual(plan_stripes([]), [])

    def test_custom_colors(self):
        self.assertEqual(plan_stripes([False, False], ['FF000000', 'FFFFFFFF']), ['FF000000', 'FFFFFFFF'])


class TestBakeTableStripes(unittest.TestCase):
    """Test stripe baking on a worksheet."""

    def setUp(self):
        self.wb = Workbook()
        self.ws = self.wb.active
        for row in range(1, 11):
            for col in range(1, 5):
                self.ws.cell(row=row, column=col, value=f'{row}:{col}')
        self.header = PatternFill(fill_type='solid', start_color=GRAY, end_color=GRAY)
        for col in range(1, 5):
            self.ws.cell(row=4, column=col).fill = self.header

    def test_rows_alternate_and_header_kept(self):
        bake_table_stripes(self.ws, 2, 7, 3)

        self.assertEqual(fill_color(self.ws['A2']), EVEN)
        self.assertEqual(fill_color(self.ws['A3']), ODD)
        self.assertEqual(fill_color(self.ws['A4']), GRAY)
        self.assertEqual(fill_color(self.ws['C4']), GRAY)
        # Row 4 still advanced the counter
        self.assertEqual(fill_color(self.ws['A5']), ODD)
        self.assertEqual(fill_color(self.ws['A6']), EVEN)
        self.assertEqual(fill_color(self.ws['A7']), ODD)

    def test_only_given_columns_painted(self):
        bake_table_stripes(self.ws, 2, 3, 3)

        self.assertEqual(fill_color(self.ws['C2']), EVEN)
        self.assertFalse(has_solid_fill(self.ws['D2']))

    def test_rows_outside_range_untouched(self):
        bake_table_stripes(self.ws, 2, 3, 4)

        self.assertFalse(has_solid_fill(self.ws['A1']))
        self.assertFalse(has_solid_fill(self.ws['A8']))

    def test_font_alignment_border_preserved(self):
        cell = self.ws['B2']
        cell.font = Font(bold=True, color='FFFF0000')
        cell.alignment = Alignment(horizontal='right', wrap_text=True)
        cell.border = Border(left=Side(style='thin'))
        cell.number_format = '0.00'

        bake_table_stripes(self.ws, 2, 2, 4)

        self.assertTrue(cell.font.bold)
        self.assertEqual(cell.font.color.rgb, 'FFFF0000')
        self.assertEqual(cell.alignment.horizontal, 'right')
        self.assertTrue(cell.alignment.wrap_text)
        self.assertEqual(cell.border.left.style, 'thin')
        self.assertEqual(cell.number_format, '0.00')
        self.assertEqual(fill_color(cell), EVEN)
        self.assertEqual(cell.value, '2:2')

    def test_cells_sharing_a_style_are_independent(self):
        shared = Font(italic=True)
        self.ws['A2'].font = shared
        self.ws['A9'].font = shared

        bake_table_stripes(self.ws, 2, 2, 1)

        self.assertEqual(fill_color(self.ws['A2']), EVEN)
        self.assertFalse(has_solid_fill(self.ws['A9']))
        self.assertTrue(self.ws['A9'].font.italic)

    def test_end_before_start_is_noop(self):
        bake_table_stripes(self.ws, 5, 4, 4)
        self.assertFalse(has_solid_fill(self.ws['A5']))

    def test_rebake_is_stable(self):
        bake_table_stripes(self.ws, 2, 7, 4)
        first = [fill_color(self.ws.cell(row=r, column=1)) for r in range(2, 8)]

        # Every row now carries a solid fill, so a second pass changes nothing
        bake_table_stripes(self.ws, 2, 7, 4)
        second = [fill_color(self.ws.cell(row=r, column=1)) for r in range(2, 8)]

        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
