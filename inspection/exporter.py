"""
Template-based Excel export.
Reads the official template, fills in inspection data and writes the result,
preserving the template's own formatting.
"""

import os
import zipfile
from io import BytesIO
from typing import Dict, Any, List, Optional

import requests
from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.page import PageMargins
from openpyxl.worksheet.properties import PageSetupProperties
from openpyxl.worksheet.filters import AutoFilter

from . import constants
from .exceptions import (
    ExportInProgressError,
    TemplateFetchError,
    TemplateParseError,
    WorkbookSerializationError,
)
from .fillers import fill_ac_sheet, fill_checklist_sheet, fill_dc_sheet, fill_defects_sheet
from .inputs import load_export_settings, normalize_date
from .stripes import bake_table_stripes


FOOTER_LEFT = 'ינשוף'

_exporting_ids = set()


def read_template(source: str, timeout: float = 30) -> bytes:
    """
    Read template bytes from a local path or an http(s) URL.

    Raises:
        TemplateFetchError: The source is missing or answered with a non-2xx status
    """
    if source.startswith(('http://', 'https://')):
        try:
            response = requests.get(source, timeout=timeout)
        except requests.RequestException as exc:
            raise TemplateFetchError(f"Failed to load template: {exc}") from exc
        if not response.ok:
            raise TemplateFetchError(f"Failed to load template: {response.status_code}")
        return response.content

    try:
        with open(source, 'rb') as f:
            return f.read()
    except OSError as exc:
        raise TemplateFetchError(f"Failed to load template: {exc}") from exc


def parse_template(data: bytes) -> Workbook:
    try:
        return load_workbook(BytesIO(data))
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise TemplateParseError(f"Template is not a valid xlsx file: {exc}") from exc


def strip_tables(wb: Workbook):
    """Remove table and autofilter definitions from every worksheet."""
    for ws in wb.worksheets:
        for name in list(ws.tables.keys()):
            del ws.tables[name]
        ws.auto_filter = AutoFilter()


def serialize_workbook(wb: Workbook) -> bytes:
    buffer = BytesIO()
    try:
        wb.save(buffer)
    except (ValueError, TypeError, KeyError) as exc:
        raise WorkbookSerializationError(f"Failed to write workbook: {exc}") from exc
    return buffer.getvalue()


def apply_page_setup(ws, orientation: str = 'portrait', fit_to_width: int = 1,
                     fit_to_height: int = 0, print_area: Optional[str] = None,
                     print_title_rows: Optional[str] = None):
    """Print-ready page setup: A4, fit to width, centered, page footer."""
    ws.page_setup.paperSize = ws.PAPERSIZE_A4
    ws.page_setup.orientation = orientation
    ws.page_setup.fitToWidth = fit_to_width
    # 0 = as many pages as needed
    ws.page_setup.fitToHeight = fit_to_height
    ws.sheet_properties.pageSetUpPr = PageSetupProperties(fitToPage=True)
    ws.print_options.horizontalCentered = True
    ws.page_margins = PageMargins(left=0.4, right=0.4, top=0.5, bottom=0.5, header=0.3, footer=0.3)

    if print_area:
        ws.print_area = print_area
    if print_title_rows:
        ws.print_title_rows = print_title_rows

    ws.oddFooter.left.text = FOOTER_LEFT
    ws.oddFooter.center.text = '&A'
    ws.oddFooter.right.text = 'עמוד &P מתוך &N'


def output_filename(meta: Dict[str, Any], prefix: str = constants.FILENAME_PREFIX,
                    placeholder: str = constants.SITE_PLACEHOLDER) -> str:
    """<prefix>_<site name or placeholder>_<iso date>.xlsx"""
    site = meta.get('site_name') or placeholder
    site = site.replace('/', '_').replace('\\', '_')
    return f"{prefix}_{site}_{normalize_date(meta.get('inspection_date', ''))}.xlsx"


class TemplateExporter:
    """Fills the official template with one inspection."""

    def __init__(self, inspection: Dict[str, Any], all_defects: Optional[List[Dict[str, Any]]] = None,
                 settings: Optional[Dict[str, Any]] = None):
        """
        Initialize exporter.

        Args:
            inspection: Inspection snapshot, not modified
            all_defects: Auto-derived plus user defects; falls back to the
                user-authored defects of the inspection
            settings: Export settings (see inputs.load_export_settings)
        """
        self.inspection = inspection
        self.defects = all_defects if all_defects is not None else inspection['defects']
        if settings is None:
            settings, _ = load_export_settings()
        self.settings = settings
        self.colors = settings['stripe_colors']

    def build_workbook(self, template_bytes: bytes) -> Workbook:
        """Parse the template and fill every sheet it contains."""
        wb = parse_template(template_bytes)

        if constants.SHEET_CHECKLIST in wb.sheetnames:
            print("  Filling checklist sheet...")
            ws = wb[constants.SHEET_CHECKLIST]
            fill_checklist_sheet(ws, self.inspection)
            start, end = self.settings['checklist_rows']
            bake_table_stripes(ws, start, end, constants.CHECKLIST_STRIPE_COLS, self.colors)
            self._page_setup(ws)

        if constants.SHEET_DC in wb.sheetnames:
            print("  Filling DC sheet...")
            ws = wb[constants.SHEET_DC]
            last_row = fill_dc_sheet(ws, self.inspection)
            bake_table_stripes(ws, 2, last_row, constants.DC_STRIPE_COLS, self.colors)
            self._page_setup(ws, orientation='landscape')

        if constants.SHEET_AC in wb.sheetnames:
            print("  Filling AC sheet...")
            ws = wb[constants.SHEET_AC]
            fill_ac_sheet(ws, self.inspection)
            start, end = self.settings['ac_rows']
            bake_table_stripes(ws, start, end, constants.AC_STRIPE_COLS, self.colors)
            self._page_setup(ws)

        if constants.SHEET_DEFECTS in wb.sheetnames:
            print("  Filling defects sheet...")
            ws = wb[constants.SHEET_DEFECTS]
            provisioned = max(ws.max_row - 1, 0)
            if len(self.defects) > provisioned:
                print(f"  Note: {len(self.defects)} defects, template has {provisioned} rows; "
                      f"extending the sheet")
            fill_defects_sheet(ws, self.defects)
            end = max(constants.DEFECT_FIRST_ROW, len(self.defects) + 1)
            bake_table_stripes(ws, constants.DEFECT_FIRST_ROW, end, constants.DEFECT_STRIPE_COLS, self.colors)
            self._page_setup(ws)

        strip_tables(wb)
        return wb

    def _page_setup(self, ws, orientation: str = 'portrait'):
        if self.settings['page_setup']:
            apply_page_setup(ws, orientation=orientation, print_title_rows='1:1')

    def to_bytes(self) -> bytes:
        """Run the whole export and return the xlsx bytes."""
        template_bytes = read_template(self.settings['template_source'], self.settings['request_timeout'])
        wb = self.build_workbook(template_bytes)
        return serialize_workbook(wb)

    def filename(self) -> str:
        return output_filename(self.inspection['meta'], self.settings['filename_prefix'],
                               self.settings['site_placeholder'])

    def export(self, output_dir: Optional[str] = None) -> str:
        """
        Export to a file in output_dir.

        Nothing is written unless the whole workbook was produced.

        Returns:
            Path of the written file
        """
        print("Exporting inspection workbook...")
        data = self.to_bytes()

        output_dir = output_dir or self.settings['output_dir']
        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, self.filename())
        with open(output_path, 'wb') as f:
            f.write(data)

        print(f"Export complete: {output_path}")
        return output_path


def download_workbook(inspection: Dict[str, Any], all_defects: Optional[List[Dict[str, Any]]] = None,
                      settings: Optional[Dict[str, Any]] = None, output_dir: Optional[str] = None) -> str:
    """
    Convenience function to fill the template and write the xlsx file.

    Returns:
        Path of the written file
    """
    exporter = TemplateExporter(inspection, all_defects, settings)
    return exporter.export(output_dir)


def export_report(report: Dict[str, Any], all_defects: Optional[List[Dict[str, Any]]] = None,
                  settings: Optional[Dict[str, Any]] = None, output_dir: Optional[str] = None) -> str:
    """
    Export a saved report, at most one export per report id at a time.

    Raises:
        ExportInProgressError: An export for this report is still running
    """
    report_id = report['id']
    if report_id in _exporting_ids:
        raise ExportInProgressError(f"Export already running for report {report_id}")

    _exporting_ids.add(report_id)
    try:
        return download_workbook(report['inspection'], all_defects, settings, output_dir)
    finally:
        _exporting_ids.discard(report_id)


def is_exporting(report_id: str) -> bool:
    return report_id in _exporting_ids
