"""
Export an inspection to the official Excel template.
Merges auto-derived defects from the checklist before filling the workbook.
"""

import sys

from inspection.catalog import load_catalog
from inspection.defects import derive_auto_defects, merge_defects
from inspection.exporter import download_workbook
from inspection.inputs import load_export_settings, load_inspection


def run_export(inspection_path: str = 'example_inspection.json',
               catalog_path: str = 'example_catalog.json',
               settings_path: str = None,
               output_dir: str = None):
    """
    Fill the template with one inspection.

    Args:
        inspection_path: Inspection or full report JSON
        catalog_path: Checklist/AC catalog JSON (section titles for defects)
        settings_path: Optional export settings JSON
        output_dir: Directory for the xlsx file (default from settings)

    Returns:
        Path to generated Excel file
    """
    print(f"  Reading inspection from: {inspection_path}")
    inspection, defaults_used = load_inspection(inspection_path)
    catalog = load_catalog(catalog_path)
    settings, settings_defaults = load_export_settings(settings_path)

    for line in defaults_used + settings_defaults:
        print(f"  Default: {line}")

    all_defects = merge_defects(derive_auto_defects(inspection['checklist'], catalog),
                                inspection['defects'])

    return download_workbook(inspection, all_defects, settings, output_dir)


if __name__ == "__main__":
    run_export(*sys.argv[1:])
