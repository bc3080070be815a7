"""
Solar Inspection Report Package
Fills the official periodic-inspection Excel template with field data.
"""

__version__ = "1.0.0"
__author__ = "Solar Inspection Team"

from .exporter import download_workbook, export_report

__all__ = ["download_workbook", "export_report"]
