"""
Input loading module.
Handles export settings and inspection JSON with defaults and audit trail.
"""

import json
from typing import Dict, Any, List, Optional, Tuple
from copy import deepcopy

from dateutil import parser as date_parser

from . import constants
from .dc_tree import migrate_dc_measurements


def normalize_date(value: Any) -> Any:
    """
    Return an ISO YYYY-MM-DD string for a parseable date, else the value unchanged.

    ISO strings are read as such; anything else is read day-first (03/04/2026 is 3 April).
    """
    if not value or not isinstance(value, str):
        return value
    try:
        return date_parser.isoparse(value).date().isoformat()
    except ValueError:
        pass
    try:
        return date_parser.parse(value, dayfirst=True).date().isoformat()
    except (ValueError, OverflowError):
        return value


class SettingsLoader:
    """Loads export settings and records every default that was applied."""

    def __init__(self):
        self.defaults_used = []
        self.validation_errors = []

    def load(self, json_path: Optional[str] = None,
             overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Load settings JSON (optional), apply overrides, then defaults."""
        data = {}
        if json_path:
            with open(json_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        if overrides:
            data.update(overrides)

        settings = self._apply_defaults(data)
        self._validate(settings)

        if self.validation_errors:
            raise ValueError(f"Settings validation failed: {self.validation_errors}")

        return settings

    def _apply_defaults(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result = deepcopy(data)

        self._set_default(result, 'template_source', 'template.xlsx')
        self._set_default(result, 'output_dir', '.')
        self._set_default(result, 'filename_prefix', constants.FILENAME_PREFIX)
        self._set_default(result, 'site_placeholder', constants.SITE_PLACEHOLDER)
        self._set_default(result, 'stripe_colors', list(constants.STRIPE_COLORS))
        self._set_default(result, 'checklist_rows', list(constants.CHECKLIST_STRIPE_ROWS))
        self._set_default(result, 'ac_rows', list(constants.AC_STRIPE_ROWS))
        self._set_default(result, 'page_setup', False)
        self._set_default(result, 'request_timeout', 30)

        return result

    def _set_default(self, section: Dict, key: str, default: Any):
        """Set a default value and track it."""
        if key not in section or section[key] is None:
            section[key] = default
            self.defaults_used.append(f"{key} = {default}")

    def _validate(self, settings: Dict[str, Any]):
        if len(settings['stripe_colors']) != 2:
            self.validation_errors.append("stripe_colors must hold exactly two ARGB colors")

        for key in ('checklist_rows', 'ac_rows'):
            rows = settings[key]
            if len(rows) != 2 or rows[0] < 1 or rows[1] < rows[0]:
                self.validation_errors.append(f"{key} must be [start, end] with 1 <= start <= end")

        if settings['request_timeout'] <= 0:
            self.validation_errors.append("request_timeout must be > 0")


class InspectionLoader:
    """Loads an inspection JSON blob and checks its structure."""

    COLLECTIONS = ['inverter_configs', 'checklist', 'dc_measurements',
                   'ac_measurements', 'inverter_serials', 'defects']

    def __init__(self):
        self.defaults_used = []
        self.validation_errors = []

    def load(self, json_path: str) -> Dict[str, Any]:
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return self.prepare(data)

    def prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Back-fill missing keys, migrate legacy records and validate structure."""
        # Full report records wrap the inspection
        if 'inspection' in data and isinstance(data['inspection'], dict):
            data = data['inspection']

        result = self._apply_defaults(data)
        migrate_dc_measurements(result['dc_measurements'])
        self._validate(result)

        if self.validation_errors:
            raise ValueError(f"Inspection validation failed: {self.validation_errors}")

        return result

    def _apply_defaults(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result = deepcopy(data)

        if 'meta' not in result or result['meta'] is None:
            result['meta'] = {}
        for key in ('site_name', 'inspection_date', 'inspector_name', 'signature_text'):
            if result['meta'].get(key) is None:
                result['meta'][key] = ''
                self.defaults_used.append(f"meta.{key} = ''")

        for key in self.COLLECTIONS:
            if result.get(key) is None:
                result[key] = []
                self.defaults_used.append(f"{key} = []")

        return result

    def _validate(self, data: Dict[str, Any]):
        for key in self.COLLECTIONS:
            if not isinstance(data[key], list):
                self.validation_errors.append(f"{key} must be a list")
        if self.validation_errors:
            return

        for config in data['inverter_configs']:
            if not isinstance(config.get('index'), int) or config['index'] < 1:
                self.validation_errors.append(f"Invalid inverter index: {config.get('index')}")

        for item in data['checklist']:
            if 'section_code' not in item:
                self.validation_errors.append("Checklist item without section_code")
            elif item.get('status', '') not in constants.STATUS_VALUES:
                self.validation_errors.append(
                    f"Invalid status for {item['section_code']}: {item.get('status')}")

        ids = {m['id'] for m in data['dc_measurements']}
        by_id = {m['id']: m for m in data['dc_measurements']}
        for m in data['dc_measurements']:
            parent_id = m.get('parent_id')
            if parent_id is None:
                continue
            if parent_id not in ids:
                self.validation_errors.append(f"DC measurement {m['id']} has unknown parent {parent_id}")
            elif by_id[parent_id].get('inverter_index') != m.get('inverter_index'):
                self.validation_errors.append(f"DC measurement {m['id']} and its parent belong to different inverters")

        for m in data['ac_measurements']:
            if 'item_code' not in m:
                self.validation_errors.append("AC measurement without item_code")


def load_export_settings(json_path: Optional[str] = None,
                         overrides: Optional[Dict[str, Any]] = None) -> Tuple[Dict[str, Any], List[str]]:
    """
    Load export settings with defaults.

    Returns:
        (settings, defaults_used)
    """
    loader = SettingsLoader()
    settings = loader.load(json_path, overrides)
    return settings, loader.defaults_used


def load_inspection(json_path: str) -> Tuple[Dict[str, Any], List[str]]:
    """
    Load and validate an inspection from JSON file.

    Returns:
        (inspection, defaults_used)
    """
    loader = InspectionLoader()
    inspection = loader.load(json_path)
    return inspection, loader.defaults_used
