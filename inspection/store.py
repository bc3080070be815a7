"""
Inspection editing operations.
Mutates one report's inspection in place and persists it after every change.
"""

from typing import Dict, Any, List, Optional

from . import constants
from .catalog import create_ac_measurements_from_template, create_checklist_from_template
from .dc_tree import (
    create_dc_measurement,
    descendant_ids,
    generate_dc_measurements,
    measurement_depth,
    migrate_dc_measurements,
    next_child_label,
    next_top_level_label,
)
from .defects import derive_auto_defects, empty_defect, merge_defects
from .reports import ReportRepository


def _sync_with_template(entries: List[Dict[str, Any]], template: List[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    """Fill an empty list from the template, else append template entries it lacks."""
    if not entries:
        return template
    existing = {e[key] for e in entries}
    entries.extend(t for t in template if t[key] not in existing)
    return entries


def _generate_inverter_serials(configs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [{'inverter_index': c['index'], 'serial_number': ''} for c in configs]


class InspectionStore:
    """Editing session for one saved report."""

    def __init__(self, report: Dict[str, Any], catalog: Dict[str, Any],
                 repository: Optional[ReportRepository] = None):
        self.report = report
        self.catalog = catalog
        self.repository = repository

        inspection = report['inspection']
        inspection['checklist'] = _sync_with_template(
            inspection['checklist'], create_checklist_from_template(catalog), 'section_code')
        inspection['ac_measurements'] = _sync_with_template(
            inspection['ac_measurements'], create_ac_measurements_from_template(catalog), 'item_code')
        migrate_dc_measurements(inspection['dc_measurements'])

    @property
    def inspection(self) -> Dict[str, Any]:
        return self.report['inspection']

    @property
    def auto_defects(self) -> List[Dict[str, Any]]:
        return derive_auto_defects(self.inspection['checklist'], self.catalog)

    @property
    def all_defects(self) -> List[Dict[str, Any]]:
        return merge_defects(self.auto_defects, self.inspection['defects'])

    def save(self):
        if self.repository is None:
            return
        self.repository.save_report(self.report)
        inspector = self.inspection['meta'].get('inspector_name')
        if inspector:
            self.repository.remember_inspector(inspector)

    def update_report_name(self, name: str):
        self.report['name'] = name
        self.save()

    def update_meta(self, **meta):
        self.inspection['meta'].update(meta)
        site_name = meta.get('site_name')
        if site_name and self.report.get('name') in ('', None, constants.DEFAULT_REPORT_NAME):
            self.report['name'] = site_name
        self.save()

    def _regenerate_strings(self):
        # Any inverter change resets all per-string data and serials
        configs = self.inspection['inverter_configs']
        self.inspection['dc_measurements'] = generate_dc_measurements(configs)
        self.inspection['inverter_serials'] = _generate_inverter_serials(configs)

    def set_inverter_configs(self, count: int, default_strings: int = constants.DEFAULT_STRING_COUNT):
        existing = self.inspection['inverter_configs']
        configs = []
        for i in range(count):
            previous = existing[i] if i < len(existing) else {}
            configs.append({
                'index': i + 1,
                'label': previous.get('label', constants.inverter_label(i + 1)),
                'string_count': previous.get('string_count', default_strings),
            })
        self.inspection['inverter_configs'] = configs
        self._regenerate_strings()
        self.save()

    def update_inverter_config(self, index: int, **updates):
        for config in self.inspection['inverter_configs']:
            if config['index'] == index:
                config.update(updates)
                self._regenerate_strings()
                self.save()
                return

    def update_checklist_item(self, section_code: str, status: Optional[str] = None,
                              notes: Optional[str] = None):
        if status is not None and status not in constants.STATUS_VALUES:
            raise ValueError(f"Invalid checklist status: {status}")
        for item in self.inspection['checklist']:
            if item['section_code'] == section_code:
                if status is not None:
                    item['status'] = status
                if notes is not None:
                    item['notes'] = notes
                self.save()
                return

    def mark_section_all_ok(self, section_code: str):
        """Mark every unset item of a section as normal."""
        prefix = f"{section_code}."
        for item in self.inspection['checklist']:
            if item['section_code'].startswith(prefix) and not item.get('status'):
                item['status'] = constants.STATUS_OK
        self.save()

    def _find_dc(self, measurement_id: str) -> Optional[Dict[str, Any]]:
        for m in self.inspection['dc_measurements']:
            if m['id'] == measurement_id:
                return m
        return None

    def update_dc_measurement(self, measurement_id: str, **updates):
        m = self._find_dc(measurement_id)
        if m is not None:
            m.update(updates)
            self.save()

    def add_dc_string(self, inverter_index: int) -> Dict[str, Any]:
        measurements = self.inspection['dc_measurements']
        m = create_dc_measurement(inverter_index, next_top_level_label(measurements, inverter_index))
        measurements.append(m)
        self.save()
        return m

    def add_dc_substring(self, parent_id: str) -> Optional[Dict[str, Any]]:
        """Add a child under parent_id. Returns None past the maximum depth."""
        measurements = self.inspection['dc_measurements']
        parent = self._find_dc(parent_id)
        if parent is None:
            return None
        if measurement_depth(measurements, parent_id) >= constants.MAX_DC_DEPTH - 1:
            return None

        label = next_child_label(measurements, parent_id, parent['string_label'])
        m = create_dc_measurement(parent['inverter_index'], label, parent_id)
        measurements.append(m)
        self.save()
        return m

    def remove_dc_measurement(self, measurement_id: str):
        """Remove a measurement and everything below it."""
        measurements = self.inspection['dc_measurements']
        to_remove = {measurement_id, *descendant_ids(measurements, measurement_id)}
        self.inspection['dc_measurements'] = [m for m in measurements if m['id'] not in to_remove]
        self.save()

    def update_ac_measurement(self, item_code: str, result=None, notes: Optional[str] = None):
        for m in self.inspection['ac_measurements']:
            if m['item_code'] == item_code:
                if result is not None:
                    m['result'] = result
                if notes is not None:
                    m['notes'] = notes
                self.save()
                return

    def update_inverter_serial(self, inverter_index: int, serial_number: str):
        for serial in self.inspection['inverter_serials']:
            if serial['inverter_index'] == inverter_index:
                serial['serial_number'] = serial_number
                self.save()
                return

    def add_defect(self, defect: Optional[Dict[str, Any]] = None):
        self.inspection['defects'].append(empty_defect(defect))
        self.save()

    def remove_defect(self, index: int):
        defects = self.inspection['defects']
        if 0 <= index < len(defects):
            del defects[index]
            self.save()

    def duplicate_defect(self, index: int):
        defects = self.inspection['defects']
        if 0 <= index < len(defects):
            defects.insert(index + 1, dict(defects[index]))
            self.save()
