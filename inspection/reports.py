"""
Report persistence.
Each report is one JSON blob in a directory, with a summary index beside it.
"""

import json
import os
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

from . import constants
from .inputs import InspectionLoader


INDEX_FILE = 'reports_index.json'
FOLDERS_FILE = 'folders.json'
INSPECTOR_FILE = 'inspector.json'
REPORT_PREFIX = 'report_'


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def empty_inspection(inspector_name: str = '') -> Dict[str, Any]:
    return {
        'meta': {
            'site_name': '',
            'inspection_date': datetime.now().date().isoformat(),
            'inspector_name': inspector_name,
            'signature_text': '',
        },
        'inverter_configs': [],
        'checklist': [],
        'dc_measurements': [],
        'ac_measurements': [],
        'inverter_serials': [],
        'defects': [],
    }


class ReportRepository:
    """Key-value store of report records on disk."""

    def __init__(self, root_dir: str):
        self.root_dir = root_dir
        os.makedirs(root_dir, exist_ok=True)

    def _path(self, name: str) -> str:
        return os.path.join(self.root_dir, name)

    def _read_json(self, name: str) -> Optional[Any]:
        """Parsed JSON, or None if the file is missing or unreadable."""
        try:
            with open(self._path(name), 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError):
            return None

    def _write_json(self, name: str, data: Any):
        with open(self._path(name), 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def _load_index(self) -> List[Dict[str, Any]]:
        return self._read_json(INDEX_FILE) or []

    def create_new_report(self, folder: str = constants.DEFAULT_FOLDER) -> Dict[str, Any]:
        """New, unsaved report; the last inspector name is filled in."""
        now = _now()
        return {
            'id': uuid.uuid4().hex[:12],
            'name': constants.DEFAULT_REPORT_NAME,
            'folder': folder,
            'created_at': now,
            'updated_at': now,
            'inspection': empty_inspection(self.last_inspector()),
        }

    def list_reports(self) -> List[Dict[str, Any]]:
        """Report summaries, most recently updated first."""
        return sorted(self._load_index(), key=lambda r: r['updated_at'], reverse=True)

    def load_report(self, report_id: str) -> Optional[Dict[str, Any]]:
        return self._read_json(f"{REPORT_PREFIX}{report_id}.json")

    def save_report(self, report: Dict[str, Any]):
        report['updated_at'] = _now()
        self._write_json(f"{REPORT_PREFIX}{report['id']}.json", report)

        meta = report['inspection']['meta']
        summary = {
            'id': report['id'],
            'name': report['name'],
            'folder': report['folder'],
            'created_at': report['created_at'],
            'updated_at': report['updated_at'],
            'site_name': meta.get('site_name', ''),
            'inspector_name': meta.get('inspector_name', ''),
            'inspection_date': meta.get('inspection_date', ''),
        }
        index = [r for r in self._load_index() if r['id'] != report['id']]
        index.append(summary)
        self._write_json(INDEX_FILE, index)

    def delete_report(self, report_id: str):
        path = self._path(f"{REPORT_PREFIX}{report_id}.json")
        if os.path.exists(path):
            os.remove(path)
        self._write_json(INDEX_FILE, [r for r in self._load_index() if r['id'] != report_id])

    def duplicate_report(self, report_id: str) -> Optional[str]:
        """Copy a report under a new id. Returns the new id, None if the original is missing."""
        original = self.load_report(report_id)
        if original is None:
            return None

        now = _now()
        copy = deepcopy(original)
        copy.update({
            'id': uuid.uuid4().hex[:12],
            'name': original['name'] + constants.COPY_SUFFIX,
            'created_at': now,
            'updated_at': now,
        })
        self.save_report(copy)
        return copy['id']

    def load_folders(self) -> List[str]:
        return self._read_json(FOLDERS_FILE) or [constants.DEFAULT_FOLDER]

    def save_folders(self, folders: List[str]):
        self._write_json(FOLDERS_FILE, folders)

    def remember_inspector(self, name: str):
        self._write_json(INSPECTOR_FILE, {'inspector_name': name})

    def last_inspector(self) -> str:
        data = self._read_json(INSPECTOR_FILE) or {}
        return data.get('inspector_name', '')

    def migrate_legacy_inspection(self, legacy_path: str) -> Optional[str]:
        """
        Import a single-inspection JSON file from before reports existed.

        Runs only while the store is still empty; the legacy file is removed
        once the report is saved.

        Returns:
            New report id, or None when nothing was imported
        """
        if self._load_index() or not os.path.exists(legacy_path):
            return None

        with open(legacy_path, 'r', encoding='utf-8') as f:
            inspection = InspectionLoader().prepare(json.load(f))

        report = self.create_new_report()
        report['inspection'] = inspection
        report['name'] = inspection['meta']['site_name'] or constants.IMPORTED_REPORT_NAME
        self.save_report(report)
        os.remove(legacy_path)
        return report['id']
