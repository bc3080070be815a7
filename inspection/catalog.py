"""
Static checklist and AC measurement catalogs.
The catalogs mirror the rows of the official template and are supplied as JSON.
"""

import json
from typing import Dict, Any, List

from . import constants


def load_catalog(json_path: str) -> Dict[str, Any]:
    """
    Load a catalog JSON file.

    Expected format:
    {
        "checklist_sections": [
            {"code": "1", "title": "...", "items": [{"code": "1.1", "description": "..."}]}
        ],
        "ac_items": [{"item_code": "1.1", "description": "..."}]
    }
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    errors = []
    sections = data.get('checklist_sections', [])
    for section in sections:
        for item in section.get('items', []):
            if not str(item.get('code', '')).startswith(f"{section.get('code')}."):
                errors.append(f"Item {item.get('code')} does not belong to section {section.get('code')}")
    if errors:
        raise ValueError(f"Catalog validation failed: {errors}")

    return {
        'checklist_sections': sections,
        'ac_items': data.get('ac_items', []),
    }


def create_checklist_from_template(catalog: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Fresh checklist entries, one per catalog item, in catalog order."""
    return [
        {
            'section_code': item['code'],
            'description': item.get('description', ''),
            'status': constants.STATUS_UNSET,
            'notes': '',
        }
        for section in catalog.get('checklist_sections', [])
        for item in section.get('items', [])
    ]


def create_ac_measurements_from_template(catalog: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        {
            'item_code': item['item_code'],
            'description': item.get('description', ''),
            'result': '',
            'notes': '',
        }
        for item in catalog.get('ac_items', [])
    ]


def section_title(catalog: Dict[str, Any], section_code: str) -> str:
    """Map a checklist code like "1.5" to the title of section "1"."""
    parent_code = section_code.split('.')[0]
    for section in catalog.get('checklist_sections', []):
        if section.get('code') == parent_code:
            return section.get('title', '')
    return ''
