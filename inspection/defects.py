"""
Defect list helpers.
Auto-derived defects come from faulty checklist items and are never stored.
"""

import re
from typing import Dict, Any, List, Optional

from . import constants
from .catalog import section_title


LEADING_VERB = re.compile(r'^(ודא|בדוק|בצע|ציין|חזק|מדוד)\s+(את\s+|כי\s+|על\s+)?', re.IGNORECASE)
LEADING_PRESENCE = re.compile(r'^(המצאות ו)')
MAX_FAULT_LENGTH = 60


def shorten_fault(description: str) -> str:
    """Shorten a checklist description into a compact fault label."""
    s = LEADING_VERB.sub('', description, count=1)
    s = LEADING_PRESENCE.sub('', s, count=1)
    # First clause only
    s = re.split(r'[.;]', s, maxsplit=1)[0].split(' - ', 1)[0]
    s = s.strip()
    if len(s) > MAX_FAULT_LENGTH:
        s = s[:MAX_FAULT_LENGTH - 3] + '...'
    return s


def empty_defect(defect: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    defect = defect or {}
    return {field: defect.get(field) or '' for field, _ in constants.DEFECT_COLUMNS}


def derive_auto_defects(checklist: List[Dict[str, Any]], catalog: Dict[str, Any]) -> List[Dict[str, Any]]:
    """One defect per checklist item marked faulty, in checklist order."""
    return [
        {
            'section_code': item['section_code'],
            'component': section_title(catalog, item['section_code']),
            'fault': shorten_fault(item.get('description', '')),
            'location': f"{constants.DEFECT_LOCATION_PREFIX} {item['section_code']}",
            'status': item.get('notes') or '',
        }
        for item in checklist
        if item.get('status') == constants.STATUS_FAULTY
    ]


def merge_defects(auto_defects: List[Dict[str, Any]], user_defects: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Auto-derived defects first, then the user-authored ones."""
    return list(auto_defects) + list(user_defects)
