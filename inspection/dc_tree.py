"""
DC string measurement tree.
Measurements are stored flat; parent links form a forest per inverter.
"""

import uuid
import pandas as pd
from typing import Dict, Any, List, Optional, Tuple

from . import constants


FRAME_COLUMNS = ['id', 'parent_id', 'depth', 'string_label'] + constants.DC_NUMERIC_FIELDS


def create_dc_measurement(inverter_index: int, string_label: str,
                          parent_id: Optional[str] = None) -> Dict[str, Any]:
    """Create an empty measurement record."""
    measurement = {
        'id': str(uuid.uuid4()),
        'parent_id': parent_id,
        'inverter_index': inverter_index,
        'string_label': string_label,
    }
    for field in constants.DC_NUMERIC_FIELDS:
        measurement[field] = None
    return measurement


def migrate_dc_measurements(measurements: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Back-fill ids, parent links and missing fields of older records, in place."""
    for m in measurements:
        if not m.get('id'):
            m['id'] = str(uuid.uuid4())
        if 'parent_id' not in m:
            m['parent_id'] = None
        for field in constants.DC_NUMERIC_FIELDS:
            m.setdefault(field, None)
    return measurements


def top_level_label(position: int) -> str:
    """Letter label for the 0-based string position."""
    if position < len(constants.STRING_LABELS):
        return constants.STRING_LABELS[position]
    return f"S{position + 1}"


def generate_dc_measurements(configs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """One root measurement per configured string, inverter by inverter."""
    return [
        create_dc_measurement(config['index'], top_level_label(i))
        for config in configs
        for i in range(config['string_count'])
    ]


def ordered_dc_tree(measurements: List[Dict[str, Any]],
                    inverter_index: int) -> List[Tuple[Dict[str, Any], int]]:
    """
    Depth-first pre-order walk of one inverter's forest.

    Siblings keep their insertion order.

    Returns:
        List of (measurement, depth) pairs, depth 0 for roots
    """
    for_inverter = [m for m in measurements if m['inverter_index'] == inverter_index]

    def children_of(parent_id):
        return [m for m in for_inverter if m.get('parent_id') == parent_id]

    result = []

    def walk(parent_id, depth):
        for m in children_of(parent_id):
            result.append((m, depth))
            walk(m['id'], depth + 1)

    walk(None, 0)
    return result


def dc_tree_frame(measurements: List[Dict[str, Any]], inverter_index: int) -> pd.DataFrame:
    """Ordered tree as a DataFrame, one row per measurement in write order."""
    records = []
    for m, depth in ordered_dc_tree(measurements, inverter_index):
        record = {column: m.get(column) for column in FRAME_COLUMNS}
        record['depth'] = depth
        records.append(record)

    # Object dtype keeps ints as ints and missing values as None
    return pd.DataFrame(records, columns=FRAME_COLUMNS, dtype=object)


def descendant_ids(measurements: List[Dict[str, Any]], parent_id: str) -> List[str]:
    """All ids below parent_id, recursively."""
    ids = []
    for m in measurements:
        if m.get('parent_id') == parent_id:
            ids.append(m['id'])
            ids.extend(descendant_ids(measurements, m['id']))
    return ids


def measurement_depth(measurements: List[Dict[str, Any]], measurement_id: str) -> int:
    """Depth of a node, 0 for a root."""
    by_id = {m['id']: m for m in measurements}
    depth = 0
    current = by_id.get(measurement_id)
    while current is not None and current.get('parent_id'):
        depth += 1
        current = by_id.get(current['parent_id'])
    return depth


def next_child_label(measurements: List[Dict[str, Any]], parent_id: str, parent_label: str) -> str:
    siblings = [m for m in measurements if m.get('parent_id') == parent_id]
    return f"{parent_label}.{len(siblings) + 1}"


def next_top_level_label(measurements: List[Dict[str, Any]], inverter_index: int) -> str:
    """First unused letter among the inverter's roots."""
    top_level = [m for m in measurements
                 if m['inverter_index'] == inverter_index and m.get('parent_id') is None]
    used = {m['string_label'] for m in top_level}
    for letter in constants.STRING_LABELS:
        if letter not in used:
            return letter
    return f"S{len(top_level) + 1}"
