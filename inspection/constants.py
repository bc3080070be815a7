"""
Template layout constants.
Sheet names, fixed cell positions and labels of the official inspection template.
"""

# Sheet names (verbatim - the DC sheet name starts with a space)
SHEET_CHECKLIST = 'פרוטוקול בדיקה תקופתית'
SHEET_DC = ' ערכי DC'
SHEET_AC = 'ערכי AC'
SHEET_DEFECTS = 'ריכוז ליקויים'

# Checklist status values
STATUS_UNSET = ''
STATUS_OK = 'תקין'
STATUS_FAULTY = 'לא תקין'
STATUS_VALUES = (STATUS_UNSET, STATUS_OK, STATUS_FAULTY)

# Checklist sheet: (row, column) of header cells
CHECKLIST_SITE_CELL = (2, 2)
CHECKLIST_DATE_CELL = (2, 4)
CHECKLIST_INSPECTOR_CELL = (3, 2)
CHECKLIST_SIGNATURE_CELL = (3, 4)
CHECKLIST_CODE_COL = 1
CHECKLIST_STATUS_COL = 3
CHECKLIST_NOTES_COL = 4

# DC sheet: column of each measurement field, header row is 1
DC_INVERTER_COL = 1
DC_FIELD_COLUMNS = [
    ('string_label', 2),
    ('panel_count', 3),
    ('open_circuit_voltage', 4),
    ('operating_current', 5),
    ('string_riso', 6),
    ('feed_riso_negative', 7),
    ('feed_riso_positive', 8),
]
DC_NUMERIC_FIELDS = [name for name, _ in DC_FIELD_COLUMNS if name != 'string_label']

# AC sheet
AC_CODE_COL = 1
AC_RESULT_COL = 3
AC_NOTES_COL = 4
SERIAL_MARKER = 'מהפך'
SERIAL_MARKER_COL = 2
SERIAL_VALUE_COL = 3

# Defects sheet: data starts right below the header row
DEFECT_FIRST_ROW = 2
DEFECT_COLUMNS = [
    ('component', 1),
    ('fault', 2),
    ('location', 3),
    ('status', 4),
]

# Stripe baking
STRIPE_COLORS = ('FFD9E2F3', 'FFB4C6E7')
CHECKLIST_STRIPE_ROWS = (2, 84)
CHECKLIST_STRIPE_COLS = 4
DC_STRIPE_COLS = 8
AC_STRIPE_ROWS = (2, 42)
AC_STRIPE_COLS = 4
DEFECT_STRIPE_COLS = 4

# Output
FILENAME_PREFIX = 'בדיקה'
SITE_PLACEHOLDER = 'ללא_שם'

# Data model defaults
STRING_LABELS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
MAX_DC_DEPTH = 3
DEFAULT_STRING_COUNT = 4
DEFAULT_REPORT_NAME = 'בדיקה חדשה'
DEFAULT_FOLDER = 'כללי'
COPY_SUFFIX = ' (עותק)'
IMPORTED_REPORT_NAME = 'בדיקה מיובאת'
DEFECT_LOCATION_PREFIX = 'סעיף'


def inverter_label(index: int) -> str:
    """Default display label for the 1-based inverter index."""
    return f'ממיר {index}'
