import os

# API Configuration
CALENDAR_SCOPE = 'https://www.googleapis.com/auth/calendar'
SCOPES = [CALENDAR_SCOPE]
CONFIG_DIR = os.environ.get('BETTRCAL_CONFIG_DIR', 'config')
TOKEN_FILE = os.path.join(CONFIG_DIR, 'token.json')
CREDENTIALS_FILE = os.path.join(CONFIG_DIR, 'credentials.json')
DONE_EVENTS_FILE = os.path.join(CONFIG_DIR, 'done_events.json')
DEFAULT_CALENDAR_ID = 'primary'
API_MAX_RESULTS = 100
FETCH_DAYS_AHEAD = int(os.environ.get('BETTRCAL_FETCH_DAYS_AHEAD', '30'))

# Logging
LOG_LEVEL = os.environ.get('BETTRCAL_LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

# Views
ZOOM_MONTHLY = 'monthly'
ZOOM_WEEKLY = 'weekly'
ZOOM_DAILY = 'daily'
ZOOM_LEVELS = (ZOOM_DAILY, ZOOM_WEEKLY, ZOOM_MONTHLY)
DEFAULT_ZOOM = ZOOM_MONTHLY
WEEKDAY_NAMES = ["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"]

# Color Theme
BACKGROUND_COLOR = "#1E1E2F"
NAV_BG_COLOR = "#2A2A3B"
DROPDOWN_BG_COLOR = "#252639"
CARD_COLOR = "#1F6AA5"
TEXT_COLOR = "#E0E0E0"
HIGHLIGHT_COLOR = "#6060A0"
DONE_COLOR = "#7A7A8C"
ERROR_COLOR = "#EF4444"

# Fonts
FONT_HEADER = "Segoe UI Semibold"
FONT_HEADER_SIZE = 18
FONT_LABEL = "Segoe UI"
FONT_LABEL_SIZE = 14
FONT_SMALL = "Segoe UI"
FONT_SMALL_SIZE = 12
FONT_DAY = "Segoe UI Semibold"
FONT_DAY_SIZE = 12
PADDING = 10

# UI Constants
DEFAULT_DIALOG_WIDTH = 420
DEFAULT_DIALOG_HEIGHT = 640
DAY_DIALOG_WIDTH = 380
DAY_DIALOG_HEIGHT = 420
DEFAULT_WINDOW_SIZE = (1400, 1000)
MAX_EVENTS_PER_CELL = 2

# StyleSheets
MAIN_STYLE = f"""
QMainWindow, QDialog {{
    background-color: {BACKGROUND_COLOR};
}}
QScrollArea {{
    background-color: {BACKGROUND_COLOR};
    border: none;
}}
QLabel, QCheckBox {{
    color: {TEXT_COLOR};
}}
QPushButton {{
    background-color: {CARD_COLOR};
    color: white;
    border: none;
    border-radius: 4px;
    padding: 8px 16px;
    font-weight: bold;
}}
QPushButton:hover {{
    background-color: #2980b9;
}}
QPushButton:checked {{
    background-color: {HIGHLIGHT_COLOR};
}}
QLineEdit, QTextEdit {{
    background-color: {DROPDOWN_BG_COLOR};
    color: {TEXT_COLOR};
    border: 1px solid #3D3D5C;
    border-radius: 4px;
    padding: 6px;
}}
QFrame[frameShape="4"] {{
    color: #3D3D5C;
}}
QDateEdit, QSpinBox {{
    background-color: {DROPDOWN_BG_COLOR};
    color: {TEXT_COLOR};
    border: 1px solid #3D3D5C;
    border-radius: 4px;
    padding: 6px;
}}
QComboBox {{
    background-color: {DROPDOWN_BG_COLOR};
    color: {TEXT_COLOR};
    border: 1px solid #3D3D5C;
    border-radius: 4px;
    padding: 6px;
}}
QComboBox QAbstractItemView {{
    background-color: {DROPDOWN_BG_COLOR};
    color: {TEXT_COLOR};
    selection-background-color: {HIGHLIGHT_COLOR};
}}
"""
