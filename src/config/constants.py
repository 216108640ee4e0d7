"""
Application constants
"""

# Sheet layout
SHEET_NAME = "Tasks"
HEADERS = [
    "ID",
    "Task",
    "Status",
    "Priority",
    "Created Date",
    "Due Date",
    "Notes",
    "Tags",
    "Assignee",
]
# Column widths in pixels, one per header
COLUMN_WIDTHS = [60, 350, 130, 110, 150, 150, 300, 200, 200]
# Rows covered by status/priority dropdown validation
VALIDATION_ROW_LIMIT = 1000

# Task options
STATUS_OPTIONS = ["Pending", "In Progress", "Completed", "Blocked"]
PRIORITY_OPTIONS = ["Low", "Medium", "High", "Critical"]

# Batch processing
BATCH_SIZE = 100  # Rows per write, for quota management
BATCH_DELAY = 0.1  # seconds between chunks

# Caching
CACHE_DURATION = 300  # seconds
TASKS_CACHE_KEY = "all_tasks"

# Google Sheets API
GOOGLE_SHEETS_API_BASE_URL = "https://sheets.googleapis.com"
GOOGLE_SHEETS_API_VERSION = "v4"
HEADER_BACKGROUND = {"red": 0.12, "green": 0.31, "blue": 0.47}  # #1f4e79
# Row highlight per cell value: (text, background, text colour or None)
CONDITIONAL_FORMATS = [
    ("Critical", {"red": 1.0, "green": 0.92, "blue": 0.93}, None),  # #ffebee
    ("Completed", {"red": 0.91, "green": 0.96, "blue": 0.91}, {"red": 0.18, "green": 0.49, "blue": 0.2}),
    ("Blocked", {"red": 1.0, "green": 0.95, "blue": 0.88}, {"red": 0.96, "green": 0.49, "blue": 0.0}),
]

# Dialogs kept by the recording dialog client
DIALOG_HISTORY_LIMIT = 50

# Retry configuration
MAX_RETRIES = 3
RETRY_DELAY = 1  # seconds

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
