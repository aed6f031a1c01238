"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("CRM_DB_PATH", PROJECT_ROOT / "data" / "db" / "crm-calendar.db"))

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

CALENDAR_TIMEZONE = os.environ.get("CALENDAR_TIMEZONE", "UTC")
WEEK_STARTS_ON = int(os.environ.get("WEEK_STARTS_ON", "6"))  # date.weekday(): 0=Mon, 6=Sun

DEFAULT_EVENT_TITLE = "Untitled Event"
DEFAULT_TASK_EVENT_CATEGORY = "task"
MIN_EVENT_DURATION_MINUTES = 30  # drag-resize floor
MAX_OCCURRENCES = 1000  # recurrence expansion safety cap
TIME_GRID_GUTTER_PERCENT = 1.0

# Category key -> label and colour. Unknown keys render as "default".
DEFAULT_CATEGORY = "default"
EVENT_CATEGORIES = {
    "default": {"label": "Default", "color": "#6b7280"},
    "meeting": {"label": "Meeting", "color": "#3b82f6"},
    "call": {"label": "Call", "color": "#22c55e"},
    "task": {"label": "Task", "color": "#a855f7"},
    "break": {"label": "Break", "color": "#f59e0b"},
    "work": {"label": "Work", "color": "#0ea5e9"},
    "design": {"label": "Design", "color": "#ec4899"},
    "presentation": {"label": "Presentation", "color": "#f97316"},
    "conference": {"label": "Conference", "color": "#ef4444"},
}

# =============================================================================
# ACCESS SCOPING
# =============================================================================

DEPARTMENTS = {"management", "sales", "accounts", "trade_shop"}
ASSIGNMENT_TYPES = {"user", "team"}

# =============================================================================
# TASKS
# =============================================================================

TASK_STATUSES = {"todo", "in-progress", "completed"}
TASK_PRIORITIES = {"low", "medium", "high"}
SCHEDULE_STATUSES = {"scheduled", "unscheduled", "partially_scheduled"}
DEFAULT_RELATION_TYPE = "working_session"

# =============================================================================
# API CONFIGURATION
# =============================================================================

CRM_API_KEY = os.environ.get("CRM_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
