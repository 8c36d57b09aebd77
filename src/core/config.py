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
DB_PATH = Path(os.environ.get("VOLUNTEER_DB_PATH", PROJECT_ROOT / "data" / "db" / "volunteer.db"))
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# SCHEDULING CONFIGURATION
# =============================================================================

ONE_TIME_SCHEDULE_ID = "oneTime"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

# Zone used to interpret schedule dates/times when a project does not set one
DEFAULT_PROJECT_TIMEZONE = os.environ.get("DEFAULT_PROJECT_TIMEZONE", "UTC")

# Signup statuses that consume a slot's capacity
CAPACITY_STATUSES = frozenset(
    s.strip()
    for s in os.environ.get("CAPACITY_STATUSES", "approved,attended").split(",")
    if s.strip()
)

# Projects cannot be deleted from 24h before start until 48h after end
DELETION_LOCK_HOURS_BEFORE_START = int(os.environ.get("DELETION_LOCK_HOURS_BEFORE_START", "24"))
DELETION_LOCK_HOURS_AFTER_END = int(os.environ.get("DELETION_LOCK_HOURS_AFTER_END", "48"))

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

CAPACITY_REPORT_HEADERS = [
    "Project ID", "Project", "Status", "Schedule ID", "Slot",
    "Date", "Time", "Capacity", "Confirmed", "Remaining",
]

# =============================================================================
# API CONFIGURATION
# =============================================================================

VOLUNTEER_API_KEY = os.environ.get("VOLUNTEER_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
FEED_PAGE_SIZE = int(os.environ.get("FEED_PAGE_SIZE", "21"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
