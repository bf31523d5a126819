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
DB_PATH = Path(os.environ.get("ONCALL_DB_PATH", PROJECT_ROOT / "data" / "db" / "oncall-compensation.db"))
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# PAGERDUTY CONFIGURATION
# =============================================================================

PAGERDUTY_BASE_URL = os.environ.get("PAGERDUTY_BASE_URL", "https://api.pagerduty.com")
PAGERDUTY_API_TOKEN = os.environ.get("PAGERDUTY_API_TOKEN", "")
PAGERDUTY_TIMEOUT_SECONDS = float(os.environ.get("PAGERDUTY_TIMEOUT_SECONDS", "30"))
PAGERDUTY_ACCEPT_HEADER = "application/vnd.pagerduty+json;version=2"
PAGERDUTY_SCHEDULE_LIST_LIMIT = 100

# =============================================================================
# PAYMENT RATES
# =============================================================================

DEFAULT_WEEKDAY_RATE = float(os.environ.get("DEFAULT_WEEKDAY_RATE", "50"))  # per weekday (Mon-Thu)
DEFAULT_WEEKEND_RATE = float(os.environ.get("DEFAULT_WEEKEND_RATE", "75"))  # per weekend day (Fri-Sun)
CURRENCY = "GBP"
CURRENCY_SYMBOL = "£"

# Accepted range for caller-supplied rates (inclusive)
RATE_MIN = 25
RATE_MAX = 200

# =============================================================================
# ATTRIBUTION
# =============================================================================

DEFAULT_TIMEZONE = "UTC"

# Python weekday() numbering: Monday = 0 ... Sunday = 6
WEEKDAY_DAYS = {0, 1, 2, 3}  # Mon-Thu
WEEKEND_DAYS = {4, 5, 6}  # Fri-Sun

# One of: first_active, shared_or_utc, utc
ATTRIBUTION_TIMEZONE_POLICY = os.environ.get("ATTRIBUTION_TIMEZONE_POLICY", "first_active")

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

REPORT_TYPE = "compensation_report"
SCHEDULE_SHEET_HEADERS = [
    "Employee",
    "Weekday Units",
    "Weekend Units",
    "Total Compensation",
    "Overlapping",
]
SUMMARY_SHEET_HEADERS = ["Schedule", "Time Zone", "Employees", "Total Compensation"]

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
