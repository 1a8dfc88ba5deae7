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
DB_PATH = PROJECT_ROOT / "data" / "db" / "availability.db"
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# FEED CONFIGURATION
# =============================================================================

# Main iCal feed of the property, and a secondary URL tried if it fails
ICAL_URL = os.environ.get("ICAL_URL", "")
ICAL_URL_FALLBACK = os.environ.get("ICAL_URL_FALLBACK", "")

# Public proxy used when the feed host refuses direct requests
PROXY_URL = os.environ.get("PROXY_URL", "https://api.allorigins.win/raw")

ICAL_REQUEST_TIMEOUT = int(os.environ.get("ICAL_REQUEST_TIMEOUT", "20"))
ICAL_USER_AGENT = os.environ.get("ICAL_USER_AGENT", "AvailabilityCalendar/1.0")

# =============================================================================
# ICS CODEC
# =============================================================================

DEFAULT_SUMMARY = "Reserved"
ICS_VERSION = "2.0"
ICS_PRODID = "-//ZenCalendar//Availability//EN"
EXPORT_FILENAME = "calendar_backup.ics"

# =============================================================================
# DISPLAY
# =============================================================================

MONTH_NAMES = [
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
]
WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# =============================================================================
# API CONFIGURATION
# =============================================================================

AVAILABILITY_API_KEY = os.environ.get("AVAILABILITY_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "5"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
API_VERSION = "1.0.0"
