import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/coursedesk.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Day boundaries for due-date classification are taken in this zone
LOCAL_TIMEZONE = os.getenv("COURSEDESK_TIMEZONE", "UTC")

# Dashboard
UPCOMING_WINDOW_DAYS = 7  # "this week" = due within the next 7 days

# Grading
AUTOSAVE_IDLE_SECONDS = 1.0  # commit a draft after 1s without edits

# Course defaults
DEFAULT_POINTS_POSSIBLE = 100
INVITE_CODE_LENGTH = 8
