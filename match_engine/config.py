# config.py
import os
from pathlib import Path

# ---------- Project Paths ----------
BASE_DIR = Path(__file__).resolve().parent
LOG_DIR = Path(os.getenv("MATCH_ENGINE_LOG_DIR", BASE_DIR / "logs"))
LOG_FILE = LOG_DIR / "app.log"

# ---------- MongoDB ----------
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("MATCH_ENGINE_DB", "match_engine_db")

CANDIDATE_COLLECTION = "candidates"
JOB_COLLECTION = "jobs"
MATCH_COLLECTION = "matches"

# ---------- Matching ----------
JOB_SCAN_LIMIT = int(os.getenv("JOB_SCAN_LIMIT", "100"))
CANDIDATE_SCAN_LIMIT = int(os.getenv("CANDIDATE_SCAN_LIMIT", "200"))

CANDIDATE_RESULT_LIMIT = 20  # matches returned for one candidate
JOB_RESULT_LIMIT = 50  # matches returned for one job

MIN_MATCH_SCORE = 30
MANUAL_MATCH_DEFAULT_SCORE = 50  # recruiter-created pair that cannot be scored

# ---------- Notifications ----------
HIGH_MATCH_SCORE = 70
NOTIFY_TOP_N = 3

# ---------- Workers ----------
MATCH_PERSIST_WORKERS = int(os.getenv("MATCH_PERSIST_WORKERS", "4"))
BACKGROUND_WORKERS = int(os.getenv("MATCH_BACKGROUND_WORKERS", "2"))
