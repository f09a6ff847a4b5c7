"""Settings shared by every environment module."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def db_config(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "ward_attendance"),
    }


# Marking window (server-local wall-clock, inclusive, HH:MM)
ATTENDANCE_WINDOW_START = os.getenv("ATTENDANCE_WINDOW_START", "06:00")
ATTENDANCE_WINDOW_END = os.getenv("ATTENDANCE_WINDOW_END", "11:00")

# ADVISORY_ONLY: unusable boundary -> VALID. FAIL_CLOSED: -> OUTSIDE_WARD.
GEOFENCE_MODE = os.getenv("GEOFENCE_MODE", "ADVISORY_ONLY")

# Roster view shows unmarked workers as ABSENT from this local hour on.
ABSENT_CUTOFF_HOUR = int(os.getenv("ABSENT_CUTOFF_HOUR", "9"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
