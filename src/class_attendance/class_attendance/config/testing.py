import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance_test"),
    "connect_timeout": 2,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

GEOFENCE_RADIUS_METERS = 50.0
EARLY_ADMISSION_MINUTES = 15
LATE_THRESHOLD_MINUTES = 10

UPSERT_MAX_RETRIES = 3
BATCH_MAX_WORKERS = 1

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
