import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Check-in rules
GEOFENCE_RADIUS_METERS = float(os.getenv("GEOFENCE_RADIUS", "50"))
EARLY_ADMISSION_MINUTES = int(os.getenv("EARLY_ADMISSION_MINUTES", "15"))
LATE_THRESHOLD_MINUTES = int(os.getenv("LATE_THRESHOLD_MINUTES", "10"))

UPSERT_MAX_RETRIES = int(os.getenv("UPSERT_MAX_RETRIES", "3"))
BATCH_MAX_WORKERS = int(os.getenv("BATCH_MAX_WORKERS", "1"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
