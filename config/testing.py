import os

SECRET_KEY = "test-secret-key-for-hs256-signing-0001"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_portal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

LATE_CUTOFF = "09:00"
ACTIVE_WINDOW_MINUTES = 5

TOKEN_TTL_MINUTES = 60
SESSION_TTL_HOURS = 120
MANAGER_CACHE_TTL_SECONDS = 300
