import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "presence_test_db"),
}

LATE_GRACE_MINUTES = 0
REFRESH_INTERVAL_SECONDS = 1

LOG_LEVEL = "WARNING"
LOG_FORMAT = "plain"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
