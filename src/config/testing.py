import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "club_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

TIMEZONE = "Asia/Ho_Chi_Minh"
ON_TIME_WINDOW_MINUTES = 15
LATE_WINDOW_MINUTES = 30
STORE_MAX_RETRIES = 3

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
