import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "club_attendance_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Ho_Chi_Minh")

ON_TIME_WINDOW_MINUTES = int(os.getenv("ON_TIME_WINDOW_MINUTES", "15"))
LATE_WINDOW_MINUTES = int(os.getenv("LATE_WINDOW_MINUTES", "30"))
STORE_MAX_RETRIES = int(os.getenv("STORE_MAX_RETRIES", "3"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
