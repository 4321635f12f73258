import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "club_attendance_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Múi giờ của câu lạc bộ; giờ điểm danh được so sánh theo giờ địa phương này
TIMEZONE = os.getenv("TIMEZONE", "Asia/Ho_Chi_Minh")

ON_TIME_WINDOW_MINUTES = int(os.getenv("ON_TIME_WINDOW_MINUTES", "15"))
LATE_WINDOW_MINUTES = int(os.getenv("LATE_WINDOW_MINUTES", "30"))

# Retries on deadlock / lock wait timeout before answering 409
STORE_MAX_RETRIES = int(os.getenv("STORE_MAX_RETRIES", "3"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
