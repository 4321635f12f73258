"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

# Check-in windows, in minutes around the slot boundary.
ON_TIME_WINDOW_MINUTES = 15
LATE_WINDOW_MINUTES = 30

SYSTEM_VERIFIER = "system"
AUTO_APPROVE_NOTE = "Tự động duyệt: Đúng vị trí, đúng thời gian, có ảnh"
MANUAL_CHECKIN_NOTE = "Điểm danh thủ công bởi officer"
OFFICER_APPROVE_NOTE = "Đã xác nhận bởi officer"
OFFICER_REJECT_NOTE = "Bị từ chối bởi officer"

DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"
DEFAULT_STORE_MAX_RETRIES = 3
MAX_TEXT_LENGTH = 500
