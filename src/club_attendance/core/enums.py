from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Trạng thái của một bản ghi điểm danh."""

    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class CheckInType(str, Enum):
    """Đầu buổi (start) hoặc cuối buổi (end)."""

    START = "start"
    END = "end"


class ApprovalStatus(str, Enum):
    """Trạng thái duyệt người tham gia trong danh sách hoạt động."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REMOVED = "removed"


class ReasonCode(str, Enum):
    """Machine-checkable reason attached to every status decision."""

    AUTO_APPROVED = "AUTO_APPROVED"
    MANUAL_APPROVED = "MANUAL_APPROVED"
    OFFICER_APPROVED = "OFFICER_APPROVED"
    OFFICER_REJECTED = "OFFICER_REJECTED"
    LATE_NEEDS_REVIEW = "LATE_NEEDS_REVIEW"
    MISSING_PHOTO_REVIEW = "MISSING_PHOTO_REVIEW"
    OUT_OF_ZONE = "OUT_OF_ZONE"
    DATE_MISMATCH = "DATE_MISMATCH"
    SLOT_NOT_FOUND = "SLOT_NOT_FOUND"
    TOO_EARLY = "TOO_EARLY"
    TOO_LATE = "TOO_LATE"
    MISSING_EVIDENCE = "MISSING_EVIDENCE"
