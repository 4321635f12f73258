from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request

from ..core.exceptions import NotFoundError, PreconditionError, StoreConflictError
from ..container import Container
from .model import (
    AttendanceRecord,
    AttendanceSummary,
    CheckOutResult,
    ParticipantAttendance,
)

logger = logging.getLogger(__name__)


def _iso(value) -> Any:
    return value.isoformat() if value is not None else None


def record_to_json(r: AttendanceRecord) -> Dict[str, Any]:
    return {
        "recordId": r.record_id,
        "timeSlot": r.time_slot,
        "checkInType": r.check_in_type.value,
        "checkInTime": _iso(r.check_in_time),
        "location": {"lat": r.location.lat, "lng": r.location.lng, "address": r.location.address},
        "photoUrl": r.photo_url,
        "status": r.status.value,
        "verifiedBy": r.verified_by,
        "verifiedAt": _iso(r.verified_at),
        "verificationNote": r.verification_note,
        "cancelReason": r.cancel_reason,
        "lateReason": r.late_reason,
    }


def summary_to_json(s: AttendanceSummary) -> Dict[str, Any]:
    return {
        "activityId": s.activity_id,
        "participants": [
            {
                "userId": p.user_id,
                "name": p.name,
                "email": p.email,
                "studentId": p.student_id,
                "checkedIn": p.checked_in,
                "checkedInAt": _iso(p.checked_in_at),
                "attendances": [record_to_json(r) for r in p.records],
            }
            for p in s.participants
        ],
        "statistics": {
            "total": s.totals.total,
            "checkedIn": s.totals.checked_in,
            "notCheckedIn": s.totals.not_checked_in,
            "attendanceRate": s.totals.rate,
        },
    }


def participant_to_json(p: ParticipantAttendance) -> Dict[str, Any]:
    return {
        "activityId": p.activity_id,
        "userId": p.user_id,
        "attendances": [record_to_json(r) for r in p.records],
        "slots": {name: {"start": s.start, "end": s.end} for name, s in p.slots.items()},
    }


def register(app: Flask, container: Container) -> None:
    def _error(message: str, status_code: int):
        return jsonify({"success": False, "message": message}), status_code

    def _handle(action):
        try:
            return action()
        except PreconditionError as e:
            return _error(str(e), 400)
        except NotFoundError as e:
            return _error(str(e), 404)
        except StoreConflictError as e:
            return _error(str(e), 409)
        except Exception:
            logger.exception("unexpected attendance failure")
            return _error("Lỗi hệ thống khi điểm danh", 500)

    @app.route("/api/activities/<int:activity_id>/attendance", methods=["PATCH"], endpoint="api_mark_attendance")
    def api_mark_attendance(activity_id: int):
        def _run():
            payload = request.get_json(silent=True)
            if not isinstance(payload, dict):
                return _error("Thiếu thông tin bắt buộc (userId, checkedIn)", 400)

            outcome = container.attendance_service.mark_attendance(activity_id, payload)
            if isinstance(outcome, CheckOutResult):
                return jsonify({"success": True, "message": outcome.message}), 200

            body = {
                "success": outcome.success,
                "message": outcome.message,
                "status": outcome.status.value,
                "recordId": outcome.record_id,
                "reasonCode": outcome.reason_code.value,
            }
            # A rejection is stored; the caller still gets a 400 with the record id.
            return jsonify(body), (200 if outcome.success else 400)

        return _handle(_run)

    @app.route("/api/activities/<int:activity_id>/attendance", methods=["GET"], endpoint="api_attendance_summary")
    def api_attendance_summary(activity_id: int):
        def _run():
            summary = container.attendance_service.get_attendance_summary(activity_id)
            return jsonify({"success": True, "data": summary_to_json(summary)}), 200

        return _handle(_run)

    @app.route(
        "/api/activities/<int:activity_id>/attendance/users/<int:user_id>",
        methods=["GET"],
        endpoint="api_participant_attendance",
    )
    def api_participant_attendance(activity_id: int, user_id: int):
        def _run():
            view = container.attendance_service.get_participant_attendance(activity_id, user_id)
            return jsonify({"success": True, "data": participant_to_json(view)}), 200

        return _handle(_run)

    @app.route("/api/attendance/<int:record_id>/verify", methods=["PATCH"], endpoint="api_verify_attendance")
    def api_verify_attendance(record_id: int):
        def _run():
            payload = request.get_json(silent=True) or {}
            record = container.attendance_service.verify_record(
                record_id,
                status=payload.get("status"),
                verifier_id=payload.get("verifiedBy"),
                verification_note=payload.get("verificationNote"),
                cancel_reason=payload.get("cancelReason"),
            )
            message = "Đã duyệt điểm danh" if record.status.value == "approved" else "Đã từ chối điểm danh"
            return jsonify({"success": True, "message": message, "data": record_to_json(record)}), 200

        return _handle(_run)
