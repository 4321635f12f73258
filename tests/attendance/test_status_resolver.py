import pytest

from club_attendance.attendance.factory import AttendanceStrategyFactory
from club_attendance.attendance.model import ManualCheckIn
from club_attendance.attendance.resolver import AttendanceStatusResolver
from club_attendance.attendance.strategies.auto_approve_strategy import AutoApproveStrategy
from club_attendance.attendance.strategies.manual_approve_strategy import ManualApproveStrategy
from club_attendance.attendance.strategies.missing_evidence_strategy import MissingEvidenceStrategy
from club_attendance.attendance.strategies.out_of_zone_strategy import OutOfZoneStrategy
from club_attendance.attendance.strategies.outside_window_strategy import OutsideWindowStrategy
from club_attendance.attendance.strategies.pending_review_strategy import PendingReviewStrategy
from club_attendance.attendance.time_window import TimeResult
from club_attendance.core.constants import AUTO_APPROVE_NOTE, SYSTEM_VERIFIER
from club_attendance.core.enums import AttendanceStatus, ReasonCode
from club_attendance.geo.model import GeoResult

GEO_OK = GeoResult(valid=True, distance_meters=30)
GEO_FAR = GeoResult(valid=False, distance_meters=80, message="Bạn đang cách vị trí hoạt động 80m")
ON_TIME = TimeResult(valid=True, on_time=True)
LATE = TimeResult(valid=True, late=True, message="late", reason_code=ReasonCode.LATE_NEEDS_REVIEW)
TOO_EARLY = TimeResult(valid=False, early=True, message="Điểm danh sớm hơn thời gian cho phép", reason_code=ReasonCode.TOO_EARLY)
TOO_LATE = TimeResult(valid=False, late=True, message="Điểm danh quá trễ", reason_code=ReasonCode.TOO_LATE)


def resolve(geo, time, has_photo, manual=None):
    return AttendanceStatusResolver().resolve(geo=geo, time=time, has_photo=has_photo, manual=manual)


@pytest.mark.parametrize("time", [None, ON_TIME, LATE, TOO_LATE])
@pytest.mark.parametrize("has_photo", [True, False])
def test_out_of_zone_always_rejected(time, has_photo):
    d = resolve(GEO_FAR, time, has_photo)

    assert d.status == AttendanceStatus.REJECTED
    assert d.reason_code == ReasonCode.OUT_OF_ZONE
    assert d.reason == GEO_FAR.message
    assert d.cancel_reason == GEO_FAR.message


@pytest.mark.parametrize("time, code", [(TOO_EARLY, ReasonCode.TOO_EARLY), (TOO_LATE, ReasonCode.TOO_LATE)])
def test_invalid_time_with_photo_rejected_with_time_message(time, code):
    d = resolve(GEO_OK, time, True)

    assert d.status == AttendanceStatus.REJECTED
    assert d.reason_code == code
    assert d.reason == time.message


def test_on_time_with_photo_auto_approved():
    d = resolve(GEO_OK, ON_TIME, True)

    assert d.status == AttendanceStatus.APPROVED
    assert d.reason_code == ReasonCode.AUTO_APPROVED
    assert d.verified_by == SYSTEM_VERIFIER
    assert d.verification_note == AUTO_APPROVE_NOTE
    assert d.clears_verification is False
    assert d.cancel_reason is None


def test_late_with_photo_pending():
    d = resolve(GEO_OK, LATE, True)

    assert d.status == AttendanceStatus.PENDING
    assert d.reason_code == ReasonCode.LATE_NEEDS_REVIEW
    assert d.clears_verification is True
    assert d.cancel_reason is None


def test_on_time_without_photo_pending():
    d = resolve(GEO_OK, ON_TIME, False)

    assert d.status == AttendanceStatus.PENDING
    assert d.reason_code == ReasonCode.MISSING_PHOTO_REVIEW


@pytest.mark.parametrize("time", [LATE, TOO_EARLY, TOO_LATE])
def test_other_photo_less_combinations_rejected(time):
    d = resolve(GEO_OK, time, False)

    assert d.status == AttendanceStatus.REJECTED
    assert d.reason_code == ReasonCode.MISSING_EVIDENCE
    assert d.cancel_reason == "Thiếu ảnh hoặc thông tin không hợp lệ"


def test_manual_check_in_approved_by_officer():
    d = resolve(GeoResult(valid=True), None, False, manual=ManualCheckIn(officer_id="officer-1"))

    assert d.status == AttendanceStatus.APPROVED
    assert d.reason_code == ReasonCode.MANUAL_APPROVED
    assert d.verified_by == "officer-1"


@pytest.mark.parametrize("time", [TOO_EARLY, TOO_LATE])
def test_manual_check_in_with_photo_outside_window_rejected(time):
    d = resolve(GeoResult(valid=True), time, True, manual=ManualCheckIn(officer_id="officer-1"))

    assert d.status == AttendanceStatus.REJECTED
    assert d.reason_code == time.reason_code
    assert d.verified_by is None


@pytest.mark.parametrize("time, has_photo", [(TOO_LATE, False), (ON_TIME, True), (LATE, True)])
def test_manual_check_in_otherwise_approved(time, has_photo):
    d = resolve(GeoResult(valid=True), time, has_photo, manual=ManualCheckIn(officer_id="officer-1"))

    assert d.status == AttendanceStatus.APPROVED
    assert d.reason_code == ReasonCode.MANUAL_APPROVED
    assert d.verified_by == "officer-1"


def test_valid_geo_requires_time_classification():
    with pytest.raises(ValueError):
        resolve(GEO_OK, None, True)


def test_factory_picks_strategies():
    factory = AttendanceStrategyFactory()

    assert isinstance(factory.for_submission(geo=GEO_FAR, time=None, has_photo=True), OutOfZoneStrategy)
    assert isinstance(factory.for_submission(geo=GEO_OK, time=ON_TIME, has_photo=True), AutoApproveStrategy)
    assert isinstance(factory.for_submission(geo=GEO_OK, time=LATE, has_photo=True), PendingReviewStrategy)
    assert isinstance(factory.for_submission(geo=GEO_OK, time=LATE, has_photo=False), MissingEvidenceStrategy)


def test_factory_keeps_window_rule_for_manual_photo_evidence():
    factory = AttendanceStrategyFactory()
    officer = ManualCheckIn(officer_id="officer-1")

    assert isinstance(
        factory.for_submission(geo=GEO_OK, time=TOO_LATE, has_photo=True, manual=officer), OutsideWindowStrategy
    )
    assert isinstance(
        factory.for_submission(geo=GEO_OK, time=TOO_LATE, has_photo=False, manual=officer), ManualApproveStrategy
    )
