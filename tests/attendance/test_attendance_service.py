from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from timecard.core.enums import AttendanceStatus
from timecard.core.exceptions import NotFoundError, ValidationError

DAY = date(2025, 3, 12)


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 3, 12, hour, minute)


@pytest.fixture
def svc(container):
    return container.attendance_service


def test_on_time_check_in_has_no_pay_cut(svc, container, fixed_now):
    impact = svc.check_in(1, now=fixed_now)

    assert impact.is_late is False
    assert impact.pay_cut_amount == Decimal("0")

    record = container.attendance_repo.get_for_user_and_date(1, DAY)
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in_time == fixed_now
    assert record.check_out_time is None


def test_late_check_in_is_charged_immediately(svc, container):
    impact = svc.check_in(1, now=at(9, 15))

    assert impact.is_late is True
    assert impact.late_minutes == 15
    assert impact.pay_cut_amount == Decimal("7.50")

    record = container.attendance_repo.get_for_user_and_date(1, DAY)
    assert record.is_late is True
    assert record.late_minutes == 15
    assert record.pay_cut_amount == Decimal("7.50")


def test_check_out_adds_early_departure_to_prior_charge(svc, container):
    svc.check_in(1, now=at(9, 15))
    impact = svc.check_out(1, now=at(16, 50))

    assert impact.late_minutes == 15
    assert impact.early_departure_minutes == 10
    assert impact.total_hours == Decimal("7.58")
    assert impact.pay_cut_amount == Decimal("12.50")

    record = container.attendance_repo.get_for_user_and_date(1, DAY)
    assert record.check_out_time == at(16, 50)
    assert record.total_hours == Decimal("7.58")
    assert record.pay_cut_amount == Decimal("12.50")


def test_check_out_prices_against_remaining_bucket(svc):
    svc.check_in(2, now=at(9, 45))
    impact = svc.check_out(2, now=at(16, 30))

    # 45 late at base, then 15 early at base and 15 early at 1.5x; rate 60
    assert impact.pay_cut_amount == Decimal("82.50")


def test_employee_without_rate_is_never_charged(svc):
    svc.check_in(3, now=at(10, 30))
    impact = svc.check_out(3, now=at(15))
    assert impact.late_minutes == 90
    assert impact.early_departure_minutes == 120
    assert impact.pay_cut_amount == Decimal("0")


def test_check_in_twice_is_rejected(svc, fixed_now):
    svc.check_in(1, now=fixed_now)
    with pytest.raises(ValidationError, match="already checked in"):
        svc.check_in(1, now=at(10))


def test_check_in_unknown_employee(svc, fixed_now):
    with pytest.raises(NotFoundError):
        svc.check_in(404, now=fixed_now)


def test_check_out_requires_check_in(svc):
    with pytest.raises(ValidationError, match="not checked in"):
        svc.check_out(1, now=at(17))


def test_check_out_twice_is_rejected(svc, fixed_now):
    svc.check_in(1, now=fixed_now)
    svc.check_out(1, now=at(17))
    with pytest.raises(ValidationError, match="already checked out"):
        svc.check_out(1, now=at(17, 30))


def test_check_out_before_check_in_is_rejected(svc, container):
    container.attendance_service.admin_edit(user_id=1, work_date=DAY, check_in="10:00")
    with pytest.raises(ValidationError, match="cannot be before"):
        svc.check_out(1, now=at(9, 30))


def test_admin_edit_reprices_in_single_pass(svc, container):
    svc.check_in(2, now=at(9, 30))

    record = svc.admin_edit(
        user_id=2,
        work_date=DAY,
        check_in="09:40",
        check_out="16:30",
        status="late",
        note="  traffic  ",
    )

    # 40 + 30 = 70 minutes at rate 60: 60 + 10 * 1.5
    assert record.pay_cut_amount == Decimal("75.00")
    assert record.late_minutes == 40
    assert record.early_departure_minutes == 30
    assert record.total_hours == Decimal("6.83")
    assert record.status == AttendanceStatus.LATE
    assert record.note == "traffic"
    assert record.pay_cut_approved is False
    assert len(container.attendance_repo.by_user_date) == 1


def test_admin_edit_resets_approval(svc):
    record = svc.admin_edit(user_id=1, work_date=DAY, check_in="09:30", check_out="17:00")
    svc.approve_pay_cut(attendance_id=record.attendance_id, approver_id=9, now=at(18))

    edited = svc.admin_edit(user_id=1, work_date=DAY, check_in="09:20", check_out="17:00")
    assert edited.attendance_id == record.attendance_id
    assert edited.pay_cut_approved is False
    assert edited.pay_cut_amount == Decimal("10.00")


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"check_in": ""}, "Check-in time is required"),
        ({"check_in": "9am"}, "Check-in time must be HH:MM"),
        ({"check_in": "10:00", "check_out": "09:00"}, "cannot be before"),
        ({"check_in": "09:00", "status": "holiday"}, "Unknown attendance status"),
    ],
)
def test_admin_edit_validation(svc, kwargs, message):
    with pytest.raises(ValidationError, match=message):
        svc.admin_edit(user_id=1, work_date=DAY, **kwargs)


def test_approve_pay_cut_records_approver(svc, container):
    svc.check_in(1, now=at(9, 20))
    record = container.attendance_repo.get_for_user_and_date(1, DAY)

    svc.approve_pay_cut(attendance_id=record.attendance_id, approver_id=9, now=at(18))

    approved = container.attendance_repo.get_by_id(record.attendance_id)
    assert approved.pay_cut_approved is True
    assert approved.pay_cut_approved_by == 9
    assert approved.pay_cut_approved_at == at(18)

    with pytest.raises(ValidationError, match="already approved"):
        svc.approve_pay_cut(attendance_id=record.attendance_id, approver_id=9)


def test_approve_pay_cut_requires_a_cut(svc, container, fixed_now):
    svc.check_in(1, now=fixed_now)
    record = container.attendance_repo.get_for_user_and_date(1, DAY)
    with pytest.raises(ValidationError, match="no pay cut"):
        svc.approve_pay_cut(attendance_id=record.attendance_id, approver_id=9)


def test_approve_pay_cut_unknown_record(svc):
    with pytest.raises(NotFoundError):
        svc.approve_pay_cut(attendance_id=77, approver_id=9)


def test_history_is_newest_first(svc):
    svc.admin_edit(user_id=1, work_date=date(2025, 3, 10), check_in="09:00", check_out="17:00")
    svc.admin_edit(user_id=1, work_date=date(2025, 3, 11), check_in="09:10", check_out="17:00")

    history = svc.get_history(1, limit=10)

    assert [h["date"] for h in history] == ["2025-03-11", "2025-03-10"]
    assert history[0]["pay_cut_amount"] == "5.00"
    assert history[1]["total_hours"] == "8.00"


def test_delete_record_allows_a_fresh_check_in(svc, container, fixed_now):
    svc.check_in(1, now=fixed_now)
    record = container.attendance_repo.get_for_user_and_date(1, fixed_now.date())

    svc.delete_record(attendance_id=record.attendance_id)

    assert svc.get_today_record(1, fixed_now.date()) is None
    svc.check_in(1, now=fixed_now)


def test_delete_unknown_record(svc):
    with pytest.raises(NotFoundError, match="Attendance record not found"):
        svc.delete_record(attendance_id=77)
