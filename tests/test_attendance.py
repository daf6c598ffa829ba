from datetime import date, timedelta

import pytest

from conftest import ADMIN, CHECK_IN, CHECK_OUT, EMPLOYEE, EMPLOYEE_2, MANAGER, at
from payroll_ledger import PayrollLedger
from payroll_ledger.errors import (
    AlreadyClaimed,
    CheckInFirst,
    CheckInWindowViolation,
    CheckOutWindowViolation,
    InvalidMonth,
    InvalidWorkingDays,
    NotFound,
    QuotaExceeded,
    Unauthorized,
    WeekendNotAllowed,
)
from payroll_ledger.events import ChangeWorkingDays, CheckIn, CheckOut


def test_check_in_opens_record(staffed, clock):
    clock.set_time(at(2023, 5, 4, 8, 0, 7))

    staffed.check_in(EMPLOYEE)

    assert staffed.events.history[-1] == CheckIn(employee=EMPLOYEE, timestamp=at(2023, 5, 4, 8, 0, 7))
    assert tuple(staffed.get_check_in_info(EMPLOYEE, 5, 2023)) == (True, 0, 100, False)
    assert staffed.records_for(EMPLOYEE)[0].last_check_in == at(2023, 5, 4, 8, 0, 7)


def test_check_in_unknown_employee(ledger, clock):
    clock.set_time(at(2023, 5, 4, 8))

    with pytest.raises(NotFound):
        ledger.check_in(EMPLOYEE)


@pytest.mark.parametrize("offset", [-900, -1, 0, 1, 900])
def test_check_in_inside_window(staffed, clock, offset):
    clock.set_time(at(2023, 5, 4, 8) + timedelta(seconds=offset))

    staffed.check_in(EMPLOYEE)

    assert staffed.get_check_in_info(EMPLOYEE, 5, 2023).is_checked_in


@pytest.mark.parametrize("offset", [-901, 901, -4 * 3600, 8 * 3600])
def test_check_in_outside_window(staffed, clock, offset):
    clock.set_time(at(2023, 5, 4, 8) + timedelta(seconds=offset))

    with pytest.raises(CheckInWindowViolation):
        staffed.check_in(EMPLOYEE)
    assert staffed.records_for(EMPLOYEE) == []


@pytest.mark.parametrize("day", [6, 7])
@pytest.mark.parametrize("hour", [0, 8, 12, 16])
def test_weekend_check_in_rejected(staffed, clock, day, hour):
    clock.set_time(at(2023, 5, day, hour))

    with pytest.raises(WeekendNotAllowed):
        staffed.check_in(EMPLOYEE)


def test_window_follows_reference_offset(fund, clock):
    # 08:00 at UTC+7 is 01:00 UTC
    ledger = PayrollLedger(ADMIN, 10, CHECK_IN, CHECK_OUT, fund, clock=clock, utc_offset_minutes=420)
    ledger.add_employee(ADMIN, EMPLOYEE, MANAGER, 100)
    clock.set_time(at(2023, 5, 4, 1))

    ledger.check_in(EMPLOYEE)

    clock.set_time(at(2023, 5, 4, 8))
    with pytest.raises(CheckInWindowViolation):
        ledger.check_in(EMPLOYEE)


def test_check_out_requires_check_in(staffed, clock):
    clock.set_time(at(2023, 5, 4, 16))

    with pytest.raises(CheckInFirst):
        staffed.check_out(EMPLOYEE)


def test_check_out_outside_window_keeps_check_in(staffed, clock):
    clock.set_time(at(2023, 5, 4, 8))
    staffed.check_in(EMPLOYEE)
    clock.set_time(at(2023, 5, 4, 15, 44, 59))

    with pytest.raises(CheckOutWindowViolation):
        staffed.check_out(EMPLOYEE)
    assert tuple(staffed.get_check_in_info(EMPLOYEE, 5, 2023)) == (True, 0, 100, False)

    clock.set_time(at(2023, 5, 4, 16, 15))
    staffed.check_out(EMPLOYEE)
    assert staffed.events.history[-1] == CheckOut(employee=EMPLOYEE, timestamp=at(2023, 5, 4, 16, 15))


def test_each_completed_pair_adds_one_day(staffed, work_day):
    days = [date(2023, 5, 1), date(2023, 5, 2), date(2023, 5, 3), date(2023, 5, 8)]
    for index, day in enumerate(days, start=1):
        work_day(staffed, EMPLOYEE, day)
        assert tuple(staffed.get_check_in_info(EMPLOYEE, 5, 2023)) == (False, index, 100, False)


def test_second_check_out_without_check_in_rejected(staffed, work_day, clock):
    work_day(staffed, EMPLOYEE, date(2023, 5, 4))

    with pytest.raises(CheckInFirst):
        staffed.check_out(EMPLOYEE)
    assert staffed.get_check_in_info(EMPLOYEE, 5, 2023).working_days == 1


def test_check_out_after_month_rollover_targets_new_month(staffed, clock):
    clock.set_time(at(2023, 5, 31, 8))
    staffed.check_in(EMPLOYEE)
    clock.set_time(at(2023, 6, 1, 16))

    with pytest.raises(CheckInFirst):
        staffed.check_out(EMPLOYEE)

    assert tuple(staffed.get_check_in_info(EMPLOYEE, 5, 2023)) == (True, 0, 100, False)
    assert tuple(staffed.get_check_in_info(EMPLOYEE, 6, 2023)) == (False, 0, 0, False)


def test_check_out_does_not_recheck_weekend(staffed, clock):
    clock.set_time(at(2023, 5, 5, 8))
    staffed.check_in(EMPLOYEE)
    clock.set_time(at(2023, 5, 6, 16))

    staffed.check_out(EMPLOYEE)

    assert staffed.get_check_in_info(EMPLOYEE, 5, 2023).working_days == 1


def test_record_keeps_rate_of_first_write(staffed, work_day):
    work_day(staffed, EMPLOYEE, date(2023, 5, 1))
    staffed.change_salary(ADMIN, EMPLOYEE, 250)
    work_day(staffed, EMPLOYEE, date(2023, 5, 2))
    work_day(staffed, EMPLOYEE, date(2023, 6, 1))

    assert staffed.get_check_in_info(EMPLOYEE, 5, 2023).salary_snapshot == 100
    assert staffed.get_check_in_info(EMPLOYEE, 6, 2023).salary_snapshot == 250


def test_change_working_days_by_manager(staffed):
    staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 4)
    assert staffed.events.history[-1] == ChangeWorkingDays(caller=MANAGER, employee=EMPLOYEE, days=4)

    with pytest.raises(Unauthorized, match="Only manager can call this function"):
        staffed.change_working_days(EMPLOYEE, EMPLOYEE, 5, 2023, 20)
    with pytest.raises(Unauthorized):
        staffed.change_working_days(ADMIN, EMPLOYEE, 5, 2023, 5)
    with pytest.raises(InvalidWorkingDays):
        staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 0)
    with pytest.raises(InvalidWorkingDays):
        staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 32)
    with pytest.raises(InvalidMonth):
        staffed.change_working_days(MANAGER, EMPLOYEE, 13, 2023, 20)
    with pytest.raises(InvalidMonth):
        staffed.change_working_days(MANAGER, EMPLOYEE, 0, 2022, 20)
    with pytest.raises(QuotaExceeded, match="Exceed max change working days"):
        staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 20)
    with pytest.raises(NotFound):
        staffed.change_working_days(MANAGER, EMPLOYEE_2, 5, 2023, 20)

    staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 14)
    assert staffed.get_working_day_change(EMPLOYEE, 5, 2023) == 10

    with pytest.raises(QuotaExceeded):
        staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 2)

    info = staffed.get_check_in_info(EMPLOYEE, 5, 2023)
    assert info.working_days == 14
    assert info.salary_snapshot == 100
    assert len(staffed.events.of_type(ChangeWorkingDays)) == 2


def test_manager_quota_follows_admin_setting(staffed):
    staffed.change_max_change_working_days(ADMIN, 2)

    with pytest.raises(QuotaExceeded):
        staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 3)
    staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 2)


def test_change_working_days_by_admin_ignores_quota(staffed):
    staffed.change_working_days(MANAGER, EMPLOYEE, 5, 2023, 5)
    staffed.change_working_days_by_admin(ADMIN, EMPLOYEE, 5, 2023, 30)

    assert staffed.events.history[-1] == ChangeWorkingDays(caller=ADMIN, employee=EMPLOYEE, days=30)
    assert tuple(staffed.get_check_in_info(EMPLOYEE, 5, 2023)) == (False, 30, 100, False)
    assert staffed.get_working_day_change(EMPLOYEE, 5, 2023) == 0

    staffed.change_working_days_by_admin(ADMIN, EMPLOYEE, 5, 2023, 1)
    assert staffed.get_check_in_info(EMPLOYEE, 5, 2023).working_days == 1


def test_change_working_days_by_admin_rejections(staffed):
    with pytest.raises(Unauthorized, match="Only admin can call this function"):
        staffed.change_working_days_by_admin(MANAGER, EMPLOYEE, 5, 2023, 20)
    with pytest.raises(InvalidWorkingDays):
        staffed.change_working_days_by_admin(ADMIN, EMPLOYEE, 5, 2023, 0)
    with pytest.raises(InvalidWorkingDays):
        staffed.change_working_days_by_admin(ADMIN, EMPLOYEE, 5, 2023, 32)
    with pytest.raises(InvalidMonth):
        staffed.change_working_days_by_admin(ADMIN, EMPLOYEE, 13, 2023, 20)
    with pytest.raises(NotFound):
        staffed.change_working_days_by_admin(ADMIN, EMPLOYEE_2, 5, 2023, 20)

    assert staffed.records_for(EMPLOYEE) == []


def test_override_allows_31_days_in_short_month(staffed):
    staffed.change_working_days_by_admin(ADMIN, EMPLOYEE, 2, 2023, 31)

    assert staffed.get_check_in_info(EMPLOYEE, 2, 2023).working_days == 31


def test_claimed_record_cannot_be_overridden(staffed, clock):
    staffed.change_working_days_by_admin(ADMIN, EMPLOYEE, 4, 2023, 3)
    staffed.add_fund(ADMIN, 1_000)
    staffed.get_paid(EMPLOYEE, 4, 2023)

    with pytest.raises(AlreadyClaimed):
        staffed.change_working_days_by_admin(ADMIN, EMPLOYEE, 4, 2023, 10)
    with pytest.raises(AlreadyClaimed):
        staffed.change_working_days(MANAGER, EMPLOYEE, 4, 2023, 5)
    assert staffed.get_check_in_info(EMPLOYEE, 4, 2023).working_days == 3
