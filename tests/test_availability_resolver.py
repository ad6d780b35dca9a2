"""
Tests for the pure availability rules: schedule/absence validation and
reconciliation of the weekly pattern with absences.
"""

from datetime import date, time, timedelta
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from clinicbook.schemas.availability import AbsenceCreate, DaySchedule
from clinicbook.services.availability_resolver import (
    TimeRange,
    parse_time,
    resolve_availability,
    split_into_slots,
    subtract_range,
    validate_absence,
    validate_weekly_schedule,
)

TODAY = date(2026, 3, 11)  # a Wednesday
MONDAY = date(2026, 3, 16)

def make_week(overrides=None):
    """Default Mon-Fri 09:00-17:00 week; overrides map day number to DaySchedule kwargs."""
    week = []
    for day in range(1, 8):
        working = day <= 5
        fields = {
            "day_of_week": day,
            "is_working_day": working,
            "start_time": "09:00" if working else None,
            "end_time": "17:00" if working else None,
        }
        fields.update((overrides or {}).get(day, {}))
        week.append(DaySchedule(**fields))
    return week

def absence(on: date, full_day: bool = False, start=None, end=None):
    return SimpleNamespace(absence_date=on, is_full_day=full_day, start_time=start, end_time=end)

def as_pairs(ranges):
    return [(r.start.strftime("%H:%M"), r.end.strftime("%H:%M")) for r in ranges]


class TestParseTime:
    def test_accepts_hh_mm(self):
        assert parse_time("09:30") == time(9, 30)

    def test_accepts_single_digit_hour_and_seconds(self):
        assert parse_time("9:05") == time(9, 5)
        assert parse_time("17:00:00") == time(17, 0)

    @pytest.mark.parametrize("value", ["24:00", "9h30", "12:60", "", "noon", "09:00:10", "12:00:59"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            parse_time(value)

    def test_orders_numerically_not_lexically(self):
        assert parse_time("9:00") < parse_time("10:00")

    def test_rejects_time_object_with_seconds(self):
        with pytest.raises(ValueError):
            parse_time(time(9, 0, 10))


class TestValidateWeeklySchedule:
    def test_accepts_default_week(self):
        result = validate_weekly_schedule(make_week())

        assert result.is_valid
        assert [d.day_of_week for d in result.value] == [1, 2, 3, 4, 5, 6, 7]
        assert result.value[0].day_name == "Monday"

    def test_missing_start_time_on_wednesday_is_rejected(self):
        result = validate_weekly_schedule(make_week({3: {"start_time": None}}))

        assert not result.is_valid
        assert len(result.errors) == 1
        assert result.errors[0].field == "schedule[2].startTime"
        assert "Wednesday" in result.errors[0].message

    def test_malformed_time_is_rejected(self):
        result = validate_weekly_schedule(make_week({1: {"end_time": "5pm"}}))

        assert [e.field for e in result.errors] == ["schedule[0].endTime"]

    @pytest.mark.parametrize("start,end", [("17:00", "09:00"), ("12:00", "12:00")])
    def test_start_not_before_end_is_rejected(self, start, end):
        result = validate_weekly_schedule(make_week({5: {"start_time": start, "end_time": end}}))

        assert [e.field for e in result.errors] == ["schedule[4].startTime"]
        assert "Friday" in result.errors[0].message

    def test_non_working_day_times_are_ignored_and_cleared(self):
        result = validate_weekly_schedule(make_week({6: {"start_time": "bogus", "end_time": None}}))

        assert result.is_valid
        saturday = result.value[5]
        assert saturday.start_time is None and saturday.end_time is None

    def test_wrong_entry_count_is_rejected(self):
        result = validate_weekly_schedule(make_week()[:6])

        assert not result.is_valid
        assert all(e.field == "schedule" for e in result.errors)
        assert any("Sunday" in e.message for e in result.errors)

    def test_duplicate_day_is_rejected(self):
        week = make_week()
        week[6] = DaySchedule(day_of_week=1, is_working_day=False)

        result = validate_weekly_schedule(week)

        fields = [e.field for e in result.errors]
        assert "schedule[6].dayOfWeek" in fields
        assert "schedule" in fields

    def test_out_of_order_input_is_sorted(self):
        result = validate_weekly_schedule(list(reversed(make_week())))

        assert [d.day_of_week for d in result.value] == [1, 2, 3, 4, 5, 6, 7]

    def test_times_are_normalised(self):
        result = validate_weekly_schedule(make_week({2: {"start_time": "8:00", "end_time": "16:30:00"}}))

        assert (result.value[1].start_time, result.value[1].end_time) == ("08:00", "16:30")

    def test_seconds_that_would_collapse_the_window_are_rejected(self):
        result = validate_weekly_schedule(make_week({1: {"start_time": "09:00:10", "end_time": "09:00:50"}}))

        assert not result.is_valid
        assert {e.field for e in result.errors} == {"schedule[0].startTime", "schedule[0].endTime"}
        assert all("HH:MM" in e.message for e in result.errors)


class TestValidateAbsence:
    def test_yesterday_is_rejected_on_date(self):
        data = AbsenceCreate(absence_date=TODAY - timedelta(days=1), is_full_day=True)

        result = validate_absence(data, today=TODAY)

        assert [e.field for e in result.errors] == ["date"]

    def test_same_day_is_allowed(self):
        result = validate_absence(AbsenceCreate(absence_date=TODAY, is_full_day=True), today=TODAY)
        assert result.is_valid

    def test_full_day_ignores_times(self):
        data = AbsenceCreate(absence_date=TODAY, is_full_day=True, start_time="xx", end_time="10:00")

        result = validate_absence(data, today=TODAY)

        assert result.is_valid
        assert result.value.start_time is None and result.value.end_time is None

    def test_partial_requires_times(self):
        result = validate_absence(AbsenceCreate(absence_date=TODAY, is_full_day=False), today=TODAY)

        assert sorted(e.field for e in result.errors) == ["endTime", "startTime"]

    def test_partial_with_reversed_window_is_rejected(self):
        data = AbsenceCreate(absence_date=TODAY, is_full_day=False, start_time="14:00", end_time="13:00")

        result = validate_absence(data, today=TODAY)

        assert [e.field for e in result.errors] == ["startTime"]

    def test_partial_with_valid_window_is_accepted(self):
        data = AbsenceCreate(absence_date=TODAY, is_full_day=False, start_time="12:00", end_time="13:00", reason="Lunch meeting")

        result = validate_absence(data, today=TODAY)

        assert result.is_valid
        assert result.value.reason == "Lunch meeting"

    def test_reports_past_date_and_bad_time_together(self):
        data = AbsenceCreate(absence_date=TODAY - timedelta(days=3), is_full_day=False, start_time="25:00", end_time="13:00")

        result = validate_absence(data, today=TODAY)

        assert {e.field for e in result.errors} == {"date", "startTime"}

    def test_partial_window_with_seconds_is_rejected(self):
        data = AbsenceCreate(absence_date=TODAY, is_full_day=False, start_time="12:00:30", end_time="12:00:45")

        result = validate_absence(data, today=TODAY)

        assert sorted(e.field for e in result.errors) == ["endTime", "startTime"]


class TestResolveAvailability:
    def test_monday_without_absence(self):
        result = resolve_availability(make_week(), [], MONDAY)

        assert result.is_working_day
        assert as_pairs(result.ranges) == [("09:00", "17:00")]

    def test_monday_with_full_day_absence(self):
        result = resolve_availability(make_week(), [absence(MONDAY, full_day=True)], MONDAY)

        assert not result.is_working_day
        assert result.ranges == []

    def test_monday_with_lunch_absence(self):
        result = resolve_availability(make_week(), [absence(MONDAY, start="12:00", end="13:00")], MONDAY)

        assert result.is_working_day
        assert as_pairs(result.ranges) == [("09:00", "12:00"), ("13:00", "17:00")]

    @pytest.mark.parametrize("offset", range(7))
    def test_empty_absence_list_matches_weekly_entry(self, offset):
        week = make_week()
        for_date = MONDAY + timedelta(days=offset)
        entry = week[offset]

        result = resolve_availability(week, [], for_date)

        assert result.is_working_day == entry.is_working_day
        expected = [(entry.start_time, entry.end_time)] if entry.is_working_day else []
        assert as_pairs(result.ranges) == expected

    def test_full_day_absence_on_non_working_day(self):
        sunday = MONDAY + timedelta(days=6)
        result = resolve_availability(make_week(), [absence(sunday, full_day=True)], sunday)
        assert not result.is_working_day

    def test_partial_absence_covering_whole_window(self):
        result = resolve_availability(make_week(), [absence(MONDAY, start="09:00", end="17:00")], MONDAY)

        assert result.is_working_day
        assert result.ranges == []

    def test_partial_absence_at_start_leaves_one_range(self):
        result = resolve_availability(make_week(), [absence(MONDAY, start="08:00", end="10:30")], MONDAY)
        assert as_pairs(result.ranges) == [("10:30", "17:00")]

    def test_absence_on_other_date_is_ignored(self):
        result = resolve_availability(make_week(), [absence(MONDAY + timedelta(days=7), full_day=True)], MONDAY)
        assert as_pairs(result.ranges) == [("09:00", "17:00")]

    def test_overlapping_partial_absences_subtract_cumulatively(self):
        absences = [
            absence(MONDAY, start="10:00", end="12:00"),
            absence(MONDAY, start="11:00", end="14:00"),
            absence(MONDAY, start="16:00", end="16:30"),
        ]

        result = resolve_availability(make_week(), absences, MONDAY)

        assert as_pairs(result.ranges) == [("09:00", "10:00"), ("14:00", "16:00"), ("16:30", "17:00")]

    def test_full_day_wins_over_partial_on_same_date(self):
        absences = [absence(MONDAY, start="10:00", end="11:00"), absence(MONDAY, full_day=True)]

        result = resolve_availability(make_week(), absences, MONDAY)

        assert not result.is_working_day
        assert result.ranges == []

    def test_accepts_time_objects_from_storage(self):
        week = [SimpleNamespace(day_of_week=1, is_working_day=True, start_time=time(8), end_time=time(12))]

        result = resolve_availability(week, [absence(MONDAY, start=time(9), end=time(10))], MONDAY)

        assert as_pairs(result.ranges) == [("08:00", "09:00"), ("10:00", "12:00")]

    def test_missing_weekly_entry_means_not_working(self):
        result = resolve_availability([], [], MONDAY)
        assert not result.is_working_day and result.ranges == []


class TestRangeHelpers:
    def test_time_range_requires_order(self):
        with pytest.raises(ValueError):
            TimeRange(start=time(10), end=time(9))

    def test_subtract_disjoint_range(self):
        source = TimeRange(start=time(9), end=time(12))
        assert subtract_range(source, TimeRange(start=time(12), end=time(13))) == [source]

    def test_split_into_slots_drops_short_tail(self):
        slots = split_into_slots([TimeRange(start=time(9), end=time(10, 45))], MONDAY, 30)

        assert as_pairs(slots) == [("09:00", "09:30"), ("09:30", "10:00"), ("10:00", "10:30")]

    def test_split_into_slots_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            split_into_slots([], MONDAY, 0)

    def test_time_range_is_immutable(self):
        time_range = TimeRange(start=time(9), end=time(10))

        with pytest.raises(ValidationError):
            time_range.start = time(8)

    def test_camel_case_aliases_and_attribute_loading(self):
        source = SimpleNamespace(day_of_week=2, day_name="Tuesday", is_working_day=True, start_time="09:00", end_time="12:00")

        entry = DaySchedule.model_validate(source)

        assert entry.model_dump(by_alias=True)["isWorkingDay"] is True
        assert DaySchedule(dayOfWeek=3, isWorkingDay=False).day_of_week == 3
