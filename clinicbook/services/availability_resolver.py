"""
Doctor availability rules.

Validates weekly schedules and absences before they are stored, and
reconciles a doctor's weekly pattern with dated absences into the open
time ranges of a given day. Everything here is a pure function of its
arguments; loading and saving is done by the caller.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, model_validator

from clinicbook.schemas.availability import AbsenceCreate, DaySchedule, day_name
from clinicbook.schemas.validation import FieldError, ValidationResult

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::00)?$")

class TimeRange(BaseModel):
    """Half-open interval [start, end) within a single day."""
    start: time
    end: time

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_order(self):
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self

class EffectiveAvailability(BaseModel):
    for_date: date
    day_of_week: int
    is_working_day: bool
    ranges: List[TimeRange] = []
    absences: List[Any] = []

def parse_time(value: Union[str, time]) -> time:
    """
    Parse an ``HH:MM`` string into a time. ``H:MM`` and a zero seconds
    suffix (``HH:MM:00``, as the store returns it) are tolerated; times are
    minute-precise, so any other seconds value is rejected.

    Raises:
        ValueError: if the value is not a valid 24-hour time of day.
    """
    if isinstance(value, time):
        if value.second or value.microsecond:
            raise ValueError(f"Time {value} is not a whole minute")
        return value
    if not isinstance(value, str):
        raise ValueError(f"Cannot convert {type(value)} to time")
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    hour, minute = match.groups()
    return time(int(hour), int(minute))

def format_time(value: Optional[Union[str, time]]) -> Optional[str]:
    if value is None:
        return None
    return parse_time(value).strftime("%H:%M")

def _check_time_window(start_value, end_value, field_prefix: str, label: str) -> List[FieldError]:
    """Validate a required start/end pair and its ordering."""
    errors = []
    parsed = {}
    for key, value in (("startTime", start_value), ("endTime", end_value)):
        readable = "start time" if key == "startTime" else "end time"
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(FieldError(
                field=f"{field_prefix}{key}",
                message=f"{label}: {readable} is required.",
            ))
            continue
        try:
            parsed[key] = parse_time(value)
        except ValueError:
            errors.append(FieldError(
                field=f"{field_prefix}{key}",
                message=f"{label}: {readable} must use the HH:MM format.",
            ))

    if len(parsed) == 2 and parsed["startTime"] >= parsed["endTime"]:
        errors.append(FieldError(
            field=f"{field_prefix}startTime",
            message=f"{label}: start time must be before end time.",
        ))
    return errors

def validate_weekly_schedule(entries: Sequence[DaySchedule]) -> ValidationResult:
    """
    Check a full week of schedule entries.

    The week must hold exactly one entry for each day 1 (Monday) to 7 (Sunday).
    Working days need a well-formed start and end time with start before end;
    times on non-working days are cleared.

    Returns:
        ValidationResult whose value is the normalised week ordered by day,
        or whose errors are tagged ``schedule`` / ``schedule[i].startTime`` /
        ``schedule[i].endTime`` with ``i`` the entry's position in the input.
    """
    errors: List[FieldError] = []

    if len(entries) != 7:
        errors.append(FieldError(
            field="schedule",
            message=f"Schedule must contain exactly 7 days, got {len(entries)}.",
        ))

    seen = set()
    for index, entry in enumerate(entries):
        if not 1 <= entry.day_of_week <= 7:
            errors.append(FieldError(
                field=f"schedule[{index}].dayOfWeek",
                message=f"Day of week must be between 1 and 7, got {entry.day_of_week}.",
            ))
            continue
        if entry.day_of_week in seen:
            errors.append(FieldError(
                field=f"schedule[{index}].dayOfWeek",
                message=f"{day_name(entry.day_of_week)} appears more than once.",
            ))
        seen.add(entry.day_of_week)

    missing = [day_name(day) for day in range(1, 8) if day not in seen]
    if missing:
        errors.append(FieldError(
            field="schedule",
            message=f"Missing schedule for: {', '.join(missing)}.",
        ))

    normalised = []
    for index, entry in enumerate(entries):
        if entry.is_working_day:
            window_errors = _check_time_window(
                entry.start_time, entry.end_time, f"schedule[{index}].", day_name(entry.day_of_week)
            )
            errors.extend(window_errors)
            if window_errors:
                continue
            normalised.append(DaySchedule(
                day_of_week=entry.day_of_week,
                day_name=day_name(entry.day_of_week),
                is_working_day=True,
                start_time=format_time(entry.start_time),
                end_time=format_time(entry.end_time),
            ))
        else:
            normalised.append(DaySchedule(
                day_of_week=entry.day_of_week,
                day_name=day_name(entry.day_of_week),
                is_working_day=False,
            ))

    if errors:
        return ValidationResult.reject(errors)
    return ValidationResult.accept(sorted(normalised, key=lambda e: e.day_of_week))

def validate_absence(data: AbsenceCreate, today: Optional[date] = None) -> ValidationResult:
    """
    Check a new absence. Same-day absences are allowed, earlier dates are not.
    Partial absences need an ordered HH:MM window; full-day absences drop any times.
    """
    today = today or date.today()
    errors: List[FieldError] = []

    if data.absence_date < today:
        errors.append(FieldError(field="date", message="Absence date cannot be in the past."))

    if data.is_full_day:
        normalised = data.model_copy(update={"start_time": None, "end_time": None})
    else:
        errors.extend(_check_time_window(data.start_time, data.end_time, "", "Partial absence"))
        normalised = data
        if not errors:
            normalised = data.model_copy(update={
                "start_time": format_time(data.start_time),
                "end_time": format_time(data.end_time),
            })

    if errors:
        return ValidationResult.reject(errors)
    return ValidationResult.accept(normalised)

def subtract_range(source: TimeRange, cut: TimeRange) -> List[TimeRange]:
    """Remove ``cut`` from ``source``, leaving zero, one or two pieces."""
    if cut.end <= source.start or cut.start >= source.end:
        return [source]

    remaining = []
    if cut.start > source.start:
        remaining.append(TimeRange(start=source.start, end=cut.start))
    if cut.end < source.end:
        remaining.append(TimeRange(start=cut.end, end=source.end))
    return remaining

def subtract_ranges(sources: Iterable[TimeRange], cut: TimeRange) -> List[TimeRange]:
    result = []
    for source in sources:
        result.extend(subtract_range(source, cut))
    return sorted(result, key=lambda r: (r.start, r.end))

def _window(start_value, end_value) -> Optional[TimeRange]:
    if start_value is None or end_value is None:
        return None
    start, end = parse_time(start_value), parse_time(end_value)
    if start >= end:
        return None
    return TimeRange(start=start, end=end)

def resolve_availability(weekly_schedule: Sequence[Any], absences: Sequence[Any], for_date: date) -> EffectiveAvailability:
    """
    Compute the open time ranges of a doctor on ``for_date``.

    ``weekly_schedule`` items expose ``day_of_week``, ``is_working_day``,
    ``start_time`` and ``end_time``; ``absences`` items expose
    ``absence_date``, ``is_full_day``, ``start_time`` and ``end_time``.
    Times may be ``datetime.time`` values or HH:MM strings.

    A full-day absence closes the day. Partial absences are subtracted from
    the weekly window one after another, in the order given.
    """
    day_of_week = for_date.isoweekday()
    entry = next((e for e in weekly_schedule if e.day_of_week == day_of_week), None)
    day_absences = [a for a in absences if a.absence_date == for_date]

    is_working_day = bool(entry is not None and entry.is_working_day)
    ranges: List[TimeRange] = []
    if is_working_day:
        window = _window(entry.start_time, entry.end_time)
        if window is not None:
            ranges = [window]

    if any(a.is_full_day for a in day_absences):
        return EffectiveAvailability(
            for_date=for_date,
            day_of_week=day_of_week,
            is_working_day=False,
            absences=day_absences,
        )

    for absence in day_absences:
        cut = _window(absence.start_time, absence.end_time)
        if cut is not None:
            ranges = subtract_ranges(ranges, cut)

    return EffectiveAvailability(
        for_date=for_date,
        day_of_week=day_of_week,
        is_working_day=is_working_day,
        ranges=ranges,
        absences=day_absences,
    )

def split_into_slots(ranges: Iterable[TimeRange], for_date: date, minutes: int) -> List[TimeRange]:
    """Cut open ranges into back-to-back slots of ``minutes``; leftovers shorter than a slot are dropped."""
    if minutes <= 0:
        raise ValueError("Slot length must be positive")

    step = timedelta(minutes=minutes)
    slots = []
    for time_range in ranges:
        current = datetime.combine(for_date, time_range.start)
        end = datetime.combine(for_date, time_range.end)
        while current + step <= end:
            slots.append(TimeRange(start=current.time(), end=(current + step).time()))
            current += step
    return slots
