"""
Availability engine.

Pure functions that turn a staff member's weekly hours, a service duration
and the day's existing appointments into bookable start times, and that
check a proposed booking against existing appointments.

Times are "HH:MM" strings on the outside and minutes since midnight inside.
Intervals are half-open, so back-to-back appointments do not conflict.
"""

import re
from datetime import date as date_type
from typing import Any, Iterable, List, Mapping, Union

from salon.core.config import settings

MINUTES_PER_DAY = 24 * 60

DAY_NAMES = [
    "monday", "tuesday", "wednesday", "thursday",
    "friday", "saturday", "sunday",
]

CANCELLED = "cancelled"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

DateLike = Union[str, date_type]


class SchedulingError(ValueError):
    """Base error for invalid scheduling input."""


class InvalidTimeError(SchedulingError):
    def __init__(self, value: Any, field: str = "time"):
        self.value = value
        self.field = field
        super().__init__(f"Invalid {field} {value!r}: expected 24-hour HH:MM")


class InvalidDateError(SchedulingError):
    def __init__(self, value: Any, field: str = "date"):
        self.value = value
        self.field = field
        super().__init__(f"Invalid {field} {value!r}: expected YYYY-MM-DD")


class MidnightCrossingError(SchedulingError):
    """A time range would run past the end of the calendar day."""


def time_to_minutes(time: str, field: str = "time") -> int:
    """Convert an "HH:MM" string to minutes since midnight."""
    if not isinstance(time, str):
        raise InvalidTimeError(time, field)
    match = _TIME_RE.match(time.strip())
    if not match:
        raise InvalidTimeError(time, field)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeError(time, field)
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight back to a zero-padded "HH:MM" string."""
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise MidnightCrossingError(
            f"{minutes} minutes is outside a single day (0-{MINUTES_PER_DAY - 1})"
        )
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def do_time_ranges_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    """
    Check whether [start1, end1) and [start2, end2) share any instant.

    Ranges that only touch at a boundary do not overlap.
    """
    return _minutes_overlap(
        time_to_minutes(start1, "start1"),
        time_to_minutes(end1, "end1"),
        time_to_minutes(start2, "start2"),
        time_to_minutes(end2, "end2"),
    )


def _minutes_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    return start1 < end2 and start2 < end1


def _check_duration(duration: Any, field: str = "duration") -> int:
    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        raise SchedulingError(f"{field} must be a positive number of minutes, got {duration!r}")
    return duration


def _end_minutes(start: int, duration: int) -> int:
    end = start + duration
    # An end time must itself be a valid HH:MM, so 24:00 counts as crossing
    if end >= MINUTES_PER_DAY:
        raise MidnightCrossingError(
            f"{minutes_to_time(start)} + {duration} min runs to or past midnight"
        )
    return end


def get_appointment_end_time(start: str, duration_minutes: int) -> str:
    """
    Compute the "HH:MM" end of an appointment from its start and length.

    Raises MidnightCrossingError when the end would fall at or after midnight.
    """
    duration = _check_duration(duration_minutes, "duration_minutes")
    end = _end_minutes(time_to_minutes(start, "start"), duration)
    return minutes_to_time(end)


def appointment_end_minutes(
    appointment: Mapping[str, Any],
    default_duration: int = None,
) -> int:
    """Effective end of a stored appointment, in minutes since midnight."""
    end_time = appointment.get("endTime")
    if end_time:
        return time_to_minutes(end_time, "endTime")
    if default_duration is None:
        default_duration = settings.DEFAULT_APPOINTMENT_MINUTES
    start = time_to_minutes(appointment["time"], "time")
    return min(start + default_duration, MINUTES_PER_DAY)


def day_name_for_date(value: DateLike) -> str:
    """
    Lowercase English weekday of a calendar date.

    Strings are read as plain ISO dates, not instants, so the result never
    depends on a timezone.
    """
    if isinstance(value, str):
        try:
            value = date_type.fromisoformat(value.strip())
        except ValueError:
            raise InvalidDateError(value)
    elif not isinstance(value, date_type):
        raise InvalidDateError(value)
    return DAY_NAMES[value.weekday()]


def _date_key(value: DateLike) -> str:
    if isinstance(value, date_type):
        return value.isoformat()
    return value


def is_time_slot_available(
    proposed_start: str,
    service_duration: int,
    existing_appointments: Iterable[Mapping[str, Any]],
    staff_id: str,
    date: DateLike,
    default_duration: int = None,
) -> bool:
    """
    Check a proposed booking against existing appointments.

    Only appointments for the same staff member and date count; cancelled
    ones are ignored. An appointment without an endTime is assumed to last
    default_duration minutes (DEFAULT_APPOINTMENT_MINUTES).

    When re-validating an appointment that is being edited, leave it out of
    existing_appointments or it will conflict with itself.
    """
    duration = _check_duration(service_duration, "service_duration")
    start = time_to_minutes(proposed_start, "proposed_start")
    end = _end_minutes(start, duration)
    date_key = _date_key(date)

    for appointment in existing_appointments:
        if appointment.get("staffId") != staff_id:
            continue
        if _date_key(appointment.get("date")) != date_key:
            continue
        if appointment.get("status") == CANCELLED:
            continue

        booked_start = time_to_minutes(appointment["time"], "time")
        booked_end = appointment_end_minutes(appointment, default_duration)
        if _minutes_overlap(start, end, booked_start, booked_end):
            return False

    return True


def generate_available_time_slots(
    date: DateLike,
    staff_member: Mapping[str, Any],
    service: Mapping[str, Any],
    existing_appointments: Iterable[Mapping[str, Any]],
    interval: int = None,
    default_duration: int = None,
) -> List[str]:
    """
    Enumerate bookable start times for a staff member, service and date.

    Args:
        date: calendar date, "YYYY-MM-DD" or datetime.date
        staff_member: mapping with "id" and a weekly "availability" map of
            day name -> {"start", "end", "available"}
        service: mapping with a positive integer "duration" in minutes
        existing_appointments: appointments to check against; other staff
            and other dates are ignored
        interval: grid step in minutes, defaults to SLOT_INTERVAL_MINUTES

    Returns:
        list of "HH:MM" strings in ascending order. Empty when the staff
        member does not work that day or nothing fits.
    """
    if interval is None:
        interval = settings.SLOT_INTERVAL_MINUTES
    interval = _check_duration(interval, "interval")
    duration = _check_duration(service.get("duration"), "service duration")

    day_name = day_name_for_date(date)
    day = (staff_member.get("availability") or {}).get(day_name)
    if not day or not day.get("available"):
        return []

    day_start = time_to_minutes(day["start"], f"{day_name}.start")
    day_end = time_to_minutes(day["end"], f"{day_name}.end")

    appointments = list(existing_appointments)
    staff_id = staff_member.get("id")

    slots = []
    candidate = day_start
    while candidate < day_end:
        if candidate + duration <= day_end:
            slot = minutes_to_time(candidate)
            if is_time_slot_available(
                slot, duration, appointments, staff_id, date, default_duration
            ):
                slots.append(slot)
        candidate += interval

    return slots

