import logging
from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from models import (
    CustomDays,
    Daily,
    Monthly,
    NoRecurrence,
    NthWeekday,
    RecurrenceRule,
    Reminder,
    SpecificDays,
    Weekly,
    Yearly,
)

logger = logging.getLogger(__name__)

# Weekly rules look at most two weeks ahead
WEEKLY_SCAN_DAYS = 14


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def _clamped_date(year: int, month: int, day: int) -> date:
    """Date in the given month, pulled back to the month's last day if needed."""
    return date(year, month, min(day, days_in_month(year, month)))


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def _at_anchor_time(day: date, anchor: datetime) -> datetime:
    return datetime.combine(day, anchor.timetz())


def nth_weekday_of_month(year: int, month: int, n: int, weekday: int) -> Optional[date]:
    """
    Find the nth occurrence of weekday in a month (n=-1 for the last one).
    Returns None when the month has no such occurrence (e.g. a 5th Monday).
    """
    if n == -1:
        last = date(year, month, days_in_month(year, month))
        return last - timedelta(days=(last.weekday() - weekday) % 7)

    first_of_month = date(year, month, 1)
    days_until = (weekday - first_of_month.weekday()) % 7
    target_day = 1 + days_until + (n - 1) * 7
    if target_day > days_in_month(year, month):
        return None
    return date(year, month, target_day)


def _next_daily(anchor: datetime, reference: datetime, interval: int) -> datetime:
    # Steps from the reference, not from the anchor: not phase-aligned for interval > 1
    candidate = _at_anchor_time(reference.date(), anchor)
    if candidate <= reference:
        candidate += timedelta(days=interval)
    return candidate


def _next_weekly(anchor: datetime, reference: datetime, days_of_week) -> Optional[datetime]:
    start = _at_anchor_time(reference.date(), anchor)
    for offset in range(WEEKLY_SCAN_DAYS):
        candidate = start + timedelta(days=offset)
        if candidate.weekday() in days_of_week and candidate > reference:
            return candidate
    return None


def _next_monthly(anchor: datetime, reference: datetime, day_of_month: int) -> datetime:
    candidate = _at_anchor_time(_clamped_date(reference.year, reference.month, day_of_month), anchor)
    if candidate <= reference:
        year, month = _next_month(reference.year, reference.month)
        candidate = _at_anchor_time(_clamped_date(year, month, day_of_month), anchor)
    return candidate


def _next_yearly(anchor: datetime, reference: datetime) -> datetime:
    # Feb 29 anchors land on Feb 28 in non-leap years
    candidate = _at_anchor_time(_clamped_date(reference.year, anchor.month, anchor.day), anchor)
    if candidate <= reference:
        candidate = _at_anchor_time(_clamped_date(reference.year + 1, anchor.month, anchor.day), anchor)
    return candidate


def _next_custom_days(anchor: datetime, reference: datetime, interval: int) -> datetime:
    if anchor > reference:
        return anchor
    stride = timedelta(days=interval)
    strides = (reference - anchor) // stride + 1
    return anchor + strides * stride


def _next_nth_weekday(anchor: datetime, reference: datetime, n: int, weekday: int) -> Optional[datetime]:
    year, month = reference.year, reference.month
    # A 5th weekday can be missing from a few consecutive months; a year always has one
    for _ in range(13):
        day = nth_weekday_of_month(year, month, n, weekday)
        if day is not None:
            candidate = _at_anchor_time(day, anchor)
            if candidate > reference:
                return candidate
        year, month = _next_month(year, month)
    return None


def _candidate(anchor: datetime, rule: RecurrenceRule, reference: datetime) -> Optional[datetime]:
    if isinstance(rule, Daily):
        return _next_daily(anchor, reference, rule.interval)
    if isinstance(rule, Weekly):
        days = rule.days_of_week if rule.days_of_week is not None else {anchor.weekday()}
        return _next_weekly(anchor, reference, days)
    if isinstance(rule, SpecificDays):
        return _next_weekly(anchor, reference, rule.days_of_week)
    if isinstance(rule, Monthly):
        return _next_monthly(anchor, reference, rule.day_of_month or anchor.day)
    if isinstance(rule, Yearly):
        return _next_yearly(anchor, reference)
    if isinstance(rule, CustomDays):
        return _next_custom_days(anchor, reference, rule.interval)
    if isinstance(rule, NthWeekday):
        return _next_nth_weekday(anchor, reference, rule.n, rule.weekday)
    raise TypeError(f"Unsupported recurrence rule: {rule!r}")


def next_occurrence(
    anchor: datetime,
    rule: RecurrenceRule,
    reference: Optional[datetime] = None
) -> Optional[datetime]:
    """
    Calculate the first occurrence of rule strictly after reference.
    The result keeps the anchor's time of day.
    Returns None when the rule does not repeat or the series has ended.
    """
    if reference is None:
        reference = datetime.now()

    if isinstance(rule, NoRecurrence):
        return None

    if rule.end_date and rule.end_date < reference.date():
        return None

    try:
        candidate = _candidate(anchor, rule, reference)
    except (OverflowError, ValueError):
        # The next date would be past datetime.max
        logger.debug("No occurrence representable after %s", reference)
        return None

    if candidate is None:
        return None
    if rule.end_date and candidate.date() > rule.end_date:
        logger.debug("Series ended on %s", rule.end_date)
        return None
    return candidate


def generate_occurrences(anchor: datetime, rule: RecurrenceRule, count: int = 5) -> Iterator[datetime]:
    """
    Yield up to count occurrences, starting with the anchor itself.
    A non-recurring rule yields only the anchor. A rule with its own count
    caps the sequence at that many occurrences.
    """
    if isinstance(rule, NoRecurrence):
        yield anchor
        return

    if rule.count is not None:
        count = min(count, rule.count)

    current = anchor
    for _ in range(count):
        yield current
        current = next_occurrence(anchor, rule, current)
        if current is None:
            return


def list_occurrences(anchor: datetime, rule: RecurrenceRule, count: int = 5) -> list[datetime]:
    return list(generate_occurrences(anchor, rule, count))


# Reminder-level helpers
def reminder_next_occurrence(reminder: Reminder) -> Optional[datetime]:
    """
    Next occurrence after the reminder's last computed occurrence
    (or after its due date/time when none was computed yet).
    """
    if not reminder.is_recurring or isinstance(reminder.recurrence, NoRecurrence):
        return None

    last = reminder.next_occurrence or reminder.anchor
    return next_occurrence(reminder.anchor, reminder.recurrence, last)


def should_recur_today(reminder: Reminder, today: Optional[date] = None) -> bool:
    if not reminder.is_recurring or isinstance(reminder.recurrence, NoRecurrence):
        return False

    if today is None:
        today = date.today()

    if reminder.due_date == today:
        return True

    upcoming = reminder_next_occurrence(reminder)
    return upcoming is not None and upcoming.date() == today


def reminder_occurrences(reminder: Reminder, count: int = 5) -> list[datetime]:
    """Preview of upcoming occurrences for the reminder's timeline."""
    if not reminder.is_recurring:
        return [reminder.anchor]
    return list_occurrences(reminder.anchor, reminder.recurrence, count)
