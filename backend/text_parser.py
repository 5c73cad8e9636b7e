"""
Best-effort extraction of a recurrence rule from free text
("every 3 days", "second Monday", "weekdays").

Matchers run in PATTERN_MATCHERS order and the first one that returns a rule
wins, so specific phrasings (day lists, nth weekday) must stay ahead of the
generic "weekly"/"monthly" ones.
"""
import logging
import re
from typing import Callable, Optional

from models import (
    WEEKDAYS,
    WEEKEND,
    CustomDays,
    Daily,
    Monthly,
    NthWeekday,
    RecurrenceRule,
    SpecificDays,
    Weekday,
    Weekly,
    Yearly,
)

logger = logging.getLogger(__name__)

DAY_NAME_MAP = {
    "monday": Weekday.MONDAY,
    "tuesday": Weekday.TUESDAY,
    "wednesday": Weekday.WEDNESDAY,
    "thursday": Weekday.THURSDAY,
    "friday": Weekday.FRIDAY,
    "saturday": Weekday.SATURDAY,
    "sunday": Weekday.SUNDAY,
}

ORDINAL_MAP = {
    "first": 1, "1st": 1,
    "second": 2, "2nd": 2,
    "third": 3, "3rd": 3,
    "fourth": 4, "4th": 4,
    "fifth": 5, "5th": 5,
    "last": -1,
}

_DAY = r"(monday|tuesday|wednesday|thursday|friday|saturday|sunday)s?"
_DAY_LIST_SEP = r"(?:\s*,\s*(?:and\s+)?|\s+and\s+|\s*&\s*|\s+)"

EVERY_N_DAYS_RE = re.compile(r"\bevery\s+(\d+)\s+days?\b")
EVERY_OTHER_DAY_RE = re.compile(r"\bevery\s+other\s+day\b")
DAILY_RE = re.compile(r"\bevery\s*day\b|\bdaily\b")
WEEKDAYS_RE = re.compile(r"\bweek\s?days?\b")
WEEKEND_RE = re.compile(r"\bweekends?\b")
EVERY_DAY_LIST_RE = re.compile(
    rf"\bevery\s+{_DAY}\b(?:{_DAY_LIST_SEP}(?:every\s+)?{_DAY}\b)*"
)
DAY_NAME_RE = re.compile(rf"\b{_DAY}\b")
NTH_WEEKDAY_RE = re.compile(
    rf"\b(first|second|third|fourth|fifth|last|1st|2nd|3rd|4th|5th)\s+{_DAY}\b"
)
WEEKLY_RE = re.compile(r"\bweekly\b|\bevery\s+week\b")
MONTHLY_RE = re.compile(r"\bmonthly\b|\bevery\s+month\b")
DAY_OF_MONTH_RE = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b")
YEARLY_RE = re.compile(r"\byearly\b|\bannually\b|\bevery\s+year\b")


def _match_every_n_days(text: str) -> Optional[RecurrenceRule]:
    match = EVERY_N_DAYS_RE.search(text)
    if match:
        return CustomDays(interval=int(match.group(1)))
    if EVERY_OTHER_DAY_RE.search(text):
        return CustomDays(interval=2)
    return None


def _match_daily(text: str) -> Optional[RecurrenceRule]:
    if DAILY_RE.search(text):
        return Daily(interval=1)
    return None


def _match_weekdays(text: str) -> Optional[RecurrenceRule]:
    if WEEKDAYS_RE.search(text):
        return SpecificDays(days_of_week=WEEKDAYS)
    return None


def _match_weekend(text: str) -> Optional[RecurrenceRule]:
    if WEEKEND_RE.search(text):
        return SpecificDays(days_of_week=WEEKEND)
    return None


def _match_day_list(text: str) -> Optional[RecurrenceRule]:
    """"every Friday" -> weekly, "every Monday and Thursday" -> specific days."""
    days = set()
    for match in EVERY_DAY_LIST_RE.finditer(text):
        days.update(DAY_NAME_MAP[name] for name in DAY_NAME_RE.findall(match.group(0)))
    if not days:
        return None
    if len(days) == 1:
        return Weekly(interval=1, days_of_week=days)
    return SpecificDays(days_of_week=days)


def _match_nth_weekday(text: str) -> Optional[RecurrenceRule]:
    match = NTH_WEEKDAY_RE.search(text)
    if match:
        return NthWeekday(n=ORDINAL_MAP[match.group(1)], weekday=DAY_NAME_MAP[match.group(2)])
    return None


def _match_weekly(text: str) -> Optional[RecurrenceRule]:
    if WEEKLY_RE.search(text):
        return Weekly(interval=1)
    return None


def _match_monthly(text: str) -> Optional[RecurrenceRule]:
    if not MONTHLY_RE.search(text):
        return None
    # "monthly on the 15th"; otherwise the caller fills the day from context
    match = DAY_OF_MONTH_RE.search(text)
    if match and 1 <= int(match.group(1)) <= 31:
        return Monthly(day_of_month=int(match.group(1)))
    return Monthly()


def _match_yearly(text: str) -> Optional[RecurrenceRule]:
    if YEARLY_RE.search(text):
        return Yearly()
    return None


PATTERN_MATCHERS: list[tuple[str, Callable[[str], Optional[RecurrenceRule]]]] = [
    ("every_n_days", _match_every_n_days),
    ("daily", _match_daily),
    ("weekdays", _match_weekdays),
    ("weekend", _match_weekend),
    ("day_list", _match_day_list),
    ("nth_weekday", _match_nth_weekday),
    ("weekly", _match_weekly),
    ("monthly", _match_monthly),
    ("yearly", _match_yearly),
]


def parse_recurrence(text: str) -> Optional[RecurrenceRule]:
    """
    Extract a recurrence rule from free text (case-insensitive).
    Returns None when no known pattern matches.
    """
    if not text:
        return None

    lower_text = text.lower()
    for name, matcher in PATTERN_MATCHERS:
        rule = matcher(lower_text)
        if rule is not None:
            logger.debug("Recurrence pattern %s matched %r", name, text)
            return rule

    logger.debug("No recurrence pattern in %r", text)
    return None
