from datetime import date, datetime, time
from enum import IntEnum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer, field_validator


class Weekday(IntEnum):
    """Day of week, numbered like date.weekday() (Monday=0)."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


DAY_MAP = {"MON": 0, "TUE": 1, "WED": 2, "THU": 3, "FRI": 4, "SAT": 5, "SUN": 6}
# Full names as well as the three-letter keys
_DAY_LOOKUP = {**DAY_MAP, **{day.name: day.value for day in Weekday}}

WEEKDAYS = frozenset({Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY})
WEEKEND = frozenset({Weekday.SATURDAY, Weekday.SUNDAY})
ALL_DAYS = frozenset(Weekday)

# Keeps every computed date well inside datetime's range
MAX_INTERVAL_DAYS = 36500


def _coerce_weekday(value):
    """Accept 0-6, "MON", "monday", "Mon" etc."""
    if isinstance(value, str):
        key = value.strip().upper()
        if key.isdigit():
            return Weekday(int(key))
        if key not in _DAY_LOOKUP:
            raise ValueError(f"Unknown weekday: {value!r}")
        return Weekday(_DAY_LOOKUP[key])
    if isinstance(value, int) and not isinstance(value, bool):
        return Weekday(value)
    raise ValueError(f"Weekday must be a number or a day name, got {value!r}")


def _coerce_days(value):
    """Accept a list of weekdays or a "MON,WED,FRI" string."""
    if value is None:
        return None
    if isinstance(value, str):
        value = [d for d in value.split(",") if d.strip()]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"days_of_week must be a list of weekdays, got {value!r}")
    return frozenset(_coerce_weekday(d) for d in value)


def _check_naive(value):
    # Occurrences are computed in local wall-clock time
    if value is not None and value.tzinfo is not None:
        raise ValueError("Timezone-aware values are not supported; use local time without an offset")
    return value


def _dump_days(days):
    if days is None:
        return None
    return sorted(int(d) for d in days)


class _RuleBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    end_date: Optional[date] = None  # Inclusive last day of the series
    count: Optional[int] = Field(default=None, ge=1)


class _IntervalRule(_RuleBase):
    interval: int = Field(default=1, ge=1, le=MAX_INTERVAL_DAYS)

    @field_validator("interval", mode="before")
    @classmethod
    def _default_interval(cls, value):
        # Missing or zero interval means "every 1"
        if value is None or value == 0:
            return 1
        return value


class NoRecurrence(_RuleBase):
    type: Literal["none"] = "none"


class Daily(_IntervalRule):
    type: Literal["daily"] = "daily"


class Weekly(_IntervalRule):
    # None = the anchor's weekday; interval is kept for storage but always treated as 1
    type: Literal["weekly"] = "weekly"
    days_of_week: Optional[frozenset[Weekday]] = None

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _parse_days(cls, value):
        return _coerce_days(value)

    @field_serializer("days_of_week")
    def _serialize_days(self, days):
        return _dump_days(days)


class Monthly(_RuleBase):
    # None = the anchor's day of month
    type: Literal["monthly"] = "monthly"
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)


class Yearly(_RuleBase):
    type: Literal["yearly"] = "yearly"


class CustomDays(_IntervalRule):
    type: Literal["custom_days"] = "custom_days"


class NthWeekday(_RuleBase):
    """The nth (1-5) or last (-1) given weekday of every month."""
    type: Literal["nth_weekday"] = "nth_weekday"
    n: int
    weekday: Weekday

    @field_validator("n")
    @classmethod
    def _check_n(cls, value: int) -> int:
        if value not in (-1, 1, 2, 3, 4, 5):
            raise ValueError("n must be -1 (last) or 1-5")
        return value

    @field_validator("weekday", mode="before")
    @classmethod
    def _parse_weekday(cls, value):
        return _coerce_weekday(value)


class SpecificDays(_RuleBase):
    type: Literal["specific_days"] = "specific_days"
    days_of_week: frozenset[Weekday]

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _parse_days(cls, value):
        return _coerce_days(value)

    @field_validator("days_of_week")
    @classmethod
    def _check_not_empty(cls, value: frozenset) -> frozenset:
        if not value:
            raise ValueError("At least one day of week must be specified")
        return value

    @field_serializer("days_of_week")
    def _serialize_days(self, days):
        return _dump_days(days)


RecurrenceRule = Annotated[
    Union[NoRecurrence, Daily, Weekly, Monthly, Yearly, CustomDays, NthWeekday, SpecificDays],
    Field(discriminator="type"),
]

_rule_adapter = TypeAdapter(RecurrenceRule)


def parse_rule(data) -> RecurrenceRule:
    """
    Build a rule from a dict or a JSON string.
    Raises pydantic.ValidationError for malformed rules.
    """
    if isinstance(data, (str, bytes)):
        return _rule_adapter.validate_json(data)
    return _rule_adapter.validate_python(data)


def dump_rule(rule: RecurrenceRule) -> dict:
    """JSON-compatible dict that parse_rule() turns back into an equal rule."""
    return _rule_adapter.dump_python(rule, mode="json")


class Reminder(BaseModel):
    id: str
    title: str
    due_date: date
    due_time: time = time(9, 0)
    recurrence: RecurrenceRule = NoRecurrence()
    is_recurring: bool = False
    next_occurrence: Optional[datetime] = None  # Last computed occurrence, if any

    @field_validator("due_time", "next_occurrence")
    @classmethod
    def _local_time(cls, value):
        return _check_naive(value)

    @property
    def anchor(self) -> datetime:
        return datetime.combine(self.due_date, self.due_time)


class NextOccurrenceRequest(BaseModel):
    anchor: datetime
    rule: RecurrenceRule
    reference: Optional[datetime] = None

    @field_validator("anchor", "reference")
    @classmethod
    def _local_time(cls, value):
        return _check_naive(value)


class OccurrencesRequest(BaseModel):
    anchor: datetime
    rule: RecurrenceRule
    count: Optional[int] = Field(default=None, ge=1)

    @field_validator("anchor")
    @classmethod
    def _local_time(cls, value):
        return _check_naive(value)


class DescribeRequest(BaseModel):
    rule: RecurrenceRule


class ParseRequest(BaseModel):
    text: str


class ReminderPreviewRequest(BaseModel):
    reminder: Reminder
    count: Optional[int] = Field(default=None, ge=1)
