"""Human-readable descriptions of recurrence rules."""
from models import (
    ALL_DAYS,
    WEEKDAYS,
    CustomDays,
    Daily,
    Monthly,
    NoRecurrence,
    NthWeekday,
    RecurrenceRule,
    SpecificDays,
    Weekly,
    Yearly,
)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
SHORT_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def ordinal(n: int) -> str:
    """1 -> 1st, 2 -> 2nd, 11 -> 11th, 23 -> 23rd."""
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _short_day_list(days) -> str:
    return ", ".join(SHORT_DAY_NAMES[d] for d in sorted(days))


def _every_n_days(interval: int) -> str:
    if interval > 1:
        return f"Every {interval} days"
    return "Every day"


def format_recurrence(rule: RecurrenceRule) -> str:
    """Describe a rule the way it is shown on a reminder card."""
    if isinstance(rule, NoRecurrence):
        return "Does not repeat"

    if isinstance(rule, (Daily, CustomDays)):
        return _every_n_days(rule.interval)

    if isinstance(rule, (Weekly, SpecificDays)):
        days = rule.days_of_week
        if not days:
            return "Every week" if isinstance(rule, Weekly) else "Selected days"
        if days == ALL_DAYS:
            return "Every day"
        if days == WEEKDAYS:
            return "Every weekday"
        if isinstance(rule, Weekly):
            return f"Weekly on {_short_day_list(days)}"
        return f"Every {_short_day_list(days)}"

    if isinstance(rule, Monthly):
        if rule.day_of_month:
            return f"Monthly on the {ordinal(rule.day_of_month)}"
        return "Every month"

    if isinstance(rule, Yearly):
        return "Every year"

    if isinstance(rule, NthWeekday):
        which = "last" if rule.n == -1 else ordinal(rule.n)
        return f"Monthly on the {which} {DAY_NAMES[rule.weekday]}"

    raise TypeError(f"Unsupported recurrence rule: {rule!r}")
