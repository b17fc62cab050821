"""
Utility functions for cron expression handling.

Schedules carry their cron expression inside the deployment properties under one
of several accepted keys. The expression itself may be written Quartz style
(``sec min hour day month day-of-week [year]``, with ``?`` as "no specific
value" and day-of-week 1-7 meaning SUN-SAT) or crontab style
(``min hour day month day-of-week``, day-of-week 0-7 with 0 and 7 meaning SUN).
"""

import logging
import re
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from apscheduler.triggers.cron import CronTrigger

from .exceptions import MissingCronError

logger = logging.getLogger(__name__)

# Accepted property keys, highest priority first
CRON_EXPRESSION_KEYS: Tuple[str, ...] = (
    "scheduler.cron.expression.primary",
    "scheduler.cron.expression.short",
    "scheduler.cron.expression.legacy",
)

WEEKDAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

_UNSUPPORTED_DAY = re.compile(r'\d+W|LW|L-\d+', re.IGNORECASE)


def resolve_cron_expression(
    properties: Mapping[str, str],
    keys: Sequence[str] = CRON_EXPRESSION_KEYS
) -> Tuple[str, Dict[str, str]]:
    """
    Pick the cron expression out of a set of deployment properties.

    Args:
        properties: Deployment properties of a schedule request
        keys: Accepted property keys in priority order

    Returns:
        The cron expression and a copy of the properties without any of the keys

    Raises:
        MissingCronError: If none of the keys holds a non-empty value
    """
    cron_expression = None
    for key in keys:
        value = properties.get(key)
        if value is not None and value.strip():
            cron_expression = value.strip()
            break

    if cron_expression is None:
        logger.error(f"Cron expression not found in properties: {dict(properties)}")
        raise MissingCronError(keys)

    cleaned = {key: value for key, value in properties.items() if key not in keys}
    return cron_expression, cleaned


def parse_cron_expression(cron_expr: str) -> Dict[str, Optional[str]]:
    """
    Convert a cron expression into CronTrigger keyword arguments.

    Raises:
        ValueError: If the expression has the wrong number of fields or uses
            tokens that have no CronTrigger equivalent
    """
    parts = cron_expr.split()

    if len(parts) == 5:
        minute, hour, day, month, day_of_week = parts
        second, year = "0", None
        quartz = False
    elif len(parts) in (6, 7):
        second, minute, hour, day, month, day_of_week = parts[:6]
        year = parts[6] if len(parts) == 7 else None
        quartz = True
    else:
        raise ValueError(f"Cron expression must have 5, 6 or 7 fields: {cron_expr!r}")

    if day == "?" and day_of_week == "?":
        raise ValueError("'?' may not be used for both day and day-of-week")

    return {
        "second": _plain_field(second),
        "minute": _plain_field(minute),
        "hour": _plain_field(hour),
        "day": _day_field(day),
        "month": _plain_field(month),
        "day_of_week": _day_of_week_field(day_of_week, quartz),
        "year": _plain_field(year) if year is not None else None,
    }


def validate_cron_expression(cron_expr: str) -> bool:
    """Validate cron expression format."""
    try:
        CronTrigger(**parse_cron_expression(cron_expr))
        return True
    except ValueError:
        return False


def _plain_field(value: str) -> str:
    if value == "?":
        return "*"
    return value.lower()


def _day_field(value: str) -> str:
    if value == "?":
        return "*"
    if value.upper() == "L":
        return "last"
    if _UNSUPPORTED_DAY.search(value):
        raise ValueError(f"Unsupported day-of-month token: {value}")
    return value.lower()


def _day_of_week_field(value: str, quartz: bool) -> str:
    if value in ("?", "*"):
        return "*"
    if "L" in value.upper() or "#" in value:
        raise ValueError(f"Unsupported day-of-week token: {value}")

    days = []
    for part in value.split(","):
        base, _, step = part.partition("/")
        increment = int(step) if step else 1
        if increment <= 0:
            raise ValueError(f"Invalid step in day-of-week: {part}")

        if base == "*":
            first, last = 0, 6
        elif "-" in base:
            start, end = base.split("-", 1)
            first, last = _weekday_index(start, quartz), _weekday_index(end, quartz)
        else:
            first = _weekday_index(base, quartz)
            last = 6 if step else first

        days.extend(_weekday_span(first, last)[::increment])

    return ",".join(WEEKDAY_NAMES[day] for day in _unique(days))


def _weekday_index(token: str, quartz: bool) -> int:
    if token.isdigit():
        number = int(token)
        if quartz:
            if not 1 <= number <= 7:
                raise ValueError(f"Day-of-week must be between 1 and 7: {token}")
            return number - 1
        if not 0 <= number <= 7:
            raise ValueError(f"Day-of-week must be between 0 and 7: {token}")
        return number % 7

    name = token.lower()
    if name not in WEEKDAY_NAMES:
        raise ValueError(f"Invalid day-of-week: {token}")
    return WEEKDAY_NAMES.index(name)


def _weekday_span(first: int, last: int) -> list:
    if first <= last:
        return list(range(first, last + 1))
    # wraps around the end of the week, e.g. FRI-MON
    return list(range(first, 7)) + list(range(0, last + 1))


def _unique(values: Iterable[int]) -> list:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen
