from __future__ import annotations

from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from .enums import Recurrence

DEFAULT_DUE_SOON_DAYS = 7

_STEPS: dict[Recurrence, relativedelta] = {
    Recurrence.DAILY: relativedelta(days=1),
    Recurrence.WEEKLY: relativedelta(weeks=1),
    Recurrence.BIWEEKLY: relativedelta(weeks=2),
    Recurrence.MONTHLY: relativedelta(months=1),
    Recurrence.QUARTERLY: relativedelta(months=3),
    Recurrence.YEARLY: relativedelta(years=1),
}


def compute_next_due(
    recurrence: Recurrence | str,
    from_date: datetime,
    custom_interval_days: int | None = None,
) -> datetime:
    """Return the next due moment for a task completed at ``from_date``.

    Scheduling is anchored on the completion moment, so a late completion
    shifts every later occurrence. ``once`` returns ``from_date`` unchanged;
    the caller is responsible for retiring the task. Month and year steps
    clamp to the last valid day of the target month.
    """
    try:
        rule = Recurrence(recurrence)
    except ValueError:
        return from_date

    if rule is Recurrence.ONCE:
        return from_date
    if rule is Recurrence.CUSTOM:
        return from_date + timedelta(days=_custom_days(custom_interval_days))
    return from_date + _STEPS[rule]


def _custom_days(interval: int | None) -> int:
    if not interval or interval < 1:
        return 1
    return int(interval)


def _as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _today(today: date | datetime | None) -> date:
    return _as_day(today) if today is not None else date.today()


def is_overdue(due: date | datetime, today: date | datetime | None = None) -> bool:
    return _as_day(due) < _today(today)


def is_due_today(due: date | datetime, today: date | datetime | None = None) -> bool:
    return _as_day(due) == _today(today)


def is_due_soon(
    due: date | datetime,
    horizon_days: int = DEFAULT_DUE_SOON_DAYS,
    today: date | datetime | None = None,
) -> bool:
    current = _today(today)
    day = _as_day(due)
    return current < day <= current + timedelta(days=horizon_days)
