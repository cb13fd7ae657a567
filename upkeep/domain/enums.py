from __future__ import annotations

from enum import StrEnum


class Recurrence(StrEnum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return RECURRENCE_LABELS[self]

    @property
    def is_terminal(self) -> bool:
        return self is Recurrence.ONCE


RECURRENCE_LABELS: dict[Recurrence, str] = {
    Recurrence.ONCE: "One time",
    Recurrence.DAILY: "Every day",
    Recurrence.WEEKLY: "Every week",
    Recurrence.BIWEEKLY: "Every two weeks",
    Recurrence.MONTHLY: "Every month",
    Recurrence.QUARTERLY: "Every three months",
    Recurrence.YEARLY: "Every year",
    Recurrence.CUSTOM: "Custom",
}
