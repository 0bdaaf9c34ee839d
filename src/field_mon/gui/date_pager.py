"""Bounded date paging for the analysis end date."""

from datetime import date, timedelta
from typing import Callable

from .. import config

BACK = -1
FORWARD = 1


def step(current: date, delta_days: int, today: date) -> date:
    """
    Move ``current`` by ``delta_days``.

    Backward steps are always taken. Forward steps stop at ``today``; from
    today (or later) a forward step leaves the date at today.
    """
    if delta_days <= 0:
        return current + timedelta(days=delta_days)
    if current >= today:
        return today
    return min(current + timedelta(days=delta_days), today)


def can_step_forward(current: date, today: date) -> bool:
    return current < today


class DatePager:
    """
    Holds the end date shared by all date-dependent layers.

    Attributes:
        step_days: Days moved per page (config.DAYS_STEP).
        current_end_date: Never later than today.
    """

    def __init__(self, step_days: int = None, today_fn: Callable[[], date] = date.today):
        self.step_days = config.DAYS_STEP if step_days is None else step_days
        self._today_fn = today_fn
        self.current_end_date = today_fn()

    def today(self) -> date:
        return self._today_fn()

    def reset(self) -> date:
        """Restart navigation at today."""
        self.current_end_date = self.today()
        return self.current_end_date

    def page(self, direction: int) -> date:
        """Step one page back (BACK) or forward (FORWARD) and return the new date."""
        if direction not in (BACK, FORWARD):
            raise ValueError(f"direction must be {BACK} or {FORWARD}, got {direction!r}")
        self.current_end_date = step(self.current_end_date, direction * self.step_days, self.today())
        return self.current_end_date

    def can_page_forward(self) -> bool:
        return can_step_forward(self.current_end_date, self.today())

    @property
    def window_start(self) -> date:
        """Start of the displayed window ending at current_end_date."""
        return self.current_end_date - timedelta(days=self.step_days)
