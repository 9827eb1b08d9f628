"""
Weekly aggregation over a cached expense list.

A week runs from Sunday 00:00:00 to the following Saturday 23:59:59.999 in
local (naive) time. Everything here is derived from the list handed in; the
tracker never writes anywhere.
"""

from datetime import date, datetime

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta, SU

DAYS_PER_WEEK = 7


def format_category_name(category):
    if not category:
        return "Other"
    return " ".join(word[:1].upper() + word[1:] for word in category.split("_"))


def _field(expense, name):
    if isinstance(expense, dict):
        return expense.get(name)
    return getattr(expense, name, None)


def expense_datetime(expense):
    """Date of an expense as a naive datetime at local midnight."""
    value = _field(expense, "date")
    if isinstance(value, str):
        value = isoparse(value)
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise ValueError(f"Expense has no usable date: {value!r}")


def week_bounds(moment):
    start = moment + relativedelta(
        weekday=SU(-1), hour=0, minute=0, second=0, microsecond=0
    )
    end = start + relativedelta(
        days=6, hour=23, minute=59, second=59, microsecond=999000
    )
    return start, end


class WeeklyTracker:
    def __init__(self, expenses=None, now=None, show_week_only=True):
        self.expenses = list(expenses or [])
        self.show_week_only = show_week_only
        self.week_start = None
        self.week_end = None
        self.set_current_week(now)

    def set_current_week(self, now=None):
        self.week_start, self.week_end = week_bounds(now or datetime.now())

    def navigate_week(self, direction):
        shift = relativedelta(days=DAYS_PER_WEEK * direction)
        self.week_start += shift
        self.week_end += shift

    def in_week(self, expense):
        return self.week_start <= expense_datetime(expense) <= self.week_end

    def week_expenses(self):
        return [e for e in self.expenses if self.in_week(e)]

    def visible_expenses(self):
        shown = self.week_expenses() if self.show_week_only else list(self.expenses)
        return sorted(shown, key=expense_datetime, reverse=True)

    @property
    def weekly_total(self):
        return sum(float(_field(e, "amount")) for e in self.week_expenses())

    @property
    def weekly_count(self):
        return len(self.week_expenses())

    @property
    def daily_average(self):
        return self.weekly_total / DAYS_PER_WEEK

    @property
    def category_totals(self):
        totals = {}
        for expense in self.week_expenses():
            category = _field(expense, "category") or "other"
            totals[category] = totals.get(category, 0) + float(_field(expense, "amount"))
        return totals

    @property
    def top_category(self):
        top, top_amount = None, 0
        for category, amount in self.category_totals.items():
            # strict comparison keeps the first category on ties
            if amount > top_amount:
                top, top_amount = category, amount
        return top

    def summary(self):
        return {
            "week_start": self.week_start,
            "week_end": self.week_end,
            "total": self.weekly_total,
            "count": self.weekly_count,
            "daily_average": self.daily_average,
            "top_category": self.top_category,
        }
