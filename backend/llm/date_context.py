"""
Calendar windows for relative date phrases in generated queries.

Warehouse dates are integer keys in YYYYMMDD form. Windows are whole
calendar months or years and never include the current, incomplete month
except where the phrase says so ("this year", "past 3 years").
"""
import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple


def date_key(d: date) -> int:
    return d.year * 10000 + d.month * 100 + d.day


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by ``delta`` months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


@dataclass(frozen=True)
class DateWindow:
    label: str
    start: date
    end: date

    @property
    def start_key(self) -> int:
        return date_key(self.start)

    @property
    def end_key(self) -> int:
        return date_key(self.end)

    def describe(self) -> str:
        return (
            f'- "{self.label}" = {self.start.isoformat()} to {self.end.isoformat()} '
            f"(DATEKEY >= {self.start_key} AND DATEKEY <= {self.end_key})"
        )


@dataclass(frozen=True)
class DateWindows:
    today: date
    last_month: DateWindow
    last_3_months: DateWindow
    this_year: DateWindow
    last_year: DateWindow
    past_3_years: DateWindow

    @classmethod
    def for_date(cls, today: Optional[date] = None) -> "DateWindows":
        today = today or date.today()
        prev_year, prev_month = shift_month(today.year, today.month, -1)
        first_year, first_month = shift_month(today.year, today.month, -3)
        _, prev_month_end = month_bounds(prev_year, prev_month)
        three_months_start, _ = month_bounds(first_year, first_month)

        return cls(
            today=today,
            last_month=DateWindow("last month", *month_bounds(prev_year, prev_month)),
            last_3_months=DateWindow("last 3 months", three_months_start, prev_month_end),
            this_year=DateWindow("this year", date(today.year, 1, 1), date(today.year, 12, 31)),
            last_year=DateWindow("last year", date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)),
            past_3_years=DateWindow("past 3 years", date(today.year - 2, 1, 1), date(today.year, 12, 31)),
        )

    def describe(self) -> str:
        lines = [
            f"CURRENT DATE: {self.today.isoformat()} (DATEKEY: {date_key(self.today)})",
            f"CURRENT YEAR: {self.today.year}",
            "When the user says:",
        ]
        for window in (self.last_month, self.last_3_months, self.this_year, self.last_year, self.past_3_years):
            lines.append(window.describe())
        return "\n".join(lines)
