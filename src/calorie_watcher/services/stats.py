"""Aggregation of logged food into batch, daily and weekly totals."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from calorie_watcher.domain.nutrition import NutrientTotals, NutritionRecord
from calorie_watcher.domain.stats import DailyTotals, LoggedFood, WeeklyDay

WEEK_DAYS = 7
_WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class FoodLogRepository(Protocol):
    """Read access to the user's food log."""

    def list_entries(self, start: date, end: date) -> list[LoggedFood]:
        """Return entries logged between start and end, both inclusive."""


def sum_records(records: Iterable[NutritionRecord | LoggedFood]) -> NutrientTotals:
    """Field-wise sum of records; empty input gives zeros."""
    total = NutrientTotals.zero()
    for record in records:
        total = total + NutrientTotals(
            calories=record.calories,
            protein=record.protein,
            carbs=record.carbs,
            fat=record.fat,
        )
    return total


def daily_totals(entries: Iterable[LoggedFood], day: date) -> DailyTotals:
    """Sum the entries logged on one calendar day."""
    total = sum_records(entry for entry in entries if entry.day == day)
    return DailyTotals(
        day=day,
        calories=total.calories,
        protein=total.protein,
        carbs=total.carbs,
        fat=total.fat,
    )


def weekly_totals(entries: Iterable[LoggedFood], end_day: date) -> list[WeeklyDay]:
    """Totals for the seven days ending on end_day, oldest first."""
    logged = list(entries)
    week = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = end_day - timedelta(days=offset)
        totals = daily_totals(logged, day)
        week.append(
            WeeklyDay(
                label=_WEEKDAY_LABELS[day.weekday()],
                day=day,
                totals=NutrientTotals(
                    calories=totals.calories,
                    protein=totals.protein,
                    carbs=totals.carbs,
                    fat=totals.fat,
                ),
            )
        )
    return week


def period_average(days: list[WeeklyDay]) -> NutrientTotals:
    """Average daily totals over a period."""
    total = NutrientTotals.zero()
    for entry in days:
        total = total + entry.totals
    return total.scaled(1 / max(len(days), 1))


@dataclass
class StatsService:
    """Derives totals on demand from the food log."""

    repository: FoodLogRepository

    def totals_for(self, day: date) -> DailyTotals:
        """Return the totals for one day, zeros when nothing was logged."""
        entries = self.repository.list_entries(day, day)
        return daily_totals(entries, day)

    def week_ending(self, day: date) -> list[WeeklyDay]:
        """Return the rolling week that ends on day."""
        start = day - timedelta(days=WEEK_DAYS - 1)
        entries = self.repository.list_entries(start, day)
        return weekly_totals(entries, day)
