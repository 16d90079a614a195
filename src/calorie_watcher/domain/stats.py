"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date

from calorie_watcher.domain.nutrition import NutrientTotals


@dataclass(frozen=True)
class LoggedFood:
    """A food entry as stored in the log, keyed by client-local day."""

    day: date
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class DailyTotals:
    """Daily total calories and macros."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float

    @classmethod
    def empty(cls, day: date) -> "DailyTotals":
        """Return zero totals for a day without logged food."""
        return cls(day=day, calories=0.0, protein=0.0, carbs=0.0, fat=0.0)


@dataclass(frozen=True)
class WeeklyDay:
    """Totals for one day of a rolling week, labelled by weekday."""

    label: str
    day: date
    totals: NutrientTotals
