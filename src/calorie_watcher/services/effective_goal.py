"""Effective daily calorie goal with burned-calorie credit and rollover."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from calorie_watcher.domain.goals import GoalFlags, GoalSet
from calorie_watcher.domain.stats import DailyTotals

ROLLOVER_LIMIT_KCAL = 200.0

_logger = logging.getLogger(__name__)


class BurnedCaloriesStore(Protocol):
    """Calories burned through exercise, per day."""

    def calories_burned_on(self, day: date) -> float | None:
        """Return burned calories for the day, or None when nothing was entered."""


class DailyTotalsProvider(Protocol):
    """Consumed totals per day."""

    def totals_for(self, day: date) -> DailyTotals:
        """Return the day's totals, zeros when nothing was logged."""


def clamp_rollover(difference: float, limit: float = ROLLOVER_LIMIT_KCAL) -> float:
    """Bound yesterday's consumed-minus-goal difference to +/- limit."""
    return max(-limit, min(limit, difference))


@dataclass
class EffectiveGoalResolver:
    """Computes the calorie figure today's intake is compared against.

    The rollover is yesterday's consumed minus yesterday's goal, clamped
    before it is added: overeating raises today's goal, undereating lowers
    it, by at most the rollover limit either way.
    """

    burned_calories: BurnedCaloriesStore
    daily_totals: DailyTotalsProvider
    rollover_limit: float = ROLLOVER_LIMIT_KCAL

    def effective_calorie_goal(
        self, day: date, goal_set: GoalSet, flags: GoalFlags
    ) -> float:
        base_goal = float(goal_set.calorie_goal)
        burned = self._burned(day, flags)
        if not flags.rollover_calories:
            return base_goal + burned

        yesterday = day - timedelta(days=1)
        yesterday_goal = base_goal + self._burned(yesterday, flags)
        consumed = self.daily_totals.totals_for(yesterday).calories
        rollover = clamp_rollover(consumed - yesterday_goal, self.rollover_limit)
        _logger.debug(
            "Rollover for %s: consumed=%s goal=%s rollover=%s",
            day.isoformat(),
            consumed,
            yesterday_goal,
            rollover,
        )
        return base_goal + burned + rollover

    def _burned(self, day: date, flags: GoalFlags) -> float:
        if not flags.add_burned_calories_to_goal:
            return 0.0
        return float(self.burned_calories.calories_burned_on(day) or 0.0)
