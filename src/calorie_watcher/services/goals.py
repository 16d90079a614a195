"""Daily goal computation from onboarding profiles.

Formula set used everywhere in the library:

* BMR by Mifflin-St Jeor (``+5`` for male, ``-161`` otherwise).
* TDEE = BMR x activity multiplier from workouts per week.
* Weight change speed is in kg per week, ``speed x 3500 / 7`` kcal per day.
* Calorie goal floored at 500 kcal.
* Protein 1.8 g/kg, fat 0.9 g/kg, carbs from the remaining calories.
* Fiber 14 g per 1000 kcal, sugar 10 % of calories, sodium fixed 2300 mg,
  water 0.035 L/kg.

Missing age defaults to 25.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from calorie_watcher.domain.errors import ProfileIncomplete
from calorie_watcher.domain.goals import GoalSet, GoalType, Sex, UserProfile

DEFAULT_AGE_YEARS = 25
FALLBACK_SEX = Sex.MALE
FALLBACK_WEIGHT_KG = 70.0
FALLBACK_HEIGHT_CM = 170.0

BMR_MIN = 800.0
BMR_MAX = 4000.0
CALORIE_FLOOR = 500
KCAL_PER_KG_WEEK = 3500 / 7

PROTEIN_G_PER_KG = 1.8
FAT_G_PER_KG = 0.9
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9
FIBER_G_PER_1000_KCAL = 14
SUGAR_CALORIE_SHARE = 0.10
SODIUM_MG = 2300
WATER_L_PER_KG = 0.035

_logger = logging.getLogger(__name__)


def activity_multiplier(workouts_per_week: int | None) -> float:
    """Map weekly workouts to a TDEE multiplier."""
    workouts = workouts_per_week or 0
    if workouts >= 7:
        return 1.9
    if workouts >= 5:
        return 1.725
    if workouts >= 3:
        return 1.55
    if workouts >= 1:
        return 1.375
    return 1.2


def age_on(birth_date: date, today: date) -> int:
    """Full years between birth_date and today, never negative."""
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return max(0, years)


def mifflin_st_jeor(sex: Sex, weight_kg: float, height_cm: float, age: int) -> float:
    """Basal metabolic rate in kcal per day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex is Sex.MALE else base - 161


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass
class GoalCalculator:
    """Derives a GoalSet from a UserProfile.

    With ``allow_fallbacks`` missing sex, weight and height take documented
    defaults (male, 70 kg, 170 cm), BMR is clamped to a plausible range and
    the defaulted fields are listed in ``GoalSet.used_fallbacks``. Without it
    a profile missing those fields raises ``ProfileIncomplete``.
    """

    allow_fallbacks: bool = False
    today: Callable[[], date] = field(default=date.today)

    def compute_goals(self, profile: UserProfile) -> GoalSet:
        """Compute calorie, macro and micro targets for the profile."""
        fallbacks: list[str] = []
        sex, weight_kg, height_cm = self._body_metrics(profile, fallbacks)
        age = self._age(profile, fallbacks)

        bmr = mifflin_st_jeor(sex, weight_kg, height_cm, age)
        if fallbacks:
            bmr = min(BMR_MAX, max(BMR_MIN, bmr))
        tdee = bmr * activity_multiplier(profile.workouts_per_week)

        speed = max(0.0, profile.weight_change_speed_kg_per_week or 0.0)
        delta = speed * KCAL_PER_KG_WEEK
        target = tdee
        if profile.goal is GoalType.LOSE:
            target -= delta
        elif profile.goal is GoalType.GAIN:
            target += delta
        calorie_goal = max(CALORIE_FLOOR, round_half_up(target))

        protein = weight_kg * PROTEIN_G_PER_KG
        fat = weight_kg * FAT_G_PER_KG
        # May go negative for aggressive cuts; macros must still sum to the goal.
        carbs = (
            calorie_goal - protein * KCAL_PER_G_PROTEIN - fat * KCAL_PER_G_FAT
        ) / KCAL_PER_G_CARBS

        goals = GoalSet(
            calorie_goal=calorie_goal,
            protein_grams=round_half_up(protein),
            carbs_grams=round_half_up(carbs),
            fat_grams=round_half_up(fat),
            fiber_grams=round_half_up(calorie_goal / 1000 * FIBER_G_PER_1000_KCAL),
            sugar_grams=round_half_up(
                calorie_goal * SUGAR_CALORIE_SHARE / KCAL_PER_G_CARBS
            ),
            sodium_mg=SODIUM_MG,
            water_liters=round(weight_kg * WATER_L_PER_KG, 2),
            used_fallbacks=tuple(fallbacks),
        )
        _logger.info(
            "Computed goals: bmr=%.1f tdee=%.1f calorie_goal=%s fallbacks=%s",
            bmr,
            tdee,
            calorie_goal,
            fallbacks or "none",
        )
        return goals

    def _body_metrics(
        self, profile: UserProfile, fallbacks: list[str]
    ) -> tuple[Sex, float, float]:
        missing = [
            name
            for name, value in (
                ("sex", profile.sex),
                ("weight_kg", profile.weight_kg),
                ("height_cm", profile.height_cm),
            )
            if not value
        ]
        if missing and not self.allow_fallbacks:
            raise ProfileIncomplete(missing)
        fallbacks.extend(missing)
        return (
            profile.sex or FALLBACK_SEX,
            float(profile.weight_kg or FALLBACK_WEIGHT_KG),
            float(profile.height_cm or FALLBACK_HEIGHT_CM),
        )

    def _age(self, profile: UserProfile, fallbacks: list[str]) -> int:
        if profile.age_years is not None:
            return max(0, profile.age_years)
        if profile.birth_date is not None:
            return age_on(profile.birth_date, self.today())
        fallbacks.append("age")
        return DEFAULT_AGE_YEARS


class GoalRepository(Protocol):
    """Persistence interface for profiles and their goals."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored onboarding profile, if any."""

    def save_profile(self, user_id: UUID, profile: UserProfile) -> None:
        """Replace the stored profile."""

    def get_goals(self, user_id: UUID) -> GoalSet | None:
        """Return the stored goals, if any."""

    def save_goals(self, user_id: UUID, goals: GoalSet) -> None:
        """Replace the stored goals."""


@dataclass
class GoalService:
    """Keeps profile edits and goal recomputation as separate operations."""

    repository: GoalRepository
    calculator: GoalCalculator = field(default_factory=GoalCalculator)

    def recompute(self, user_id: UUID) -> GoalSet:
        """Recompute and replace all goals from the stored profile."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileIncomplete(["profile"])
        goals = self.calculator.compute_goals(profile)
        self.repository.save_goals(user_id, goals)
        return goals

    def update_body_metrics(
        self,
        user_id: UUID,
        *,
        weight_kg: float | None = None,
        height_cm: float | None = None,
        goal_weight_kg: float | None = None,
    ) -> UserProfile:
        """Update body metrics only; stored goals stay as they are."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileIncomplete(["profile"])
        changes: dict[str, float] = {}
        if weight_kg is not None:
            changes["weight_kg"] = max(0.0, weight_kg)
        if height_cm is not None:
            changes["height_cm"] = max(0.0, height_cm)
        if goal_weight_kg is not None:
            changes["goal_weight_kg"] = max(0.0, goal_weight_kg)
        updated = replace(profile, **changes)
        self.repository.save_profile(user_id, updated)
        return updated

    def update_calorie_goal(self, user_id: UUID, calories: int) -> GoalSet | None:
        """Manually set the calorie goal, leaving other targets unchanged."""
        goals = self.repository.get_goals(user_id)
        if goals is None:
            return None
        updated = replace(goals, calorie_goal=max(0, calories))
        self.repository.save_goals(user_id, updated)
        return updated

    def update_macro_goals(
        self, user_id: UUID, protein_grams: int, carbs_grams: int, fat_grams: int
    ) -> GoalSet | None:
        """Manually set macro targets."""
        goals = self.repository.get_goals(user_id)
        if goals is None:
            return None
        updated = replace(
            goals,
            protein_grams=max(0, protein_grams),
            carbs_grams=max(0, carbs_grams),
            fat_grams=max(0, fat_grams),
        )
        self.repository.save_goals(user_id, updated)
        return updated
