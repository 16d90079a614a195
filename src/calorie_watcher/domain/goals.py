"""Domain models for user profiles and nutrition goals."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class Sex(Enum):
    """Sex as captured during onboarding."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class GoalType(Enum):
    """Body weight direction the user is aiming for."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


@dataclass(frozen=True)
class UserProfile:
    """Onboarding snapshot used to derive goals.

    ``age_years`` takes precedence over ``birth_date`` when both are set.
    """

    sex: Sex | None
    weight_kg: float | None
    height_cm: float | None
    birth_date: date | None = None
    age_years: int | None = None
    workouts_per_week: int | None = None
    goal: GoalType | None = None
    weight_change_speed_kg_per_week: float | None = None
    goal_weight_kg: float | None = None


@dataclass(frozen=True)
class GoalSet:
    """Daily calorie, macro and micro targets."""

    calorie_goal: int
    protein_grams: int
    carbs_grams: int
    fat_grams: int
    fiber_grams: int
    sugar_grams: int
    sodium_mg: int
    water_liters: float
    used_fallbacks: tuple[str, ...] = ()


@dataclass(frozen=True)
class GoalFlags:
    """Profile switches that shape the effective daily goal."""

    add_burned_calories_to_goal: bool = False
    rollover_calories: bool = False
