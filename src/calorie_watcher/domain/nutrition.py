"""Nutrition domain models."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class NutritionSource(Enum):
    """Where the numbers of a nutrition record came from."""

    DATABASE_MATCH = "DatabaseMatch"
    LLM_ESTIMATE = "LLMEstimate"
    ESTIMATION_FAILED = "EstimationFailed"


class FoodMention(BaseModel):
    """Food item identified in a meal image, before any nutrition lookup."""

    name: str = Field(min_length=1)
    quantity: str = Field(min_length=1)
    description: str | None = None


@dataclass(frozen=True)
class NutrientTotals:
    """Calories and macronutrients in grams."""

    calories: float
    protein: float
    carbs: float
    fat: float

    @classmethod
    def zero(cls) -> "NutrientTotals":
        """Return all-zero totals."""
        return cls(calories=0.0, protein=0.0, carbs=0.0, fat=0.0)

    def __add__(self, other: "NutrientTotals") -> "NutrientTotals":
        return NutrientTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )

    def clamped(self) -> "NutrientTotals":
        """Return a copy with negative values raised to zero."""
        return NutrientTotals(
            calories=max(0.0, self.calories),
            protein=max(0.0, self.protein),
            carbs=max(0.0, self.carbs),
            fat=max(0.0, self.fat),
        )

    def scaled(self, factor: float) -> "NutrientTotals":
        """Return a copy with every value multiplied by factor."""
        return NutrientTotals(
            calories=self.calories * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fat=self.fat * factor,
        )


@dataclass(frozen=True)
class NutritionRecord:
    """Estimated nutrition for a single food mention."""

    name: str
    quantity: str
    calories: float
    protein: float
    carbs: float
    fat: float
    source: NutritionSource
    note: str | None = None

    @property
    def totals(self) -> NutrientTotals:
        return NutrientTotals(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )


@dataclass(frozen=True)
class MealEstimate:
    """Per-item records for one upload plus their totals."""

    items: list[NutritionRecord]
    totals: NutrientTotals
