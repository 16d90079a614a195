"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

import pytest

from calorie_watcher.adapters.fdc_client import FdcClient
from calorie_watcher.config import Settings
from calorie_watcher.domain.goals import GoalSet, GoalType, Sex, UserProfile
from calorie_watcher.domain.stats import DailyTotals, LoggedFood
from calorie_watcher.services.effective_goal import (
    BurnedCaloriesStore,
    DailyTotalsProvider,
)
from calorie_watcher.services.estimation import NutritionLookup, NutritionTextClient
from calorie_watcher.services.goals import GoalRepository
from calorie_watcher.services.stats import FoodLogRepository


def fdc_nutrient(
    nutrient_id: int, name: str, unit: str, amount: float | None
) -> dict[str, object]:
    """Build a food-detail style nutrient row."""
    return {
        "nutrient": {"id": nutrient_id, "name": name, "unitName": unit},
        "amount": amount,
    }


CHICKEN_BREAST: dict[str, object] = {
    "fdcId": 171077,
    "description": "Chicken, broiler or fryers, breast, skinless, boneless, raw",
    "dataType": "Foundation",
    "foodNutrients": [
        fdc_nutrient(1008, "Energy", "kcal", 120),
        fdc_nutrient(1062, "Energy", "kJ", 502),
        fdc_nutrient(1003, "Protein", "g", 22.5),
        fdc_nutrient(1004, "Total lipid (fat)", "g", 2.62),
        fdc_nutrient(1005, "Carbohydrate, by difference", "g", 0),
    ],
}


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken breast, raw",
                    "dataType": "Foundation",
                }
            ]
        }
    )
    food_payload: dict[str, object] = field(default_factory=lambda: CHICKEN_BREAST)
    search_calls: int = 0
    food_calls: int = 0

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        self.search_calls += 1
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        return self.food_payload


@dataclass
class FakeLookup(NutritionLookup):
    """Lookup returning records by food name."""

    records: dict[str, dict[str, object]] = field(default_factory=dict)
    error: Exception | None = None
    delay_seconds: float = 0.0

    async def find_food(self, name: str) -> dict[str, object] | None:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.records.get(name)


@dataclass
class FakeTextClient(NutritionTextClient):
    """Text client answering from a name-keyed table of raw responses."""

    answers: dict[str, str] = field(default_factory=dict)
    default: str = ""
    error: Exception | None = None
    delays: dict[str, float] = field(default_factory=dict)
    prompts: list[str] = field(default_factory=list)

    async def complete(self, *, instructions: str, prompt: str) -> str:
        self.prompts.append(prompt)
        for name, delay in self.delays.items():
            if f"for: {name}," in prompt:
                await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        for name, answer in self.answers.items():
            if f"for: {name}," in prompt:
                return answer
        return self.default


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log for tests."""

    entries: list[LoggedFood] = field(default_factory=list)

    def list_entries(self, start: date, end: date) -> list[LoggedFood]:
        return [entry for entry in self.entries if start <= entry.day <= end]


@dataclass
class InMemoryBurnedCalories(BurnedCaloriesStore):
    """Burned calories keyed by day."""

    by_day: dict[date, float] = field(default_factory=dict)

    def calories_burned_on(self, day: date) -> float | None:
        return self.by_day.get(day)


@dataclass
class FixedDailyTotals(DailyTotalsProvider):
    """Consumed calories keyed by day."""

    calories_by_day: dict[date, float] = field(default_factory=dict)

    def totals_for(self, day: date) -> DailyTotals:
        calories = self.calories_by_day.get(day)
        if calories is None:
            return DailyTotals.empty(day)
        return DailyTotals(day=day, calories=calories, protein=0, carbs=0, fat=0)


@dataclass
class InMemoryGoalRepository(GoalRepository):
    """In-memory profile and goal storage for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    goals: dict[UUID, GoalSet] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def save_profile(self, user_id: UUID, profile: UserProfile) -> None:
        self.profiles[user_id] = profile

    def get_goals(self, user_id: UUID) -> GoalSet | None:
        return self.goals.get(user_id)

    def save_goals(self, user_id: UUID, goals: GoalSet) -> None:
        self.goals[user_id] = goals


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def reference_profile() -> UserProfile:
    return UserProfile(
        sex=Sex.MALE,
        weight_kg=80,
        height_cm=180,
        age_years=30,
        workouts_per_week=3,
        goal=GoalType.LOSE,
        weight_change_speed_kg_per_week=0.5,
    )
