"""Dependency container wiring for the library."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from calorie_watcher.adapters.fdc_client import HttpxFdcClient
from calorie_watcher.adapters.openai_text_client import OpenAITextClient
from calorie_watcher.app_logging import configure_logging
from calorie_watcher.config import Settings
from calorie_watcher.services.cache import InMemoryCache
from calorie_watcher.services.estimation import NutritionEstimator
from calorie_watcher.services.goals import GoalCalculator
from calorie_watcher.services.nutrition import NutritionService
from calorie_watcher.services.stats import FoodLogRepository, StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    estimator: NutritionEstimator
    goal_calculator: GoalCalculator
    stats_service: StatsService | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, food_log: FoodLogRepository | None = None
) -> AppContainer:
    """Create the default dependency container.

    Aggregation needs the host application's food log, so ``stats_service``
    is only built when ``food_log`` is given.
    """
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.request_timeout_seconds,
    )
    text_client = OpenAITextClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
    )
    estimator = NutritionEstimator(
        lookup=nutrition_service,
        text_client=text_client,
        timeout_seconds=resolved_settings.request_timeout_seconds,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await text_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        estimator=estimator,
        goal_calculator=GoalCalculator(),
        stats_service=StatsService(food_log) if food_log is not None else None,
        close_resources=close_resources,
    )
