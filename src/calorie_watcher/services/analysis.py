"""Meal image analysis: vision identification followed by nutrition estimation."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import TypeAdapter

from calorie_watcher.domain.nutrition import FoodMention, MealEstimate
from calorie_watcher.services.estimation import NutritionEstimator

_MENTIONS = TypeAdapter(list[FoodMention])

_logger = logging.getLogger(__name__)


class VisionClient(Protocol):
    """Interface for identifying food items in a meal image."""

    async def identify(self, image_ref: str) -> list[dict[str, object]]:
        """Return food items as name/quantity/description mappings."""


@dataclass
class MealAnalysisService:
    """Runs the image-to-nutrition pipeline."""

    vision_client: VisionClient
    estimator: NutritionEstimator

    async def analyze(self, image_ref: str) -> MealEstimate:
        """Identify foods in the image and estimate their nutrition.

        Vision failures and malformed identifications are not masked: they
        propagate to the caller, unlike per-item estimation failures.
        """
        raw_items = await self.vision_client.identify(image_ref)
        mentions = _MENTIONS.validate_python(raw_items)
        if not mentions:
            _logger.warning("No food items identified in %s", image_ref)
        return await self.estimator.estimate_nutrition(mentions)
