"""Per-item nutrition estimation: structured lookup first, model estimate second."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import httpx
import openai

from calorie_watcher.domain.errors import MalformedEstimate, UpstreamUnavailable
from calorie_watcher.domain.nutrition import (
    FoodMention,
    MealEstimate,
    NutrientTotals,
    NutritionRecord,
    NutritionSource,
)
from calorie_watcher.services.estimate_parsing import parse_estimate
from calorie_watcher.services.nutrients import extract_nutrients
from calorie_watcher.services.stats import sum_records
from calorie_watcher.services.units import quantity_multiplier

ESTIMATE_INSTRUCTIONS = (
    "You are a nutrition expert. Provide accurate nutrition estimates based on "
    "food names and quantities. Calculate the total nutrition for the specified "
    "quantity, not per serving."
)

ESTIMATE_PROMPT = (
    "Estimate the total nutrition information for: {name}, quantity: {quantity}.\n\n"
    "IMPORTANT: Calculate the TOTAL nutrition for the entire quantity specified "
    '(e.g., if quantity is "200g", provide nutrition for 200g, not per 100g).\n\n'
    """Return ONLY a JSON object with this exact structure:
{{
  "calories": number,
  "protein": number (in grams),
  "carbs": number (in grams),
  "fat": number (in grams)
}}"""
)

FAILED_NOTE = "Could not estimate nutrition values"

_TRANSPORT_ERRORS = (httpx.HTTPError, openai.OpenAIError)

_logger = logging.getLogger(__name__)


class NutritionLookup(Protocol):
    """Structured nutrition reference, searched by food name."""

    async def find_food(self, name: str) -> dict[str, object] | None:
        """Return the top-ranked record for the name, or None."""


class NutritionTextClient(Protocol):
    """Interface for free-text model completions."""

    async def complete(self, *, instructions: str, prompt: str) -> str:
        """Return the raw model answer for the prompt."""


@dataclass
class NutritionEstimator:
    """Produces one NutritionRecord per food mention, never failing the batch."""

    lookup: NutritionLookup | None
    text_client: NutritionTextClient
    timeout_seconds: float = 10.0

    async def estimate_nutrition(
        self, mentions: Sequence[FoodMention]
    ) -> MealEstimate:
        """Estimate all mentions concurrently, keeping input order."""
        records = await asyncio.gather(
            *(self.estimate_item(mention) for mention in mentions)
        )
        items = list(records)
        failed = sum(
            1 for item in items if item.source is NutritionSource.ESTIMATION_FAILED
        )
        _logger.info("Estimated %s food items (%s failed)", len(items), failed)
        return MealEstimate(items=items, totals=sum_records(items))

    async def estimate_item(self, mention: FoodMention) -> NutritionRecord:
        """Estimate nutrition for a single mention."""
        matched = await self._lookup(mention)
        if matched is not None:
            return matched
        try:
            totals = await self._estimate_with_model(mention)
        except (UpstreamUnavailable, MalformedEstimate) as exc:
            _logger.warning(
                "Nutrition estimate failed for %r (%s): %s",
                mention.name,
                type(exc).__name__,
                exc,
            )
            return _record(
                mention,
                NutrientTotals.zero(),
                NutritionSource.ESTIMATION_FAILED,
                note=f"{FAILED_NOTE}: {exc}",
            )
        return _record(mention, totals, NutritionSource.LLM_ESTIMATE)

    async def _lookup(self, mention: FoodMention) -> NutritionRecord | None:
        if self.lookup is None:
            return None
        try:
            food = await asyncio.wait_for(
                self.lookup.find_food(mention.name), timeout=self.timeout_seconds
            )
        except (TimeoutError, *_TRANSPORT_ERRORS) as exc:
            _logger.warning(
                "Structured lookup unavailable for %r: %s", mention.name, exc
            )
            return None
        if not food:
            return None
        totals = extract_nutrients(food, quantity_multiplier(mention.quantity))
        if totals == NutrientTotals.zero():
            _logger.info("FDC record for %r has no usable nutrients", mention.name)
            return None
        return _record(
            mention,
            totals,
            NutritionSource.DATABASE_MATCH,
            note=_describe_match(food),
        )

    async def _estimate_with_model(self, mention: FoodMention) -> NutrientTotals:
        prompt = ESTIMATE_PROMPT.format(name=mention.name, quantity=mention.quantity)
        try:
            raw = await asyncio.wait_for(
                self.text_client.complete(
                    instructions=ESTIMATE_INSTRUCTIONS, prompt=prompt
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise UpstreamUnavailable(
                f"estimate timed out after {self.timeout_seconds}s"
            ) from exc
        except _TRANSPORT_ERRORS as exc:
            raise UpstreamUnavailable(str(exc) or type(exc).__name__) from exc
        _logger.debug("Raw estimate for %r: %r", mention.name, raw)
        return parse_estimate(raw).unwrap()


def _record(
    mention: FoodMention,
    totals: NutrientTotals,
    source: NutritionSource,
    note: str | None = None,
) -> NutritionRecord:
    return NutritionRecord(
        name=mention.name,
        quantity=mention.quantity,
        calories=totals.calories,
        protein=totals.protein,
        carbs=totals.carbs,
        fat=totals.fat,
        source=source,
        note=note,
    )


def _describe_match(food: dict[str, object]) -> str:
    description = food.get("description") or "unnamed food"
    fdc_id = food.get("fdcId")
    if fdc_id is None:
        return str(description)
    return f"{description} (FDC {fdc_id})"
