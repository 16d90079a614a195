"""Tolerant parsing of model-written nutrition estimates.

Every step takes the previous value and returns a ``ParseResult``; the first
failing step short-circuits the rest of the pipeline.
"""

import json
import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel, field_validator

from calorie_watcher.domain.errors import MalformedEstimate
from calorie_watcher.domain.nutrition import NutrientTotals

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


@dataclass(frozen=True)
class ParseResult:
    """Either a parsed value or the reason parsing stopped."""

    value: object = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: object) -> "ParseResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ParseResult":
        return cls(error=error)

    def then(self, step: "Callable[[object], ParseResult]") -> "ParseResult":
        """Apply the next step when this result succeeded."""
        if not self.ok:
            return self
        return step(self.value)

    def unwrap(self) -> object:
        """Return the value or raise ``MalformedEstimate``."""
        if not self.ok:
            raise MalformedEstimate(self.error)
        return self.value


class EstimatedMacros(BaseModel):
    """Nutrition figures as written by the model."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _coerce(cls, value: object) -> float:
        if isinstance(value, bool) or value is None:
            return 0.0
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(number):
            return 0.0
        return max(0.0, number)


def require_text(raw: object) -> ParseResult:
    if not isinstance(raw, str) or not raw.strip():
        return ParseResult.failure("empty response")
    return ParseResult.success(raw.strip())


def strip_code_fence(text: object) -> ParseResult:
    """Remove a surrounding ```json or ``` Markdown fence, if present."""
    content = str(text).strip()
    match = _FENCE_PATTERN.match(content)
    if match:
        content = match.group(1).strip()
    elif content.startswith("```"):
        content = content.replace("```json", "").replace("```", "").strip()
    return ParseResult.success(content)


def decode_json(text: object) -> ParseResult:
    try:
        return ParseResult.success(json.loads(str(text)))
    except json.JSONDecodeError as exc:
        return ParseResult.failure(f"invalid JSON: {exc.msg}")


def require_object(value: object) -> ParseResult:
    if not isinstance(value, dict):
        return ParseResult.failure(
            f"expected a JSON object, got {type(value).__name__}"
        )
    return ParseResult.success(value)


def coerce_macros(value: object) -> ParseResult:
    """Read the four figures, defaulting missing ones to zero."""
    macros = EstimatedMacros.model_validate(value)
    return ParseResult.success(
        NutrientTotals(
            calories=macros.calories,
            protein=macros.protein,
            carbs=macros.carbs,
            fat=macros.fat,
        )
    )


def parse_estimate(raw: object) -> ParseResult:
    """Run the full pipeline from raw model output to ``NutrientTotals``."""
    return (
        require_text(raw)
        .then(strip_code_fence)
        .then(decode_json)
        .then(require_object)
        .then(coerce_macros)
    )
