"""Conversion of free-text quantities into gram multipliers."""

import logging
import re

from calorie_watcher.domain.errors import InputParseError

BASE_SERVING_GRAMS = 100.0

# Piece and volume conversions are coarse approximations without food density.
GRAMS_PER_UNIT: dict[str, float] = {
    "g": 1.0,
    "kg": 1000.0,
    "oz": 28.35,
    "lb": 453.592,
    "cup": 240.0,
    "cups": 240.0,
    "ml": 1.0,
    "l": 1000.0,
    "tbsp": 15.0,
    "tsp": 5.0,
    "piece": 50.0,
    "pieces": 50.0,
}

_QUANTITY_PATTERN = re.compile(
    r"(\d+\.?\d*)\s*"
    r"(g|kg|oz|lb|cup|cups|piece|pieces|serving|servings|ml|l|tbsp|tsp)?",
    re.IGNORECASE,
)

_logger = logging.getLogger(__name__)


def parse_quantity(text: str) -> tuple[float, str]:
    """Return the leading amount and unit of a quantity string.

    The unit defaults to grams when absent. Raises ``InputParseError`` when
    the text holds no number.
    """
    match = _QUANTITY_PATTERN.search(text or "")
    if match is None:
        raise InputParseError(f"No amount found in quantity {text!r}")
    amount = float(match.group(1))
    unit = (match.group(2) or "g").lower()
    return amount, unit


def to_grams(amount: float, unit: str) -> float:
    """Convert an amount in a known unit to grams.

    Units without a table entry (servings) are taken as grams.
    """
    return amount * GRAMS_PER_UNIT.get(unit.lower(), 1.0)


def quantity_multiplier(
    text: str, base_serving_grams: float = BASE_SERVING_GRAMS
) -> float:
    """Return quantity in grams divided by the base serving size.

    Unparseable input counts as one serving.
    """
    try:
        amount, unit = parse_quantity(text)
    except InputParseError:
        _logger.debug("Quantity %r not parseable, using one serving", text)
        return 1.0
    return to_grams(amount, unit) / base_serving_grams


normalize = quantity_multiplier
