"""Extraction of calories and macros from FoodData Central records.

Each nutrient has an ordered list of rules. The first rule that matches any
entry of the record decides the value, and within a rule the first matching
entry in record order wins. A lower-priority rule is only consulted when no
higher-priority rule matched anything, so the order of the nutrient array
never changes which entry is picked across rules.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from calorie_watcher.domain.nutrition import NutrientTotals

ENERGY_IDS = frozenset({1008, 2047, 2048})
PROTEIN_ID = 1003
FAT_ID = 1004
CARBS_ID = 1005

_EXACT_FAT_NAMES = frozenset({"total lipid (fat)", "total lipid", "total fat"})
_EXACT_CARB_NAMES = frozenset(
    {"carbohydrate, by difference", "carbohydrate by difference"}
)
_FAT_EXCLUSIONS = (
    "saturated",
    "monounsaturated",
    "polyunsaturated",
    "trans",
    "fatty acid",
)


@dataclass(frozen=True)
class NutrientEntry:
    """A single nutrient row, normalized across FDC payload shapes."""

    id: int | None
    name: str
    unit: str
    amount: float


Rule = tuple[Callable[[NutrientEntry], bool], str]


def _is_kcal(entry: NutrientEntry) -> bool:
    return entry.unit == "kcal"


CALORIE_RULES: list[Rule] = [
    (lambda e: e.name == "energy" and _is_kcal(e), "exact energy"),
    (lambda e: "energy" in e.name and _is_kcal(e), "energy variant"),
    (lambda e: e.id in ENERGY_IDS and _is_kcal(e), "energy id"),
]

PROTEIN_RULES: list[Rule] = [
    (lambda e: e.name == "protein", "exact protein"),
    (lambda e: "protein" in e.name and "nitrogen" not in e.name, "protein variant"),
    (lambda e: e.id == PROTEIN_ID, "protein id"),
]

CARB_RULES: list[Rule] = [
    (lambda e: e.name in _EXACT_CARB_NAMES, "exact carbohydrate"),
    (
        lambda e: "carbohydrate" in e.name and "difference" in e.name,
        "carbohydrate by difference variant",
    ),
    (
        lambda e: "carbohydrate" in e.name and "summation" in e.name,
        "carbohydrate by summation",
    ),
    (lambda e: e.id == CARBS_ID, "carbohydrate id"),
]


def _is_total_fat_variant(entry: NutrientEntry) -> bool:
    if "lipid" not in entry.name and entry.name != "fat":
        return False
    return not any(word in entry.name for word in _FAT_EXCLUSIONS)


FAT_RULES: list[Rule] = [
    (lambda e: e.name in _EXACT_FAT_NAMES, "exact total fat"),
    (_is_total_fat_variant, "total fat variant"),
    (lambda e: e.id == FAT_ID, "fat id"),
]


def normalize_entries(
    food_nutrients: Iterable[dict[str, object]],
) -> list[NutrientEntry]:
    """Flatten detail and search-result nutrient rows, skipping missing amounts."""
    entries: list[NutrientEntry] = []
    for raw in food_nutrients:
        if not isinstance(raw, dict):
            continue
        nutrient_info = raw.get("nutrient") or {}
        amount = raw.get("amount")
        if amount is None:
            amount = raw.get("value")
        if amount is None:
            continue
        try:
            numeric_amount = float(amount)
        except (TypeError, ValueError):
            continue
        nutrient_id = nutrient_info.get("id") or raw.get("nutrientId")
        name = nutrient_info.get("name") or raw.get("nutrientName") or ""
        unit = nutrient_info.get("unitName") or raw.get("unitName") or ""
        entries.append(
            NutrientEntry(
                id=_as_int(nutrient_id),
                name=str(name).strip().lower(),
                unit=str(unit).strip().lower(),
                amount=numeric_amount,
            )
        )
    return entries


def match_first(entries: list[NutrientEntry], rules: list[Rule]) -> float | None:
    """Return the amount picked by the highest-priority matching rule."""
    for predicate, _label in rules:
        for entry in entries:
            if predicate(entry):
                return entry.amount
    return None


def extract_nutrients(
    food_data: dict[str, object] | None, multiplier: float = 1.0
) -> NutrientTotals:
    """Return calories, protein, carbs and fat scaled by the multiplier."""
    if not food_data:
        return NutrientTotals.zero()
    entries = normalize_entries(food_data.get("foodNutrients") or [])
    totals = NutrientTotals(
        calories=match_first(entries, CALORIE_RULES) or 0.0,
        protein=match_first(entries, PROTEIN_RULES) or 0.0,
        carbs=match_first(entries, CARB_RULES) or 0.0,
        fat=match_first(entries, FAT_RULES) or 0.0,
    )
    return totals.scaled(multiplier).clamped()


def _as_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None
