"""Tests for priority-ordered nutrient extraction."""

import pytest

from calorie_watcher.services.nutrients import extract_nutrients, normalize_entries
from tests.conftest import CHICKEN_BREAST, fdc_nutrient


def test_extracts_standard_record() -> None:
    totals = extract_nutrients(CHICKEN_BREAST, 2.0)

    assert totals.calories == 240
    assert totals.protein == 45
    assert totals.fat == pytest.approx(5.24)
    assert totals.carbs == 0


@pytest.mark.parametrize("reverse", [False, True])
def test_exact_energy_beats_atwater_variant_in_any_order(reverse: bool) -> None:
    nutrients = [
        fdc_nutrient(2047, "Energy (Atwater General Factors)", "kcal", 130),
        fdc_nutrient(1008, "Energy", "kcal", 120),
    ]
    if reverse:
        nutrients.reverse()

    totals = extract_nutrients({"foodNutrients": nutrients})

    assert totals.calories == 120


def test_energy_in_kilojoules_is_ignored() -> None:
    record = {"foodNutrients": [fdc_nutrient(1062, "Energy", "kJ", 500)]}

    assert extract_nutrients(record).calories == 0


def test_energy_id_fallback_requires_kcal() -> None:
    record = {
        "foodNutrients": [
            fdc_nutrient(2048, "Calories, specific factors", "kcal", 98),
        ]
    }

    assert extract_nutrients(record).calories == 98


def test_protein_variant_excludes_nitrogen() -> None:
    record = {
        "foodNutrients": [
            fdc_nutrient(1002, "Nitrogen to protein conversion factor", "", 6.25),
            fdc_nutrient(9999, "Protein, total", "g", 11),
        ]
    }

    assert extract_nutrients(record).protein == 11


def test_carbs_prefer_difference_over_summation() -> None:
    record = {
        "foodNutrients": [
            fdc_nutrient(1050, "Carbohydrate, by summation", "g", 9),
            fdc_nutrient(1005, "Carbohydrate, by difference", "g", 12),
        ]
    }

    assert extract_nutrients(record).carbs == 12


def test_carbs_fall_back_to_summation() -> None:
    record = {
        "foodNutrients": [
            fdc_nutrient(1050, "Carbohydrate, by summation", "g", 9),
        ]
    }

    assert extract_nutrients(record).carbs == 9


def test_fat_skips_fatty_acid_breakdowns() -> None:
    record = {
        "foodNutrients": [
            fdc_nutrient(1258, "Fatty acids, total saturated", "g", 1.1),
            fdc_nutrient(1257, "Fatty acids, total trans", "g", 0.1),
            fdc_nutrient(1085, "Total lipid, NLEA", "g", 4.2),
        ]
    }

    assert extract_nutrients(record).fat == 4.2


def test_fat_falls_back_to_id() -> None:
    record = {"foodNutrients": [fdc_nutrient(1004, "Graisses totales", "g", 3)]}

    assert extract_nutrients(record).fat == 3


def test_first_entry_wins_within_a_rule() -> None:
    record = {
        "foodNutrients": [
            fdc_nutrient(1003, "Protein", "g", 10),
            fdc_nutrient(1003, "Protein", "g", 20),
        ]
    }

    assert extract_nutrients(record).protein == 10


def test_missing_amount_is_skipped() -> None:
    record = {
        "foodNutrients": [
            fdc_nutrient(1008, "Energy", "kcal", None),
            fdc_nutrient(2047, "Energy (Atwater General Factors)", "kcal", 88),
        ]
    }

    assert extract_nutrients(record).calories == 88


def test_search_result_shape_is_supported() -> None:
    record = {
        "foodNutrients": [
            {
                "nutrientId": 1008,
                "nutrientName": "Energy",
                "unitName": "KCAL",
                "value": 52,
            },
            {
                "nutrientId": 1003,
                "nutrientName": "Protein",
                "unitName": "G",
                "value": 0.3,
            },
        ]
    }

    totals = extract_nutrients(record, 1.5)

    assert totals.calories == pytest.approx(78)
    assert totals.protein == pytest.approx(0.45)


def test_no_matches_yields_zeros() -> None:
    record = {"foodNutrients": [fdc_nutrient(1087, "Calcium, Ca", "mg", 12)]}

    totals = extract_nutrients(record)

    assert (totals.calories, totals.protein, totals.carbs, totals.fat) == (0, 0, 0, 0)
    assert extract_nutrients(None).calories == 0


def test_negative_amounts_are_clamped() -> None:
    record = {
        "foodNutrients": [fdc_nutrient(1005, "Carbohydrate, by difference", "g", -2)]
    }

    assert extract_nutrients(record).carbs == 0


def test_normalize_entries_lowercases_names_and_units() -> None:
    entries = normalize_entries([fdc_nutrient(1008, " Energy ", "KCAL", 10)])

    assert entries[0].name == "energy"
    assert entries[0].unit == "kcal"
    assert entries[0].id == 1008
