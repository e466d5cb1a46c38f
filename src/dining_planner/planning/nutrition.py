"""
nutrition.py

Totals and daily targets. Everything here is a pure function.
"""
from __future__ import annotations

from typing import Dict, Iterable

from dining_planner.schema import DailyTargets, FoodItem, NutritionTotals

CALORIE_MULTIPLIERS: Dict[str, float] = {
    "lose_weight": 1.2,
    "maintain": 1.4,
    "gain_weight": 1.6,
    "build_muscle": 1.7,
}

# grams of protein per kg body weight
PROTEIN_PER_KG: Dict[str, float] = {
    "lose_weight": 2.0,
    "maintain": 1.6,
    "gain_weight": 1.8,
    "build_muscle": 2.2,
}

BALANCE_TOLERANCE = 0.15


def aggregate(items: Iterable[FoodItem]) -> NutritionTotals:
    calories = 0
    protein = carbs = fat = cost = 0.0
    for item in items:
        calories += item.calories or 0
        protein += item.protein or 0
        carbs += item.carbs or 0
        fat += item.fat or 0
        cost += item.price or 0
    return NutritionTotals(calories=calories, protein=protein, carbs=carbs, fat=fat, cost=cost)


def _round_half_up(x: float) -> int:
    return int(x + 0.5) if x >= 0 else -int(-x + 0.5)


def daily_targets(weight_kg: float, fitness_goal: str) -> DailyTargets:
    if fitness_goal not in CALORIE_MULTIPLIERS:
        raise ValueError(
            f"Unknown fitness goal '{fitness_goal}'; expected one of {sorted(CALORIE_MULTIPLIERS)}"
        )
    base_calories = weight_kg * 24  # rough basal rate
    calories = _round_half_up(base_calories * CALORIE_MULTIPLIERS[fitness_goal])
    protein = _round_half_up(weight_kg * PROTEIN_PER_KG[fitness_goal])
    # Carbs: 50% of calories, 4 kcal/g
    carbs = _round_half_up((calories * 0.5) / 4)
    # Fat: whatever calories remain, 9 kcal/g
    fat = _round_half_up((calories - protein * 4 - carbs * 4) / 9)
    return DailyTargets(calories=calories, protein=protein, carbs=carbs, fat=fat)


def is_nutritionally_balanced(totals: NutritionTotals, targets: DailyTargets) -> Dict[str, bool]:
    if targets.calories > 0:
        calories_ok = abs(totals.calories - targets.calories) / targets.calories <= BALANCE_TOLERANCE
    else:
        calories_ok = totals.calories == 0
    protein_ok = totals.protein >= targets.protein * 0.8
    return {
        "calories": calories_ok,
        "protein": protein_ok,
        "balanced": calories_ok and protein_ok,
    }


def macro_percentages(protein: float, carbs: float, fat: float) -> Dict[str, int]:
    protein_cals = protein * 4
    carb_cals = carbs * 4
    fat_cals = fat * 9
    total = protein_cals + carb_cals + fat_cals
    if total <= 0:
        return {"protein": 0, "carbs": 0, "fat": 0}
    return {
        "protein": _round_half_up(protein_cals / total * 100),
        "carbs": _round_half_up(carb_cals / total * 100),
        "fat": _round_half_up(fat_cals / total * 100),
    }
