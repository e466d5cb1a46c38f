"""
scoring.py

Weighted meal-plan score against a GoalProfile.

  nutrition (0.5): 0.6 * calorie accuracy + 0.4 * protein accuracy, floored at 0
  budget    (0.3): 100 - 20 * utilization when within budget,
                   100 - 100 * overage ratio (floored at 0) when over
  dietary   (0.2): 100 - 25 per item whose allergens hit a restriction keyword

Feedback is appended in a fixed order: nutrition warning, over-budget
warning, dietary warning, then exactly one closing remark.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from dining_planner.planning.nutrition import aggregate
from dining_planner.schema import FoodItem, GoalProfile, MealPlanScore

WEIGHT_NUTRITION = 0.5
WEIGHT_BUDGET = 0.3
WEIGHT_DIETARY = 0.2

NUTRITION_WARNING_BELOW = 70
PENALTY_PER_VIOLATION = 25

EXCELLENT_ABOVE = 85
GOOD_ABOVE = 70

EXCELLENT_REMARK = "Excellent meal plan! Well balanced and budget-friendly."
GOOD_REMARK = "Good meal plan with room for minor improvements."
ADJUST_REMARK = "Consider adjusting this meal plan for better nutrition or budget alignment."


def _keywords(restrictions: Iterable[str]) -> List[str]:
    return [r.strip().lower() for r in restrictions if r and r.strip()]


def conflicts_with_restrictions(item: FoodItem, restrictions: Sequence[str]) -> bool:
    """
    True when any allergen tag of the item appears inside any restriction
    keyword ("dairy" hits both "dairy" and "no dairy"). Case-insensitive.
    """
    keywords = _keywords(restrictions)
    if not keywords:
        return False
    for allergen in item.allergens:
        a = allergen.strip().lower()
        if a and any(a in kw for kw in keywords):
            return True
    return False


def _ratio(actual: float, target: float) -> float:
    """actual / target with target <= 0 treated as "already satisfied"."""
    if target <= 0:
        return 1.0
    return actual / target


def score(items: Sequence[FoodItem], goals: GoalProfile) -> MealPlanScore:
    totals = aggregate(items)
    feedback: List[str] = []

    # Nutrition
    if goals.target_calories > 0:
        calorie_accuracy = 1 - abs(totals.calories - goals.target_calories) / goals.target_calories
    else:
        calorie_accuracy = 1.0 if totals.calories == 0 else 0.0
    protein_accuracy = min(_ratio(totals.protein, goals.target_protein), 1.0)
    nutrition_score = max(0.0, (0.6 * calorie_accuracy + 0.4 * protein_accuracy) * 100)

    if nutrition_score < NUTRITION_WARNING_BELOW:
        feedback.append(f"Nutrition could be improved - {round(100 - nutrition_score)}% off target")

    # Budget
    if goals.max_budget > 0:
        utilization = totals.cost / goals.max_budget
    else:
        utilization = 0.0 if totals.cost <= 0 else float("inf")

    if utilization <= 1:
        budget_score = 100 - 20 * utilization
    else:
        budget_score = max(0.0, 100 - 100 * (utilization - 1))
        feedback.append(f"Over budget by ${totals.cost - goals.max_budget:.2f}")

    # Dietary safety
    violations = sum(1 for item in items if conflicts_with_restrictions(item, goals.dietary_restrictions))
    dietary_score = max(0.0, 100.0 - PENALTY_PER_VIOLATION * violations)

    if violations > 0:
        feedback.append(f"{violations} item(s) may conflict with dietary restrictions")

    overall = (
        WEIGHT_NUTRITION * nutrition_score
        + WEIGHT_BUDGET * budget_score
        + WEIGHT_DIETARY * dietary_score
    )

    if overall > EXCELLENT_ABOVE:
        feedback.append(EXCELLENT_REMARK)
    elif overall > GOOD_ABOVE:
        feedback.append(GOOD_REMARK)
    else:
        feedback.append(ADJUST_REMARK)

    return MealPlanScore(
        nutrition_score=nutrition_score,
        budget_score=budget_score,
        dietary_score=dietary_score,
        overall=overall,
        violations=violations,
        feedback=feedback,
    )
