"""
optimizer.py

Plan optimization and cold-start generation.

optimize():
    One bounded pass, never a loop to convergence:
      1. budget score < 70 -> try a cheaper same-category swap for each of
         the two highest-priced items
      2. protein total < 80% of target -> try one swap for the lowest-protein
         item under 20 g
    Each step is best-effort; "no candidate" is a no-op.

generate():
    Greedy pick of the best protein-per-dollar safe item in each of
    entree / side / beverage / snack, then score (optionally after one
    optimize() pass).
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from dining_planner.logging_utils import get_logger
from dining_planner.planning.nutrition import aggregate
from dining_planner.planning.scoring import conflicts_with_restrictions, score
from dining_planner.planning.substitution import SubstitutionReason, suggest
from dining_planner.schema import FoodItem, GoalProfile, MealPlanScore

logger = get_logger("optimizer")

BUDGET_FIX_BELOW = 70
BUDGET_FIX_ITEMS = 2
PROTEIN_FIX_RATIO = 0.8
LOW_PROTEIN_GRAMS = 20

GENERATED_CATEGORIES = ("entree", "side", "beverage", "snack")


@dataclass
class OptimizationResult:
    items: List[FoodItem]
    improvements: List[str] = field(default_factory=list)


@dataclass
class GeneratedPlan:
    items: List[FoodItem]
    score: MealPlanScore
    improvements: List[str] = field(default_factory=list)


def _fmt_grams(value: float) -> str:
    return f"{value:g}"


def optimize(
    items: Sequence[FoodItem],
    catalog: Sequence[FoodItem],
    goals: GoalProfile,
) -> OptimizationResult:
    plan = list(items)
    improvements: List[str] = []

    # Step 1: budget
    current = score(plan, goals)
    if current.budget_score < BUDGET_FIX_BELOW:
        # stable: equal prices keep plan order
        expensive = sorted(range(len(plan)), key=lambda i: plan[i].price, reverse=True)[:BUDGET_FIX_ITEMS]
        for idx in expensive:
            item = plan[idx]
            alternatives = suggest(item, catalog, goals, SubstitutionReason.BUDGET)
            if not alternatives:
                continue
            replacement = alternatives[0]
            plan[idx] = replacement
            improvements.append(
                f"Replaced {item.name} with {replacement.name} "
                f"to save ${item.price - replacement.price:.2f}"
            )

    # Step 2: protein
    totals = aggregate(plan)
    if totals.protein < goals.target_protein * PROTEIN_FIX_RATIO:
        low = [i for i in range(len(plan)) if plan[i].protein < LOW_PROTEIN_GRAMS]
        if low:
            idx = min(low, key=lambda i: plan[i].protein)
            item = plan[idx]
            alternatives = suggest(item, catalog, goals, SubstitutionReason.NUTRITION)
            if alternatives:
                replacement = alternatives[0]
                plan[idx] = replacement
                improvements.append(
                    f"Upgraded to {replacement.name} for "
                    f"+{_fmt_grams(replacement.protein - item.protein)}g protein"
                )

    logger.debug(
        "Optimizer pass made %d change(s)",
        len(improvements),
        extra={
            "invoking_func": "optimize",
            "invoking_purpose": "Single bounded improvement pass over a plan",
            "next_step": "Return optimized plan to caller",
            "resolution": "",
        },
    )
    return OptimizationResult(items=plan, improvements=improvements)


def protein_per_dollar(item: FoodItem) -> float:
    """Free items rank first when they carry protein; free and protein-less rank as 0."""
    if item.price <= 0:
        return math.inf if item.protein > 0 else 0.0
    return item.protein / item.price


def generate(
    catalog: Sequence[FoodItem],
    goals: GoalProfile,
    *,
    optimize_plan: bool = False,
) -> GeneratedPlan:
    safe = [i for i in catalog if not conflicts_with_restrictions(i, goals.dietary_restrictions)]

    selected: List[FoodItem] = []
    for category in GENERATED_CATEGORIES:
        ranked = sorted(
            (i for i in safe if i.category == category),
            key=protein_per_dollar,
            reverse=True,
        )
        if ranked:
            selected.append(ranked[0])

    improvements: List[str] = []
    if optimize_plan and selected:
        result = optimize(selected, catalog, goals)
        selected, improvements = result.items, result.improvements

    plan_score = score(selected, goals)

    logger.info(
        "Generated plan with %d item(s), overall=%.1f",
        len(selected),
        plan_score.overall,
        extra={
            "invoking_func": "generate",
            "invoking_purpose": "Cold-start plan from catalog + goal profile",
            "next_step": "Return plan and score to caller",
            "resolution": "" if selected else "Catalog has no safe items in the planned categories",
        },
    )
    return GeneratedPlan(items=selected, score=plan_score, improvements=improvements)
