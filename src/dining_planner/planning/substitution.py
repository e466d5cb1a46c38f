"""
substitution.py

Same-category replacement shortlist for one item of a plan.

An empty list means "no substitution found"; that is a normal outcome.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Sequence, Union

from dining_planner.planning.scoring import conflicts_with_restrictions
from dining_planner.schema import FoodItem, GoalProfile

DEFAULT_LIMIT = 3


class SubstitutionReason(str, Enum):
    BUDGET = "budget"
    NUTRITION = "nutrition"
    DIETARY = "dietary"


def suggest(
    current: FoodItem,
    catalog: Sequence[FoodItem],
    goals: GoalProfile,
    reason: Union[SubstitutionReason, str],
    limit: int = DEFAULT_LIMIT,
) -> List[FoodItem]:
    reason = SubstitutionReason(reason)  # ValueError on unknown reasons

    pool = [
        item for item in catalog
        if item is not current and item.id != current.id and item.category == current.category
    ]

    if reason is SubstitutionReason.BUDGET:
        pool = sorted((i for i in pool if i.price < current.price), key=lambda i: i.price)
    elif reason is SubstitutionReason.NUTRITION:
        # lower calories, highest protein first
        pool = sorted((i for i in pool if i.calories < current.calories), key=lambda i: i.protein, reverse=True)
    else:
        pool = [i for i in pool if not conflicts_with_restrictions(i, goals.dietary_restrictions)]

    return pool[:limit]
