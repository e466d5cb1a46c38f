"""Menu browsing helpers over an in-memory catalog snapshot.

search_menu_items() combines a free-text term with optional location,
category, price and dietary-restriction filters. Restriction handling:

  - "vegetarian" / "vegan" restrictions require the matching dietary tag
  - any restriction mentioning "gluten" requires the "gluten-free" tag
  - any allergen of the item that appears inside a restriction excludes it
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from dining_planner.planning.scoring import conflicts_with_restrictions
from dining_planner.schema import FoodItem

# restriction keyword -> dietary tag the item must carry
REQUIRED_TAGS = (
    ("vegetarian", "vegetarian"),
    ("vegan", "vegan"),
    ("gluten", "gluten-free"),
)


def _violates(item: FoodItem, restriction: str) -> bool:
    r = restriction.lower()
    for keyword, tag in REQUIRED_TAGS:
        if keyword in r and tag not in item.tags:
            return True
    return conflicts_with_restrictions(item, [r])


def search_menu_items(
    catalog: Iterable[FoodItem],
    term: str = "",
    *,
    location: Optional[str] = None,
    category: Optional[str] = None,
    max_price: Optional[float] = None,
    dietary_restrictions: Sequence[str] = (),
) -> List[FoodItem]:
    items = list(catalog)

    if term:
        t = term.lower()
        items = [
            i for i in items
            if t in i.name.lower()
            or t in (i.description or "").lower()
            or any(t in tag.lower() for tag in i.tags)
        ]

    if location:
        loc = location.lower()
        items = [i for i in items if loc in i.location.lower()]

    if category:
        items = [i for i in items if i.category == category]

    if max_price is not None:
        items = [i for i in items if i.price <= max_price]

    restrictions = [r for r in dietary_restrictions if r and r.strip()]
    if restrictions:
        items = [i for i in items if not any(_violates(i, r) for r in restrictions)]

    return items


def filter_by_nutrition(
    catalog: Iterable[FoodItem],
    *,
    max_calories: Optional[float] = None,
    min_protein: Optional[float] = None,
    max_carbs: Optional[float] = None,
    max_fat: Optional[float] = None,
) -> List[FoodItem]:
    out = []
    for item in catalog:
        if max_calories is not None and item.calories > max_calories:
            continue
        if min_protein is not None and item.protein < min_protein:
            continue
        if max_carbs is not None and item.carbs > max_carbs:
            continue
        if max_fat is not None and item.fat > max_fat:
            continue
        out.append(item)
    return out


def filter_by_dietary_tags(catalog: Iterable[FoodItem], tags: Sequence[str]) -> List[FoodItem]:
    """Items carrying at least one of `tags`; no tags means no filtering."""
    items = list(catalog)
    if not tags:
        return items
    wanted = set(tags)
    return [i for i in items if wanted.intersection(i.tags)]


def group_by_meal_and_station(catalog: Iterable[FoodItem]) -> Dict[str, Dict[str, List[FoodItem]]]:
    """menu type -> station -> items. Items with several menu types appear under each."""
    grouped: Dict[str, Dict[str, List[FoodItem]]] = {}
    for item in catalog:
        station = item.station or "General"
        for meal_type in item.menu_types or ["Other"]:
            grouped.setdefault(meal_type, {}).setdefault(station, []).append(item)
    return grouped
