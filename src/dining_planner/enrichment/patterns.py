# src/dining_planner/enrichment/patterns.py
from __future__ import annotations

"""
patterns.py

Purpose:
    Layer-0 (deterministic) extraction from the free-text `text` field of a
    vendor export row.

It provides:
  - extract_nutrition: numeric value + unit phrases ("380 calories", "35g protein")
  - extract_allergens: fixed allergen vocabulary, substring match
  - extract_dietary_tags: tag -> keyword variants, substring match
  - classify_category: vendor category hint first, then text, then "entree"

Design rules:
  - Every table below is module-level and immutable; nothing is rebuilt per call.
  - Each nutrient pattern is evaluated independently (first match wins).
  - Nothing here raises on malformed input. No match is an empty list,
    None, or the default category.
"""

import re
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Pattern, Sequence, Tuple

from dining_planner.schema import DEFAULT_CATEGORY, NutritionFacts

_NUM = r"(\d+(?:\.\d+)?)"

# ---------------------------------------------------------------------
# Nutrition: ordered (field, pattern, converter) table
# ---------------------------------------------------------------------
NUTRITION_PATTERNS: Tuple[Tuple[str, Pattern[str], Callable[[str], Any]], ...] = (
    ("calories", re.compile(r"(\d+)\s*(?:k?cal(?:ories)?\b|calories?)", re.I), int),
    ("protein", re.compile(_NUM + r"\s*g?\s*protein", re.I), float),
    ("carbs", re.compile(_NUM + r"\s*g?\s*(?:total\s+)?carb(?:ohydrate)?s?", re.I), float),
    ("fat", re.compile(_NUM + r"\s*g?\s*(?:total\s+)?fat", re.I), float),
    ("fiber", re.compile(_NUM + r"\s*g?\s*(?:dietary\s+)?fib(?:er|re)", re.I), float),
    ("sugar", re.compile(_NUM + r"\s*g?\s*(?:total\s+)?sugars?", re.I), float),
    ("sodium", re.compile(_NUM + r"\s*(?:mg)?\s*sodium", re.I), float),
    ("saturated_fat", re.compile(_NUM + r"\s*g?\s*saturated\s*fat", re.I), float),
    ("trans_fat", re.compile(_NUM + r"\s*g?\s*trans\s*fat", re.I), float),
    ("cholesterol", re.compile(_NUM + r"\s*(?:mg)?\s*cholesterol", re.I), float),
    ("vitamin_a", re.compile(_NUM + r"\s*%?\s*vitamin\s*a\b", re.I), float),
    ("vitamin_c", re.compile(_NUM + r"\s*%?\s*vitamin\s*c\b", re.I), float),
    ("calcium", re.compile(_NUM + r"\s*%?\s*calcium", re.I), float),
    ("iron", re.compile(_NUM + r"\s*%?\s*iron", re.I), float),
)

# ---------------------------------------------------------------------
# Allergens (tested once each, in this order)
# ---------------------------------------------------------------------
ALLERGEN_KEYWORDS: Tuple[str, ...] = (
    "milk",
    "eggs",
    "fish",
    "shellfish",
    "tree nuts",
    "peanuts",
    "wheat",
    "soy",
    "gluten",
    "dairy",
    "nuts",
    "peanut",
    "almond",
    "walnut",
    "cashew",
    "pecan",
    "hazelnut",
    "pistachio",
    "macadamia",
    "brazil nut",
    "chestnut",
    "pine nut",
    "sesame",
    "mustard",
    "celery",
    "lupin",
    "sulfites",
    "molluscs",
)

# ---------------------------------------------------------------------
# Dietary labels
# ---------------------------------------------------------------------
DIETARY_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "vegetarian": ("vegetarian", "veggie", "plant-based"),
    "vegan": ("vegan", "plant-based"),
    "gluten-free": ("gluten-free", "gluten free", "gf"),
    "dairy-free": ("dairy-free", "dairy free", "lactose-free"),
    "nut-free": ("nut-free", "nut free", "peanut-free"),
    "low-sodium": ("low sodium", "low-sodium", "reduced sodium"),
    "low-fat": ("low fat", "low-fat", "reduced fat"),
    "low-calorie": ("low calorie", "low-calorie", "light"),
    "high-protein": ("high protein", "high-protein", "protein-rich"),
    "organic": ("organic", "certified organic"),
    "local": ("local", "locally sourced"),
    "sustainable": ("sustainable", "eco-friendly"),
})

# ---------------------------------------------------------------------
# Category synonyms (word-bounded so "inside" is not a side)
# ---------------------------------------------------------------------
CATEGORY_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("entree", re.compile(r"\bentr[eé]es?\b|\bmain(?:s|\s+course|\s+dish)?\b", re.I)),
    ("side", re.compile(r"\bsides?\b", re.I)),
    ("dessert", re.compile(r"\bdesserts?\b|\bsweets\b", re.I)),
    ("beverage", re.compile(r"\bbeverages?\b|\bdrinks?\b", re.I)),
    ("snack", re.compile(r"\bsnacks?\b", re.I)),
)


# ------------ helpers ------------
def _as_text(text: Any) -> str:
    return text if isinstance(text, str) else ""


def _contains_any(text_l: str, keywords: Sequence[str]) -> bool:
    return any(k in text_l for k in keywords)


# ------------ extractors ------------
def extract_nutrition(text: Any) -> Optional[NutritionFacts]:
    """
    Scan text for nutrient phrases. Returns None when nothing matched, so
    callers can tell "not found" apart from "found but small".
    """
    t = _as_text(text)
    if not t:
        return None

    found = {}
    for field_name, pattern, convert in NUTRITION_PATTERNS:
        m = pattern.search(t)
        if m:
            found[field_name] = convert(m.group(1))

    if not found:
        return None
    return NutritionFacts(**found)


def extract_allergens(text: Any) -> List[str]:
    text_l = _as_text(text).lower()
    if not text_l:
        return []
    return [a for a in ALLERGEN_KEYWORDS if a in text_l]


def extract_dietary_tags(text: Any) -> List[str]:
    text_l = _as_text(text).lower()
    if not text_l:
        return []
    return [tag for tag, kws in DIETARY_KEYWORDS.items() if _contains_any(text_l, kws)]


def _match_category(value: str) -> Optional[str]:
    for category, pattern in CATEGORY_PATTERNS:
        if pattern.search(value):
            return category
    return None


def classify_category(category_hint: Any, text: Any = "") -> str:
    """Vendor hint wins over inferred text; default is entree."""
    return (
        _match_category(_as_text(category_hint))
        or _match_category(_as_text(text))
        or DEFAULT_CATEGORY
    )
