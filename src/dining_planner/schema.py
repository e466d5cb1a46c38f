# src/dining_planner/schema.py
from __future__ import annotations

"""
schema.py

Purpose:
    Shared dataclasses for the dining planner.

    These are the "internal contracts" between:
      - the vendor export loader and extraction layer,
      - the normalizer / deduplicator,
      - the planning layer (aggregate, score, substitute, optimize, generate),
      - the catalog store (Supabase rows).

    Nothing in this module talks to Supabase directly.

Objects:
      - NutritionFacts (sparse extractor output)
      - FoodItem (canonical catalog entry)
      - GoalProfile (user targets)
      - NutritionTotals, MealPlanScore, CleanReport (derived, never persisted alone)
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Iterable, List, Optional

CATEGORIES = ("entree", "side", "dessert", "beverage", "snack")
DEFAULT_CATEGORY = "entree"


def unique(values: Iterable[str]) -> List[str]:
    """De-dupe while preserving order."""
    seen = set()
    out: List[str] = []
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        if value is None:
            return default
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass
class NutritionFacts:
    """Only the fields the extractor matched are set; the rest stay None."""

    calories: Optional[int] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None
    saturated_fat: Optional[float] = None
    trans_fat: Optional[float] = None
    cholesterol: Optional[float] = None
    vitamin_a: Optional[float] = None
    vitamin_c: Optional[float] = None
    calcium: Optional[float] = None
    iron: Optional[float] = None

    def present(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def is_empty(self) -> bool:
        return not self.present()


@dataclass
class FoodItem:
    id: str
    name: str
    location: str
    category: str = DEFAULT_CATEGORY
    price: float = 0.0

    calories: float = 0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None

    serving_size: Optional[str] = None
    allergens: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    station: str = ""
    serving_days: List[str] = field(default_factory=list)
    menu_types: List[str] = field(default_factory=list)
    available: bool = True

    description: str = ""
    vendor_id: Optional[str] = None
    menu_item_date: Optional[str] = None
    nutrition: Optional[NutritionFacts] = None

    def __post_init__(self) -> None:
        if self.category not in CATEGORIES:
            self.category = DEFAULT_CATEGORY
        self.price = max(0.0, _to_float(self.price))
        self.calories = max(0, _to_float(self.calories))
        self.protein = max(0.0, _to_float(self.protein))
        self.carbs = max(0.0, _to_float(self.carbs))
        self.fat = max(0.0, _to_float(self.fat))
        self.allergens = unique(self.allergens)
        self.tags = unique(self.tags)

    # ------------------------------------------------------------------
    # Document-store rows
    # ------------------------------------------------------------------
    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row["nutrition"] = self.nutrition.present() if self.nutrition else None
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "FoodItem":
        """Build a FoodItem from a loosely typed stored document.

        Stored rows may predate the current schema, so every field falls back
        to the documented default (numbers -> 0, available -> True).
        """
        nutrition_raw = row.get("nutrition") or None
        nutrition = None
        if isinstance(nutrition_raw, dict):
            known = {f.name for f in fields(NutritionFacts)}
            nutrition = NutritionFacts(**{k: v for k, v in nutrition_raw.items() if k in known})

        return cls(
            id=str(row.get("id") or ""),
            name=row.get("name") or "Unknown Item",
            location=row.get("location") or "",
            category=(row.get("category") or DEFAULT_CATEGORY).lower(),
            price=row.get("price") if isinstance(row.get("price"), (int, float)) else 0.0,
            calories=row.get("calories") or 0,
            protein=row.get("protein") or 0.0,
            carbs=row.get("carbs") or 0.0,
            fat=row.get("fat") or 0.0,
            fiber=row.get("fiber"),
            sugar=row.get("sugar"),
            sodium=row.get("sodium"),
            serving_size=row.get("serving_size") or None,
            allergens=list(row.get("allergens") or []),
            tags=list(row.get("tags") or []),
            station=row.get("station") or "",
            serving_days=list(row.get("serving_days") or []),
            menu_types=list(row.get("menu_types") or []),
            available=row.get("available") is not False,
            description=row.get("description") or "",
            vendor_id=row.get("vendor_id"),
            menu_item_date=row.get("menu_item_date"),
            nutrition=nutrition,
        )


@dataclass
class GoalProfile:
    target_calories: float
    target_protein: float
    target_carbs: float = 0.0
    target_fat: float = 0.0
    max_budget: float = 0.0
    # Free-text keywords ("vegetarian", "nut-free", "dairy"); matched by substring.
    dietary_restrictions: List[str] = field(default_factory=list)

    @classmethod
    def from_body_metrics(
        cls,
        weight_kg: float,
        fitness_goal: str,
        max_budget: float,
        dietary_restrictions: Optional[List[str]] = None,
    ) -> "GoalProfile":
        from dining_planner.planning.nutrition import daily_targets

        targets = daily_targets(weight_kg, fitness_goal)
        return cls(
            target_calories=targets.calories,
            target_protein=targets.protein,
            target_carbs=targets.carbs,
            target_fat=targets.fat,
            max_budget=max_budget,
            dietary_restrictions=list(dietary_restrictions or []),
        )

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "GoalProfile":
        """
        Stored targets win. Targets the row leaves out are derived from
        weight (kg) + fitness goal when both are stored, otherwise 0.
        """
        from dining_planner.planning.nutrition import CALORIE_MULTIPLIERS, daily_targets

        derived: Optional[DailyTargets] = None
        weight = _to_float(row.get("weight_kg") or row.get("weight"))
        goal = row.get("fitness_goal") or row.get("fitness_goals")
        if weight > 0 and isinstance(goal, str) and goal in CALORIE_MULTIPLIERS:
            derived = daily_targets(weight, goal)

        def _target(attr: str, *keys: str) -> float:
            for key in keys:
                value = row.get(key)
                if value is not None and value != "":
                    return _to_float(value)
            return float(getattr(derived, attr)) if derived is not None else 0.0

        return cls(
            target_calories=_target("calories", "target_calories", "calorie_goal"),
            target_protein=_target("protein", "target_protein"),
            target_carbs=_target("carbs", "target_carbs"),
            target_fat=_target("fat", "target_fat"),
            max_budget=_to_float(row.get("max_budget") or row.get("budget")),
            dietary_restrictions=list(row.get("dietary_restrictions") or []),
        )


@dataclass(frozen=True)
class NutritionTotals:
    calories: float = 0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    cost: float = 0.0


@dataclass(frozen=True)
class DailyTargets:
    calories: int
    protein: int
    carbs: int
    fat: int


@dataclass
class MealPlanScore:
    nutrition_score: float
    budget_score: float
    dietary_score: float
    overall: float
    violations: int = 0
    feedback: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        """Rounded view for display / persistence next to a plan."""
        return {
            "nutrition_score": round(self.nutrition_score),
            "budget_score": round(self.budget_score),
            "dietary_score": round(self.dietary_score),
            "overall": round(self.overall),
            "violations": self.violations,
            "feedback": list(self.feedback),
        }


@dataclass
class CleanReport:
    original_count: int
    kept_count: int
    dropped_invalid: int = 0
    dropped_duplicates: int = 0

    @property
    def reduction_pct(self) -> float:
        if self.original_count == 0:
            return 0.0
        return round((1 - self.kept_count / self.original_count) * 100, 1)

    def summary(self) -> str:
        return (
            f"{self.original_count} -> {self.kept_count} rows "
            f"({self.reduction_pct:.1f}% reduction; invalid={self.dropped_invalid}, "
            f"duplicates={self.dropped_duplicates})"
        )
