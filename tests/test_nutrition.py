"""
Unit tests for nutrition totals and daily targets
Run with: python -m pytest tests/test_nutrition.py
"""

import unittest

from dining_planner.planning.nutrition import (
    aggregate,
    daily_targets,
    is_nutritionally_balanced,
    macro_percentages,
)
from dining_planner.schema import DailyTargets, GoalProfile, NutritionTotals
from tests.factories import make_item


class TestAggregate(unittest.TestCase):
    """aggregate()"""

    def test_sums_every_field(self):
        items = [
            make_item("Burger", price=8.5, calories=700, protein=35, carbs=40, fat=30),
            make_item("Fries", category="side", price=3.0, calories=350, protein=4, carbs=45, fat=17),
        ]
        totals = aggregate(items)
        self.assertEqual(totals.calories, 1050)
        self.assertEqual(totals.protein, 39)
        self.assertEqual(totals.carbs, 85)
        self.assertEqual(totals.fat, 47)
        self.assertAlmostEqual(totals.cost, 11.5)

    def test_empty_plan_is_all_zero(self):
        self.assertEqual(aggregate([]), NutritionTotals())

    def test_order_independent(self):
        a = make_item("A", price=1.1, calories=100, protein=3)
        b = make_item("B", price=2.2, calories=200, protein=7)
        self.assertEqual(aggregate([a, b]).calories, aggregate([b, a]).calories)
        self.assertAlmostEqual(aggregate([a, b]).cost, aggregate([b, a]).cost)


class TestDailyTargets(unittest.TestCase):
    """daily_targets() / GoalProfile.from_body_metrics()"""

    def test_maintain(self):
        targets = daily_targets(70, "maintain")
        self.assertEqual(targets, DailyTargets(calories=2352, protein=112, carbs=294, fat=81))

    def test_build_muscle_has_more_protein(self):
        self.assertGreater(daily_targets(70, "build_muscle").protein, daily_targets(70, "maintain").protein)

    def test_unknown_goal_raises(self):
        with self.assertRaises(ValueError):
            daily_targets(70, "bulk_forever")

    def test_goal_profile_from_body_metrics(self):
        goals = GoalProfile.from_body_metrics(70, "maintain", 25, ["vegetarian"])
        self.assertEqual(goals.target_calories, 2352)
        self.assertEqual(goals.target_protein, 112)
        self.assertEqual(goals.max_budget, 25)
        self.assertEqual(goals.dietary_restrictions, ["vegetarian"])

    def test_stored_profile_without_targets_uses_body_metrics(self):
        goals = GoalProfile.from_row({"weight": 70, "fitness_goal": "maintain", "budget": 20})
        self.assertEqual(goals.target_calories, 2352)
        self.assertEqual(goals.target_protein, 112)
        self.assertEqual(goals.target_carbs, 294)
        self.assertEqual(goals.target_fat, 81)
        self.assertEqual(goals.max_budget, 20)

    def test_stored_targets_win_over_body_metrics(self):
        goals = GoalProfile.from_row({"calorie_goal": 1800, "weight_kg": 70, "fitness_goal": "build_muscle"})
        self.assertEqual(goals.target_calories, 1800)
        self.assertEqual(goals.target_protein, 154)

    def test_stored_profile_without_metrics_defaults_to_zero(self):
        goals = GoalProfile.from_row({"calorie_goal": 2000, "fitness_goal": "unknown"})
        self.assertEqual(goals.target_calories, 2000)
        self.assertEqual(goals.target_protein, 0)


class TestBalance(unittest.TestCase):
    """is_nutritionally_balanced() / macro_percentages()"""

    def test_balanced_within_tolerance(self):
        targets = DailyTargets(calories=2000, protein=100, carbs=250, fat=70)
        result = is_nutritionally_balanced(NutritionTotals(calories=2200, protein=85), targets)
        self.assertEqual(result, {"calories": True, "protein": True, "balanced": True})

    def test_low_protein_not_balanced(self):
        targets = DailyTargets(calories=2000, protein=100, carbs=250, fat=70)
        result = is_nutritionally_balanced(NutritionTotals(calories=2000, protein=50), targets)
        self.assertTrue(result["calories"])
        self.assertFalse(result["balanced"])

    def test_macro_percentages(self):
        self.assertEqual(macro_percentages(25, 50, 10), {"protein": 26, "carbs": 51, "fat": 23})
        self.assertEqual(macro_percentages(0, 0, 0), {"protein": 0, "carbs": 0, "fat": 0})


if __name__ == "__main__":
    unittest.main()
