"""
Unit tests for plan optimization and generation
Run with: python -m pytest tests/test_optimizer.py
"""

import math
import unittest

from dining_planner.planning.optimizer import generate, optimize, protein_per_dollar
from dining_planner.planning.scoring import score
from tests.factories import make_goals, make_item


class TestOptimize(unittest.TestCase):
    """optimize()"""

    def setUp(self):
        self.steak = make_item("Steak", price=20, calories=700, protein=40)
        self.fries = make_item("Fries", category="side", price=6, calories=400, protein=3)
        self.soda = make_item("Soda", category="beverage", price=3, calories=150, protein=0)
        self.burger = make_item("Burger", price=9, calories=650, protein=30)
        self.chips = make_item("Chips", category="side", price=2, calories=200, protein=2)
        self.milk = make_item("Milk", category="beverage", price=2, calories=120, protein=8)
        self.catalog = [self.steak, self.fries, self.soda, self.burger, self.chips, self.milk]
        self.goals = make_goals(calories=1200, protein=50, budget=15)

    def test_budget_then_protein_swaps(self):
        plan = [self.steak, self.fries, self.soda]
        result = optimize(plan, self.catalog, self.goals)

        self.assertEqual(result.items, [self.burger, self.chips, self.milk])
        self.assertEqual(
            result.improvements,
            [
                "Replaced Steak with Burger to save $11.00",
                "Replaced Fries with Chips to save $4.00",
                "Upgraded to Milk for +8g protein",
            ],
        )

    def test_input_plan_not_mutated(self):
        plan = [self.steak, self.fries, self.soda]
        optimize(plan, self.catalog, self.goals)
        self.assertEqual(plan, [self.steak, self.fries, self.soda])

    def test_no_alternatives_is_noop(self):
        lonely = make_item("Lobster", price=30, calories=300, protein=5)
        result = optimize([lonely], [lonely], self.goals)
        self.assertEqual(result.items, [lonely])
        self.assertEqual(result.improvements, [])

    def test_good_plan_left_alone(self):
        plan = [self.burger, self.milk]
        goals = make_goals(calories=770, protein=38, budget=20)
        result = optimize(plan, self.catalog, goals)
        self.assertEqual(result.items, plan)
        self.assertEqual(result.improvements, [])

    def test_budget_score_never_drops(self):
        plan = [self.steak, self.fries, self.soda]
        before = score(plan, self.goals).budget_score
        after = score(optimize(plan, self.catalog, self.goals).items, self.goals).budget_score
        self.assertGreaterEqual(after, before)


class TestGenerate(unittest.TestCase):
    """generate() / protein_per_dollar()"""

    def setUp(self):
        self.chicken = make_item("Chicken", price=8, protein=40)
        self.pasta = make_item("Pasta", price=5, protein=10)
        self.satay = make_item("Satay", price=4, protein=30, allergens=["peanuts"])
        self.rice = make_item("Rice", category="side", price=3, protein=4)
        self.apple = make_item("Apple", category="snack", price=0, protein=1)
        self.bar = make_item("Protein Bar", category="snack", price=2, protein=10)
        self.catalog = [self.chicken, self.pasta, self.satay, self.rice, self.apple, self.bar]
        self.goals = make_goals(restrictions=["peanuts"])

    def test_protein_per_dollar(self):
        self.assertEqual(protein_per_dollar(self.chicken), 5)
        self.assertTrue(math.isinf(protein_per_dollar(self.apple)))
        self.assertEqual(protein_per_dollar(make_item("Water", price=0, protein=0)), 0.0)

    def test_best_safe_item_per_category(self):
        plan = generate(self.catalog, self.goals)
        self.assertEqual(plan.items, [self.chicken, self.rice, self.apple])
        self.assertEqual(plan.improvements, [])
        self.assertEqual(plan.score, score(plan.items, self.goals))

    def test_restricted_items_never_selected(self):
        plan = generate(self.catalog, self.goals)
        self.assertNotIn(self.satay, plan.items)

    def test_without_restrictions_best_ratio_wins(self):
        plan = generate(self.catalog, make_goals())
        self.assertEqual(plan.items[0], self.satay)

    def test_empty_catalog(self):
        plan = generate([], self.goals)
        self.assertEqual(plan.items, [])
        self.assertEqual(plan.score.budget_score, 100)

    def test_optional_optimizer_pass(self):
        plan = generate(self.catalog, self.goals, optimize_plan=True)
        self.assertEqual(plan.score, score(plan.items, self.goals))
        self.assertIsInstance(plan.improvements, list)


if __name__ == "__main__":
    unittest.main()
