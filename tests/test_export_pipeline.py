"""
Unit tests for the export loader and the MenuETL pipeline
Run with: python -m pytest tests/test_export_pipeline.py
"""

import os
import tempfile
import unittest
from unittest.mock import MagicMock

from dining_planner.datasets.nutrislice_export import _normalize_col_name, load_export
from dining_planner.etl.pipeline import MODULE_PURPOSE, MenuETL, restaurant_name
from tests.factories import make_row

EXPORT_CSV = (
    "Nutrislice Food Name,Imported Food Name,Locations,Station,Text,Price,Category,"
    "Is Section Title,Is Station Header,Published,Serving Days,Menu Types,"
    "Serving size (amount),Serving size (unit),Nutrislice Food ID\n"
    "Lunch,,Scott Dining,,,,,true,false,true,,,,,\n"
    'Grilled Chicken,,Scott Dining,Grill,"380 calories, 35g protein, contains dairy",8.50,Entree,'
    'false,false,true,"Monday, Tuesday",Lunch,6,oz,101\n'
    "Grilled Chicken,,Scott Dining,Grill,duplicate line,9.00,Entree,false,false,true,,,,,\n"
    "Hidden Item,,Traditions,Deli,,,,false,false,false,,,,,\n"
)


def _write(folder, name, content):
    path = os.path.join(folder, name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


class TestLoadExport(unittest.TestCase):
    """load_export()"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = _write(self.tmp.name, "scott-dining.csv", EXPORT_CSV)

    def tearDown(self):
        self.tmp.cleanup()

    def test_column_names_normalized(self):
        self.assertEqual(_normalize_col_name("Nutrislice Food Name"), "nutrislice_food_name")
        self.assertEqual(_normalize_col_name("Serving size (amount)"), "serving_size_amount")

    def test_rows_keep_headers_and_raw_cells(self):
        rows = load_export(self.path)
        self.assertEqual(len(rows), 4)

        self.assertTrue(rows[0].is_section_title)
        self.assertEqual(rows[1].nutrislice_food_name, "Grilled Chicken")
        self.assertEqual(rows[1].price, "8.50")
        self.assertEqual(rows[1].nutrislice_food_id, "101")
        self.assertEqual(rows[1].serving_size_amount, "6")
        self.assertEqual(rows[1].serving_days, "Monday, Tuesday")
        self.assertIs(rows[1].published, True)
        self.assertIs(rows[3].published, False)
        self.assertIsNone(rows[3].price)
        self.assertEqual(rows[3].text, "")

    def test_snake_case_export_without_published_column(self):
        path = _write(self.tmp.name, "kiosk.tsv", "food_name\tlocation\tdescription\nBagel\tKiosk\t250 calories\n")
        rows = load_export(path)
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].nutrislice_food_name, "Bagel")
        self.assertEqual(rows[0].locations, "Kiosk")
        self.assertEqual(rows[0].text, "250 calories")
        self.assertIsNone(rows[0].published)


class TestMenuETL(unittest.TestCase):
    """MenuETL"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = _write(self.tmp.name, "scott-dining.csv", EXPORT_CSV)

    def tearDown(self):
        self.tmp.cleanup()

    def test_dry_run_ingest_file(self):
        result = MenuETL().ingest_file(self.path)

        self.assertEqual(result.restaurant_id, "scott-dining")
        self.assertEqual(result.stored, 0)
        self.assertEqual(result.report.original_count, 4)
        self.assertEqual(result.report.dropped_invalid, 1)
        self.assertEqual(result.report.dropped_duplicates, 1)
        self.assertEqual([i.name for i in result.items], ["Grilled Chicken", "Hidden Item"])

        chicken, hidden = result.items
        self.assertEqual(chicken.id, "101_grilled-chicken_scott-dining_grill")
        self.assertEqual(chicken.price, 8.5)
        self.assertEqual(chicken.calories, 380)
        self.assertEqual(chicken.allergens, ["dairy"])
        self.assertEqual(chicken.serving_size, "6 oz")
        self.assertFalse(hidden.available)
        self.assertEqual(hidden.price, 0.0)

    def test_items_go_to_store(self):
        store = MagicMock()
        store.put_food_items.return_value = 2
        result = MenuETL(store=store).ingest_file(self.path, restaurant_id="scott")

        self.assertEqual(result.stored, 2)
        store.put_food_items.assert_called_once()
        self.assertEqual(len(store.put_food_items.call_args[0][0]), 2)

    def test_folder_skips_broken_exports(self):
        _write(self.tmp.name, "broken.xlsx", "this is not a workbook")
        results = MenuETL().ingest_folder(self.tmp.name)
        self.assertEqual([r.restaurant_id for r in results], ["scott-dining"])

    def test_empty_folder(self):
        with tempfile.TemporaryDirectory() as empty:
            self.assertEqual(MenuETL().ingest_folder(empty), [])

    def test_dining_locations(self):
        result = MenuETL().ingest_file(self.path)
        locations = MenuETL.dining_locations(result.items, "scott-dining")
        self.assertEqual([loc.id for loc in locations], ["scott-dining_Scott_Dining", "scott-dining_Traditions"])
        self.assertEqual(len(locations[0].menu), 1)

    def test_restaurant_name(self):
        self.assertEqual(restaurant_name("scott-traditions"), "Scott Traditions")

    def test_batch_log_carries_module_purpose(self):
        with self.assertLogs("pipeline", level="INFO") as captured:
            MenuETL().ingest_rows([make_row("Soup")], "scott")
        self.assertEqual(captured.records[-1].invoking_purpose, MODULE_PURPOSE)
        self.assertEqual(captured.records[-1].invoking_func, "ingest_rows")

    def test_ids_unique_within_a_batch(self):
        batches = [
            [
                make_row("Grilled Chicken", locations="Scott Traditions", nutrislice_food_id="123"),
                make_row("Grilled Chicken", locations="Kennedy Commons", nutrislice_food_id="123"),
            ],
            [make_row("Pizza"), make_row("PIZZA"), make_row("Pizza  Slice"), make_row("Pizza Slice")],
            [make_row("Fries", station="Grill"), make_row("Fries", station="Deli", nutrislice_food_id="7")],
        ]
        for rows in batches:
            result = MenuETL().ingest_rows(rows, "scott")
            ids = [i.id for i in result.items]
            self.assertEqual(len(set(ids)), len(ids), ids)

        pizza = MenuETL().ingest_rows(batches[1], "scott")
        self.assertEqual(len(pizza.items), 2)
        two_halls = MenuETL().ingest_rows(batches[0], "scott")
        self.assertEqual(len(two_halls.items), 2)


if __name__ == "__main__":
    unittest.main()
