"""
Unit tests for the structured log line format
Run with: python -m pytest tests/test_logging_utils.py
"""

import logging
import unittest

from dining_planner.logging_utils import LOG_RUN_ID, StructuredFormatter, log_error, log_warning


class TestStructuredFormatter(unittest.TestCase):

    def _record(self, **extra):
        record = logging.LogRecord(
            name="dedup",
            level=logging.INFO,
            pathname="/src/dining_planner/etl/dedup.py",
            lineno=42,
            msg="Cleaned batch '%s'",
            args=("scott",),
            exc_info=None,
            func="clean",
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_pipe_delimited_fields(self):
        line = StructuredFormatter().format(self._record(
            invoking_func="clean",
            invoking_purpose="Drop duplicates",
            next_step="Normalize",
            resolution="",
        ))
        parts = line.split("|")
        self.assertEqual(parts[0], LOG_RUN_ID)
        self.assertEqual(parts[3], "INFO")
        self.assertEqual(parts[4], "dedup.py:42")
        self.assertEqual(parts[5], "dedup.clean")
        self.assertEqual(parts[6], StructuredFormatter.MODULE_PURPOSES["dedup"])
        self.assertEqual(parts[9], "Cleaned batch 'scott'")
        self.assertEqual(parts[-1], "<END>")

    def test_missing_extra_fields_are_blank(self):
        parts = StructuredFormatter().format(self._record()).split("|")
        self.assertEqual(parts[7], "")
        self.assertEqual(parts[10], "")


class TestScriptHelpers(unittest.TestCase):

    def test_warning_line(self):
        with self.assertLogs("dining_planner", level="WARNING") as captured:
            log_warning("No exports found", module_purpose="ETL runner", next_step="Exit")
        line = captured.records[0].getMessage()
        self.assertTrue(line.startswith(LOG_RUN_ID + "|"))
        self.assertIn("|WARNING|", line)
        self.assertIn("|No exports found|Exit|", line)

    def test_error_line_carries_exception(self):
        with self.assertLogs("dining_planner", level="ERROR") as captured:
            log_error("Upload failed", module_purpose="ETL runner", exc=ValueError("bad key"))
        self.assertIn("EXC=ValueError('bad key')", captured.records[0].getMessage())


if __name__ == "__main__":
    unittest.main()
