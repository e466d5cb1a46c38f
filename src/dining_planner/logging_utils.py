# logging_utils.py
"""
Pipe-delimited log lines for the ingestion runs, the planner and the scripts.

Every line carries the same thirteen fields, so one grep/awk over a run's
output lines up ETL batches, store writes and plan generation:

  run id | date | time | level | where | function | module purpose |
  invoking func | invoking purpose | detail | next step | resolution | <END>

Library modules use get_logger(name) and pass the context through
`extra={"invoking_func", "invoking_purpose", "next_step", "resolution"}`;
StructuredFormatter looks the module purpose up in MODULE_PURPOSES.
Scripts call log_info / log_warning / log_error and name their purpose
themselves.
"""

from __future__ import annotations

import datetime
import inspect
import logging
import uuid
from typing import Dict, Optional, Sequence

LOG_RUN_ID: str = uuid.uuid4().hex[:8]
RUN_ID: str = LOG_RUN_ID

END_MARK = "<END>"

_script_logger = logging.getLogger("dining_planner")


def _join(fields: Sequence[str]) -> str:
    return "|".join(list(fields) + [END_MARK])


def _stamp(moment: datetime.datetime) -> Sequence[str]:
    return moment.strftime("%Y-%m-%d"), moment.strftime("%H:%M:%S")


# ---------------------------------------------------------------------------
# Script helpers
# ---------------------------------------------------------------------------
def _emit(
    level: int,
    message: str,
    *,
    module_purpose: str,
    invoking_function: str = "",
    invoking_purpose: str = "",
    next_step: str = "",
    resolution: str = "",
    exc: Optional[BaseException] = None,
) -> None:
    # [0] _emit, [1] log_info/log_warning/log_error, [2] the script
    stack = inspect.stack()
    caller = stack[2] if len(stack) > 2 else None

    date_str, time_str = _stamp(datetime.datetime.now(datetime.timezone.utc))
    line = _join([
        LOG_RUN_ID,
        date_str,
        time_str,
        logging.getLevelName(level),
        f"L{caller.lineno}" if caller else "L-1",
        caller.function if caller else "<unknown>",
        module_purpose,
        invoking_function,
        invoking_purpose,
        message,
        next_step,
        resolution,
    ])
    if exc is not None:
        line = f"{line} EXC={exc!r}"
    _script_logger.log(level, line)


def log_info(message: str, *, module_purpose: str, **context: str) -> None:
    _emit(logging.INFO, message, module_purpose=module_purpose, **context)


def log_warning(message: str, *, module_purpose: str, **context: str) -> None:
    _emit(logging.WARNING, message, module_purpose=module_purpose, **context)


def log_error(
    message: str,
    *,
    module_purpose: str,
    exc: Optional[BaseException] = None,
    **context: str,
) -> None:
    _emit(logging.ERROR, message, module_purpose=module_purpose, exc=exc, **context)


# ---------------------------------------------------------------------------
# Library loggers
# ---------------------------------------------------------------------------
class StructuredFormatter(logging.Formatter):
    """Renders a LogRecord as one pipe-delimited line (traceback appended)."""

    # record.module -> what that module is for
    MODULE_PURPOSES: Dict[str, str] = {
        "pipeline": "Menu ETL from vendor export rows to catalog food items",
        "normalizer": "Turn one raw vendor row into a canonical FoodItem",
        "dedup": "Drop header rows and duplicate vendor rows per batch",
        "patterns": "Extract nutrition, allergens, dietary tags and category from free text",
        "nutrislice_export": "Read Nutrislice spreadsheet exports into RawVendorRow objects",
        "scoring": "Score a candidate meal plan against a goal profile",
        "substitution": "Rank same-category replacement candidates",
        "optimizer": "Bounded local search and cold-start plan generation",
        "catalog_store": "Supabase adapter for catalog, profiles and plans",
        "chat": "Conversational dining assistant (OpenAI or canned replies)",
        "menu_search": "In-memory search and filtering over the catalog",
        "config": "Create Supabase / OpenAI settings from environment variables",
        "etl_run": "Operator CLI for vendor export ingestion",
        "plan_example": "Operator CLI that generates a plan for a stored user",
    }

    CONTEXT_FIELDS = ("invoking_func", "invoking_purpose")
    OUTCOME_FIELDS = ("next_step", "resolution")

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        date_str, time_str = _stamp(datetime.datetime.fromtimestamp(record.created))
        context = [str(getattr(record, name, "")) for name in self.CONTEXT_FIELDS]
        outcome = [str(getattr(record, name, "")) for name in self.OUTCOME_FIELDS]

        line = _join(
            [
                getattr(record, "run_id", RUN_ID),
                date_str,
                time_str,
                record.levelname,
                f"{record.filename}:{record.lineno}",
                f"{record.module}.{record.funcName}",
                self.MODULE_PURPOSES.get(record.module, ""),
            ]
            + context
            + [record.getMessage()]
            + outcome
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def init_logging(level: int = logging.INFO) -> None:
    """Attach a StructuredFormatter handler to the root logger, once."""
    root = logging.getLogger()
    if root.handlers:
        # someone (pytest, a notebook, the host app) already configured logging
        return

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    init_logging()
    return logging.getLogger(name)
