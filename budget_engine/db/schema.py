"""Database schema DDL definitions and initialization utilities.

Tables:
  - budget_plans: one JSON-serialized plan per (user_id, month)
  - transactions: immutable JSON-serialized transactions keyed by id
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

BUDGET_PLANS_DDL = f"""
CREATE TABLE IF NOT EXISTS budget_plans (
    user_id TEXT NOT NULL,
    month TEXT NOT NULL, -- YYYY-MM
    id TEXT NOT NULL UNIQUE,
    base_currency TEXT NOT NULL,
    payload TEXT NOT NULL, -- MonthlyBudgetPlan JSON
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    PRIMARY KEY (user_id, month)
);
"""

TRANSACTIONS_DDL = f"""
CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    budget_plan_id TEXT NOT NULL,
    date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    payload TEXT NOT NULL, -- Transaction JSON
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

TRANSACTIONS_PLAN_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_transactions_plan ON transactions(budget_plan_id, date);"
)

DDL_ORDER: Sequence[str] = (
    BUDGET_PLANS_DDL,
    TRANSACTIONS_DDL,
    TRANSACTIONS_PLAN_INDEX_DDL,
)


def init_db(path: Path) -> None:
    """Create all tables idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
