"""SQLite-backed plan store.

Responsibilities
----------------
- Persist whole plans as JSON documents keyed by (user_id, month); saving an
  existing key replaces the previous plan.
- Persist transactions once, keyed by their own id (never updated).
- Hand back fresh pydantic objects on every read so callers never share state.
"""

from __future__ import annotations

from pathlib import Path
import sqlite3
from typing import List, Optional

from budget_engine.models.plan import MonthlyBudgetPlan
from budget_engine.models.transaction import Transaction
from .schema import init_db
from .store import PlanStore

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"


class SqlitePlanStore(PlanStore):
    def __init__(self, db_path: Path):
        self.db_path = db_path
        init_db(db_path)

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Plans
    def get_plan(self, user_id: str, month: str) -> Optional[MonthlyBudgetPlan]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT payload FROM budget_plans WHERE user_id = ? AND month = ?",
                (user_id, month),
            )
            row = cur.fetchone()
            return MonthlyBudgetPlan.model_validate_json(row["payload"]) if row else None

    def save_plan(self, plan: MonthlyBudgetPlan) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO budget_plans (user_id, month, id, base_currency, payload)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id, month) DO UPDATE SET
                    id = excluded.id,
                    base_currency = excluded.base_currency,
                    payload = excluded.payload,
                    updated_at = ({UTC_NOW_SQL})
                """,
                (
                    plan.user_id,
                    plan.month,
                    plan.id,
                    plan.base_currency,
                    plan.model_dump_json(),
                ),
            )
            conn.commit()

    def list_plans(self, user_id: str) -> List[MonthlyBudgetPlan]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT payload FROM budget_plans WHERE user_id = ? ORDER BY month ASC",
                (user_id,),
            )
            return [
                MonthlyBudgetPlan.model_validate_json(r["payload"]) for r in cur.fetchall()
            ]

    # ------------------------------------------------------------------
    # Transactions
    def save_transaction(self, transaction: Transaction) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO transactions (id, user_id, budget_plan_id, date, payload)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    transaction.id,
                    transaction.user_id,
                    transaction.budget_plan_id,
                    transaction.date.isoformat(),
                    transaction.model_dump_json(),
                ),
            )
            conn.commit()

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT payload FROM transactions WHERE id = ?", (transaction_id,)
            )
            row = cur.fetchone()
            return Transaction.model_validate_json(row["payload"]) if row else None

    def list_transactions(self, budget_plan_id: str) -> List[Transaction]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT payload FROM transactions
                WHERE budget_plan_id = ?
                ORDER BY date ASC, created_at ASC
                """,
                (budget_plan_id,),
            )
            return [Transaction.model_validate_json(r["payload"]) for r in cur.fetchall()]
