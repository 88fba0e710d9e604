from __future__ import annotations
from datetime import datetime, timezone
from pydantic import BaseModel, field_validator


class Money(BaseModel):
    """Amount in its original currency plus its base-currency equivalent.

    `base_amount == amount * fx_rate` when created; rate and timestamp record
    provenance and are never recomputed.
    """

    amount: float
    currency: str
    base_amount: float
    fx_rate: float = 1.0
    fx_timestamp: datetime

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()

    @classmethod
    def in_base(cls, amount: float, currency: str) -> "Money":
        """Money already denominated in the base currency (rate 1)."""
        return cls(
            amount=amount,
            currency=currency,
            base_amount=amount,
            fx_rate=1.0,
            fx_timestamp=datetime.now(timezone.utc),
        )
