from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Literal


class FxRate(BaseModel):
    """A cached rate for one currency pair (1 unit of `from_currency` in `to_currency`)."""

    id: str
    from_currency: str
    to_currency: str
    rate: float = Field(..., gt=0)
    timestamp: datetime
    source: Literal["identity", "live", "default", "manual"] = "live"

    @field_validator("from_currency", "to_currency")
    @classmethod
    def upper_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("currency code cannot be empty")
        return v

    @property
    def pair(self) -> str:
        return f"{self.from_currency}_{self.to_currency}"
