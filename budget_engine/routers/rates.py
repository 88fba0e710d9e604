from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from typing import List

from budget_engine.core.config import get_settings
from budget_engine.models.rates import FxRate
from budget_engine.services.engine import BudgetEngine

"""Rates router providing cache inspection and manual override endpoints.

Endpoints:
    - GET /rates                      -> cached rates (live, default and manual)
    - PUT /rates/{from}/{to}          -> pin a manual rate {rate}
    - DELETE /rates                   -> drop every cached rate

Writes are guarded by settings.enable_rate_override. Manual rates live in the
in-memory cache and expire with the normal TTL.
"""

router = APIRouter(prefix="/rates", tags=["rates"])


def get_engine(request: Request) -> BudgetEngine:
    return request.app.state.engine


def require_override_enabled(request: Request):
    settings = getattr(request.app.state, "settings", None) or get_settings()
    if not settings.enable_rate_override:
        raise HTTPException(status_code=403, detail="rate override feature disabled")
    return True


class RateSetPayload(BaseModel):
    rate: float = Field(..., gt=0, description="Units of `to` per 1 unit of `from`")


@router.get("", response_model=List[FxRate], summary="List cached FX rates")
async def list_rates(engine: BudgetEngine = Depends(get_engine)):
    return engine.cached_rates()


@router.put(
    "/{from_currency}/{to_currency}",
    response_model=FxRate,
    summary="Set a manual rate for a currency pair",
)
async def set_rate(
    from_currency: str,
    to_currency: str,
    payload: RateSetPayload,
    _: bool = Depends(require_override_enabled),
    engine: BudgetEngine = Depends(get_engine),
):
    try:
        return engine.rates.set_rate(from_currency, to_currency, payload.rate)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.delete("", summary="Clear the FX rate cache")
async def clear_rates(
    _: bool = Depends(require_override_enabled),
    engine: BudgetEngine = Depends(get_engine),
):
    engine.rates.clear()
    return {"status": "cleared"}
