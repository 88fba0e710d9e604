import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from budget_engine.models import (
    BudgetInsight,
    BudgetRuleSet,
    Debt,
    FxRate,
    Goal,
    IncomeSource,
    MonthlyBudgetPlan,
    Transaction,
    TransactionResult,
)
from budget_engine.models.constants import GoalType, IncomeType, Recurrence
from budget_engine.services.engine import BudgetEngine

router = APIRouter(prefix="/budget", tags=["budget"])

DEFAULT_CURRENCY = "AED"

# Dependencies -----------------------------------------------------


def get_engine(request: Request) -> BudgetEngine:
    return request.app.state.engine


# Request / Response Models ----------------------------------------
class IncomeIn(BaseModel):
    id: str
    name: str = ""
    type: IncomeType = "salary"
    amount: float = Field(..., ge=0)
    currency: Optional[str] = None
    recurrence: Recurrence = "monthly"
    is_active: bool = True


class DebtIn(BaseModel):
    id: str
    name: str = ""
    currency: Optional[str] = None
    outstanding_principal: float = Field(..., ge=0)
    interest_rate_annual: float = Field(..., ge=0)
    min_monthly_payment: float = Field(..., ge=0)
    country: str = ""
    priority: Optional[int] = None


class GoalIn(BaseModel):
    id: str
    name: str = ""
    type: GoalType = "other"
    currency: Optional[str] = None
    target_amount: float = Field(..., ge=0)
    current_amount: float = Field(0, ge=0)
    target_date: dt.date
    country: str = ""


class PlanCreateIn(BaseModel):
    user_id: str
    month: str = Field(..., description="YYYY-MM")
    base_currency: str = DEFAULT_CURRENCY
    incomes: List[IncomeIn] = Field(default_factory=list)
    debts: List[DebtIn] = Field(default_factory=list)
    goals: List[GoalIn] = Field(default_factory=list)
    rules: Optional[BudgetRuleSet] = None


class TransactionIn(BaseModel):
    user_id: str
    amount: float
    currency: str = DEFAULT_CURRENCY
    category: str
    bucket: str = Field(..., description="NEEDS | WANTS | SAVINGS | DEBT")
    description: str = ""
    date: Optional[dt.date] = None
    tags: List[str] = Field(default_factory=list)
    month: Optional[str] = Field(None, description="Defaults to the month of `date`")
    base_currency: Optional[str] = None


class InsightGenerateIn(BaseModel):
    user_id: str
    month: str


class InsightList(BaseModel):
    insights: List[BudgetInsight]
    count: int


class PlanList(BaseModel):
    plans: List[MonthlyBudgetPlan]
    count: int


class RateList(BaseModel):
    rates: List[FxRate]
    count: int


# Helpers ----------------------------------------------------------


def _to_domain(
    payload: PlanCreateIn, engine: BudgetEngine
) -> tuple[List[IncomeSource], List[Debt], List[Goal]]:
    base = payload.base_currency.upper()

    def money(amount: float, currency: Optional[str]):
        return engine.create_money(amount, currency or base, base)

    incomes = [
        IncomeSource(
            id=i.id,
            name=i.name,
            type=i.type,
            money=money(i.amount, i.currency),
            recurrence=i.recurrence,
            is_active=i.is_active,
        )
        for i in payload.incomes
    ]
    debts = [
        Debt(
            id=d.id,
            name=d.name,
            currency=d.currency or base,
            outstanding_principal=money(d.outstanding_principal, d.currency),
            interest_rate_annual=d.interest_rate_annual,
            min_monthly_payment=money(d.min_monthly_payment, d.currency),
            country=d.country,
            priority=d.priority,
        )
        for d in payload.debts
    ]
    goals = [
        Goal(
            id=g.id,
            name=g.name,
            type=g.type,
            target_amount=money(g.target_amount, g.currency),
            current_amount=money(g.current_amount, g.currency),
            target_date=g.target_date,
            country=g.country,
        )
        for g in payload.goals
    ]
    return incomes, debts, goals


# Routes -----------------------------------------------------------
@router.post(
    "/plan",
    response_model=MonthlyBudgetPlan,
    status_code=201,
    summary="Create or regenerate a budget plan for a month",
)
def create_plan(payload: PlanCreateIn, engine: BudgetEngine = Depends(get_engine)):
    user_id, month, base = engine.validate_plan_request(
        payload.user_id, payload.month, payload.base_currency
    )
    incomes, debts, goals = _to_domain(payload, engine)
    return engine.generate_plan(
        user_id,
        month,
        base,
        incomes,
        debts,
        goals,
        payload.rules,
    )


@router.get(
    "/fx-rates",
    response_model=RateList,
    summary="Currently cached FX rates used for normalisation",
)
async def list_fx_rates(engine: BudgetEngine = Depends(get_engine)):
    rates = engine.cached_rates()
    return RateList(rates=rates, count=len(rates))


@router.get(
    "/user/{user_id}", response_model=PlanList, summary="All budget plans for a user"
)
async def list_user_plans(user_id: str, engine: BudgetEngine = Depends(get_engine)):
    plans = engine.list_user_plans(user_id)
    return PlanList(plans=plans, count=len(plans))


@router.post(
    "/transactions",
    response_model=TransactionResult,
    status_code=201,
    summary="Log a transaction against the month's plan",
)
def log_transaction(
    payload: TransactionIn, engine: BudgetEngine = Depends(get_engine)
):
    when = payload.date or dt.date.today()
    month = payload.month or f"{when.year:04d}-{when.month:02d}"
    return engine.log_transaction(
        payload.user_id,
        month,
        payload.amount,
        payload.currency,
        payload.category,
        payload.bucket,
        payload.description,
        date=when,
        tags=payload.tags,
        base_currency=payload.base_currency,
    )


@router.get(
    "/insights/{month}",
    response_model=InsightList,
    summary="Stored insights for a month",
)
async def list_insights(
    month: str,
    user_id: str = Query(..., description="User identifier"),
    engine: BudgetEngine = Depends(get_engine),
):
    insights = engine.get_insights(user_id, month)
    return InsightList(insights=insights, count=len(insights))


@router.post(
    "/insights/generate",
    response_model=InsightList,
    summary="Recompute insights for a plan without storing them",
)
async def generate_insights(
    payload: InsightGenerateIn, engine: BudgetEngine = Depends(get_engine)
):
    insights = engine.regenerate_insights(payload.user_id, payload.month)
    if insights is None:
        raise HTTPException(status_code=404, detail="budget plan not found")
    return InsightList(insights=insights, count=len(insights))


@router.get(
    "/{month}/transactions",
    response_model=List[Transaction],
    summary="Transactions logged against a month's plan",
)
async def list_transactions(
    month: str,
    user_id: str = Query(..., description="User identifier"),
    engine: BudgetEngine = Depends(get_engine),
):
    if engine.get_plan(user_id, month) is None:
        raise HTTPException(status_code=404, detail="budget plan not found for this month")
    return engine.list_transactions(user_id, month)


@router.get(
    "/{month}",
    response_model=MonthlyBudgetPlan,
    summary="Current budget plan and execution status",
)
async def get_plan(
    month: str,
    user_id: str = Query(..., description="User identifier"),
    engine: BudgetEngine = Depends(get_engine),
):
    plan = engine.get_plan(user_id, month)
    if plan is None:
        raise HTTPException(status_code=404, detail="budget plan not found for this month")
    return plan
