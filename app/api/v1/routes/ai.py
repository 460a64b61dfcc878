# app/api/v1/routes/ai.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.core.auth import User
from app.api.deps import get_current_user, get_advisor
from app.crud.transaction import get_transactions_for_user
from app.schemas.advisor import (
    ExpenseAnalysis,
    ExpenseAnalysisRequest,
    FinancialAdvice,
    FinancialAdviceRequest,
    SpendingInsights,
)
from app.services.advisor import Advisor

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/analyze-expense", response_model=ExpenseAnalysis)
async def analyze_expense(
    payload: ExpenseAnalysisRequest,
    user: User = Depends(get_current_user),
    advisor: Advisor = Depends(get_advisor),
):
    """Suggest a category and tags for an expense before it is saved"""
    return await advisor.analyze_expense(payload.description, payload.amount, payload.location)


@router.post("/financial-advice", response_model=FinancialAdvice)
async def financial_advice(
    payload: FinancialAdviceRequest,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    advisor: Advisor = Depends(get_advisor),
):
    transactions = await get_transactions_for_user(user.id, db)
    return await advisor.financial_advice(transactions, payload.question)


@router.get("/spending-insights", response_model=SpendingInsights)
async def spending_insights(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    advisor: Advisor = Depends(get_advisor),
):
    transactions = await get_transactions_for_user(user.id, db)
    return await advisor.spending_insights(transactions)
