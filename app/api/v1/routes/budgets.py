# app/api/v1/routes/budgets.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from app.schemas.budget import BudgetCreate, BudgetRead, BudgetUpdate
from app.crud.budget import (
    create_budget_for_user,
    get_budgets_for_user,
    get_budget_by_id,
    update_budget,
    delete_budget,
)
from app.core.database import get_async_session
from app.core.auth import User
from app.api.deps import get_current_user

router = APIRouter(prefix="/budgets", tags=["budgets"])

@router.get("", response_model=List[BudgetRead])
async def read_budgets(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_budgets_for_user(user.id, db)

@router.post("", response_model=BudgetRead, status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget_in: BudgetCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await create_budget_for_user(user.id, budget_in, db)

@router.get("/{budget_id}", response_model=BudgetRead)
async def read_budget(
    budget_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    budget = await get_budget_by_id(budget_id, user.id, db)
    if not budget:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return budget

@router.patch("/{budget_id}", response_model=BudgetRead)
async def update_budget_endpoint(
    budget_id: uuid.UUID,
    budget_in: BudgetUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    budget = await get_budget_by_id(budget_id, user.id, db)
    if not budget:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Budget not found")
    changes = budget_in.model_dump(exclude_unset=True)
    start_date = changes.get("start_date", budget.start_date)
    end_date = changes.get("end_date", budget.end_date)
    if end_date and end_date < start_date:
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must not be before start_date",
        )
    return await update_budget(budget, budget_in, db)

@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget_endpoint(
    budget_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    budget = await get_budget_by_id(budget_id, user.id, db)
    if not budget:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Budget not found")
    await delete_budget(budget, db)
    return None
