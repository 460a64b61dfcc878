# app/api/v1/routes/transactions.py
from fastapi import APIRouter, Depends, HTTPException, status, Request, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime
import logging
import uuid

from app.schemas.transaction import (
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
    TransactionFilters,
)
from app.crud.transaction import (
    create_transaction_for_user,
    get_transactions_for_user,
    get_transaction_by_id,
    update_transaction,
    delete_transaction,
)
from app.core.database import get_async_session
from app.core.auth import User
from app.models.transaction import TransactionType
from app.api.deps import get_current_user, get_advisor
from app.services.advisor import Advisor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


def transaction_filters(
    category: Optional[str] = Query(None),
    type: Optional[TransactionType] = Query(None),
    start_date: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end_date: Optional[datetime] = Query(None, description="Inclusive upper bound"),
    search: Optional[str] = Query(None, description="Matches description or location"),
    tags: Optional[str] = Query(None, description="Comma separated; any one must match"),
    location: Optional[str] = Query(None),
) -> TransactionFilters:
    try:
        return TransactionFilters(
            category=category,
            type=type,
            start_date=start_date,
            end_date=end_date,
            search=search,
            tags=tags.split(",") if tags else None,
            location=location,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.get("", response_model=List[TransactionRead])
async def read_transactions(
    request: Request,
    filters: TransactionFilters = Depends(transaction_filters),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_transactions_for_user(user.id, db, filters)

@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    tx_in: TransactionCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
    advisor: Advisor = Depends(get_advisor),
):
    # Auto-categorize when no category was given
    if not tx_in.category:
        analysis = await advisor.analyze_expense(tx_in.description, float(tx_in.amount), tx_in.location)
        updates = {"category": analysis.suggested_category}
        if not tx_in.tags:
            updates["tags"] = analysis.tags
        tx_in = tx_in.model_copy(update=updates)
        logger.info(f"Categorized transaction as '{analysis.suggested_category}' (confidence {analysis.confidence})")
    return await create_transaction_for_user(user.id, tx_in, db)

@router.get("/{transaction_id}", response_model=TransactionRead)
async def read_transaction(
    transaction_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return tx

@router.patch("/{transaction_id}", response_model=TransactionRead)
async def update_transaction_endpoint(
    transaction_id: uuid.UUID,
    tx_in: TransactionUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return await update_transaction(tx, tx_in, db)

@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction_endpoint(
    transaction_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    await delete_transaction(tx, db)
    return None
