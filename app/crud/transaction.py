# app/crud/transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import and_, or_, desc, asc
from app.models.transaction import Transaction
from typing import List, Optional, Sequence
import uuid
from app.schemas.transaction import TransactionCreate, TransactionUpdate, TransactionFilters


def build_filter_conditions(user_id: uuid.UUID, filters: Optional[TransactionFilters]) -> list:
    """
    SQL conditions for a ledger query. The owner condition is always first and
    nothing in `filters` can widen it.
    """
    conditions = [Transaction.user_id == user_id]
    if filters is None:
        return conditions

    if filters.category:
        conditions.append(Transaction.category == filters.category)
    if filters.type:
        conditions.append(Transaction.type == filters.type)
    if filters.start_date:
        conditions.append(Transaction.transaction_date >= filters.start_date)
    if filters.end_date:
        conditions.append(Transaction.transaction_date <= filters.end_date)
    if filters.search:
        conditions.append(
            or_(
                Transaction.description.icontains(filters.search, autoescape=True),
                Transaction.location.icontains(filters.search, autoescape=True),
            )
        )
    if filters.location:
        conditions.append(Transaction.location.icontains(filters.location, autoescape=True))
    return conditions


def matches_tags(tx: Transaction, tags: Optional[Sequence[str]]) -> bool:
    """True when no tags were asked for, or the transaction shares at least one"""
    if not tags:
        return True
    return bool(set(tx.tags or []) & set(tags))


async def get_transactions_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    filters: Optional[TransactionFilters] = None,
) -> List[Transaction]:
    """
    The user's transactions matching every supplied criterion, most recent
    first. Equal dates keep insertion order.
    """
    result = await db.execute(
        select(Transaction)
        .where(and_(*build_filter_conditions(user_id, filters)))
        .order_by(desc(Transaction.transaction_date), asc(Transaction.seq))
    )
    transactions = result.scalars().all()
    # Tags live in a JSON column, so the intersection is checked here
    tags = filters.tags if filters else None
    return [tx for tx in transactions if matches_tags(tx, tags)]


async def get_transaction_by_id(transaction_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Transaction]:
    result = await db.execute(
        select(Transaction).where(Transaction.id == transaction_id, Transaction.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_transaction_for_user(user_id: uuid.UUID, tx_in: TransactionCreate, db: AsyncSession) -> Transaction:
    data = tx_in.model_dump()
    data["tags"] = data.get("tags") or []
    new_tx = Transaction(**data, user_id=user_id)
    db.add(new_tx)
    await db.commit()
    await db.refresh(new_tx)
    return new_tx

async def update_transaction(tx: Transaction, tx_in: TransactionUpdate, db: AsyncSession) -> Transaction:
    for field, value in tx_in.model_dump(exclude_unset=True).items():
        if field == "tags" and value is None:
            value = []
        setattr(tx, field, value)
    db.add(tx)
    await db.commit()
    await db.refresh(tx)
    return tx

async def delete_transaction(tx: Transaction, db: AsyncSession) -> None:
    await db.delete(tx)
    await db.commit()
