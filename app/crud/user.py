# app/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete
from app.core.auth import User
from app.models import Budget, Category, Goal, Notification, Transaction
import logging
import uuid
from app.schemas.user import UserPreferencesUpdate
from app.crud.budget import get_budgets_for_user
from app.crud.category import get_categories_for_user
from app.crud.goal import get_goals_for_user
from app.crud.transaction import get_transactions_for_user

logger = logging.getLogger(__name__)

# Child tables first; the user row itself is kept
USER_OWNED_MODELS = (Notification, Category, Goal, Budget, Transaction)

async def update_user_preferences(user: User, prefs_in: UserPreferencesUpdate, db: AsyncSession) -> User:
    for field, value in prefs_in.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user

async def delete_all_user_data(user_id: uuid.UUID, db: AsyncSession) -> None:
    """Permanently remove every record the user owns, in a single commit"""
    for model in USER_OWNED_MODELS:
        result = await db.execute(delete(model).where(model.user_id == user_id))
        logger.info(f"Deleted {result.rowcount} {model.__tablename__} rows for user {user_id}")
    await db.commit()

async def export_user_data(user: User, db: AsyncSession) -> dict:
    """Everything the user owns, in the same shapes the API returns"""
    return {
        "user": user,
        "transactions": await get_transactions_for_user(user.id, db),
        "budgets": await get_budgets_for_user(user.id, db),
        "goals": await get_goals_for_user(user.id, db),
        "categories": await get_categories_for_user(user.id, db),
    }
