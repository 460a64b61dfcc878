# app/api/v1/routes/users.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import User, UserRead
from app.core.database import get_async_session
from app.api.deps import get_current_user
from app.crud.user import delete_all_user_data, export_user_data, update_user_preferences
from app.schemas.user import UserDataExport, UserPreferencesUpdate
from app.utils.timestamp import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["User Management"])

# 1) GET /users/me
@router.get("/me", response_model=UserRead)
async def read_own_profile(
    request: Request,
    user: User = Depends(get_current_user)
):
    """Get current user's profile and preferences"""
    return user

# 2) PATCH /users/me
@router.patch("/me", response_model=UserRead)
async def update_own_profile(
    prefs_in: UserPreferencesUpdate,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update profile fields and preferences (language, currency, timezone, theme)"""
    if not prefs_in.model_dump(exclude_unset=True):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update"
        )
    return await update_user_preferences(user, prefs_in, db)

# 3) GET /users/me/export
@router.get("/me/export", response_model=UserDataExport)
async def export_own_data(
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Download everything the user owns as a JSON attachment"""
    exported_at = utcnow()
    data = await export_user_data(user, db)
    export = UserDataExport.model_validate({"exported_at": exported_at, **data}, from_attributes=True)
    logger.info(f"Exported {len(export.transactions)} transactions for user {user.id}")

    filename = f"expense-tracker-export-{exported_at:%Y-%m-%d}.json"
    return Response(
        content=export.model_dump_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

# 4) DELETE /users/me/data
@router.delete("/me/data", status_code=status.HTTP_204_NO_CONTENT)
async def delete_own_data(
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Permanently delete all transactions, budgets, goals, categories and notifications; keeps the account"""
    await delete_all_user_data(user.id, db)
    logger.info(f"Deleted all data for user {user.email}")
    return None
