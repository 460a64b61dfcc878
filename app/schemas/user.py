# app/schemas/user.py
from typing import List, Literal, Optional
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.auth import UserRead
from app.schemas.budget import BudgetRead
from app.schemas.category import CategoryRead
from app.schemas.goal import GoalRead
from app.schemas.transaction import TransactionRead


# Fields accepted on PATCH /users/me
class UserPreferencesUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    language: Optional[str] = Field(None, min_length=2, max_length=10)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = None
    theme: Optional[Literal["light", "dark", "system"]] = None
    onboarding_completed: Optional[bool] = None

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value else value

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("language", "currency", "timezone", "theme", "onboarding_completed"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


# Full-fidelity dump returned by GET /users/me/export
class UserDataExport(BaseModel):
    exported_at: datetime
    user: UserRead
    transactions: List[TransactionRead]
    budgets: List[BudgetRead]
    goals: List[GoalRead]
    categories: List[CategoryRead]
