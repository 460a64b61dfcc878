# app/schemas/budget.py
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from datetime import datetime
import uuid

from app.models.budget import BudgetPeriod
from app.schemas.common import Money, StoredMoney, UTCDateTime


class BudgetBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150, description="E.g. Groceries")
    category: Optional[str] = Field(None, max_length=100, description="Leave empty to budget all spending")
    amount: Money
    period: BudgetPeriod = BudgetPeriod.monthly
    start_date: UTCDateTime
    end_date: Optional[UTCDateTime] = None
    is_active: bool = True

class BudgetCreate(BudgetBase):
    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class BudgetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    category: Optional[str] = Field(None, max_length=100)
    amount: Optional[Money] = None
    period: Optional[BudgetPeriod] = None
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("name", "amount", "period", "start_date", "is_active"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

class BudgetRead(BudgetBase):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: StoredMoney
    start_date: datetime
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
