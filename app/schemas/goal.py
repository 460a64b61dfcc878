# app/schemas/goal.py
from typing import Optional
from pydantic import BaseModel, Field, computed_field, model_validator
from datetime import datetime
from decimal import Decimal
import uuid

from app.schemas.common import Money, StoredMoney, UTCDateTime
from app.utils.money import percentage_of


class GoalBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150, description="E.g. Emergency fund")
    target_amount: Money
    current_amount: Money = Decimal("0")
    category: Optional[str] = Field(None, max_length=100)
    deadline: Optional[UTCDateTime] = None
    is_completed: bool = False

class GoalCreate(GoalBase):
    pass

class GoalUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    target_amount: Optional[Money] = None
    current_amount: Optional[Money] = None
    category: Optional[str] = Field(None, max_length=100)
    deadline: Optional[UTCDateTime] = None
    is_completed: Optional[bool] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("name", "target_amount", "current_amount", "is_completed"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

class GoalRead(GoalBase):
    id: uuid.UUID
    user_id: uuid.UUID
    target_amount: StoredMoney
    current_amount: StoredMoney
    deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def progress_percentage(self) -> float:
        return round(min(100.0, percentage_of(self.current_amount, self.target_amount)), 2)

    class Config:
        from_attributes = True
