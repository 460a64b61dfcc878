# app/schemas/transaction.py
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from decimal import Decimal
import uuid

from app.models.transaction import TransactionType, Mood
from app.schemas.common import Money, StoredMoney, UTCDateTime


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class TransactionBase(BaseModel):
    amount: Money = Field(..., description="Magnitude of the movement; the sign comes from `type`")
    type: TransactionType
    description: str = Field(..., min_length=1, max_length=500, description="E.g. Grocery at Costco")
    transaction_date: UTCDateTime = Field(..., description="ISO 8601 date/time the money moved")
    location: Optional[str] = None
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    mood: Optional[Mood] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    receipt_url: Optional[str] = None


class TransactionCreate(TransactionBase):
    # Left empty, the category is suggested by the AI advisor
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(value)


class TransactionUpdate(BaseModel):
    """Partial update; the id and owner of a transaction can never change"""
    amount: Optional[Money] = None
    type: Optional[TransactionType] = None
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    transaction_date: Optional[UTCDateTime] = None
    location: Optional[str] = None
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    mood: Optional[Mood] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    receipt_url: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(value)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("amount", "type", "description", "category", "transaction_date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class TransactionRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: StoredMoney
    type: TransactionType
    description: str
    category: str
    transaction_date: datetime
    location: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    mood: Optional[Mood] = None
    rating: Optional[int] = None
    receipt_url: Optional[str] = None
    tags: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionFilters(BaseModel):
    """
    Criteria for listing a user's ledger. Every supplied field narrows the
    result (logical AND); omitted fields impose nothing.
    """
    category: Optional[str] = None
    type: Optional[TransactionType] = None
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    # Case-insensitive substring of description OR location
    search: Optional[str] = None
    # Matches when the transaction carries at least one of these tags
    tags: Optional[List[str]] = None
    location: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(value)

    @field_validator("category", "search", "location")
    @classmethod
    def blank_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def check_date_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self
