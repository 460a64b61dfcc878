# app/schemas/category.py
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from datetime import datetime
import uuid

class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=50)

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=50)

    @model_validator(mode="after")
    def name_not_null(self):
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null")
        return self

class CategoryRead(CategoryBase):
    id: uuid.UUID
    user_id: uuid.UUID
    is_default: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
