# app/schemas/currency.py
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator


class CurrencyRead(BaseModel):
    code: str
    rate: float
    symbol: str
    name: str


class CurrencyConversionRequest(BaseModel):
    amount: Decimal = Field(..., ge=0)
    from_currency: str = Field(..., min_length=3, max_length=3, description="ISO 4217 code, e.g. EUR")
    to_currency: str = Field(..., min_length=3, max_length=3, description="ISO 4217 code, e.g. USD")

    @field_validator("from_currency", "to_currency")
    @classmethod
    def upper_code(cls, value: str) -> str:
        return value.upper()


class CurrencyConversion(BaseModel):
    from_currency: str
    to_currency: str
    amount: float
    converted_amount: float
    rate: float
    formatted: str
