# app/schemas/common.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field, PlainSerializer

from app.utils.money import quantize_money, format_money
from app.utils.timestamp import to_naive_utc

# Non-negative amount with two decimal places; serialized as "12.50"
Money = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2),
    AfterValidator(quantize_money),
    PlainSerializer(format_money, return_type=str, when_used="json"),
]

# Read side: whatever the store returns, rendered with two digits
StoredMoney = Annotated[
    Decimal,
    AfterValidator(quantize_money),
    PlainSerializer(format_money, return_type=str, when_used="json"),
]

# Incoming timestamps are normalized to the naive UTC form the store uses
UTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]
