# app/api/v1/routes/currencies.py
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from app.core.auth import User
from app.core.exceptions import UnsupportedCurrencyError
from app.api.deps import get_current_user, get_currency_converter
from app.schemas.currency import CurrencyConversion, CurrencyConversionRequest, CurrencyRead
from app.services.currency import CurrencyConverter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/currencies", tags=["currencies"])


# Public: the frontend needs the list before login
@router.get("", response_model=List[CurrencyRead])
async def list_currencies(converter: CurrencyConverter = Depends(get_currency_converter)):
    await converter.refresh_if_stale()
    return [
        CurrencyRead(code=r.code, rate=r.rate, symbol=r.symbol, name=r.name)
        for r in converter.supported_currencies()
    ]


@router.post("/convert", response_model=CurrencyConversion)
async def convert_currency(
    payload: CurrencyConversionRequest,
    user: User = Depends(get_current_user),
    converter: CurrencyConverter = Depends(get_currency_converter),
):
    try:
        return await converter.convert(payload.amount, payload.from_currency, payload.to_currency)
    except UnsupportedCurrencyError as e:
        logger.info(f"Rejected conversion {payload.from_currency}->{payload.to_currency}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
