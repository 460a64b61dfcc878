# app/api/deps.py
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import jwt
import uuid

from app.core.database import get_async_session
from app.core.auth import User, JWT_AUDIENCE
from app.core.config import settings
from app.services.advisor import Advisor, build_advisor
from app.services.currency import CurrencyConverter

optional_security = HTTPBearer(auto_error=False)


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then `token`/`access_token` query params, then the cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials

    token = request.query_params.get("token") or request.query_params.get("access_token")
    if token:
        return token

    token = request.cookies.get("access_token")
    if token and token.startswith("Bearer "):
        token = token[7:]
    return token


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security)
) -> User:
    """
    Resolve the verified user for this request.

    The identity provider only has to hand us a signed token; everything
    downstream works from the user id it carries.
    """
    token = _extract_token(request, credentials)
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid token")

    user_id_str = payload.get("sub")
    if not user_id_str:
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        raise _unauthorized("Invalid user ID format in token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()

    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise _unauthorized("Inactive user")

    return user


def get_advisor() -> Advisor:
    return build_advisor(settings)


def get_currency_converter(request: Request) -> CurrencyConverter:
    return request.app.state.currency_converter
