"""FastAPI dependency providers.

Collections are resolved through dependencies so tests can swap them with
``app.dependency_overrides``.
"""

from typing import Optional

from fastapi import Cookie, Header

from models.database import (
    get_details_collection,
    get_meals_collection,
    get_users_collection,
    get_workouts_collection,
)
from services.auth_service import verify_token
from utils.exceptions import AuthenticationError

TOKEN_COOKIE = "token"


def get_users():
    return get_users_collection()


def get_workouts():
    return get_workouts_collection()


def get_meals():
    return get_meals_collection()


def get_details():
    return get_details_collection()


def extract_token(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    """Pick the bearer token from the Authorization header, else the cookie."""
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return cookie_token or None


async def get_current_user(
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Cookie(None),
) -> str:
    """
    Resolve the caller's user id from a signed token.

    Usage:
        @router.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user)):
            return {"user_id": user_id}
    """
    raw_token = extract_token(authorization, token)
    if not raw_token:
        raise AuthenticationError("Not authorized to access this route")
    return verify_token(raw_token)
