"""Authentication routes: register, login, logout, current user."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import TOKEN_COOKIE, get_current_user, get_users
from config.settings import settings
from schemas.user import ChangePasswordRequest, LoginRequest, RegisterRequest, UserPublic
from services.auth_service import (
    authenticate_user,
    change_password,
    create_access_token,
    get_user,
    register_user,
)
from utils.exceptions import AppError, PersistenceError
from utils.helpers import format_response
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def send_token(user: UserPublic, status_code: int) -> JSONResponse:
    """Respond with a fresh token in the body and as an http-only cookie."""
    token = create_access_token(user.id)
    response = JSONResponse(
        status_code=status_code,
        content=format_response({"token": token, "user": user.model_dump(by_alias=True)}),
    )
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        max_age=settings.cookie_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.post("/register", status_code=201)
async def register(payload: RegisterRequest, users=Depends(get_users)):
    """Register a user and sign them in."""
    try:
        user = await register_user(users, payload.username, payload.email, payload.password)
        return send_token(user, 201)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error registering user: {e}", exc_info=True)
        raise PersistenceError("Error registering user") from e


@router.post("/login")
async def login(payload: LoginRequest, users=Depends(get_users)):
    """Exchange email and password for a token."""
    try:
        user = await authenticate_user(users, payload.email, payload.password)
        logger.info(f"User {user.id} logged in")
        return send_token(user, 200)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error logging in: {e}", exc_info=True)
        raise PersistenceError("Error logging in") from e


@router.post("/logout")
async def logout():
    """Clear the token cookie."""
    response = JSONResponse(content=format_response(message="Logged out"))
    response.delete_cookie(TOKEN_COOKIE)
    return response


@router.get("/me")
async def me(user_id: str = Depends(get_current_user), users=Depends(get_users)):
    """Return the signed-in user."""
    try:
        user = await get_user(users, user_id)
        return format_response(user.model_dump(by_alias=True))
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error fetching user {user_id}: {e}", exc_info=True)
        raise PersistenceError("Error fetching user") from e


@router.put("/password")
async def update_password(
    payload: ChangePasswordRequest,
    user_id: str = Depends(get_current_user),
    users=Depends(get_users),
):
    """Change the signed-in user's password."""
    try:
        await change_password(users, user_id, payload.current_password, payload.new_password)
        return format_response(message="Password updated")
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error changing password for {user_id}: {e}", exc_info=True)
        raise PersistenceError("Error changing password") from e
