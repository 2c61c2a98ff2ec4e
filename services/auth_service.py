"""Credential verification: password hashing, user lookup and JWT handling."""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from pymongo.errors import DuplicateKeyError

from config.settings import settings
from schemas.user import UserPublic
from utils.exceptions import AuthenticationError, DuplicateError, NotFoundError, ValidationError
from utils.helpers import parse_object_id, utcnow
from utils.logger import setup_logger

logger = setup_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@([A-Za-z0-9-]+\.)+[A-Za-z]{2,}$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72  # bcrypt input limit

PUBLIC_PROJECTION = {"password": 0}


# ---------------------------
# Passwords
# ---------------------------

def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def _validate_password(password: Optional[str]) -> str:
    if not password:
        raise ValidationError("Please provide password")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return password


# ---------------------------
# Tokens
# ---------------------------

def create_access_token(user_id: str, now: Optional[datetime] = None) -> str:
    """Sign a token whose ``id`` claim is the user id."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> str:
    """Validate a token and return the user id it was issued for."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        raise AuthenticationError("Not authorized to access this route")

    user_id = payload.get("id")
    if not user_id or not isinstance(user_id, str):
        raise AuthenticationError("Not authorized to access this route")
    return user_id


# ---------------------------
# Users
# ---------------------------

async def register_user(
    collection,
    username: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> UserPublic:
    """Create a user. Email is trimmed and lower-cased before storage."""
    username = (username or "").strip()
    email = (email or "").strip().lower()

    if not username:
        raise ValidationError("Please provide a username")
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
        )
    if not email:
        raise ValidationError("Please provide email")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please provide a valid email")
    _validate_password(password)

    existing = await collection.find_one({"$or": [{"email": email}, {"username": username}]})
    if existing:
        field = "email" if existing.get("email") == email else "username"
        raise DuplicateError(f"A user with this {field} already exists")

    now = utcnow()
    document = {
        "username": username,
        "email": email,
        "password": hash_password(password),
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        result = await collection.insert_one(document)
    except DuplicateKeyError:
        raise DuplicateError("A user with this email or username already exists")

    document["_id"] = result.inserted_id
    logger.info(f"Registered user {username} ({result.inserted_id})")
    return UserPublic.from_document(document)


async def authenticate_user(collection, email: Optional[str], password: Optional[str]) -> UserPublic:
    """Check an email/password pair."""
    if not email or not password:
        raise ValidationError("Please provide an email and password")

    user = await collection.find_one({"email": email.strip().lower()})
    if not user or not verify_password(password, user.get("password", "")):
        raise AuthenticationError("Invalid credentials")
    return UserPublic.from_document(user)


async def get_user(collection, user_id: str) -> UserPublic:
    """Load a user without the password field."""
    object_id = parse_object_id(user_id)
    user = await collection.find_one({"_id": object_id}, PUBLIC_PROJECTION) if object_id else None
    if not user:
        raise NotFoundError("User not found")
    return UserPublic.from_document(user)


async def change_password(collection, user_id: str, current_password: str, new_password: str) -> None:
    """Rehash and store a new password after checking the current one."""
    object_id = parse_object_id(user_id)
    user = await collection.find_one({"_id": object_id}) if object_id else None
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(current_password, user.get("password", "")):
        raise AuthenticationError("Current password is incorrect")
    _validate_password(new_password)

    await collection.update_one(
        {"_id": object_id},
        {"$set": {"password": hash_password(new_password), "updatedAt": utcnow()}},
    )
    logger.info(f"Password changed for user {user_id}")
