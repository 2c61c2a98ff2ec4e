"""User collection schema."""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class RegisterRequest(BaseModel):
    """Registration payload."""
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Login payload."""
    email: Optional[str] = None
    password: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    """Password change payload."""
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword")
    new_password: str = Field(..., alias="newPassword")


class UserPublic(BaseModel):
    """User as returned to clients. Never carries the password hash."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="User identifier")
    username: str
    email: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @classmethod
    def from_document(cls, document: dict) -> "UserPublic":
        return cls(
            id=str(document["_id"]),
            username=document["username"],
            email=document["email"],
            created_at=document.get("createdAt"),
        )
