"""User schemas for request/response validation."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from app.models.user import UserRole


class UserBase(BaseModel):
    """Base user schema."""
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for registering a user."""
    password: str = Field(min_length=6)
    role: UserRole = UserRole.EMPLOYEE


class UserLogin(BaseModel):
    """Schema for logging in."""
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(UserBase):
    """Schema for user response."""
    id: int
    role: UserRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Token plus the authenticated user."""
    message: str
    token: str
    user: UserResponse


class MeResponse(BaseModel):
    """Profile of the current user."""
    user: UserResponse


class TokenData(BaseModel):
    """Token payload data.

    ``role`` is kept as the raw string from the token so that the policy
    can reject values outside :class:`UserRole`.
    """
    id: int
    username: str
    role: str
