"""Pydantic schemas for user data validation."""

from datetime import datetime

from pydantic import EmailStr, Field

from components.core.schemas import ApiSchema


class UserCreate(ApiSchema):
    """Schema for user registration."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class UserLogin(ApiSchema):
    """Schema for login credentials."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class User(ApiSchema):
    """Schema for user response."""
    id: int
    name: str
    email: str
    created_at: datetime


class UserData(ApiSchema):
    user: User


class UserWithToken(ApiSchema):
    """Schema for user response with access token."""
    user: User
    token: str
    token_type: str = "bearer"
