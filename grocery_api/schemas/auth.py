"""Authentication-related Pydantic schemas."""

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field

from grocery_api.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Schema for login request."""

    username: str
    password: str


class SignupRequest(BaseModel):
    """Schema for user registration."""

    username: Annotated[str, Field(min_length=3, max_length=50)]
    email: Annotated[EmailStr, Field(max_length=100)]
    password: Annotated[str, Field(min_length=6, max_length=120)]


class TokenResponse(BaseModel):
    """Schema for token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshTokenRequest(BaseModel):
    """Schema for token refresh request."""

    refresh_token: str


class AuthResponse(BaseModel):
    """Schema for authentication response (signin/signup)."""

    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class LogoutRequest(BaseModel):
    """Schema for logout request."""

    refresh_token: str
