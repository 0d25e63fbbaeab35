"""Pydantic models for authentication."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Credentials supplied for user authentication."""

    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    """User registration request."""
    email: EmailStr
    password: str = Field(min_length=6)
    username: Optional[str] = None


class SessionUser(BaseModel):
    id: str
    email: str
    display_name: str


class AuthResult(BaseModel):
    """Signed-in user together with their profile row."""
    user: SessionUser
    profile: Optional[Dict[str, Any]] = None


class LogoutResponse(BaseModel):
    """Response after logout."""
    message: str = "Logged out successfully"
