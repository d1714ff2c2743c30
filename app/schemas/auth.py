"""Token claims and the authenticated caller."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field


class JWTClaims(BaseModel):
    """Claims of a verified Supabase access token."""

    sub: str = Field(..., description="Supabase user ID")
    email: EmailStr
    exp: int
    iat: int
    iss: str
    aud: Optional[str] = None
    role: str = Field(default="authenticated", description="Postgres role, not the QMS role")
    app_metadata: Optional[Dict[str, Any]] = Field(None, description="Carries the QMS role")
    user_metadata: Optional[Dict[str, Any]] = Field(None, description="Carries the display name")


class CurrentUser(BaseModel):
    """Caller identity derived from the token, before the local user lookup."""

    id: str = Field(..., description="Supabase user ID")
    email: EmailStr
    role: str = Field(default="user", description="QMS role: user or admin")
    name: Optional[str] = None
    app_metadata: Optional[Dict[str, Any]] = None
    user_metadata: Optional[Dict[str, Any]] = None
