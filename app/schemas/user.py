from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Self-registration of a local user record."""

    email: EmailStr = Field(..., description="User email address")
    name: str = Field(..., min_length=1, description="Display name")
    username: Optional[str] = None
    department: Optional[str] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: Optional[str] = None
    username: Optional[str] = None
    department: Optional[str] = None
    role: str = "user"
    created_at: Optional[datetime] = None


class UserSummary(BaseModel):
    """Compact user shape embedded in other responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: Optional[str] = None
    email: str
