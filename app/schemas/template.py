from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.enums import TemplateType


class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1)
    content: Any = Field(..., description="Field/section schema")
    description: Optional[str] = None
    type: TemplateType = TemplateType.FINISHED_PRODUCT_SPEC


class TemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    type: str
    content: Any = None
    is_active: bool = True
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
