from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class LabelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    filename: str
    company: str
    product_sku: Optional[str] = None
    storage_path: str
    file_size: Optional[int] = None
    uploaded_at: Optional[datetime] = None
