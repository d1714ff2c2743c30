from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sku: str
    brand: Optional[str] = None
    product_name: str
    health_category: Optional[str] = None
    therapeutic_platform: Optional[str] = None
    nutrient_type: Optional[str] = None
    format: Optional[str] = None
    number_of_actives: Optional[str] = None
    bottle_count: Optional[str] = None
    unit_count: Optional[int] = None
    manufacturer: Optional[str] = None
    contains_iron: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductUpdate(BaseModel):
    """Partial product update; unset fields are left alone."""

    brand: Optional[str] = None
    product_name: Optional[str] = None
    health_category: Optional[str] = None
    therapeutic_platform: Optional[str] = None
    nutrient_type: Optional[str] = None
    format: Optional[str] = None
    number_of_actives: Optional[str] = None
    bottle_count: Optional[str] = None
    unit_count: Optional[int] = None
    manufacturer: Optional[str] = None
    contains_iron: Optional[bool] = None


class ProductDocument(BaseModel):
    """Document listed on a product page, with its signature if approved."""

    id: UUID
    title: str
    filename: str
    status: str
    workflow_status: str
    version: int
    template_name: Optional[str] = None
    digital_signature: Optional[str] = None
    approved_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductDetailResponse(ProductResponse):
    documents: List[ProductDocument] = Field(default_factory=list)
