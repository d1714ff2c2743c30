"""Document, approval, share and association schemas."""

from datetime import datetime
from typing import Any, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.enums import DocumentCategory, DocumentStatus
from app.schemas.product import ProductResponse
from app.schemas.template import TemplateResponse
from app.schemas.user import UserSummary


class DocumentCreate(BaseModel):
    """Create a form document, optionally from a template."""

    title: str = Field(..., min_length=1)
    template_id: Optional[UUID] = None
    product_sku: Optional[str] = None
    category: DocumentCategory = DocumentCategory.SPECIFICATION
    document_type: Optional[str] = None
    content: Any = None


class DocumentUpdate(BaseModel):
    """Partial update. ``content`` is stored JSON-encoded."""

    title: Optional[str] = None
    content: Any = None
    summary: Optional[str] = None
    status: Optional[DocumentStatus] = None
    tags: Optional[List[str]] = None


class DocumentSaveRequest(BaseModel):
    content: Any = Field(..., description="Form data to store")
    create_new_version: bool = False


class ApprovalRequest(BaseModel):
    action: Literal["approve", "reject"]
    comments: Optional[str] = None
    signature: Optional[str] = Field(None, description="Name typed as a digital signature, defaults to the approver")
    timestamp: Optional[datetime] = Field(None, description="Signing time, defaults to now")


class AssignRequest(BaseModel):
    """Share with named users, link to a product, or send for review.

    Exactly one mode applies, checked in this order: ``assigned_users``,
    ``product_id``, ``assigned_to``.
    """

    assigned_users: Optional[List[str]] = Field(None, description="Display names to share with")
    product_sku: Optional[str] = None
    product_id: Optional[UUID] = None
    assigned_to: Optional[UUID] = Field(None, description="Approver user ID")
    comments: Optional[str] = None


class ApprovalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    document_id: UUID
    approver_id: UUID
    status: str
    comments: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    approver: Optional[UserSummary] = None


class ShareResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    shared_with: UUID
    shared_by: Optional[UUID] = None
    permissions: str
    user: Optional[UserSummary] = None


class AssociationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    document_id: UUID
    association_type: str
    association_id: str
    document_filename: Optional[str] = None
    document_title: Optional[str] = None
    document_path: Optional[str] = None
    document_type: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    created_at: Optional[datetime] = None


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    filename: str
    filepath: Optional[str] = None
    storage_path: Optional[str] = None
    mimetype: Optional[str] = None
    size: int = 0
    content: Optional[str] = None
    summary: Optional[str] = None
    category: str
    document_type: Optional[str] = None
    tags: Optional[List[Any]] = None
    status: str
    workflow_status: str
    version: int
    is_latest: bool
    parent_document_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    template_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DocumentDetailResponse(DocumentResponse):
    """Document with its owner, product, template, shares and approvals."""

    user: Optional[UserSummary] = None
    product: Optional[ProductResponse] = None
    template: Optional[TemplateResponse] = None
    shares: List[ShareResponse] = Field(default_factory=list)
    approvals: List[ApprovalResponse] = Field(default_factory=list)


class UploadResult(BaseModel):
    document: DocumentResponse
    storage_path: str
    associations: List[AssociationResponse] = Field(default_factory=list)
    label_id: Optional[UUID] = None


class AssociatedFile(BaseModel):
    """File linked to a product, supplier or raw material, from either an
    association row or the labels table."""

    id: str
    filename: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    storage_path: Optional[str] = None
    document_type: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    association_type: str
    source: Literal["associations", "labels_table"]
    company: Optional[str] = None
