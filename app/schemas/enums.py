"""Enumerations shared by models, schemas and services."""

from enum import Enum


class DocumentStatus(str, Enum):
    READY = "ready"
    EDIT_MODE = "edit_mode"
    SIGNED = "signed"


class WorkflowStatus(str, Enum):
    DRAFT = "draft"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DocumentCategory(str, Enum):
    FORM = "FORM"
    SPECIFICATION = "SPECIFICATION"
    UPLOAD = "UPLOAD"


class TemplateType(str, Enum):
    COA = "COA"
    COC = "COC"
    PSF = "PSF"
    FINISHED_PRODUCT_SPEC = "FINISHED_PRODUCT_SPEC"
    RAW_MATERIAL_SPEC = "RAW_MATERIAL_SPEC"
    LABEL_MANUSCRIPT = "LABEL_MANUSCRIPT"
    BOM = "BOM"
    MMR = "MMR"
    CHANGE_CONTROL = "CHANGE_CONTROL"
    DEVIATION = "DEVIATION"
    VALIDATION = "VALIDATION"
    OTHER = "OTHER"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Documents in any other status are neither indexed nor returned by search
SEARCHABLE_DOCUMENT_STATUSES = (
    DocumentStatus.READY.value,
    DocumentStatus.EDIT_MODE.value,
    DocumentStatus.SIGNED.value,
)
