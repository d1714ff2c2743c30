"""Product catalog operations."""

import re
from typing import List, Optional, Tuple
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.database.models import Approval, Document, Label, Product
from app.repositories.label_repository import LabelRepository
from app.repositories.product_repository import ProductRepository
from app.schemas.enums import ApprovalStatus
from app.schemas.product import ProductDetailResponse, ProductDocument, ProductResponse, ProductUpdate
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

SIGNATURE_PATTERN = re.compile(r"Digitally signed by:\s*(.+?)(?:\n|$)")

# NOT NULL columns; an explicit null in an update leaves them unchanged
REQUIRED_FIELDS = ("product_name", "contains_iron")


def extract_signature(approvals: List[Approval]) -> Tuple[Optional[str], Optional[datetime]]:
    """Signer name and time from the first approved approval, if any."""
    for approval in approvals:
        if approval.status != ApprovalStatus.APPROVED.value:
            continue
        match = SIGNATURE_PATTERN.search(approval.comments or "")
        if match:
            return match.group(1).strip(), approval.approved_at
        return None, approval.approved_at
    return None, None


def _product_document(document: Document) -> ProductDocument:
    signature, approved_at = extract_signature(document.approvals)
    return ProductDocument(
        id=document.id,
        title=document.title,
        filename=document.filename,
        status=document.status,
        workflow_status=document.workflow_status,
        version=document.version,
        template_name=document.template.name if document.template else None,
        digital_signature=signature,
        approved_at=approved_at,
        updated_at=document.updated_at,
    )


class ProductService:
    """Reads and edits products and their label files."""

    def __init__(self, db_session: AsyncSession):
        self.repository = ProductRepository(db_session)
        self.labels = LabelRepository(db_session)

    async def list_products(self) -> List[Product]:
        return await self.repository.list_by_name()

    async def get_product_detail(self, sku: str) -> ProductDetailResponse:
        """Product with its documents and their digital signatures.

        Raises:
            NotFoundError: If no product has this SKU
        """
        product = await self.repository.get_by_sku_with_documents(sku)
        if not product:
            raise NotFoundError(f"Product {sku} not found")

        base = ProductResponse.model_validate(product).model_dump()
        documents = sorted(
            (_product_document(document) for document in product.documents),
            key=lambda d: d.updated_at.timestamp() if d.updated_at else 0.0,
            reverse=True,
        )
        return ProductDetailResponse(**base, documents=documents)

    async def update_product(self, sku: str, data: ProductUpdate) -> Product:
        """Apply a partial update.

        Raises:
            NotFoundError: If no product has this SKU
        """
        product = await self.repository.get_by_sku(sku)
        if not product:
            raise NotFoundError(f"Product {sku} not found")

        changes = data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]

        updated = await self.repository.update(product.id, **changes)
        LOGGER.info(f"Updated product {sku}")
        return updated

    async def list_labels(self, sku: str) -> List[Label]:
        return await self.labels.list_for_sku(sku)
