"""Read-only diagnostics over the database and the storage bucket."""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import (
    Approval,
    Document,
    DocumentAssociation,
    DocumentShare,
    Label,
    Product,
    RawMaterial,
    SearchHistory,
    Supplier,
    Task,
    TaskComment,
    Template,
    User,
)
from app.repositories.document_repository import DocumentAssociationRepository
from app.services.document_service import DocumentService
from app.services.storage_service import StorageService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

TABLES = (
    User, Product, Template, Document, DocumentAssociation, DocumentShare,
    Approval, Task, TaskComment, Label, Supplier, RawMaterial, SearchHistory,
)


class DiagnosticsService:
    def __init__(self, db_session: AsyncSession, storage: Optional[StorageService] = None):
        self.session = db_session
        self.associations = DocumentAssociationRepository(db_session)
        self.storage = storage

    async def association_summary(self, sample_size: int = 10) -> Dict[str, Any]:
        """Association counts per type and the most recent rows."""
        stmt = (
            select(DocumentAssociation.association_type, func.count())
            .group_by(DocumentAssociation.association_type)
        )
        by_type = {row[0]: row[1] for row in (await self.session.execute(stmt)).all()}
        recent = await self.associations.get_all(
            limit=sample_size, order_by=DocumentAssociation.created_at.desc()
        )
        return {
            "total": sum(by_type.values()),
            "by_type": by_type,
            "recent": [DocumentService.associated_file(row) for row in recent],
        }

    async def storage_listing(self, prefix: str = "", limit: int = 100) -> List[Dict[str, Any]]:
        return await self.storage.list_files(prefix=prefix, limit=limit)

    async def table_counts(self) -> Dict[str, int]:
        counts = {}
        for model in TABLES:
            counts[model.__tablename__] = await self.session.scalar(
                select(func.count()).select_from(model)
            )
        LOGGER.info("Collected table counts", extra={"tables": len(counts)})
        return counts
