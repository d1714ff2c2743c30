from typing import Optional, List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database.models import (
    Approval,
    Document,
    DocumentAssociation,
    DocumentShare,
)
from app.repositories.base_repository import BaseRepository
from app.schemas.enums import DocumentCategory, SEARCHABLE_DOCUMENT_STATUSES
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

_RELATIONS = (
    selectinload(Document.user),
    selectinload(Document.product),
    selectinload(Document.template),
    selectinload(Document.shares).selectinload(DocumentShare.user),
    selectinload(Document.approvals).selectinload(Approval.approver),
)

# Owner, product and template named in search result context
_SEARCH_RELATIONS = (
    selectinload(Document.user),
    selectinload(Document.product),
    selectinload(Document.template),
)


class DocumentRepository(BaseRepository[Document]):
    """Repository for managing Document records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Document)

    async def get_with_relations(self, document_id: UUID) -> Optional[Document]:
        """Get a document with owner, product, template, shares and approvals loaded."""
        stmt = select(Document).where(Document.id == document_id).options(*_RELATIONS)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_relations(self, user_id: Optional[UUID] = None) -> List[Document]:
        """List documents, most recently updated first.

        Args:
            user_id: Restrict to documents owned by this user

        Returns:
            Documents with their relations loaded
        """
        stmt = select(Document).options(*_RELATIONS).order_by(Document.updated_at.desc())
        if user_id is not None:
            stmt = stmt.where(Document.user_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_searchable(self) -> List[Document]:
        """Documents eligible for the search index, with product and template loaded."""
        stmt = (
            select(Document)
            .where(Document.status.in_(SEARCHABLE_DOCUMENT_STATUSES))
            .options(selectinload(Document.product), selectinload(Document.template))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_searchable(self, document_id: UUID) -> Optional[Document]:
        stmt = (
            select(Document)
            .where(Document.id == document_id)
            .options(selectinload(Document.product), selectinload(Document.template))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_searchable_by_ids(self, ids: list) -> List[Document]:
        if not ids:
            return []
        stmt = (
            select(Document)
            .where(Document.id.in_(ids), Document.status.in_(SEARCHABLE_DOCUMENT_STATUSES))
            .options(*_SEARCH_RELATIONS)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(self, term: str, limit: int) -> List[Document]:
        """Keyword search over title, content, summary and filename.

        Form documents match regardless of the term.
        """
        return await self.search_contains(
            term,
            ("title", "content", "summary", "filename"),
            limit,
            extra_matches=(Document.category == DocumentCategory.FORM.value,),
            where=(Document.status.in_(SEARCHABLE_DOCUMENT_STATUSES),),
            options=_SEARCH_RELATIONS,
        )


class DocumentAssociationRepository(BaseRepository[DocumentAssociation]):
    """Repository for document association tags."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, DocumentAssociation)

    async def list_by_target(
        self, association_type: str, association_id: Optional[str] = None
    ) -> List[DocumentAssociation]:
        """Associations of one type, optionally for one target, newest first."""
        filters = {"association_type": association_type}
        if association_id is not None:
            filters["association_id"] = association_id
        return await self.get_all(
            limit=None, filters=filters, order_by=DocumentAssociation.created_at.desc()
        )

    async def list_for_destination(self, destination: str) -> List[DocumentAssociation]:
        return await self.list_by_target("destination", destination)


class DocumentShareRepository(BaseRepository[DocumentShare]):
    """Repository for document shares."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, DocumentShare)


class ApprovalRepository(BaseRepository[Approval]):
    """Repository for approval decisions."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Approval)
