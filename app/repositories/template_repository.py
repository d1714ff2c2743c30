from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database.models import Template
from app.repositories.base_repository import BaseRepository


class TemplateRepository(BaseRepository[Template]):
    """Repository for document templates."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Template)

    async def list_active(self) -> List[Template]:
        """Active templates, newest first."""
        return await self.get_all(
            limit=None, filters={"is_active": True}, order_by=Template.created_at.desc()
        )

    async def get_active_by_ids(self, ids: list) -> List[Template]:
        """Active templates among ``ids``, with their creator loaded."""
        if not ids:
            return []
        stmt = (
            select(Template)
            .where(Template.id.in_(ids), Template.is_active.is_(True))
            .options(selectinload(Template.creator))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(self, term: str, limit: int) -> List[Template]:
        return await self.search_contains(
            term,
            ("name", "description", "type"),
            limit,
            filters={"is_active": True},
            options=(selectinload(Template.creator),),
        )
