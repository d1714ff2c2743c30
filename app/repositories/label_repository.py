from typing import List

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Label
from app.repositories.base_repository import BaseRepository


class LabelRepository(BaseRepository[Label]):
    """Repository for uploaded label files."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Label)

    async def list_recent(self) -> List[Label]:
        return await self.get_all(limit=None, order_by=Label.uploaded_at.desc())

    async def list_for_sku(self, sku: str, include_filename_match: bool = True) -> List[Label]:
        """Labels tagged with the SKU, or whose filename mentions it.

        Args:
            sku: Product SKU
            include_filename_match: Also match labels whose filename contains the SKU

        Returns:
            Labels, newest first
        """
        condition = Label.product_sku == sku
        if include_filename_match:
            condition = or_(condition, Label.filename.icontains(sku, autoescape=True))
        stmt = select(Label).where(condition).order_by(Label.uploaded_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
