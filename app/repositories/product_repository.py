from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database.models import Document, Product
from app.repositories.base_repository import BaseRepository

SEARCHABLE_COLUMNS = (
    "product_name",
    "sku",
    "brand",
    "health_category",
    "therapeutic_platform",
    "nutrient_type",
    "format",
    "manufacturer",
)


class ProductRepository(BaseRepository[Product]):
    """Repository for the product catalog."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Product)

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        result = await self.session.execute(select(Product).where(Product.sku == sku))
        return result.scalar_one_or_none()

    async def get_by_sku_with_documents(self, sku: str) -> Optional[Product]:
        """Get a product with its documents and their approvals eagerly loaded."""
        stmt = (
            select(Product)
            .where(Product.sku == sku)
            .options(
                selectinload(Product.documents).selectinload(Document.approvals),
                selectinload(Product.documents).selectinload(Document.template),
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: list) -> List[Product]:
        if not ids:
            return []
        result = await self.session.execute(select(Product).where(Product.id.in_(ids)))
        return list(result.scalars().all())

    async def list_by_name(self) -> List[Product]:
        return await self.get_all(limit=None, order_by=Product.product_name)

    async def search(self, term: str, limit: int) -> List[Product]:
        """Case-insensitive substring search over the descriptive columns."""
        return await self.search_contains(term, SEARCHABLE_COLUMNS, limit)
