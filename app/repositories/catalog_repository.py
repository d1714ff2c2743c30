from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import RawMaterial, Supplier
from app.repositories.base_repository import BaseRepository


class SupplierRepository(BaseRepository[Supplier]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Supplier)

    async def list_by_name(self) -> List[Supplier]:
        return await self.get_all(limit=None, order_by=Supplier.name)


class RawMaterialRepository(BaseRepository[RawMaterial]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, RawMaterial)

    async def list_by_name(self) -> List[RawMaterial]:
        return await self.get_all(limit=None, order_by=RawMaterial.name)
