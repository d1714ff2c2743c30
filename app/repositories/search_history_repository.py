from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import SearchHistory
from app.repositories.base_repository import BaseRepository


class SearchHistoryRepository(BaseRepository[SearchHistory]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, SearchHistory)
