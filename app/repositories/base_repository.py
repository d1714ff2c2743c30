"""Generic async repository shared by every QMS table."""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.utils.logging import get_logger

ModelType = TypeVar("ModelType")

LOGGER = get_logger(__name__)


class BaseRepository(Generic[ModelType]):
    """CRUD over one model.

    Every write commits on its own, so a service that chains several writes
    (version flips, cascading deletes) is not atomic.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        self.session = session
        self.model = model

    @property
    def model_name(self) -> str:
        return self.model.__name__

    @contextmanager
    def _logged(self, action: str) -> Iterator[None]:
        """Log SQLAlchemy failures with the model name and re-raise them."""
        try:
            yield
        except SQLAlchemyError as e:
            LOGGER.error(f"Error {action} {self.model_name}: {e}", exc_info=True)
            raise

    def _where_equal(self, query: Select, filters: Optional[Dict[str, Any]]) -> Select:
        for field, value in (filters or {}).items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)
        return query

    async def _scalars(self, query: Select) -> List[ModelType]:
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def _commit(self) -> None:
        await self.session.flush()
        await self.session.commit()

    async def get_by_id(self, id: UUID | str) -> Optional[ModelType]:
        with self._logged(f"loading {id} of"):
            result = await self.session.execute(select(self.model).where(self.model.id == id))
            return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: Optional[int] = 200,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Any] = None,
    ) -> List[ModelType]:
        """Rows matching equality filters.

        Args:
            skip: Rows to skip
            limit: Maximum rows, None for all
            filters: ``{column: value}`` equality filters
            order_by: Column expression to order by
        """
        query = self._where_equal(select(self.model), filters)
        if order_by is not None:
            query = query.order_by(order_by)
        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        with self._logged("listing"):
            return await self._scalars(query)

    async def search_contains(
        self,
        term: str,
        columns: Sequence[str],
        limit: int,
        filters: Optional[Dict[str, Any]] = None,
        extra_matches: Sequence[Any] = (),
        where: Sequence[Any] = (),
        options: Sequence[Any] = (),
    ) -> List[ModelType]:
        """Case-insensitive substring match on any of ``columns``.

        ``%`` and ``_`` in ``term`` match literally. ``extra_matches`` are
        OR-ed with the column matches; ``filters`` and ``where`` narrow the
        result; ``options`` are loader options such as ``selectinload``.
        """
        matches = [getattr(self.model, column).icontains(term, autoescape=True) for column in columns]
        matches.extend(extra_matches)
        query = self._where_equal(select(self.model), filters).where(or_(*matches))
        if options:
            query = query.options(*options)
        for condition in where:
            query = query.where(condition)
        with self._logged(f"searching '{term}' in"):
            return await self._scalars(query.limit(limit))

    async def create(self, **values) -> ModelType:
        instance = self.model(**values)
        with self._logged("creating"):
            self.session.add(instance)
            await self._commit()
        return instance

    async def update(self, id: UUID | str, **values) -> Optional[ModelType]:
        """Set the given attributes; unknown names are ignored.

        Returns:
            The updated row, or None if it does not exist
        """
        instance = await self.get_by_id(id)
        if instance is None:
            return None
        for key, value in values.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        # Set client-side so the value is loaded after commit
        if hasattr(instance, "updated_at"):
            instance.updated_at = datetime.now(timezone.utc)
        with self._logged(f"updating {id} of"):
            await self._commit()
        return instance

    async def delete(self, id: UUID | str) -> bool:
        instance = await self.get_by_id(id)
        if instance is None:
            return False
        with self._logged(f"deleting {id} of"):
            await self.session.delete(instance)
            await self._commit()
        return True

    async def delete_where(self, **filters) -> int:
        """Bulk delete on equality filters; returns the row count."""
        stmt = delete(self.model)
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        with self._logged(f"bulk deleting {filters} from"):
            result = await self.session.execute(stmt)
            await self.session.commit()
        return result.rowcount or 0
