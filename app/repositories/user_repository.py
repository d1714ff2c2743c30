"""Repository for user data access operations."""

from typing import Optional, List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import User
from app.repositories.base_repository import BaseRepository
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_by_supabase_id(self, supabase_user_id: str) -> Optional[User]:
        """Get user by Supabase user ID."""
        stmt = select(User).where(User.supabase_user_id == supabase_user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_names(self, names: Sequence[str]) -> List[User]:
        """Get users whose display name is in the given list."""
        if not names:
            return []
        stmt = select(User).where(User.name.in_(list(names)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_name(self) -> List[User]:
        """List all users ordered by display name."""
        return await self.get_all(limit=None, order_by=User.name)

    async def get_or_create_from_supabase(
        self,
        supabase_user_id: str,
        email: str,
        name: Optional[str] = None,
        role: str = "user",
    ) -> User:
        """Get the local user for a Supabase identity, creating it if needed.

        A user registered by email before their first login is linked to
        the Supabase identity instead of being duplicated.

        Args:
            supabase_user_id: Supabase user ID
            email: User email address
            name: Display name
            role: Role for newly created users

        Returns:
            The existing or newly created User
        """
        user = await self.get_by_supabase_id(supabase_user_id)
        if user:
            return user

        try:
            user = await self.get_by_email(email)
            if user:
                user.supabase_user_id = supabase_user_id
                await self.session.flush()
                await self.session.commit()
                LOGGER.info(f"Linked registered user {user.id} to Supabase identity")
                return user

            user = await self.create(
                supabase_user_id=supabase_user_id,
                email=email,
                name=name or email.split("@")[0],
                username=email.split("@")[0],
                role=role,
            )
            LOGGER.info(f"Created user: {user.id} ({user.email})")
            return user
        except SQLAlchemyError:
            LOGGER.error(f"Failed to get or create user for {supabase_user_id}", exc_info=True)
            raise
