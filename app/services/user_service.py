"""User service for business logic operations."""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.database.models import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import CurrentUser
from app.schemas.user import RegisterRequest
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class UserService:
    """Service for user business logic operations."""

    def __init__(self, db_session: AsyncSession):
        self.repository = UserRepository(db_session)

    async def get_or_create_user_from_jwt(self, current_user: CurrentUser) -> User:
        """Get or create the local user for an authenticated caller.

        Every authenticated request needs a local row so documents,
        approvals and tasks can reference it.
        """
        return await self.repository.get_or_create_from_supabase(
            supabase_user_id=current_user.id,
            email=current_user.email,
            name=current_user.name,
        )

    async def register_user(self, data: RegisterRequest) -> User:
        """Create a local user ahead of their first login.

        Raises:
            ConflictError: If the email is already registered
        """
        existing = await self.repository.get_by_email(data.email)
        if existing:
            raise ConflictError(f"User with email {data.email} already exists")

        user = await self.repository.create(
            email=data.email,
            name=data.name,
            username=data.username or data.email.split("@")[0],
            department=data.department,
            role="user",
        )
        LOGGER.info(f"Registered user {user.id} ({user.email})")
        return user

    async def list_users(self) -> List[User]:
        return await self.repository.list_by_name()
