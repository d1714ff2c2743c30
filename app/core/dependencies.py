"""Centralized dependency injection for the FastAPI application.

Endpoints depend on these factories rather than constructing services
directly, so tests can swap them through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user
from app.core.database import get_async_session
from app.database.models import User
from app.schemas.auth import CurrentUser
from app.services.catalog_service import CatalogService
from app.services.diagnostics_service import DiagnosticsService
from app.services.document_service import DocumentService
from app.services.notification_service import NotificationService, get_notification_service
from app.services.product_service import ProductService
from app.services.search.indexing_service import IndexingService
from app.services.search.search_service import SearchService
from app.services.storage_service import StorageService, get_storage_service
from app.services.task_service import TaskService
from app.services.template_service import TemplateService
from app.services.user_service import UserService


async def get_user_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> UserService:
    return UserService(db_session)


async def get_current_db_user(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Local user row for the authenticated caller, created on first use."""
    return await user_service.get_or_create_user_from_jwt(current_user)


async def get_indexing_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> IndexingService:
    return IndexingService(db_session)


async def get_search_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> SearchService:
    return SearchService(db_session)


async def get_document_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    storage: Annotated[StorageService, Depends(get_storage_service)],
    indexing: Annotated[IndexingService, Depends(get_indexing_service)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
) -> DocumentService:
    """Document service wired to storage, the search index and notifications."""
    return DocumentService(db_session, storage=storage, indexing=indexing, notifications=notifications)


async def get_product_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> ProductService:
    return ProductService(db_session)


async def get_template_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> TemplateService:
    return TemplateService(db_session)


async def get_task_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> TaskService:
    return TaskService(db_session)


async def get_catalog_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> CatalogService:
    return CatalogService(db_session)


async def get_diagnostics_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    storage: Annotated[StorageService, Depends(get_storage_service)],
) -> DiagnosticsService:
    return DiagnosticsService(db_session, storage=storage)
