from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_current_db_user, get_indexing_service, get_search_service
from app.core.exceptions import ValidationError
from app.database.models import User
from app.schemas.search import IndexRequest, SearchRequest
from app.services.search.indexing_service import IndexingService
from app.services.search.search_service import SearchService
from app.utils.logging import get_logger
from app.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    summary="Search products, templates and documents",
    description=(
        "Hybrid vector and keyword search. With chat mode on, an AI answer "
        "grounded in the results is included"
    ),
    operation_id="search_content",
)
async def search_content(
    request: Request,
    payload: SearchRequest,
    current_user: Annotated[User, Depends(get_current_db_user)],
    search_service: Annotated[SearchService, Depends(get_search_service)],
):
    result = await search_service.search(payload.query, chat_mode=payload.chat_mode, user_id=current_user.id)
    return create_api_response(
        data=result,
        message="Search completed successfully",
        request=request,
    )


@router.post(
    "/index",
    summary="Index content for search",
    description="Re-index every item of a type, or a single item",
    operation_id="index_content",
)
async def index_content(
    request: Request,
    payload: IndexRequest,
    current_user: Annotated[User, Depends(get_current_db_user)],
    indexing_service: Annotated[IndexingService, Depends(get_indexing_service)],
):
    LOGGER.info(f"Index request '{payload.action}' by {current_user.id}", extra={"type": payload.type})

    if payload.action == "index-all":
        reports = await indexing_service.index_by_type(payload.type or "all")
        return create_api_response(
            data=reports,
            message="Indexing completed",
            request=request,
        )

    if not payload.type or not payload.id:
        raise ValidationError("Type and id are required for a single index request")
    indexed = await indexing_service.index_single(payload.type, payload.id)
    return create_api_response(
        data={"type": payload.type, "id": payload.id, "indexed": indexed},
        message="Item indexed" if indexed else "Item not found or not searchable",
        request=request,
    )


@router.get(
    "/status",
    summary="Search index status",
    operation_id="get_search_index_status",
)
async def get_search_index_status(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    search_service: Annotated[SearchService, Depends(get_search_service)],
):
    status = await search_service.index_status()
    return create_api_response(
        data=status,
        message="Index status retrieved successfully",
        request=request,
    )
