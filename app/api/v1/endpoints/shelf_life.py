from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_catalog_service, get_current_db_user
from app.database.models import User
from app.services.catalog_service import CatalogService
from app.utils.responses import create_api_response

router = APIRouter()


@router.get(
    "/documents",
    summary="List shelf-life files",
    description="Uploads tagged with the shelfLife destination",
    operation_id="list_shelf_life_documents",
)
async def list_shelf_life_documents(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    catalog_service: Annotated[CatalogService, Depends(get_catalog_service)],
):
    files = await catalog_service.list_destination_files("shelfLife")
    return create_api_response(
        data=files,
        message="Shelf-life files retrieved successfully",
        request=request,
    )
