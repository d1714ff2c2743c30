from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_catalog_service, get_current_db_user
from app.database.models import User
from app.schemas.catalog import SupplierResponse
from app.services.catalog_service import CatalogService
from app.utils.responses import create_api_response

router = APIRouter()


@router.get(
    "",
    summary="List suppliers",
    operation_id="list_suppliers",
)
async def list_suppliers(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    catalog_service: Annotated[CatalogService, Depends(get_catalog_service)],
):
    suppliers = await catalog_service.list_suppliers()
    return create_api_response(
        data=[SupplierResponse.model_validate(supplier) for supplier in suppliers],
        message="Suppliers retrieved successfully",
        request=request,
    )
