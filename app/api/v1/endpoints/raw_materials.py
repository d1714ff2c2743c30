from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request

from app.core.dependencies import get_catalog_service, get_current_db_user
from app.database.models import User
from app.schemas.catalog import RawMaterialResponse
from app.services.catalog_service import CatalogService
from app.utils.responses import create_api_response

router = APIRouter()


@router.get(
    "",
    summary="List raw materials",
    operation_id="list_raw_materials",
)
async def list_raw_materials(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    catalog_service: Annotated[CatalogService, Depends(get_catalog_service)],
):
    materials = await catalog_service.list_raw_materials()
    return create_api_response(
        data=[RawMaterialResponse.model_validate(material) for material in materials],
        message="Raw materials retrieved successfully",
        request=request,
    )


@router.get(
    "/documents",
    summary="List raw material files",
    description="Files associated with raw materials, optionally a single one",
    operation_id="list_raw_material_documents",
)
async def list_raw_material_documents(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    catalog_service: Annotated[CatalogService, Depends(get_catalog_service)],
    raw_material_id: Optional[str] = Query(None, alias="rawMaterialId"),
):
    files = await catalog_service.list_raw_material_files(raw_material_id)
    return create_api_response(
        data=files,
        message="Raw material files retrieved successfully",
        request=request,
    )
