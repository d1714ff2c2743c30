from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from app.core.dependencies import get_catalog_service, get_current_db_user, get_document_service
from app.database.models import User
from app.schemas.label import LabelResponse
from app.services.catalog_service import CatalogService
from app.services.document_service import DocumentService
from app.utils.responses import create_api_response

router = APIRouter()


@router.get(
    "",
    summary="List labels",
    description="Label files from the labels table, newest first",
    operation_id="list_labels",
)
async def list_labels(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    catalog_service: Annotated[CatalogService, Depends(get_catalog_service)],
):
    labels = await catalog_service.list_labels()
    return create_api_response(
        data=[LabelResponse.model_validate(label) for label in labels],
        message="Labels retrieved successfully",
        request=request,
    )


@router.get(
    "/documents",
    summary="List all label files",
    description="Labels table rows plus uploads tagged with the labels destination",
    operation_id="list_label_documents",
)
async def list_label_documents(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    catalog_service: Annotated[CatalogService, Depends(get_catalog_service)],
):
    files = await catalog_service.list_all_label_files()
    return create_api_response(
        data=files,
        message="Label files retrieved successfully",
        request=request,
    )


@router.get(
    "/download",
    summary="Download a label",
    operation_id="download_label",
)
async def download_label(
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    path: str = Query(..., min_length=1, description="Storage path of the label"),
) -> Response:
    content, filename, _ = await document_service.download(storage_path=path)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
