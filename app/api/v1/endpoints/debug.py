"""Diagnostics for operators. Admin only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.core.auth import require_admin
from app.core.dependencies import get_diagnostics_service
from app.schemas.auth import CurrentUser
from app.services.diagnostics_service import DiagnosticsService
from app.utils.responses import create_api_response

router = APIRouter()


@router.get(
    "/associations",
    summary="Association summary",
    operation_id="debug_associations",
)
async def debug_associations(
    request: Request,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    diagnostics: Annotated[DiagnosticsService, Depends(get_diagnostics_service)],
):
    summary = await diagnostics.association_summary()
    return create_api_response(data=summary, message="Association summary", request=request)


@router.get(
    "/storage",
    summary="List storage objects",
    operation_id="debug_storage",
)
async def debug_storage(
    request: Request,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    diagnostics: Annotated[DiagnosticsService, Depends(get_diagnostics_service)],
    prefix: str = Query("", description="Folder prefix"),
    limit: int = Query(100, ge=1, le=1000),
):
    objects = await diagnostics.storage_listing(prefix=prefix, limit=limit)
    return create_api_response(data=objects, message="Storage listing", request=request)


@router.get(
    "/tables",
    summary="Row counts per table",
    operation_id="debug_tables",
)
async def debug_tables(
    request: Request,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    diagnostics: Annotated[DiagnosticsService, Depends(get_diagnostics_service)],
):
    counts = await diagnostics.table_counts()
    return create_api_response(data=counts, message="Table counts", request=request)
