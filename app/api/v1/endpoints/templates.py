from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse

from app.core.dependencies import get_current_db_user, get_template_service
from app.database.models import User
from app.schemas.template import TemplateCreate, TemplateResponse
from app.services.template_service import TemplateService
from app.utils.responses import create_api_response

router = APIRouter()

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@router.get(
    "",
    summary="List templates",
    description="Active templates, newest first",
    operation_id="list_templates",
)
async def list_templates(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    template_service: Annotated[TemplateService, Depends(get_template_service)],
):
    templates = await template_service.list_templates()
    return create_api_response(
        data=[TemplateResponse.model_validate(template) for template in templates],
        message="Templates retrieved successfully",
        request=request,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a template",
    operation_id="create_template",
)
async def create_template(
    request: Request,
    payload: TemplateCreate,
    current_user: Annotated[User, Depends(get_current_db_user)],
    template_service: Annotated[TemplateService, Depends(get_template_service)],
):
    template = await template_service.create_template(payload, current_user.id)
    return create_api_response(
        data=TemplateResponse.model_validate(template),
        message="Template created successfully",
        request=request,
    )


@router.get(
    "/files/{template_name}",
    summary="Download a blank template file",
    description="Serve a .docx template from the template files directory",
    operation_id="download_template_file",
)
async def download_template_file(
    template_name: str,
    current_user: Annotated[User, Depends(get_current_db_user)],
    template_service: Annotated[TemplateService, Depends(get_template_service)],
) -> FileResponse:
    path = template_service.get_template_file(template_name)
    return FileResponse(path, media_type=DOCX_MEDIA_TYPE, filename=path.name)


@router.get(
    "/{template_id}",
    summary="Get a template",
    operation_id="get_template",
)
async def get_template(
    request: Request,
    template_id: UUID,
    current_user: Annotated[User, Depends(get_current_db_user)],
    template_service: Annotated[TemplateService, Depends(get_template_service)],
):
    template = await template_service.get_template(template_id)
    return create_api_response(
        data=TemplateResponse.model_validate(template),
        message="Template retrieved successfully",
        request=request,
    )
