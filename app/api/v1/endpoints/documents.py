import json
from typing import Annotated, Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile, status

from app.core.dependencies import get_current_db_user, get_document_service
from app.core.exceptions import ValidationError
from app.database.models import User
from app.schemas.document import (
    ApprovalRequest,
    ApprovalResponse,
    AssignRequest,
    AssociationResponse,
    DocumentCreate,
    DocumentDetailResponse,
    DocumentResponse,
    DocumentSaveRequest,
    DocumentUpdate,
    UploadResult,
)
from app.services.document_service import DocumentService
from app.utils.logging import get_logger
from app.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


def _parse_json_form(raw: Optional[str], field: str, default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid JSON in form field '{field}'", e) from e


@router.get(
    "",
    summary="List documents",
    description="All documents with owner, product, template, shares and approvals",
    operation_id="list_documents",
)
async def list_documents(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    documents = await document_service.list_documents()
    return create_api_response(
        data=[DocumentDetailResponse.model_validate(document) for document in documents],
        message="Documents retrieved successfully",
        request=request,
    )


@router.get(
    "/mine",
    summary="List my documents",
    operation_id="list_my_documents",
)
async def list_my_documents(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    documents = await document_service.list_documents(owner=current_user)
    return create_api_response(
        data=[DocumentDetailResponse.model_validate(document) for document in documents],
        message="Documents retrieved successfully",
        request=request,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a document",
    description="Create a form document, copying the template content when a template is given",
    operation_id="create_document",
)
async def create_document(
    request: Request,
    payload: DocumentCreate,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    document = await document_service.create_document(payload, current_user)
    return create_api_response(
        data=DocumentResponse.model_validate(document),
        message="Document created successfully",
        request=request,
    )


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    summary="Upload a file",
    description=(
        "Store a file in the documents bucket and tag it with destinations "
        "and associated products, suppliers or raw materials"
    ),
    operation_id="upload_document",
)
async def upload_document(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    file: UploadFile = File(..., description="File to upload"),
    document_type: str = Form(..., alias="documentType"),
    destinations: str = Form(..., description="JSON array of destination names"),
    associations: Optional[str] = Form(None, description="JSON object of association lists"),
):
    """Upload a file. Multipart fields: file, documentType, destinations, associations."""
    parsed_destinations: List[str] = _parse_json_form(destinations, "destinations", [])
    parsed_associations: Dict[str, Any] = _parse_json_form(associations, "associations", {})
    if not isinstance(parsed_destinations, list):
        raise ValidationError("destinations must be a JSON array")
    if not isinstance(parsed_associations, dict):
        raise ValidationError("associations must be a JSON object")

    content = await file.read()
    result = await document_service.upload_document(
        content=content,
        filename=file.filename or "",
        content_type=file.content_type,
        document_type=document_type,
        destinations=parsed_destinations,
        associations=parsed_associations,
        owner=current_user,
    )
    upload = UploadResult(
        document=DocumentResponse.model_validate(result["document"]),
        storage_path=result["storage_path"],
        associations=[AssociationResponse.model_validate(row) for row in result["associations"]],
        label_id=result["label_id"],
    )
    return create_api_response(
        data=upload,
        message="File uploaded successfully",
        request=request,
    )


@router.get(
    "/download",
    summary="Download a stored file",
    description="Stream a file by document ID or storage path",
    operation_id="download_document",
)
async def download_document(
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    document_id: Optional[UUID] = Query(None, alias="id"),
    path: Optional[str] = Query(None),
) -> Response:
    content, filename, content_type = await document_service.download(document_id=document_id, storage_path=path)
    return Response(
        content=content,
        media_type=content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/by-association",
    summary="List files by association",
    description="Files linked to a product, supplier or raw material",
    operation_id="list_documents_by_association",
)
async def list_documents_by_association(
    request: Request,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    association_type: Optional[str] = Query(None, alias="type"),
    association_id: Optional[str] = Query(None, alias="id"),
):
    files = await document_service.list_by_association(association_type, association_id)
    return create_api_response(
        data=files,
        message="Associated files retrieved successfully",
        request=request,
    )


@router.get(
    "/{document_id}",
    summary="Get document details",
    operation_id="get_document",
)
async def get_document(
    request: Request,
    document_id: UUID,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    document = await document_service.get_document(document_id)
    return create_api_response(
        data=DocumentDetailResponse.model_validate(document),
        message="Document details retrieved successfully",
        request=request,
    )


@router.put(
    "/{document_id}",
    summary="Update a document",
    operation_id="update_document",
)
async def update_document(
    request: Request,
    document_id: UUID,
    payload: DocumentUpdate,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    document = await document_service.update_document(document_id, payload)
    return create_api_response(
        data=DocumentResponse.model_validate(document),
        message="Document updated successfully",
        request=request,
    )


@router.delete(
    "/{document_id}",
    summary="Delete a document",
    description="Only the owner may delete a document",
    operation_id="delete_document",
)
async def delete_document(
    request: Request,
    document_id: UUID,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    await document_service.delete_document(document_id, current_user)
    LOGGER.info(f"Document {document_id} deleted by {current_user.id}")
    return create_api_response(
        data={"id": str(document_id)},
        message="Document deleted successfully",
        request=request,
    )


@router.post(
    "/{document_id}/save",
    summary="Save form data",
    description="Save in place, or create a new version when requested",
    operation_id="save_document",
)
async def save_document(
    request: Request,
    document_id: UUID,
    payload: DocumentSaveRequest,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    document = await document_service.save_document(document_id, payload, current_user)
    message = "New version created" if payload.create_new_version else "Document saved successfully"
    return create_api_response(
        data=DocumentResponse.model_validate(document),
        message=message,
        request=request,
    )


@router.post(
    "/{document_id}/approve",
    summary="Approve or reject a document",
    operation_id="approve_document",
)
async def approve_document(
    request: Request,
    document_id: UUID,
    payload: ApprovalRequest,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    document, approval = await document_service.approve_document(document_id, payload, current_user)
    return create_api_response(
        data={
            "document": DocumentResponse.model_validate(document),
            "approval": ApprovalResponse.model_validate(approval),
        },
        message=f"Document {payload.action}d successfully",
        request=request,
    )


@router.post(
    "/{document_id}/assign",
    summary="Share, link or send a document for review",
    operation_id="assign_document",
)
async def assign_document(
    request: Request,
    document_id: UUID,
    payload: AssignRequest,
    current_user: Annotated[User, Depends(get_current_db_user)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
):
    result = await document_service.assign_document(document_id, payload, current_user)
    return create_api_response(
        data=result,
        message="Document assigned successfully",
        request=request,
    )
