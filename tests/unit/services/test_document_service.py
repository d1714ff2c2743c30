"""Unit tests for DocumentService.

Tests:
- Creation from templates and SKU resolution
- Save in place vs. new version
- Partial updates ignore nulls for required columns
- Approval and rejection
- Assignment modes and notifications
- Ownership check on delete
- Upload registration and association listing
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.exceptions import (
    DocumentNotFoundError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.schemas.document import (
    ApprovalRequest,
    AssignRequest,
    DocumentCreate,
    DocumentSaveRequest,
    DocumentUpdate,
)
from app.services.document_service import DocumentService, signed_comments
from app.services.notification_service import NotificationService

REPOSITORIES = (
    "documents", "associations", "shares", "approvals",
    "products", "templates", "users", "labels",
)


@pytest.fixture
def notifications():
    return NotificationService()


@pytest.fixture
def storage():
    return AsyncMock()


@pytest.fixture
def indexing():
    return AsyncMock()


@pytest.fixture
def service(storage, indexing, notifications):
    service = DocumentService(AsyncMock(), storage=storage, indexing=indexing, notifications=notifications)
    for name in REPOSITORIES:
        setattr(service, name, AsyncMock())
    service.documents.create.side_effect = lambda **kwargs: MagicMock(id=uuid4(), **kwargs)
    service.documents.update.side_effect = lambda document_id, **kwargs: MagicMock(id=document_id, **kwargs)
    return service


def test_signed_comments():
    assert signed_comments(None, "Jane Doe") == "Digitally signed by: Jane Doe"
    assert signed_comments("Looks good", "Jane Doe") == "Looks good\n\nDigitally signed by: Jane Doe"


@pytest.mark.asyncio
async def test_create_document_copies_template_content(service, user, make_template, make_product):
    template = make_template()
    product = make_product()
    service.templates.get_by_id.return_value = template
    service.products.get_by_sku.return_value = product

    document = await service.create_document(
        DocumentCreate(title="Lot 42 COA", template_id=template.id, product_sku=product.sku), user
    )

    kwargs = service.documents.create.call_args.kwargs
    assert json.loads(kwargs["content"]) == template.content
    assert kwargs["filename"] == "Lot 42 COA.json"
    assert kwargs["filepath"] == "/documents/Lot_42_COA.json"
    assert kwargs["status"] == "edit_mode"
    assert kwargs["workflow_status"] == "draft"
    assert kwargs["product_id"] == product.id
    assert document.user_id == user.id


@pytest.mark.asyncio
async def test_create_document_with_unknown_sku(service, user):
    service.products.get_by_sku.return_value = None

    with pytest.raises(NotFoundError):
        await service.create_document(DocumentCreate(title="Spec", product_sku="NOPE"), user)


@pytest.mark.asyncio
async def test_save_in_place(service, user, make_document):
    document = make_document()
    service.documents.get_by_id.return_value = document

    await service.save_document(document.id, DocumentSaveRequest(content={"lot": "A1"}), user)

    service.documents.update.assert_awaited_once_with(document.id, content='{"lot": "A1"}', size=13)
    service.documents.create.assert_not_called()


@pytest.mark.asyncio
async def test_save_as_new_version(service, user, make_document):
    document = make_document(version=3, status="signed", workflow_status="approved")
    service.documents.get_by_id.return_value = document

    new_version = await service.save_document(
        document.id, DocumentSaveRequest(content={"lot": "A2"}, create_new_version=True), user
    )

    service.documents.update.assert_awaited_once_with(document.id, is_latest=False)
    assert new_version.version == 4
    assert new_version.parent_document_id == document.id
    assert new_version.is_latest is True
    assert new_version.status == "ready"
    assert new_version.workflow_status == "draft"


@pytest.mark.asyncio
async def test_new_version_from_superseded_version_rejected(service, user, make_document):
    document = make_document(version=2, is_latest=False)
    service.documents.get_by_id.return_value = document

    with pytest.raises(ValidationError):
        await service.save_document(
            document.id, DocumentSaveRequest(content={"lot": "A3"}, create_new_version=True), user
        )

    service.documents.update.assert_not_called()
    service.documents.create.assert_not_called()


@pytest.mark.asyncio
async def test_save_superseded_version_in_place(service, user, make_document):
    document = make_document(is_latest=False)
    service.documents.get_by_id.return_value = document

    await service.save_document(document.id, DocumentSaveRequest(content={"lot": "A1"}), user)

    service.documents.update.assert_awaited_once_with(document.id, content='{"lot": "A1"}', size=13)


@pytest.mark.asyncio
async def test_update_ignores_null_title_and_status(service, make_document):
    document = make_document()
    service.documents.get_by_id.return_value = document

    await service.update_document(
        document.id, DocumentUpdate(title=None, status=None, summary="Revised assay limits")
    )

    service.documents.update.assert_awaited_once_with(document.id, summary="Revised assay limits")


@pytest.mark.asyncio
async def test_update_normalizes_status(service, make_document):
    document = make_document()
    service.documents.get_by_id.return_value = document

    await service.update_document(document.id, DocumentUpdate(title="Lot 43 COA", status="ready"))

    service.documents.update.assert_awaited_once_with(document.id, title="Lot 43 COA", status="ready")


@pytest.mark.asyncio
async def test_save_missing_document(service, user):
    service.documents.get_by_id.return_value = None

    with pytest.raises(DocumentNotFoundError):
        await service.save_document(uuid4(), DocumentSaveRequest(content={}), user)


@pytest.mark.asyncio
async def test_approve_signs_document(service, notifications, make_user, make_document):
    owner = make_user(email="owner@example.com")
    approver = make_user(name="Jane Doe", email="jane@example.com")
    document = make_document(user_id=owner.id)
    service.documents.get_by_id.return_value = document
    service.documents.update.side_effect = lambda document_id, **kwargs: MagicMock(
        id=document_id, user_id=owner.id, title=document.title, **kwargs
    )
    signed_at = datetime(2024, 5, 1, tzinfo=timezone.utc)

    updated, _ = await service.approve_document(
        document.id, ApprovalRequest(action="approve", comments="OK", timestamp=signed_at), approver
    )

    assert updated.workflow_status == "approved"
    assert updated.status == "signed"
    kwargs = service.approvals.create.call_args.kwargs
    assert kwargs["status"] == "approved"
    assert kwargs["comments"] == "OK\n\nDigitally signed by: Jane Doe"
    assert kwargs["approved_at"] == signed_at
    assert [n["type"] for n in notifications.list_for_user(str(owner.id))] == ["document_approved"]


@pytest.mark.asyncio
async def test_reject_returns_to_edit_mode(service, user, make_document):
    document = make_document(user_id=user.id)
    service.documents.get_by_id.return_value = document

    updated, _ = await service.approve_document(
        document.id, ApprovalRequest(action="reject", comments="Fix assay"), user
    )

    assert updated.workflow_status == "rejected"
    assert updated.status == "edit_mode"
    kwargs = service.approvals.create.call_args.kwargs
    assert kwargs["comments"] == "Fix assay"
    assert kwargs["approved_at"] is None


@pytest.mark.asyncio
async def test_assign_shares_with_named_users(service, notifications, user, make_user, make_document):
    document = make_document(user_id=user.id)
    colleague = make_user(name="Sam Lee", email="sam@example.com")
    service.documents.get_by_id.return_value = document
    service.users.get_by_names.return_value = [colleague]

    result = await service.assign_document(
        document.id, AssignRequest(assigned_users=["Sam Lee", "Unknown Person"]), user
    )

    assert result == {"mode": "share", "shared_with": [str(colleague.id)]}
    service.shares.delete_where.assert_awaited_once_with(document_id=document.id)
    assert service.shares.create.call_args.kwargs["permissions"] == "edit"
    notification = notifications.list_for_user(str(colleague.id))[0]
    assert notification["from"] == user.name


@pytest.mark.asyncio
async def test_assign_for_review_creates_pending_approval(service, user, make_user, make_document):
    document = make_document(user_id=user.id)
    approver = make_user(name="QA Lead", email="lead@example.com")
    service.documents.get_by_id.return_value = document
    service.users.get_by_id.return_value = approver
    service.approvals.create.return_value = MagicMock(id=uuid4())

    result = await service.assign_document(document.id, AssignRequest(assigned_to=approver.id), user)

    assert result["mode"] == "review"
    service.documents.update.assert_awaited_once_with(document.id, workflow_status="in_review")
    assert service.approvals.create.call_args.kwargs["status"] == "pending"


@pytest.mark.asyncio
async def test_assign_without_mode(service, user, make_document):
    service.documents.get_by_id.return_value = make_document()

    with pytest.raises(ValidationError):
        await service.assign_document(uuid4(), AssignRequest(comments="hello"), user)


@pytest.mark.asyncio
async def test_delete_requires_owner(service, user, make_document):
    service.documents.get_by_id.return_value = make_document(user_id=uuid4())

    with pytest.raises(PermissionDeniedError):
        await service.delete_document(uuid4(), user)
    service.documents.delete.assert_not_called()


@pytest.mark.asyncio
async def test_delete_removes_dependents_and_vector(service, indexing, user, make_document):
    document = make_document(user_id=user.id)
    child = make_document(parent_document_id=document.id)
    service.documents.get_by_id.return_value = document
    service.documents.get_all.return_value = [child]

    await service.delete_document(document.id, user)

    service.approvals.delete_where.assert_awaited_once_with(document_id=document.id)
    service.shares.delete_where.assert_awaited_once_with(document_id=document.id)
    service.associations.delete_where.assert_awaited_once_with(document_id=document.id)
    service.documents.update.assert_awaited_once_with(child.id, parent_document_id=None)
    indexing.remove_document.assert_awaited_once_with(document.id)
    service.documents.delete.assert_awaited_once_with(document.id)


@pytest.mark.asyncio
async def test_upload_registers_document_associations_and_label(service, storage, user):
    result = await service.upload_document(
        content=b"%PDF-1.4",
        filename="VN1234.01 Front Label.pdf",
        content_type="application/pdf",
        document_type="Label",
        destinations=["products", "labels"],
        associations={"products": ["VN1234.01"], "suppliers": []},
        owner=user,
    )

    storage_path = storage.upload_file.call_args.args[1]
    assert storage_path.startswith("labels/")
    assert storage_path.endswith("_VN1234.01_Front_Label.pdf")
    assert result["storage_path"] == storage_path

    document_kwargs = service.documents.create.call_args.kwargs
    assert document_kwargs["category"] == "UPLOAD"
    assert document_kwargs["size"] == 8

    targets = [
        (call.kwargs["association_type"], call.kwargs["association_id"])
        for call in service.associations.create.call_args_list
    ]
    assert targets == [("destination", "products"), ("destination", "labels"), ("product", "VN1234.01")]

    label_kwargs = service.labels.create.call_args.kwargs
    assert label_kwargs["product_sku"] == "VN1234.01"
    assert label_kwargs["company"] == "General"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "filename, document_type, destinations",
    [("", "COA", ["products"]), ("a.pdf", "", ["products"]), ("a.pdf", "COA", [])],
)
async def test_upload_validation(service, user, filename, document_type, destinations):
    with pytest.raises(ValidationError):
        await service.upload_document(b"x", filename, None, document_type, destinations, {}, user)


@pytest.mark.asyncio
async def test_list_by_association_includes_product_labels(service):
    label = MagicMock(
        id=uuid4(), filename="VN1 Back.pdf", file_size=10, storage_path="labels/1_VN1_Back.pdf",
        uploaded_at=None, company="General",
    )
    service.associations.list_by_target.return_value = []
    service.labels.list_for_sku.return_value = [label]

    files = await service.list_by_association("product", "VN1")

    assert len(files) == 1
    assert files[0].id == f"label_{label.id}"
    assert files[0].source == "labels_table"


@pytest.mark.asyncio
async def test_list_by_association_requires_type_and_id(service):
    with pytest.raises(ValidationError):
        await service.list_by_association("product", "")


@pytest.mark.asyncio
async def test_download_by_storage_path(service, storage):
    storage.download_file.return_value = b"bytes"

    content, filename, content_type = await service.download(storage_path="labels/1_a.pdf")

    assert (content, filename, content_type) == (b"bytes", "1_a.pdf", "application/pdf")
