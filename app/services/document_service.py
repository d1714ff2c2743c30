"""Document authoring, versioning, approval and upload workflows."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DocumentNotFoundError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from app.database.models import Approval, Document, DocumentAssociation, User
from app.repositories.document_repository import (
    ApprovalRepository,
    DocumentAssociationRepository,
    DocumentRepository,
    DocumentShareRepository,
)
from app.repositories.label_repository import LabelRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.template_repository import TemplateRepository
from app.repositories.user_repository import UserRepository
from app.schemas.document import (
    ApprovalRequest,
    AssignRequest,
    AssociatedFile,
    DocumentCreate,
    DocumentSaveRequest,
    DocumentUpdate,
)
from app.schemas.enums import (
    ApprovalStatus,
    DocumentCategory,
    DocumentStatus,
    WorkflowStatus,
)
from app.services.notification_service import NotificationService
from app.services.search.indexing_service import IndexingService
from app.services.storage_service import StorageService
from app.utils.filenames import (
    content_type_for,
    file_extension,
    parse_label_sku,
    sanitize_filename,
    storage_folder,
    unique_storage_name,
)
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Upload association keys -> association_type values
ASSOCIATION_KEYS = {
    "products": "product",
    "suppliers": "supplier",
    "rawMaterials": "raw_material",
}


def encode_content(content: Any) -> Optional[str]:
    """Documents store form content as a JSON string."""
    if content is None:
        return None
    if isinstance(content, str):
        return content
    return json.dumps(content)


def signed_comments(comments: Optional[str], signature: str) -> str:
    line = f"Digitally signed by: {signature}"
    return f"{comments}\n\n{line}" if comments else line


class DocumentService:
    """Business logic for QMS documents.

    Multi-row operations (versioning, deletion) issue one commit per
    step and are not atomic.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        storage: Optional[StorageService] = None,
        indexing: Optional[IndexingService] = None,
        notifications: Optional[NotificationService] = None,
    ):
        self.documents = DocumentRepository(db_session)
        self.associations = DocumentAssociationRepository(db_session)
        self.shares = DocumentShareRepository(db_session)
        self.approvals = ApprovalRepository(db_session)
        self.products = ProductRepository(db_session)
        self.templates = TemplateRepository(db_session)
        self.users = UserRepository(db_session)
        self.labels = LabelRepository(db_session)
        self.storage = storage
        self.indexing = indexing
        self.notifications = notifications

    async def _get_or_404(self, document_id: UUID) -> Document:
        document = await self.documents.get_by_id(document_id)
        if not document:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document

    async def list_documents(self, owner: Optional[User] = None) -> List[Document]:
        return await self.documents.list_with_relations(owner.id if owner else None)

    async def get_document(self, document_id: UUID) -> Document:
        document = await self.documents.get_with_relations(document_id)
        if not document:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document

    async def create_document(self, data: DocumentCreate, owner: User) -> Document:
        """Create an editable form document.

        The template's field schema is copied as the starting content when
        no content is given. A product SKU, if given, must exist.
        """
        content = data.content
        template_id = None
        if data.template_id:
            template = await self.templates.get_by_id(data.template_id)
            if not template:
                raise NotFoundError(f"Template {data.template_id} not found")
            template_id = template.id
            if content is None:
                content = template.content

        product_id = None
        if data.product_sku:
            product = await self.products.get_by_sku(data.product_sku)
            if not product:
                raise NotFoundError(f"Product {data.product_sku} not found")
            product_id = product.id

        encoded = encode_content(content)
        document = await self.documents.create(
            title=data.title,
            filename=f"{data.title}.json",
            filepath=f"/documents/{sanitize_filename(data.title)}.json",
            mimetype="application/json",
            size=len(encoded or ""),
            content=encoded,
            category=data.category.value,
            document_type=data.document_type,
            status=DocumentStatus.EDIT_MODE.value,
            workflow_status=WorkflowStatus.DRAFT.value,
            version=1,
            is_latest=True,
            user_id=owner.id,
            product_id=product_id,
            template_id=template_id,
        )
        LOGGER.info(f"Created document {document.id}", extra={"title": data.title, "user_id": str(owner.id)})
        return document

    async def update_document(self, document_id: UUID, data: DocumentUpdate) -> Document:
        await self._get_or_404(document_id)

        changes = data.model_dump(exclude_unset=True)
        # Explicit nulls for NOT NULL columns leave them unchanged
        for field in ("title", "status"):
            if field in changes and changes[field] is None:
                del changes[field]
        if "content" in changes:
            changes["content"] = encode_content(changes["content"])
            changes["size"] = len(changes["content"] or "")
        if "status" in changes:
            changes["status"] = DocumentStatus(changes["status"]).value

        return await self.documents.update(document_id, **changes)

    async def delete_document(self, document_id: UUID, caller: User) -> None:
        """Delete a document the caller owns, with its dependent rows.

        Raises:
            DocumentNotFoundError: If the document does not exist
            PermissionDeniedError: If the caller is not the owner
        """
        document = await self._get_or_404(document_id)
        if document.user_id != caller.id:
            raise PermissionDeniedError("Only the document owner can delete it")

        await self.approvals.delete_where(document_id=document_id)
        await self.shares.delete_where(document_id=document_id)
        await self.associations.delete_where(document_id=document_id)
        # Later versions keep existing; they just lose their parent pointer
        for child in await self.documents.get_all(limit=None, filters={"parent_document_id": document_id}):
            await self.documents.update(child.id, parent_document_id=None)
        if self.indexing:
            await self.indexing.remove_document(document_id)

        await self.documents.delete(document_id)
        LOGGER.info(f"Deleted document {document_id}", extra={"user_id": str(caller.id)})

    async def save_document(self, document_id: UUID, data: DocumentSaveRequest, caller: User) -> Document:
        """Save form content in place, or as a new version.

        A new version is a copy with ``version + 1`` pointing at its
        parent; the parent stops being the latest version.

        Raises:
            DocumentNotFoundError: If the document does not exist
            ValidationError: If a new version is requested from a superseded version
        """
        document = await self._get_or_404(document_id)
        if data.create_new_version and not document.is_latest:
            raise ValidationError(f"Document {document_id} is not the latest version")
        encoded = encode_content(data.content) or ""

        if not data.create_new_version:
            return await self.documents.update(document_id, content=encoded, size=len(encoded))

        await self.documents.update(document_id, is_latest=False)
        new_version = await self.documents.create(
            title=document.title,
            filename=document.filename,
            filepath=document.filepath,
            mimetype=document.mimetype,
            size=len(encoded),
            content=encoded,
            summary=document.summary,
            category=document.category,
            document_type=document.document_type,
            tags=document.tags,
            status=DocumentStatus.READY.value,
            workflow_status=WorkflowStatus.DRAFT.value,
            version=document.version + 1,
            is_latest=True,
            parent_document_id=document.id,
            user_id=caller.id,
            product_id=document.product_id,
            template_id=document.template_id,
        )
        LOGGER.info(
            f"Created version {new_version.version} of document {document_id}",
            extra={"new_document_id": str(new_version.id)},
        )
        return new_version

    async def approve_document(
        self, document_id: UUID, data: ApprovalRequest, approver: User
    ) -> Tuple[Document, Approval]:
        """Record an approval or rejection.

        Approving signs the document and appends the signature line to the
        comments; rejecting sends it back to edit mode.
        """
        await self._get_or_404(document_id)

        if data.action == "approve":
            workflow_status = WorkflowStatus.APPROVED.value
            status = DocumentStatus.SIGNED.value
            approval_status = ApprovalStatus.APPROVED.value
            comments = signed_comments(data.comments, data.signature or approver.name or approver.email)
            approved_at = data.timestamp or datetime.now(timezone.utc)
        else:
            workflow_status = WorkflowStatus.REJECTED.value
            status = DocumentStatus.EDIT_MODE.value
            approval_status = ApprovalStatus.REJECTED.value
            comments = data.comments
            approved_at = None

        document = await self.documents.update(
            document_id, workflow_status=workflow_status, status=status
        )
        approval = await self.approvals.create(
            document_id=document_id,
            approver_id=approver.id,
            status=approval_status,
            comments=comments,
            approved_at=approved_at,
            approver=approver,
        )

        if self.notifications and document.user_id and document.user_id != approver.id:
            verb = "approved" if data.action == "approve" else "rejected"
            self.notifications.create_notification(
                user_id=str(document.user_id),
                type=f"document_{verb}",
                title=f"Document {verb}",
                message=f"{document.title} was {verb}",
                sender=approver.name or approver.email,
                document_id=str(document_id),
            )

        LOGGER.info(f"Document {document_id} {data.action}d by {approver.id}")
        return document, approval

    async def assign_document(self, document_id: UUID, data: AssignRequest, caller: User) -> Dict[str, Any]:
        """Share a document, link it to a product, or send it for review.

        Raises:
            ValidationError: If the request selects no mode
            NotFoundError: If a referenced product or approver is missing
        """
        document = await self._get_or_404(document_id)

        if data.assigned_users is not None:
            return await self._share_with_users(document, data, caller)

        if data.product_id is not None:
            product = await self.products.get_by_id(data.product_id)
            if not product:
                raise NotFoundError(f"Product {data.product_id} not found")
            await self.documents.update(document_id, product_id=product.id)
            return {"mode": "product", "product_id": str(product.id)}

        if data.assigned_to is not None:
            approver = await self.users.get_by_id(data.assigned_to)
            if not approver:
                raise NotFoundError(f"User {data.assigned_to} not found")
            await self.documents.update(document_id, workflow_status=WorkflowStatus.IN_REVIEW.value)
            approval = await self.approvals.create(
                document_id=document_id,
                approver_id=approver.id,
                status=ApprovalStatus.PENDING.value,
                comments=data.comments,
            )
            self._notify(
                [approver], "approval_request", "Approval requested",
                f"{caller.name or caller.email} requested your approval on {document.title}",
                caller, document_id,
            )
            return {"mode": "review", "approval_id": str(approval.id), "approver_id": str(approver.id)}

        raise ValidationError("Provide assigned_users, product_id or assigned_to")

    async def _share_with_users(self, document: Document, data: AssignRequest, caller: User) -> Dict[str, Any]:
        await self.shares.delete_where(document_id=document.id)

        users = await self.users.get_by_names(data.assigned_users)
        missing = set(data.assigned_users) - {user.name for user in users}
        if missing:
            LOGGER.warning(f"Unknown users skipped when sharing {document.id}: {sorted(missing)}")

        for user in users:
            await self.shares.create(
                document_id=document.id,
                shared_with=user.id,
                shared_by=caller.id,
                permissions="edit",
            )

        if data.product_sku:
            product = await self.products.get_by_sku(data.product_sku)
            if not product:
                raise NotFoundError(f"Product {data.product_sku} not found")
            await self.documents.update(document.id, product_id=product.id)

        self._notify(
            users, "document_assigned", "Document assigned",
            f"{caller.name or caller.email} shared {document.title} with you",
            caller, document.id,
        )
        return {"mode": "share", "shared_with": [str(user.id) for user in users]}

    def _notify(self, users: List[User], type: str, title: str, message: str, caller: User, document_id: UUID):
        if not self.notifications:
            return
        for user in users:
            self.notifications.create_notification(
                user_id=str(user.id),
                type=type,
                title=title,
                message=message,
                sender=caller.name or caller.email,
                document_id=str(document_id),
            )

    async def upload_document(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str],
        document_type: str,
        destinations: List[str],
        associations: Dict[str, Any],
        owner: User,
    ) -> Dict[str, Any]:
        """Store an uploaded file and register it.

        The file goes to the folder of its highest-priority destination.
        A document row is created, plus one association row per
        destination and per associated product, supplier or raw material.
        Uploads to ``labels`` are also recorded in the labels table.
        """
        if not filename:
            raise ValidationError("No file provided")
        if not document_type:
            raise ValidationError("Document type is required")
        if not destinations:
            raise ValidationError("At least one destination is required")
        if self.storage is None:
            raise StorageError("Storage is not configured")

        storage_path = f"{storage_folder(destinations)}/{unique_storage_name(filename)}"
        mimetype = content_type or content_type_for(filename)
        await self.storage.upload_file(content, storage_path, content_type=mimetype)

        document = await self.documents.create(
            title=filename,
            filename=filename,
            filepath=storage_path,
            storage_path=storage_path,
            mimetype=mimetype,
            size=len(content),
            category=DocumentCategory.UPLOAD.value,
            document_type=document_type,
            status=DocumentStatus.READY.value,
            workflow_status=WorkflowStatus.DRAFT.value,
            version=1,
            is_latest=True,
            user_id=owner.id,
        )

        targets = [("destination", destination) for destination in destinations]
        for key, association_type in ASSOCIATION_KEYS.items():
            values = associations.get(key) or []
            if isinstance(values, str):
                values = [values]
            targets.extend((association_type, str(value)) for value in values)

        created = []
        for association_type, association_id in targets:
            created.append(await self.associations.create(
                document_id=document.id,
                association_type=association_type,
                association_id=association_id,
                document_filename=filename,
                document_title=filename,
                document_path=storage_path,
                document_type=document_type,
                file_type=file_extension(filename),
                file_size=len(content),
            ))

        label = None
        if "labels" in destinations:
            label = await self.labels.create(
                filename=filename,
                company="General",
                product_sku=parse_label_sku(filename),
                storage_path=storage_path,
                file_size=len(content),
            )

        LOGGER.info(
            f"Uploaded {filename} to {storage_path}",
            extra={"document_id": str(document.id), "associations": len(created)},
        )
        return {
            "document": document,
            "storage_path": storage_path,
            "associations": created,
            "label_id": label.id if label else None,
        }

    async def list_by_association(self, association_type: str, association_id: str) -> List[AssociatedFile]:
        """Files tagged with a product, supplier or raw material.

        Products also list label files whose parsed SKU matches.
        """
        if not association_type or not association_id:
            raise ValidationError("Association type and ID are required")

        rows = await self.associations.list_by_target(association_type, association_id)
        files = [self.associated_file(row) for row in rows]

        if association_type == "product":
            for label in await self.labels.list_for_sku(association_id, include_filename_match=False):
                files.append(AssociatedFile(
                    id=f"label_{label.id}",
                    filename=label.filename,
                    file_type="label",
                    file_size=label.file_size,
                    storage_path=label.storage_path,
                    document_type="Label",
                    uploaded_at=label.uploaded_at,
                    association_type="label",
                    source="labels_table",
                    company=label.company,
                ))
        return files

    @staticmethod
    def associated_file(row: DocumentAssociation) -> AssociatedFile:
        return AssociatedFile(
            id=str(row.document_id),
            filename=row.document_filename,
            file_type=row.file_type,
            file_size=row.file_size,
            storage_path=row.document_path,
            document_type=row.document_type,
            uploaded_at=row.created_at,
            association_type=row.association_type,
            source="associations",
        )

    async def download(
        self, document_id: Optional[UUID] = None, storage_path: Optional[str] = None
    ) -> Tuple[bytes, str, str]:
        """Fetch a stored file by document ID or storage path.

        Returns:
            File bytes, download filename and content type

        Raises:
            ValidationError: If neither an ID nor a path is given
            NotFoundError: If the document, its path or the object is missing
        """
        if not document_id and not storage_path:
            raise ValidationError("Document ID or storage path is required")

        path = storage_path
        if not path:
            document = await self._get_or_404(document_id)
            path = document.storage_path
            if not path:
                raise NotFoundError("Storage path not found")

        if self.storage is None:
            raise StorageError("Storage is not configured")
        try:
            content = await self.storage.download_file(path)
        except StorageError as e:
            raise NotFoundError("File not found", e) from e

        filename = path.rsplit("/", 1)[-1] or "document"
        return content, filename, content_type_for(filename)
