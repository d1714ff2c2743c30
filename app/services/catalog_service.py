"""Read-only catalog lists: labels, suppliers, raw materials and
destination-tagged uploads."""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Label, RawMaterial, Supplier
from app.repositories.catalog_repository import RawMaterialRepository, SupplierRepository
from app.repositories.document_repository import DocumentAssociationRepository
from app.repositories.label_repository import LabelRepository
from app.schemas.document import AssociatedFile
from app.services.document_service import DocumentService


class CatalogService:
    def __init__(self, db_session: AsyncSession):
        self.labels = LabelRepository(db_session)
        self.suppliers = SupplierRepository(db_session)
        self.raw_materials = RawMaterialRepository(db_session)
        self.associations = DocumentAssociationRepository(db_session)

    async def list_suppliers(self) -> List[Supplier]:
        return await self.suppliers.list_by_name()

    async def list_raw_materials(self) -> List[RawMaterial]:
        return await self.raw_materials.list_by_name()

    async def list_destination_files(self, destination: str) -> List[AssociatedFile]:
        """Uploads tagged with a destination bucket such as ``labels`` or ``shelfLife``."""
        rows = await self.associations.list_for_destination(destination)
        return [DocumentService.associated_file(row) for row in rows]

    async def list_raw_material_files(self, raw_material_id: Optional[str] = None) -> List[AssociatedFile]:
        rows = await self.associations.list_by_target("raw_material", raw_material_id)
        return [DocumentService.associated_file(row) for row in rows]

    async def list_labels(self) -> List[Label]:
        return await self.labels.list_recent()

    async def list_all_label_files(self) -> List[AssociatedFile]:
        """Rows from the labels table followed by label-destination uploads.

        An upload already present in the labels table, matched by storage
        path, is listed once.
        """
        labels = await self.labels.list_recent()
        files = [
            AssociatedFile(
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
            )
            for label in labels
        ]
        seen = {label.storage_path for label in labels}
        for file in await self.list_destination_files("labels"):
            if file.storage_path not in seen:
                files.append(file)
        return files
