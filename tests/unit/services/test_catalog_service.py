from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.database.models import DocumentAssociation, Label
from app.services.catalog_service import CatalogService


def _association(path, filename="front.pdf"):
    return DocumentAssociation(
        id=uuid4(),
        document_id=uuid4(),
        association_type="destination",
        association_id="labels",
        document_filename=filename,
        document_path=path,
        file_type="pdf",
    )


@pytest.fixture
def service():
    service = CatalogService(AsyncMock())
    service.labels = AsyncMock()
    service.associations = AsyncMock()
    return service


@pytest.mark.asyncio
async def test_label_files_skip_uploads_already_in_labels_table(service):
    label = Label(
        id=uuid4(), filename="VN1234.01 Front.pdf", company="VitaNorth",
        storage_path="labels/1_VN1234.01_Front.pdf", file_size=2048,
    )
    service.labels.list_recent.return_value = [label]
    service.associations.list_for_destination.return_value = [
        _association("labels/1_VN1234.01_Front.pdf"),
        _association("labels/2_Back.pdf", "Back.pdf"),
    ]

    files = await service.list_all_label_files()

    assert [f.source for f in files] == ["labels_table", "associations"]
    assert files[0].id == f"label_{label.id}"
    assert files[0].company == "VitaNorth"
    assert files[1].filename == "Back.pdf"
    service.associations.list_for_destination.assert_awaited_once_with("labels")


@pytest.mark.asyncio
async def test_raw_material_files(service):
    service.associations.list_by_target.return_value = [_association("raw-materials/1_coa.pdf")]

    files = await service.list_raw_material_files("rm-42")

    assert files[0].storage_path == "raw-materials/1_coa.pdf"
    service.associations.list_by_target.assert_awaited_once_with("raw_material", "rm-42")
