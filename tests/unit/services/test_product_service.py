from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.exceptions import NotFoundError
from app.database.models import Approval
from app.schemas.product import ProductUpdate
from app.services.product_service import ProductService, extract_signature

SIGNED_AT = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _approval(status, comments=None, approved_at=None):
    return Approval(
        id=uuid4(), document_id=uuid4(), approver_id=uuid4(),
        status=status, comments=comments, approved_at=approved_at,
    )


def test_extract_signature_from_approved_comments():
    approvals = [
        _approval("pending"),
        _approval("approved", "Reviewed\n\nDigitally signed by: Jane Doe", SIGNED_AT),
    ]
    assert extract_signature(approvals) == ("Jane Doe", SIGNED_AT)


def test_extract_signature_without_signature_line():
    assert extract_signature([_approval("approved", "ok", SIGNED_AT)]) == (None, SIGNED_AT)


def test_extract_signature_no_approval():
    assert extract_signature([_approval("rejected", "Digitally signed by: X")]) == (None, None)


@pytest.fixture
def service():
    service = ProductService(AsyncMock())
    service.repository = AsyncMock()
    service.labels = AsyncMock()
    return service


@pytest.mark.asyncio
async def test_product_detail_orders_documents_newest_first(service, make_product, make_document):
    product = make_product()
    older = make_document(title="Old", updated_at=datetime(2023, 1, 1, tzinfo=timezone.utc))
    newer = make_document(title="New", updated_at=datetime(2024, 6, 1, tzinfo=timezone.utc))
    undated = make_document(title="Undated", updated_at=None)
    product.documents = [older, undated, newer]
    service.repository.get_by_sku_with_documents.return_value = product

    detail = await service.get_product_detail(product.sku)

    assert detail.sku == product.sku
    assert [d.title for d in detail.documents] == ["New", "Old", "Undated"]


@pytest.mark.asyncio
async def test_product_detail_unknown_sku(service):
    service.repository.get_by_sku_with_documents.return_value = None

    with pytest.raises(NotFoundError):
        await service.get_product_detail("MISSING")


@pytest.mark.asyncio
async def test_update_product_applies_only_set_fields(service, make_product):
    product = make_product()
    service.repository.get_by_sku.return_value = product

    await service.update_product(product.sku, ProductUpdate(brand="NewBrand"))

    service.repository.update.assert_awaited_once_with(product.id, brand="NewBrand")


@pytest.mark.asyncio
async def test_update_product_ignores_null_required_fields(service, make_product):
    product = make_product()
    service.repository.get_by_sku.return_value = product

    await service.update_product(
        product.sku, ProductUpdate(product_name=None, contains_iron=None, brand="NewBrand", manufacturer=None)
    )

    service.repository.update.assert_awaited_once_with(product.id, brand="NewBrand", manufacturer=None)
