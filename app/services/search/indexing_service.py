"""Build searchable text per entity and push embeddings to the vector index.

Indexing is sequential and best-effort: one failing item is logged and
counted, and the loop moves on to the next one.
"""

from typing import Any, Callable, Dict, Iterable, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.openai_client import OpenAIClient, get_openai_client
from app.core.vector_store import PineconeClient, get_vector_store
from app.database.models import Document, Product, Template
from app.repositories.document_repository import DocumentRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.template_repository import TemplateRepository
from app.schemas.enums import SEARCHABLE_DOCUMENT_STATUSES
from app.schemas.search import IndexingReport
from app.services.search.content_extractor import (
    extract_form_fields_content,
    extract_template_content,
)
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

Builder = Callable[[Any], Tuple[str, Dict[str, Any]]]


def vector_id(entity_type: str, entity_id: Any) -> str:
    return f"{entity_type}-{entity_id}"


def _join(parts: Iterable[Any]) -> str:
    return " ".join(str(part) for part in parts if part)


def _preview(text: str) -> str:
    return text[: settings.search.content_preview_length]


def build_product_text(product: Product) -> Tuple[str, Dict[str, Any]]:
    """Searchable text and vector metadata for a product."""
    text = _join([
        product.product_name,
        product.sku,
        product.brand,
        product.health_category,
        product.therapeutic_platform,
        product.nutrient_type,
        product.format,
        product.manufacturer,
        product.number_of_actives,
        product.bottle_count,
        f"Unit count: {product.unit_count}" if product.unit_count else None,
        "Contains Iron" if product.contains_iron else "No Iron",
    ])
    metadata = {
        "type": "product",
        "productId": str(product.id),
        "sku": product.sku,
        "productName": product.product_name,
        "content": _preview(text),
    }
    return text, metadata


def build_document_text(document: Document) -> Tuple[str, Dict[str, Any]]:
    """Searchable text and vector metadata for a document.

    Includes the linked product and template, when loaded, and the
    extracted form content.
    """
    product = document.product
    template = document.template
    text = _join([
        document.title,
        document.filename,
        document.category,
        document.summary,
        f"Product: {_join([product.product_name, product.sku, product.brand])}" if product else None,
        f"Template: {_join([template.name, template.type])}" if template else None,
        extract_form_fields_content(document.content),
    ])
    metadata = {
        "type": "document",
        "documentId": str(document.id),
        "title": document.title,
        "filename": document.filename,
        "content": _preview(text),
        "category": document.category,
        "userId": str(document.user_id) if document.user_id else None,
    }
    return text, metadata


def build_template_text(template: Template) -> Tuple[str, Dict[str, Any]]:
    """Searchable text and vector metadata for a template."""
    text = _join([
        template.name,
        template.description,
        template.type,
        extract_template_content(template.content),
    ])
    metadata = {
        "type": "template",
        "templateId": str(template.id),
        "name": template.name,
        "content": _preview(text),
        "creatorId": str(template.created_by) if template.created_by else None,
    }
    return text, metadata


class IndexingService:
    """Embeds products, templates and documents into the search index."""

    def __init__(
        self,
        session: AsyncSession,
        openai_client: Optional[OpenAIClient] = None,
        vector_store: Optional[PineconeClient] = None,
    ):
        self.products = ProductRepository(session)
        self.templates = TemplateRepository(session)
        self.documents = DocumentRepository(session)
        self.openai_client = openai_client or get_openai_client()
        self.vector_store = vector_store or get_vector_store()

    async def _index_one(self, entity_type: str, entity: Any, build: Builder) -> None:
        text, metadata = build(entity)
        embedding = await self.openai_client.create_embedding(text)
        await self.vector_store.upsert_vector(vector_id(entity_type, entity.id), embedding, metadata)

    async def _index_batch(self, entity_type: str, items: list, build: Builder) -> IndexingReport:
        report = IndexingReport(entity_type=entity_type, total=len(items))
        LOGGER.info(f"Indexing {len(items)} {entity_type}(s)")

        for item in items:
            try:
                await self._index_one(entity_type, item, build)
                report.indexed += 1
            except Exception as e:
                # One bad item must not stop the batch
                report.failed += 1
                LOGGER.warning(
                    f"Failed to index {entity_type} {item.id}: {e}",
                    extra={"entity_type": entity_type, "entity_id": str(item.id)},
                )

        LOGGER.info(
            f"Indexed {report.indexed}/{report.total} {entity_type}(s)",
            extra={"entity_type": entity_type, "failed": report.failed},
        )
        return report

    async def index_products(self) -> IndexingReport:
        products = await self.products.get_all(limit=None)
        return await self._index_batch("product", products, build_product_text)

    async def index_templates(self) -> IndexingReport:
        templates = await self.templates.list_active()
        return await self._index_batch("template", templates, build_template_text)

    async def index_documents(self) -> IndexingReport:
        documents = await self.documents.list_searchable()
        return await self._index_batch("document", documents, build_document_text)

    async def index_all(self) -> Dict[str, IndexingReport]:
        return {
            "products": await self.index_products(),
            "templates": await self.index_templates(),
            "documents": await self.index_documents(),
        }

    async def index_by_type(self, content_type: str) -> Dict[str, IndexingReport]:
        """Run a full re-index for ``products``, ``templates``, ``documents`` or ``all``.

        Raises:
            ValidationError: For any other type
        """
        if content_type == "all":
            return await self.index_all()
        runners = {
            "products": self.index_products,
            "templates": self.index_templates,
            "documents": self.index_documents,
        }
        if content_type not in runners:
            raise ValidationError(f"Invalid index type: {content_type}")
        return {content_type: await runners[content_type]()}

    async def index_product(self, product_id: UUID) -> bool:
        product = await self.products.get_by_id(product_id)
        if not product:
            LOGGER.warning(f"Product {product_id} not found, skipping indexing")
            return False
        await self._index_one("product", product, build_product_text)
        return True

    async def index_template(self, template_id: UUID) -> bool:
        template = await self.templates.get_by_id(template_id)
        if not template or not template.is_active:
            LOGGER.warning(f"Template {template_id} not found or inactive, skipping indexing")
            return False
        await self._index_one("template", template, build_template_text)
        return True

    async def index_document(self, document_id: UUID) -> bool:
        document = await self.documents.get_searchable(document_id)
        if not document or document.status not in SEARCHABLE_DOCUMENT_STATUSES:
            LOGGER.warning(f"Document {document_id} not found or not searchable, skipping indexing")
            return False
        await self._index_one("document", document, build_document_text)
        return True

    async def index_single(self, content_type: str, entity_id: Optional[str]) -> bool:
        """Index one entity of type ``product``, ``template`` or ``document``.

        Raises:
            ValidationError: On an unknown type or a malformed id
        """
        runners = {
            "product": self.index_product,
            "template": self.index_template,
            "document": self.index_document,
        }
        if content_type not in runners or not entity_id:
            raise ValidationError("Invalid single index request")
        try:
            parsed_id = UUID(entity_id)
        except ValueError as e:
            raise ValidationError(f"Invalid {content_type} id: {entity_id}", e) from e
        return await runners[content_type](parsed_id)

    async def remove_document(self, document_id: UUID) -> None:
        """Drop a document's vector. Failures are logged only."""
        try:
            await self.vector_store.delete_vectors([vector_id("document", document_id)])
        except Exception as e:
            LOGGER.warning(f"Failed to remove document {document_id} from index: {e}")
