"""Hybrid search over products, templates and documents.

The query is embedded once and fanned out to one vector query per
content type. Relational substring search runs alongside; both result
sets are merged, ranked and optionally handed to a chat model.
"""

from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.openai_client import OpenAIClient, get_openai_client
from app.core.vector_store import PineconeClient, get_vector_store
from app.database.models import Document, Product, Template
from app.repositories.document_repository import DocumentRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.search_history_repository import SearchHistoryRepository
from app.repositories.template_repository import TemplateRepository
from app.schemas.document import DocumentResponse
from app.schemas.product import ProductResponse
from app.schemas.search import SearchResponse, SearchResult
from app.schemas.template import TemplateResponse
from app.schemas.user import UserSummary
from app.services.search.context_formatter import build_chat_messages, format_context
from app.services.search.result_merger import SearchResultMerger
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Metadata key holding the relational id, per content type
_METADATA_ID_KEYS = {
    "document": "documentId",
    "template": "templateId",
    "product": "productId",
}


def product_chunk(product: Product) -> str:
    return f"{product.product_name} - {product.sku} - {product.brand}"


def template_chunk(template: Template) -> str:
    return f"{template.name} - {template.type} - {template.description or 'No description'}"


def document_chunk(document: Document) -> str:
    if document.summary:
        return document.summary
    return f"{(document.content or '')[:200]}..."


def _vector_chunk(entity_type: str, entity: Any, content: Optional[str]) -> str:
    """Indexed text of the best match, or a short label when it carried none."""
    if content:
        return content
    if entity_type == "product":
        return f"{entity.product_name} - {entity.sku}"
    if entity_type == "template":
        return f"{entity.name} - {entity.type}"
    return document_chunk(entity)


def _dump(schema: Any, value: Any) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    return schema.model_validate(value).model_dump(mode="json")


def _entity_data(entity_type: str, entity: Any) -> Dict[str, Any]:
    if entity_type == "product":
        return _dump(ProductResponse, entity)
    if entity_type == "template":
        data = _dump(TemplateResponse, entity)
        data["creator"] = _dump(UserSummary, entity.creator)
        return data
    data = _dump(DocumentResponse, entity)
    data["user"] = _dump(UserSummary, entity.user)
    data["product"] = _dump(ProductResponse, entity.product)
    data["template"] = _dump(TemplateResponse, entity.template)
    return data


def _to_result(
    entity_type: str,
    entity: Any,
    score: float,
    search_type: str,
    chunk: Optional[str] = None,
) -> SearchResult:
    if chunk is None:
        if entity_type == "product":
            chunk = product_chunk(entity)
        elif entity_type == "template":
            chunk = template_chunk(entity)
        else:
            chunk = document_chunk(entity)
    return SearchResult(
        type=entity_type,
        id=str(entity.id),
        score=score,
        search_type=search_type,
        relevant_chunk=chunk,
        data=_entity_data(entity_type, entity),
    )


class SearchService:
    """Vector plus keyword search with optional AI answer."""

    CONTENT_TYPES = ("document", "template", "product")

    def __init__(
        self,
        session: AsyncSession,
        openai_client: Optional[OpenAIClient] = None,
        vector_store: Optional[PineconeClient] = None,
        merger: Optional[SearchResultMerger] = None,
    ):
        self.session = session
        self.products = ProductRepository(session)
        self.templates = TemplateRepository(session)
        self.documents = DocumentRepository(session)
        self.history = SearchHistoryRepository(session)
        self.openai_client = openai_client or get_openai_client()
        self.vector_store = vector_store or get_vector_store()
        self.merger = merger or SearchResultMerger()

    async def search(
        self,
        query: str,
        chat_mode: bool = False,
        user_id: Optional[UUID] = None,
    ) -> SearchResponse:
        """Run a hybrid search.

        Args:
            query: Free-text query
            chat_mode: Ask the chat model for an answer grounded in the results
            user_id: Local user ID recorded in search history

        Returns:
            Ranked results, the AI answer if requested, and the result count

        Raises:
            ValidationError: If the query is blank
            APIClientError: If the embeddings or vector API fails
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Query is required")

        LOGGER.info("Running search", extra={"query": query, "chat_mode": chat_mode})

        embedding = await self.openai_client.create_embedding(query)

        vector_results: List[SearchResult] = []
        for content_type in self.CONTENT_TYPES:
            vector_results.extend(await self._vector_search(content_type, embedding))

        keyword_results = await self._keyword_search(query)

        results = self.merger.merge(vector_results, keyword_results)

        ai_response = None
        if chat_mode and results:
            ai_response = await self._answer(query, results)

        await self._record_history(query, results, chat_mode, ai_response, user_id)

        LOGGER.info(
            f"Search returned {len(results)} results",
            extra={
                "vector_hits": len(vector_results),
                "keyword_hits": len(keyword_results),
            },
        )
        return SearchResponse(results=results, ai_response=ai_response, total_results=len(results))

    async def _vector_search(self, content_type: str, embedding: List[float]) -> List[SearchResult]:
        matches = await self.vector_store.query_vectors(
            embedding,
            top_k=settings.search.vector_top_k,
            filter={"type": {"$eq": content_type}},
        )

        scores: Dict[UUID, float] = {}
        chunks: Dict[UUID, Optional[str]] = {}
        for match in matches:
            metadata = match.get("metadata") or {}
            raw_id = metadata.get(_METADATA_ID_KEYS[content_type])
            try:
                entity_id = UUID(str(raw_id))
            except ValueError:
                LOGGER.warning(f"Vector match {match.get('id')} has no usable {content_type} id")
                continue
            score = float(match.get("score") or 0.0)
            if entity_id not in scores or score > scores[entity_id]:
                scores[entity_id] = score
                chunks[entity_id] = metadata.get("content")

        if not scores:
            return []

        entities = await self._fetch_entities(content_type, list(scores))
        return [
            _to_result(
                content_type,
                entity,
                scores[entity.id],
                "vector",
                chunk=_vector_chunk(content_type, entity, chunks.get(entity.id)),
            )
            for entity in entities
            if entity.id in scores
        ]

    async def _fetch_entities(self, content_type: str, ids: List[UUID]) -> Sequence[Any]:
        if content_type == "product":
            return await self.products.get_by_ids(ids)
        if content_type == "template":
            return await self.templates.get_active_by_ids(ids)
        return await self.documents.get_searchable_by_ids(ids)

    async def _keyword_search(self, query: str) -> List[SearchResult]:
        search_settings = settings.search
        plans = (
            ("product", self.products.search, search_settings.product_keyword_limit,
             search_settings.product_keyword_score),
            ("template", self.templates.search, search_settings.template_keyword_limit,
             search_settings.template_keyword_score),
            ("document", self.documents.search, search_settings.document_keyword_limit,
             search_settings.document_keyword_score),
        )

        results: List[SearchResult] = []
        for content_type, search, limit, score in plans:
            try:
                entities = await search(query, limit)
            except SQLAlchemyError as e:
                LOGGER.warning(f"Keyword search on {content_type} failed: {e}")
                await self.session.rollback()
                continue
            results.extend(_to_result(content_type, entity, score, "keyword") for entity in entities)
        return results

    async def _answer(self, query: str, results: List[SearchResult]) -> Optional[str]:
        messages = build_chat_messages(query, format_context(results))
        return await self.openai_client.chat_completion(
            messages,
            temperature=settings.openai.chat_temperature,
            max_tokens=settings.openai.chat_max_tokens,
        )

    async def _record_history(
        self,
        query: str,
        results: List[SearchResult],
        chat_mode: bool,
        ai_response: Optional[str],
        user_id: Optional[UUID],
    ) -> None:
        try:
            await self.history.create(
                user_id=user_id,
                query=query,
                results={
                    "matches": len(results),
                    "chatMode": chat_mode,
                    "aiResponse": ai_response,
                },
            )
        except SQLAlchemyError as e:
            LOGGER.warning(f"Failed to record search history: {e}")
            await self.session.rollback()

    async def index_status(self) -> Dict[str, Any]:
        """Index name and the vector store's stats."""
        stats = await self.vector_store.describe_index_stats()
        return {"index_name": settings.pinecone.index_name, "stats": stats}
