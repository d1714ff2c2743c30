"""Unit tests for SearchService.

Tests:
- Vector and keyword results are merged with vector precedence
- Fixed keyword scores per content type
- Chat answer only when requested and results exist
- Keyword and history failures are not fatal
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import ValidationError
from app.services.search.search_service import SearchService, document_chunk


@pytest.fixture
def openai_client():
    client = AsyncMock()
    client.create_embedding.return_value = [0.1] * 8
    client.chat_completion.return_value = "Iron Complex is the only iron product."
    return client


@pytest.fixture
def vector_store():
    store = AsyncMock()
    store.query_vectors.return_value = []
    return store


@pytest.fixture
def service(openai_client, vector_store):
    service = SearchService(AsyncMock(), openai_client=openai_client, vector_store=vector_store)
    service.products = AsyncMock()
    service.templates = AsyncMock()
    service.documents = AsyncMock()
    service.history = AsyncMock()
    for repo in (service.products, service.templates, service.documents):
        repo.search.return_value = []
    return service


def _vector_matches_for(content_type, matches):
    async def query_vectors(vector, top_k=5, filter=None):
        return matches if filter == {"type": {"$eq": content_type}} else []
    return query_vectors


@pytest.mark.asyncio
async def test_vector_hit_takes_precedence_over_keyword(service, vector_store, make_product, make_template):
    product = make_product()
    template = make_template()
    vector_store.query_vectors.side_effect = _vector_matches_for(
        "product", [{"id": f"product-{product.id}", "score": 0.92, "metadata": {"productId": str(product.id)}}]
    )
    service.products.get_by_ids.return_value = [product]
    service.products.search.return_value = [product]
    service.templates.search.return_value = [template]

    response = await service.search("iron")

    assert response.total_results == 2
    first, second = response.results
    assert (first.type, first.id, first.search_type, first.score) == ("product", str(product.id), "vector", 0.92)
    assert (second.type, second.search_type, second.score) == ("template", "keyword", 0.7)
    assert first.relevant_chunk == "Iron Complex - VN1234.01"
    assert second.relevant_chunk == "Certificate of Analysis - COA - COA for finished goods"
    assert response.ai_response is None
    service.openai_client.chat_completion.assert_not_called()


@pytest.mark.asyncio
async def test_query_is_embedded_once_and_each_type_queried(service, openai_client, vector_store):
    await service.search("vitamin d")

    openai_client.create_embedding.assert_awaited_once_with("vitamin d")
    filters = [call.kwargs["filter"] for call in vector_store.query_vectors.call_args_list]
    assert filters == [
        {"type": {"$eq": "document"}},
        {"type": {"$eq": "template"}},
        {"type": {"$eq": "product"}},
    ]


@pytest.mark.asyncio
async def test_keyword_scores_are_fixed_per_type(service, make_product, make_template, make_document):
    service.products.search.return_value = [make_product()]
    service.templates.search.return_value = [make_template()]
    service.documents.search.return_value = [make_document(summary="Spec summary")]

    response = await service.search("spec")

    assert [(r.type, r.score) for r in response.results] == [
        ("product", 0.8),
        ("template", 0.7),
        ("document", 0.6),
    ]
    assert response.results[2].relevant_chunk == "Spec summary"


@pytest.mark.asyncio
async def test_chat_mode_builds_answer_from_results(service, openai_client, make_product):
    service.products.search.return_value = [make_product()]

    response = await service.search("iron", chat_mode=True)

    assert response.ai_response == "Iron Complex is the only iron product."
    messages = openai_client.chat_completion.call_args.args[0]
    assert "PRODUCT: Iron Complex" in messages[1]["content"]
    assert messages[1]["content"].endswith("Question: iron")


@pytest.mark.asyncio
async def test_chat_mode_without_results_skips_chat(service, openai_client):
    response = await service.search("nothing matches", chat_mode=True)

    assert response.results == []
    assert response.ai_response is None
    openai_client.chat_completion.assert_not_called()


@pytest.mark.asyncio
async def test_blank_query_rejected(service, openai_client):
    with pytest.raises(ValidationError):
        await service.search("   ")
    openai_client.create_embedding.assert_not_called()


@pytest.mark.asyncio
async def test_failing_keyword_query_is_skipped(service, make_product):
    service.templates.search.side_effect = SQLAlchemyError("relation does not exist")
    service.products.search.return_value = [make_product()]

    response = await service.search("iron")

    assert [r.type for r in response.results] == ["product"]
    service.session.rollback.assert_awaited()


@pytest.mark.asyncio
async def test_vector_match_without_usable_id_is_ignored(service, vector_store):
    vector_store.query_vectors.side_effect = _vector_matches_for(
        "document", [{"id": "document-x", "score": 0.8, "metadata": {"documentId": "not-a-uuid"}}]
    )

    response = await service.search("anything")

    assert response.results == []
    service.documents.get_searchable_by_ids.assert_not_called()


@pytest.mark.asyncio
async def test_history_failure_does_not_fail_search(service, user):
    service.history.create.side_effect = SQLAlchemyError("insert failed")

    response = await service.search("iron", user_id=user.id)

    assert response.total_results == 0
    service.session.rollback.assert_awaited()


@pytest.mark.asyncio
async def test_history_records_summary(service):
    user_id = uuid4()
    await service.search("iron", user_id=user_id)

    kwargs = service.history.create.call_args.kwargs
    assert kwargs["user_id"] == user_id
    assert kwargs["query"] == "iron"
    assert kwargs["results"] == {"matches": 0, "chatMode": False, "aiResponse": None}


def test_document_chunk_falls_back_to_content_prefix(make_document):
    document = make_document(summary=None, content="x" * 300)
    assert document_chunk(document) == "x" * 200 + "..."


@pytest.mark.asyncio
async def test_vector_hit_uses_indexed_content_of_best_match(service, vector_store, make_template):
    template = make_template()
    vector_store.query_vectors.side_effect = _vector_matches_for(
        "template",
        [
            {"id": "t-low", "score": 0.41, "metadata": {"templateId": str(template.id), "content": "Lot Number"}},
            {"id": "t-high", "score": 0.83,
             "metadata": {"templateId": str(template.id), "content": "Assay HPLC Percent of claim"}},
        ],
    )
    service.templates.get_active_by_ids.return_value = [template]

    response = await service.search("assay")

    (result,) = response.results
    assert result.score == 0.83
    assert result.relevant_chunk == "Assay HPLC Percent of claim"


@pytest.mark.asyncio
async def test_document_hit_carries_owner_product_and_template(
    service, openai_client, make_document, make_product, make_template, user
):
    product = make_product()
    template = make_template()
    document = make_document(
        summary="Iron spec", user=user, product=product, template=template,
        user_id=user.id, product_id=product.id, template_id=template.id,
    )
    service.documents.search.return_value = [document]

    response = await service.search("iron", chat_mode=True)

    data = response.results[0].data
    assert data["user"]["name"] == "Quality Analyst"
    assert data["product"]["sku"] == "VN1234.01"
    assert data["template"]["name"] == "Certificate of Analysis"
    context = openai_client.chat_completion.call_args.args[0][1]["content"]
    assert "Created by: Quality Analyst" in context
    assert "Associated Product: Iron Complex (VN1234.01)" in context
    assert "Based on Template: Certificate of Analysis (COA)" in context
