from unittest.mock import AsyncMock

from app.core.dependencies import get_indexing_service, get_search_service
from app.core.exceptions import ValidationError
from app.schemas.search import IndexingReport, SearchResponse, SearchResult


def test_search(test_client, authenticated, override_service):
    search = override_service(get_search_service, AsyncMock())
    search.search.return_value = SearchResponse(
        results=[
            SearchResult(
                type="product", id="p1", score=0.8, search_type="keyword",
                relevant_chunk="Iron Complex - VN1234.01 - VitaNorth", data={},
            )
        ],
        ai_response="Iron Complex is a capsule.",
        total_results=1,
    )

    response = test_client.post("/api/v1/search", json={"query": "iron", "chat_mode": True})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_results"] == 1
    assert data["results"][0]["score"] == 0.8
    assert data["ai_response"] == "Iron Complex is a capsule."
    search.search.assert_awaited_once_with("iron", chat_mode=True, user_id=authenticated.id)


def test_blank_query_is_a_bad_request(test_client, authenticated, override_service):
    search = override_service(get_search_service, AsyncMock())
    search.search.side_effect = ValidationError("Query is required")

    response = test_client.post("/api/v1/search", json={"query": "  "})

    assert response.status_code == 400
    assert response.json()["detail"]["detail"] == "Query is required"


def test_index_all(test_client, authenticated, override_service):
    indexing = override_service(get_indexing_service, AsyncMock())
    indexing.index_by_type.return_value = {
        "products": IndexingReport(entity_type="product", total=2, indexed=2),
    }

    response = test_client.post("/api/v1/search/index", json={"action": "index-all", "type": "products"})

    assert response.status_code == 200
    assert response.json()["data"]["products"]["indexed"] == 2
    indexing.index_by_type.assert_awaited_once_with("products")


def test_index_single_needs_id(test_client, authenticated, override_service):
    indexing = override_service(get_indexing_service, AsyncMock())

    response = test_client.post("/api/v1/search/index", json={"action": "index-single", "type": "product"})

    assert response.status_code == 400
    indexing.index_single.assert_not_called()


def test_index_single(test_client, authenticated, override_service):
    indexing = override_service(get_indexing_service, AsyncMock())
    indexing.index_single.return_value = False

    response = test_client.post(
        "/api/v1/search/index", json={"action": "index-single", "type": "document", "id": "abc"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["indexed"] is False
    assert body["message"] == "Item not found or not searchable"
