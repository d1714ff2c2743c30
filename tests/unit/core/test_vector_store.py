from unittest.mock import patch

import httpx
import pytest

from app.core.exceptions import APITimeoutError, ConfigurationError
from app.core.vector_store import PineconeClient


def _response(payload, path="/query"):
    return httpx.Response(200, json=payload, request=httpx.Request("POST", f"https://idx.pinecone.io{path}"))


@pytest.fixture
def store():
    return PineconeClient(api_key="pc-test", index_host="idx.pinecone.io", index_name="qms-search")


@pytest.mark.asyncio
async def test_upsert_drops_none_metadata(store):
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = _response({"upsertedCount": 1}, "/vectors/upsert")

        await store.upsert_vector("product-1", [0.5], {"type": "product", "sku": "VN1", "brand": None})

    assert mock_post.call_args.args[0] == "https://idx.pinecone.io/vectors/upsert"
    vector = mock_post.call_args.kwargs["json"]["vectors"][0]
    assert vector == {"id": "product-1", "values": [0.5], "metadata": {"type": "product", "sku": "VN1"}}
    headers = mock_post.call_args.kwargs["headers"]
    assert headers["Api-Key"] == "pc-test"
    assert "Authorization" not in headers


@pytest.mark.asyncio
async def test_query_sends_filter_and_returns_matches(store):
    matches = [{"id": "document-1", "score": 0.83, "metadata": {"documentId": "1"}}]
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = _response({"matches": matches})

        result = await store.query_vectors([0.1], top_k=5, filter={"type": {"$eq": "document"}})

    assert result == matches
    body = mock_post.call_args.kwargs["json"]
    assert body["topK"] == 5
    assert body["includeMetadata"] is True
    assert body["filter"] == {"type": {"$eq": "document"}}


@pytest.mark.asyncio
async def test_timeout_raises_after_single_attempt(store):
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(APITimeoutError):
            await store.query_vectors([0.1])

    assert mock_post.call_count == 1


@pytest.mark.asyncio
async def test_unconfigured_index_host():
    store = PineconeClient(api_key="pc-test", index_host="")

    with pytest.raises(ConfigurationError):
        await store.delete_vectors(["document-1"])
