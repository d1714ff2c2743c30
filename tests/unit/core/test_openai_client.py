from unittest.mock import patch

import httpx
import pytest

from app.core.exceptions import APIClientError
from app.core.openai_client import OpenAIClient


def _response(status_code, payload, url="https://api.openai.com/v1/embeddings"):
    return httpx.Response(status_code, json=payload, request=httpx.Request("POST", url))


@pytest.fixture
def client():
    return OpenAIClient(api_key="sk-test")


@pytest.mark.asyncio
async def test_create_embedding(client):
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = _response(200, {"data": [{"embedding": [0.1, 0.2]}]})

        embedding = await client.create_embedding("vitamin c")

    assert embedding == [0.1, 0.2]
    url = mock_post.call_args.args[0]
    body = mock_post.call_args.kwargs["json"]
    headers = mock_post.call_args.kwargs["headers"]
    assert url == "https://api.openai.com/v1/embeddings"
    assert body == {"model": "text-embedding-3-small", "input": "vitamin c", "dimensions": 1024}
    assert headers["Authorization"] == "Bearer sk-test"


@pytest.mark.asyncio
async def test_create_embedding_rejects_malformed_response(client):
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = _response(200, {"data": []})

        with pytest.raises(APIClientError, match="Invalid response format"):
            await client.create_embedding("vitamin c")


@pytest.mark.asyncio
async def test_client_error_is_not_retried():
    client = OpenAIClient(api_key="sk-test", max_retries=3)
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = _response(401, {"error": "bad key"})

        with pytest.raises(APIClientError, match="401"):
            await client.create_embedding("vitamin c")

    assert mock_post.call_count == 1


@pytest.mark.asyncio
async def test_chat_completion(client):
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = _response(
            200, {"choices": [{"message": {"role": "assistant", "content": "Use lot 42."}}]}
        )

        answer = await client.chat_completion([{"role": "user", "content": "Which lot?"}], temperature=0.7, max_tokens=1000)

    assert answer == "Use lot 42."
    body = mock_post.call_args.kwargs["json"]
    assert body["model"] == "gpt-4"
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 1000


@pytest.mark.asyncio
async def test_chat_completion_empty_content_returns_none(client):
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = _response(200, {"choices": [{"message": {"content": ""}}]})

        assert await client.chat_completion([{"role": "user", "content": "?"}]) is None
