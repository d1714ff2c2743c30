"""OpenAI embeddings and chat completion client."""

from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import APIClientError
from app.core.http_client import BaseAPIClient
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class OpenAIClient:
    """Thin wrapper over the OpenAI REST API.

    Only the two calls the search layer needs are exposed: one embedding
    per text and a single-turn chat completion.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        embedding_model: str = "text-embedding-3-small",
        embedding_dimensions: int = 1024,
        chat_model: str = "gpt-4",
        timeout: int = 60,
        max_retries: int = 1,
    ):
        self.embedding_model = embedding_model
        self.embedding_dimensions = embedding_dimensions
        self.chat_model = chat_model
        self.client = BaseAPIClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )

        LOGGER.info(
            f"Initialized OpenAI client with embedding model {self.embedding_model} "
            f"({self.embedding_dimensions} dims) and chat model {self.chat_model}"
        )

    async def create_embedding(self, text: str) -> List[float]:
        """Embed a single text.

        Args:
            text: Input text

        Returns:
            Embedding vector of ``embedding_dimensions`` floats

        Raises:
            APIClientError: If the request fails or the response has no embedding
        """
        payload = {
            "model": self.embedding_model,
            "input": text,
            "dimensions": self.embedding_dimensions,
        }
        response = await self.client.call_api(endpoint="/embeddings", payload=payload)

        data = response.get("data") or []
        if not data or "embedding" not in data[0]:
            LOGGER.error("Unexpected embeddings response format", extra={"keys": list(response)})
            raise APIClientError("Invalid response format from embeddings API")

        return data[0]["embedding"]

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> Optional[str]:
        """Run a chat completion and return the first choice's text.

        Args:
            messages: Chat messages (role/content dicts)
            temperature: Sampling temperature
            max_tokens: Completion token cap

        Returns:
            The assistant message content, None when the model returned nothing
        """
        payload: Dict[str, Any] = {
            "model": self.chat_model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        response = await self.client.call_api(endpoint="/chat/completions", payload=payload)

        choices = response.get("choices") or []
        if not choices:
            LOGGER.error(f"Unexpected chat completion response format: {response}")
            raise APIClientError("Invalid response format from chat completion API")

        content = choices[0].get("message", {}).get("content")
        if not content:
            LOGGER.warning("Empty response from chat completion")
            return None
        return content


def get_openai_client() -> OpenAIClient:
    """Build a client from application settings."""
    return OpenAIClient(
        api_key=settings.openai.api_key,
        base_url=settings.openai.api_url,
        embedding_model=settings.openai.embedding_model,
        embedding_dimensions=settings.openai.embedding_dimensions,
        chat_model=settings.openai.chat_model,
        timeout=settings.http_timeout,
        max_retries=settings.max_retries,
    )
