"""Pinecone data-plane client for the search index."""

from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.core.http_client import BaseAPIClient
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class PineconeAPIClient(BaseAPIClient):
    """Pinecone authenticates with an Api-Key header rather than a bearer token."""

    def __init__(self, *args, api_version: str = "2024-07", **kwargs):
        super().__init__(*args, **kwargs)
        self.api_version = api_version

    def _auth_headers(self) -> Dict[str, str]:
        return {"Api-Key": self.api_key, "X-Pinecone-API-Version": self.api_version}


class PineconeClient:
    """Upsert, query and delete vectors in one Pinecone index.

    Entries are keyed ``{type}-{id}`` and carry a flat metadata dict whose
    ``type`` field is used to filter queries.
    """

    def __init__(
        self,
        api_key: str,
        index_host: str,
        index_name: str = "",
        namespace: str = "",
        api_version: str = "2024-07",
        timeout: int = 60,
        max_retries: int = 1,
    ):
        if index_host and not index_host.startswith("http"):
            index_host = f"https://{index_host}"
        self.index_host = index_host
        self.index_name = index_name
        self.namespace = namespace
        self.client = PineconeAPIClient(
            api_key=api_key,
            base_url=index_host,
            timeout=timeout,
            max_retries=max_retries,
            api_version=api_version,
        )

    def _ensure_configured(self) -> None:
        if not self.index_host:
            raise ConfigurationError("PINECONE_INDEX_HOST is not configured")

    def _with_namespace(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.namespace:
            payload["namespace"] = self.namespace
        return payload

    async def upsert_vector(
        self, vector_id: str, values: List[float], metadata: Dict[str, Any]
    ) -> None:
        """Insert or replace one vector.

        Args:
            vector_id: Entry key, e.g. ``product-<uuid>``
            values: Embedding values
            metadata: Flat metadata; None values are dropped
        """
        self._ensure_configured()
        clean_metadata = {key: value for key, value in metadata.items() if value is not None}
        payload = self._with_namespace({
            "vectors": [{"id": vector_id, "values": values, "metadata": clean_metadata}]
        })
        await self.client.call_api(endpoint="/vectors/upsert", payload=payload)
        LOGGER.debug(f"Upserted vector {vector_id}")

    async def query_vectors(
        self,
        vector: List[float],
        top_k: int = 5,
        filter: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Nearest-neighbour query.

        Args:
            vector: Query embedding
            top_k: Number of matches to return
            filter: Metadata filter, e.g. ``{"type": {"$eq": "product"}}``

        Returns:
            Matches as dicts with ``id``, ``score`` and ``metadata``
        """
        self._ensure_configured()
        payload = self._with_namespace({
            "vector": vector,
            "topK": top_k,
            "includeMetadata": True,
            "includeValues": False,
        })
        if filter:
            payload["filter"] = filter
        response = await self.client.call_api(endpoint="/query", payload=payload)
        return response.get("matches") or []

    async def delete_vectors(self, vector_ids: List[str]) -> None:
        self._ensure_configured()
        payload = self._with_namespace({"ids": vector_ids})
        await self.client.call_api(endpoint="/vectors/delete", payload=payload)
        LOGGER.debug(f"Deleted vectors {vector_ids}")

    async def describe_index_stats(self) -> Dict[str, Any]:
        self._ensure_configured()
        return await self.client.call_api(endpoint="/describe_index_stats", payload={})


def get_vector_store() -> PineconeClient:
    """Build a client from application settings."""
    return PineconeClient(
        api_key=settings.pinecone.api_key,
        index_host=settings.pinecone.index_host,
        index_name=settings.pinecone.index_name,
        namespace=settings.pinecone.namespace,
        api_version=settings.pinecone.api_version,
        timeout=settings.http_timeout,
        max_retries=settings.max_retries,
    )
