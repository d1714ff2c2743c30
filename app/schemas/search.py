"""Schemas for semantic search and indexing."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """Free-text search request."""

    query: str = Field(..., description="Search text")
    chat_mode: bool = Field(default=False, description="Also synthesize an AI answer from the results")


class SearchResult(BaseModel):
    """One ranked search hit."""

    type: Literal["document", "template", "product"]
    id: str = Field(..., description="Entity ID")
    score: float = Field(..., description="Vector similarity or fixed keyword score")
    search_type: Literal["vector", "keyword"]
    relevant_chunk: str = Field(default="", description="Short text shown with the hit")
    data: Dict[str, Any] = Field(default_factory=dict, description="Serialized entity")


class SearchResponse(BaseModel):
    results: List[SearchResult]
    ai_response: Optional[str] = None
    total_results: int


class IndexRequest(BaseModel):
    """Indexing trigger.

    ``index-all`` accepts type products/templates/documents/all;
    ``index-single`` accepts product/template/document plus an id.
    """

    action: Literal["index-all", "index-single"]
    type: str
    id: Optional[str] = None


class IndexingReport(BaseModel):
    """Outcome of one indexing run for one entity type."""

    entity_type: str
    indexed: int = 0
    failed: int = 0
    total: int = 0
