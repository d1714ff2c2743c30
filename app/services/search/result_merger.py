from typing import Dict, List, Tuple

from app.schemas.search import SearchResult
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class SearchResultMerger:
    """
    Merges vector hits and keyword hits into one ranked list.

    Responsibilities:
    1. Deduplicate results by (type, entity id).
    2. Prefer the vector hit, and its score, when both sources found an entity.
    3. Sort by score, highest first. Ties keep their insertion order.
    """

    def merge(
        self,
        vector_results: List[SearchResult],
        keyword_results: List[SearchResult],
    ) -> List[SearchResult]:
        """
        Merge vector and keyword results.

        Args:
            vector_results: Hits from the vector index, scored by similarity.
            keyword_results: Hits from relational substring search, fixed scores.

        Returns:
            Unique results sorted by non-increasing score.
        """
        merged_map: Dict[Tuple[str, str], SearchResult] = {}

        for result in vector_results:
            key = self._generate_key(result)
            existing = merged_map.get(key)
            if existing is None or result.score > existing.score:
                merged_map[key] = result

        for result in keyword_results:
            key = self._generate_key(result)
            if key in merged_map:
                LOGGER.debug(f"Keyword hit {key} already found by vector search")
                continue
            merged_map[key] = result

        results = list(merged_map.values())
        results.sort(key=lambda r: r.score, reverse=True)
        return results

    def _generate_key(self, result: SearchResult) -> Tuple[str, str]:
        return (result.type, result.id)
