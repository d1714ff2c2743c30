import pytest

from app.schemas.search import SearchResult
from app.services.search.result_merger import SearchResultMerger


def _result(type_, id_, score, search_type):
    return SearchResult(type=type_, id=id_, score=score, search_type=search_type)


@pytest.fixture
def merger():
    return SearchResultMerger()


def test_vector_hit_wins_over_keyword_hit(merger):
    vector = [_result("product", "p1", 0.55, "vector")]
    keyword = [_result("product", "p1", 0.8, "keyword")]

    merged = merger.merge(vector, keyword)

    assert len(merged) == 1
    assert merged[0].search_type == "vector"
    assert merged[0].score == 0.55


def test_same_id_different_type_is_not_deduplicated(merger):
    vector = [_result("product", "x", 0.9, "vector")]
    keyword = [_result("document", "x", 0.6, "keyword")]

    merged = merger.merge(vector, keyword)

    assert {(r.type, r.id) for r in merged} == {("product", "x"), ("document", "x")}


def test_duplicate_vector_hits_keep_best_score(merger):
    vector = [_result("document", "d1", 0.4, "vector"), _result("document", "d1", 0.7, "vector")]

    merged = merger.merge(vector, [])

    assert len(merged) == 1
    assert merged[0].score == 0.7


def test_results_sorted_by_score_descending(merger):
    vector = [_result("document", "d1", 0.65, "vector"), _result("template", "t1", 0.91, "vector")]
    keyword = [
        _result("product", "p1", 0.8, "keyword"),
        _result("template", "t2", 0.7, "keyword"),
        _result("document", "d2", 0.6, "keyword"),
    ]

    merged = merger.merge(vector, keyword)

    scores = [r.score for r in merged]
    assert scores == sorted(scores, reverse=True)
    assert [r.id for r in merged] == ["t1", "p1", "t2", "d1", "d2"]


def test_ties_keep_insertion_order(merger):
    keyword = [_result("product", "p1", 0.8, "keyword"), _result("product", "p2", 0.8, "keyword")]

    merged = merger.merge([], keyword)

    assert [r.id for r in merged] == ["p1", "p2"]


def test_empty_inputs(merger):
    assert merger.merge([], []) == []
