from __future__ import annotations

from typing import Optional

import pytest
from pydantic import BaseModel, ValidationError

from es_handler.codec import decode_response
from es_handler.exceptions import CodecError, DocumentDecodeError
from es_handler.results import (
    DeleteByQueryResult,
    GetResult,
    SearchHit,
    SearchResult,
)


class Example(BaseModel):
    example_field: str
    other_field: list[int]


class Loose(BaseModel):
    example_field: str
    other_field: Optional[list[int]] = None


def _envelope(total=2):
    return {
        "took": 3,
        "timed_out": False,
        "_shards": {"total": 5, "successful": 5, "failed": 0},
        "hits": {
            "total": total,
            "max_score": 1.0,
            "hits": [
                {
                    "_index": "notes",
                    "_type": "note",
                    "_id": "a1",
                    "_score": 1.0,
                    "_source": {"example_field": "x", "other_field": [1, 2]},
                },
                {
                    "_index": "notes",
                    "_type": "memo",
                    "_id": "b2",
                    "_score": 0.5,
                    "_source": {"example_field": "x"},
                },
            ],
        },
    }


def test_decode_envelope_keeps_hit_order():
    result = decode_response(SearchResult, _envelope())

    assert result.shards.total == 5
    assert result.shards.successful == 5
    assert result.shards.failed == 0
    assert result.hits.total == 2
    assert len(result.hits.hits) == 2
    assert [hit.id for hit in result.hits.hits] == ["a1", "b2"]
    assert result.hits.hits[1].doc_type == "memo"
    assert result.hits.hits[0].score == 1.0


def test_total_accepts_object_form():
    result = decode_response(SearchResult, _envelope(total={"value": 2, "relation": "eq"}))
    assert result.hits.total == 2


def test_zero_hits_is_not_an_error():
    data = {"_shards": {"total": 1, "successful": 1, "failed": 0}, "hits": {"total": 0, "hits": []}}
    result = decode_response(SearchResult, data)
    assert result.hits.total == 0
    assert result.hits.hits == []


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("hits"),
        lambda d: d.pop("_shards"),
        lambda d: d["hits"].pop("total"),
        lambda d: d["hits"].pop("hits"),
        lambda d: d["hits"].__setitem__("hits", {"not": "a list"}),
        lambda d: d["_shards"].__setitem__("failed", "lots"),
        lambda d: d["hits"]["hits"][0].pop("_id"),
    ],
)
def test_structural_mismatch_is_codec_error(mutate):
    data = _envelope()
    mutate(data)
    with pytest.raises(CodecError) as excinfo:
        decode_response(SearchResult, data)
    assert isinstance(excinfo.value.__cause__, ValidationError)


def test_source_is_kept_as_raw_structure():
    result = decode_response(SearchResult, _envelope())
    assert result.hits.hits[1].source == {"example_field": "x"}


def test_typed_decode_success_and_repeatable():
    hit = decode_response(SearchResult, _envelope()).hits.hits[0]

    first = hit.source_as(Example)
    second = hit.source_as(Example)

    assert first == Example(example_field="x", other_field=[1, 2])
    assert first == second
    assert hit.source_as(dict[str, object]) == {"example_field": "x", "other_field": [1, 2]}


def test_typed_decode_mismatch_leaves_generic_source_available():
    hit = decode_response(SearchResult, _envelope()).hits.hits[1]

    with pytest.raises(DocumentDecodeError) as excinfo:
        hit.source_as(Example)
    assert isinstance(excinfo.value.__cause__, ValidationError)

    assert hit.source == {"example_field": "x"}
    assert hit.source_as(Loose) == Loose(example_field="x")


def test_typed_decode_failure_does_not_affect_other_hits():
    hits = decode_response(SearchResult, _envelope()).hits.hits

    with pytest.raises(DocumentDecodeError):
        hits[1].source_as(Example)

    assert hits[0].source_as(Example).other_field == [1, 2]


def test_typed_decode_without_source():
    hit = SearchHit.model_validate({"_index": "i", "_id": "1", "_score": None})
    assert hit.source is None
    assert hit.doc_type is None
    with pytest.raises(DocumentDecodeError):
        hit.source_as(Example)


def test_get_result_not_found_and_typed_source():
    missing = decode_response(GetResult, {"_index": "i", "_type": "t", "_id": "1", "found": False})
    assert missing.found is False
    assert missing.source is None

    found = decode_response(
        GetResult,
        {
            "_index": "i",
            "_type": "t",
            "_id": "1",
            "_version": 2,
            "found": True,
            "_source": {"example_field": "y", "other_field": []},
        },
    )
    assert found.version == 2
    assert found.source_as(Example).example_field == "y"


def test_delete_by_query_result_successful():
    ok = decode_response(
        DeleteByQueryResult,
        {
            "_indices": {
                "a": {"_shards": {"total": 5, "successful": 5, "failed": 0}},
                "b": {"_shards": {"total": 5, "successful": 5, "failed": 0}},
            }
        },
    )
    assert ok.successful() is True
    assert set(ok.indices) == {"a", "b"}

    partial = decode_response(
        DeleteByQueryResult,
        {"_indices": {"a": {"_shards": {"total": 5, "successful": 4, "failed": 1}}}},
    )
    assert partial.successful() is False


def test_typed_decode_does_not_coerce_strings_to_numbers():
    hit = SearchHit.model_validate(
        {"_index": "i", "_id": "1", "_source": {"example_field": "x", "other_field": ["1", 2, "3"]}}
    )

    with pytest.raises(DocumentDecodeError):
        hit.source_as(Example)
    with pytest.raises(DocumentDecodeError):
        hit.source_as(dict[str, list[int]])

    counts = SearchHit.model_validate({"_index": "i", "_id": "2", "_source": {"views": "10"}})
    with pytest.raises(DocumentDecodeError):
        counts.source_as(dict[str, int])
    assert counts.source_as(dict[str, str]) == {"views": "10"}


def test_typed_decode_returns_independent_data():
    hit = decode_response(SearchResult, _envelope()).hits.hits[0]

    decoded = hit.source_as(dict[str, object])
    decoded["example_field"] = "changed"

    assert hit.source["example_field"] == "x"
