from __future__ import annotations

import dataclasses

import pytest

from es_handler.codec import decode_filter, decode_query, dumps, encode_filter, encode_query
from es_handler.exceptions import BuilderReuseError, CodecError
from es_handler.filters import BoolFilter, Filter, RangeFilter, TermFilter
from es_handler.query import FilteredQuery, MatchQuery, MultiMatchQuery, Query, TermQuery


def _scenario_query() -> Query:
    bool_filter = (
        Filter.build_bool()
        .with_must([
            Filter.build_term("field_a", "value").build(),
            Filter.build_range("field_b").with_gte(5).with_lt(10).build(),
        ])
        .build()
    )
    return (
        Query.build_filtered(bool_filter)
        .with_query(Query.build_query_string("some value").build())
        .build()
    )


def test_filtered_bool_scenario_serializes_exactly():
    query = _scenario_query()

    assert query.to_dict() == {
        "filtered": {
            "query": {"query_string": {"query": "some value"}},
            "filter": {
                "bool": {
                    "must": [
                        {"term": {"field_a": "value"}},
                        {"range": {"field_b": {"gte": 5, "lt": 10}}},
                    ]
                }
            },
        }
    }
    assert encode_query(query) == query.to_dict()
    assert list(query.to_dict()["filtered"]) == ["query", "filter"]
    assert dumps(query) == (
        '{"filtered":{"query":{"query_string":{"query":"some value"}},'
        '"filter":{"bool":{"must":[{"term":{"field_a":"value"}},'
        '{"range":{"field_b":{"gte":5,"lt":10}}}]}}}}'
    )


def test_bool_preserves_insertion_order():
    a = Query.build_match("title", "a").build()
    b = Query.build_term("kind", "b").build()
    c = Query.build_match_all().build()

    body = (
        Query.build_bool()
        .with_must([c, a])
        .with_should([b, a, c])
        .with_must_not([a, b])
        .build()
        .to_dict()["bool"]
    )

    assert body["must"] == [c.to_dict(), a.to_dict()]
    assert body["should"] == [b.to_dict(), a.to_dict(), c.to_dict()]
    assert body["must_not"] == [a.to_dict(), b.to_dict()]
    assert list(body) == ["must", "should", "must_not"]


def test_range_without_bounds_keeps_field():
    assert Filter.build_range("age").build().to_dict() == {"range": {"age": {}}}
    assert Query.build_range("age").build().to_dict() == {"range": {"age": {}}}


def test_range_bounds_and_dates():
    flt = Filter.build_range("created").with_gt("2015-01-01").with_lte("now").build()
    assert flt.to_dict() == {"range": {"created": {"gt": "2015-01-01", "lte": "now"}}}

    query = Query.build_range("price").with_gte(1.5).with_boost(2.0).with_format("yyyy").build()
    assert query.to_dict() == {"range": {"price": {"gte": 1.5, "format": "yyyy", "boost": 2.0}}}


def test_empty_bool_and_explicit_empty_list():
    assert Filter.build_bool().build().to_dict() == {"bool": {}}
    assert Query.build_bool().build().to_dict() == {"bool": {}}
    assert Query.build_bool().with_must([]).build().to_dict() == {"bool": {"must": []}}


def test_absent_optionals_are_omitted_not_null():
    match = Query.build_match("title", "hello").build().to_dict()
    assert match == {"match": {"title": {"query": "hello"}}}
    assert "null" not in dumps(match)

    qs = Query.build_query_string("a AND b").with_default_field("body").build()
    assert qs.to_dict() == {"query_string": {"query": "a AND b", "default_field": "body"}}


def test_reserved_word_type_keeps_wire_key():
    mm = (
        Query.build_multi_match(["title", "body"], "quick fox")
        .with_type("best_fields")
        .with_tie_breaker(0.3)
        .build()
    )
    assert mm.match_type == "best_fields"
    assert mm.to_dict() == {
        "multi_match": {
            "query": "quick fox",
            "fields": ["title", "body"],
            "type": "best_fields",
            "tie_breaker": 0.3,
        }
    }

    phrase = Query.build_match("title", "quick fox").with_type("phrase").build()
    assert phrase.to_dict()["match"]["title"]["type"] == "phrase"


def test_term_boost_uses_object_form():
    assert Query.build_term("kind", "note").build().to_dict() == {"term": {"kind": "note"}}
    boosted = Query.build_term("kind", "note").with_boost(2.0).build()
    assert boosted.to_dict() == {"term": {"kind": {"value": "note", "boost": 2.0}}}


def test_constant_score_and_not_wrap_filters():
    inner = Filter.build_exists("email").build()
    cs = Query.build_constant_score(Filter.build_not(inner).build()).with_boost(1.2).build()
    assert cs.to_dict() == {
        "constant_score": {"filter": {"not": {"filter": {"exists": {"field": "email"}}}}, "boost": 1.2}
    }


def test_build_twice_raises():
    builder = Query.build_match("title", "hello")
    builder.build()
    with pytest.raises(BuilderReuseError):
        builder.build()

    range_builder = Filter.build_range("age")
    range_builder.build()
    with pytest.raises(BuilderReuseError):
        range_builder.build()


def test_finalized_clause_is_immutable():
    term = Filter.build_term("kind", "note").build()
    with pytest.raises(dataclasses.FrozenInstanceError):
        term.value = "other"  # type: ignore[misc]


def test_builders_produce_variant_types():
    assert isinstance(_scenario_query(), FilteredQuery)
    assert isinstance(Filter.build_term("a", 1).build(), TermFilter)
    assert isinstance(Filter.build_range("a").build(), RangeFilter)
    assert isinstance(Filter.build_bool().build(), BoolFilter)
    assert isinstance(Query.build_match("a", "b").build(), MatchQuery)


QUERIES = [
    _scenario_query(),
    Query.build_match_all().build(),
    Query.build_match_all().with_boost(1.5).build(),
    Query.build_match("title", "hello").with_operator("and").with_fuzziness("AUTO").build(),
    Query.build_multi_match(["a", "b"], "x").with_type("phrase").build(),
    Query.build_query_string("x").with_fields(["a", "b^2"]).with_lenient(True).build(),
    Query.build_term("kind", 3).with_boost(2.0).build(),
    Query.build_terms("tags", ["a", "b"]).with_minimum_should_match(1).build(),
    Query.build_range("n").with_gt(1).with_lt(2).build(),
    Query.build_bool()
    .with_must([Query.build_term("a", "b").build()])
    .with_should([Query.build_match("c", "d").build(), Query.build_match_all().build()])
    .with_must_not([])
    .with_minimum_should_match("50%")
    .build(),
    Query.build_constant_score(Filter.build_match_all().build()).build(),
]

FILTERS = [
    Filter.build_terms("tags", ["x", "y"]).build(),
    Filter.build_missing("email").with_existence(True).with_null_value(False).build(),
    Filter.build_not(Filter.build_exists("email").build()).build(),
    Filter.build_bool()
    .with_should([Filter.build_term("a", True).build()])
    .with_must_not([Filter.build_range("n").with_lte(3).build()])
    .build(),
]


@pytest.mark.parametrize("query", QUERIES, ids=lambda q: q.kind)
def test_query_round_trip(query):
    assert decode_query(query.to_dict()) == query
    assert decode_query(dumps(query)) == query


@pytest.mark.parametrize("flt", FILTERS, ids=lambda f: f.kind)
def test_filter_round_trip(flt):
    assert decode_filter(encode_filter(flt)) == flt


def test_decode_accepts_shorthand_forms():
    assert decode_query({"match": {"title": "hello"}}) == MatchQuery(field="title", query="hello")
    assert decode_query({"term": {"kind": {"value": "note"}}}) == TermQuery(field="kind", value="note")
    assert decode_query({"multi_match": {"query": "q", "fields": ["a"], "type": "phrase"}}) == (
        MultiMatchQuery(fields=("a",), query="q", match_type="phrase")
    )


@pytest.mark.parametrize(
    "data",
    [
        {"no_such_kind": {}},
        {"match": {"a": "b"}, "term": {"c": "d"}},
        [],
        {"bool": {"must": {"match_all": {}}}},
        {"filtered": {"query": {"match_all": {}}}},
        {"range": {"a": {}, "b": {}}},
        {"match": {"title": {"operator": "and"}}},
    ],
)
def test_decode_query_rejects_malformed(data):
    with pytest.raises(CodecError):
        decode_query(data)


def test_filter_family_does_not_accept_query_kinds():
    with pytest.raises(CodecError):
        decode_filter({"query_string": {"query": "x"}})


def test_filter_bool_rejects_query_children():
    match = Query.build_match("a", "b").build()
    with pytest.raises(TypeError):
        Filter.build_bool().with_must([match])
    with pytest.raises(TypeError):
        Filter.build_bool().with_should([Filter.build_term("a", 1).build(), match])
    with pytest.raises(TypeError):
        Filter.build_not(match)


def test_query_slots_reject_wrong_family():
    boosted = Query.build_match_all().with_boost(2.0).build()
    with pytest.raises(TypeError):
        Query.build_filtered(boosted)
    with pytest.raises(TypeError):
        Query.build_constant_score(boosted)

    term_filter = Filter.build_term("a", "b").build()
    with pytest.raises(TypeError):
        Query.build_bool().with_must_not([term_filter])
    with pytest.raises(TypeError):
        Query.build_filtered(Filter.build_match_all().build()).with_query(term_filter)


@pytest.mark.parametrize(
    "make",
    [
        lambda: Query.build_match("a", None),
        lambda: Query.build_term(None, "x"),
        lambda: Query.build_query_string(None),
        lambda: Filter.build_exists(None),
        lambda: Filter.build_range(None),
    ],
)
def test_none_mandatory_argument_is_rejected(make):
    with pytest.raises(ValueError):
        make()
