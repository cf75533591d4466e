"""Query DSL clauses and their builders.

Every variant is a frozen dataclass registered under its DSL name, so
``Query.from_dict(q.to_dict()) == q`` holds for any finalized query.

Example:
    query = (Query.build_filtered(
            Filter.build_bool()
                .with_must([
                    Filter.build_term("field_a", "value").build(),
                    Filter.build_range("field_b").with_gte(5).with_lt(10).build(),
                ])
                .build())
        .with_query(Query.build_query_string("some value").build())
        .build())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Sequence, Union

from .clause import (
    Bound,
    Clause,
    ClauseBuilder,
    Scalar,
    all_of_family,
    children,
    compact,
    expect_list,
    expect_object,
    field_entry,
    of_family,
    register,
    required,
)
from .filters import Filter


class Query(Clause):
    """Base of the query family."""

    family: ClassVar[str] = "query"
    registry: ClassVar[dict[str, type[Clause]]] = {}

    @staticmethod
    def build_match_all() -> "MatchAllQueryBuilder":
        return MatchAllQueryBuilder()

    @staticmethod
    def build_match(field: str, query: Scalar) -> "MatchQueryBuilder":
        return MatchQueryBuilder(field=field, query=query)

    @staticmethod
    def build_multi_match(fields: Sequence[str], query: Scalar) -> "MultiMatchQueryBuilder":
        return MultiMatchQueryBuilder(fields=tuple(fields), query=query)

    @staticmethod
    def build_query_string(query: str) -> "QueryStringQueryBuilder":
        return QueryStringQueryBuilder(query=query)

    @staticmethod
    def build_term(field: str, value: Scalar) -> "TermQueryBuilder":
        return TermQueryBuilder(field=field, value=value)

    @staticmethod
    def build_terms(field: str, values: Sequence[Scalar]) -> "TermsQueryBuilder":
        return TermsQueryBuilder(field=field, values=tuple(values))

    @staticmethod
    def build_range(field: str) -> "RangeQueryBuilder":
        return RangeQueryBuilder(field=field)

    @staticmethod
    def build_bool() -> "BoolQueryBuilder":
        return BoolQueryBuilder()

    @staticmethod
    def build_filtered(filter: Filter) -> "FilteredQueryBuilder":
        return FilteredQueryBuilder(filter=of_family(Filter, filter, "filtered.filter"))

    @staticmethod
    def build_constant_score(filter: Filter) -> "ConstantScoreQueryBuilder":
        return ConstantScoreQueryBuilder(filter=of_family(Filter, filter, "constant_score.filter"))


# ============================================================================
# Leaf queries
# ============================================================================


@register
@dataclass(frozen=True)
class MatchAllQuery(Query):
    """Match all documents."""

    kind: ClassVar[str] = "match_all"

    boost: Optional[float] = None

    def body(self) -> dict[str, Any]:
        return compact(boost=self.boost)

    @classmethod
    def from_body(cls, body: Any) -> "MatchAllQuery":
        return cls(boost=expect_object(body, "match_all").get("boost"))


@register
@dataclass(frozen=True)
class MatchQuery(Query):
    """Full-text match on one field.

    ``match_type`` is sent as ``"type"`` (``boolean``, ``phrase``,
    ``phrase_prefix``).
    """

    kind: ClassVar[str] = "match"

    field: str
    query: Scalar
    match_type: Optional[str] = None
    operator: Optional[str] = None
    analyzer: Optional[str] = None
    fuzziness: Optional[Union[str, int]] = None
    minimum_should_match: Optional[Union[str, int]] = None
    zero_terms_query: Optional[str] = None
    boost: Optional[float] = None

    def body(self) -> dict[str, Any]:
        return {
            self.field: compact(
                query=self.query,
                type=self.match_type,
                operator=self.operator,
                analyzer=self.analyzer,
                fuzziness=self.fuzziness,
                minimum_should_match=self.minimum_should_match,
                zero_terms_query=self.zero_terms_query,
                boost=self.boost,
            )
        }

    @classmethod
    def from_body(cls, body: Any) -> "MatchQuery":
        field, entry = field_entry(body, "match")
        if not isinstance(entry, dict):
            # Shorthand form: {"match": {"field": "text"}}
            return cls(field=field, query=entry)
        return cls(
            field=field,
            query=required(entry, "query", f"match.{field}"),
            match_type=entry.get("type"),
            operator=entry.get("operator"),
            analyzer=entry.get("analyzer"),
            fuzziness=entry.get("fuzziness"),
            minimum_should_match=entry.get("minimum_should_match"),
            zero_terms_query=entry.get("zero_terms_query"),
            boost=entry.get("boost"),
        )


@register
@dataclass(frozen=True)
class MultiMatchQuery(Query):
    kind: ClassVar[str] = "multi_match"

    fields: tuple[str, ...]
    query: Scalar
    match_type: Optional[str] = None
    operator: Optional[str] = None
    analyzer: Optional[str] = None
    tie_breaker: Optional[float] = None
    minimum_should_match: Optional[Union[str, int]] = None
    boost: Optional[float] = None

    def body(self) -> dict[str, Any]:
        return compact(
            query=self.query,
            fields=list(self.fields),
            type=self.match_type,
            operator=self.operator,
            analyzer=self.analyzer,
            tie_breaker=self.tie_breaker,
            minimum_should_match=self.minimum_should_match,
            boost=self.boost,
        )

    @classmethod
    def from_body(cls, body: Any) -> "MultiMatchQuery":
        body = expect_object(body, "multi_match")
        return cls(
            fields=tuple(expect_list(required(body, "fields", "multi_match"), "multi_match.fields")),
            query=required(body, "query", "multi_match"),
            match_type=body.get("type"),
            operator=body.get("operator"),
            analyzer=body.get("analyzer"),
            tie_breaker=body.get("tie_breaker"),
            minimum_should_match=body.get("minimum_should_match"),
            boost=body.get("boost"),
        )


@register
@dataclass(frozen=True)
class QueryStringQuery(Query):
    """Lucene query-string syntax, parsed by the engine."""

    kind: ClassVar[str] = "query_string"

    query: str
    default_field: Optional[str] = None
    fields: Optional[tuple[str, ...]] = None
    default_operator: Optional[str] = None
    analyzer: Optional[str] = None
    allow_leading_wildcard: Optional[bool] = None
    lenient: Optional[bool] = None
    minimum_should_match: Optional[Union[str, int]] = None
    boost: Optional[float] = None

    def body(self) -> dict[str, Any]:
        return compact(
            query=self.query,
            default_field=self.default_field,
            fields=list(self.fields) if self.fields is not None else None,
            default_operator=self.default_operator,
            analyzer=self.analyzer,
            allow_leading_wildcard=self.allow_leading_wildcard,
            lenient=self.lenient,
            minimum_should_match=self.minimum_should_match,
            boost=self.boost,
        )

    @classmethod
    def from_body(cls, body: Any) -> "QueryStringQuery":
        body = expect_object(body, "query_string")
        fields = body.get("fields")
        return cls(
            query=required(body, "query", "query_string"),
            default_field=body.get("default_field"),
            fields=tuple(expect_list(fields, "query_string.fields")) if fields is not None else None,
            default_operator=body.get("default_operator"),
            analyzer=body.get("analyzer"),
            allow_leading_wildcard=body.get("allow_leading_wildcard"),
            lenient=body.get("lenient"),
            minimum_should_match=body.get("minimum_should_match"),
            boost=body.get("boost"),
        )


@register
@dataclass(frozen=True)
class TermQuery(Query):
    """Exact term match query."""

    kind: ClassVar[str] = "term"

    field: str
    value: Scalar
    boost: Optional[float] = None

    def body(self) -> dict[str, Any]:
        if self.boost is not None:
            return {self.field: {"value": self.value, "boost": self.boost}}
        return {self.field: self.value}

    @classmethod
    def from_body(cls, body: Any) -> "TermQuery":
        field, entry = field_entry(body, "term")
        if isinstance(entry, dict):
            return cls(
                field=field,
                value=required(entry, "value", f"term.{field}"),
                boost=entry.get("boost"),
            )
        return cls(field=field, value=entry)


@register
@dataclass(frozen=True)
class TermsQuery(Query):
    kind: ClassVar[str] = "terms"

    field: str
    values: tuple[Scalar, ...]
    minimum_should_match: Optional[Union[str, int]] = None

    def body(self) -> dict[str, Any]:
        return {
            self.field: list(self.values),
            **compact(minimum_should_match=self.minimum_should_match),
        }

    @classmethod
    def from_body(cls, body: Any) -> "TermsQuery":
        field, values = field_entry(body, "terms", reserved=frozenset({"minimum_should_match"}))
        return cls(
            field=field,
            values=tuple(expect_list(values, f"terms.{field}")),
            minimum_should_match=body.get("minimum_should_match"),
        )


@register
@dataclass(frozen=True)
class RangeQuery(Query):
    """Range query."""

    kind: ClassVar[str] = "range"

    field: str
    gte: Optional[Bound] = None
    gt: Optional[Bound] = None
    lte: Optional[Bound] = None
    lt: Optional[Bound] = None
    format: Optional[str] = None
    boost: Optional[float] = None

    def body(self) -> dict[str, Any]:
        return {
            self.field: compact(
                gte=self.gte,
                gt=self.gt,
                lte=self.lte,
                lt=self.lt,
                format=self.format,
                boost=self.boost,
            )
        }

    @classmethod
    def from_body(cls, body: Any) -> "RangeQuery":
        field, entry = field_entry(body, "range")
        entry = expect_object(entry, f"range.{field}")
        return cls(
            field=field,
            gte=entry.get("gte"),
            gt=entry.get("gt"),
            lte=entry.get("lte"),
            lt=entry.get("lt"),
            format=entry.get("format"),
            boost=entry.get("boost"),
        )


# ============================================================================
# Compound queries
# ============================================================================


@register
@dataclass(frozen=True)
class BoolQuery(Query):
    """Boolean compound query. Child order is preserved on the wire."""

    kind: ClassVar[str] = "bool"

    must: Optional[tuple[Query, ...]] = None
    should: Optional[tuple[Query, ...]] = None
    must_not: Optional[tuple[Query, ...]] = None
    minimum_should_match: Optional[Union[str, int]] = None
    boost: Optional[float] = None

    def body(self) -> dict[str, Any]:
        bool_body: dict[str, Any] = {}

        if self.must is not None:
            bool_body["must"] = [q.to_dict() for q in self.must]

        if self.should is not None:
            bool_body["should"] = [q.to_dict() for q in self.should]

        if self.must_not is not None:
            bool_body["must_not"] = [q.to_dict() for q in self.must_not]

        bool_body.update(compact(minimum_should_match=self.minimum_should_match, boost=self.boost))
        return bool_body

    @classmethod
    def from_body(cls, body: Any) -> "BoolQuery":
        body = expect_object(body, "bool")
        return cls(
            must=children(Query, body, "must", "bool"),
            should=children(Query, body, "should", "bool"),
            must_not=children(Query, body, "must_not", "bool"),
            minimum_should_match=body.get("minimum_should_match"),
            boost=body.get("boost"),
        )


@register
@dataclass(frozen=True)
class FilteredQuery(Query):
    """Runs ``query`` and keeps only documents passing ``filter``."""

    kind: ClassVar[str] = "filtered"

    filter: Filter
    query: Optional[Query] = None

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.query is not None:
            body["query"] = self.query.to_dict()
        body["filter"] = self.filter.to_dict()
        return body

    @classmethod
    def from_body(cls, body: Any) -> "FilteredQuery":
        body = expect_object(body, "filtered")
        query = body.get("query")
        return cls(
            filter=Filter.from_dict(required(body, "filter", "filtered")),
            query=Query.from_dict(query) if query is not None else None,
        )


@register
@dataclass(frozen=True)
class ConstantScoreQuery(Query):
    kind: ClassVar[str] = "constant_score"

    filter: Filter
    boost: Optional[float] = None

    def body(self) -> dict[str, Any]:
        return {"filter": self.filter.to_dict(), **compact(boost=self.boost)}

    @classmethod
    def from_body(cls, body: Any) -> "ConstantScoreQuery":
        body = expect_object(body, "constant_score")
        return cls(
            filter=Filter.from_dict(required(body, "filter", "constant_score")),
            boost=body.get("boost"),
        )


# ============================================================================
# Builders
# ============================================================================


class MatchAllQueryBuilder(ClauseBuilder[MatchAllQuery]):
    clause_class = MatchAllQuery

    def with_boost(self, boost: float) -> "MatchAllQueryBuilder":
        return self._set("boost", boost)


class MatchQueryBuilder(ClauseBuilder[MatchQuery]):
    clause_class = MatchQuery

    def with_type(self, match_type: str) -> "MatchQueryBuilder":
        return self._set("match_type", match_type)

    def with_operator(self, operator: str) -> "MatchQueryBuilder":
        return self._set("operator", operator)

    def with_analyzer(self, analyzer: str) -> "MatchQueryBuilder":
        return self._set("analyzer", analyzer)

    def with_fuzziness(self, fuzziness: Union[str, int]) -> "MatchQueryBuilder":
        return self._set("fuzziness", fuzziness)

    def with_minimum_should_match(self, value: Union[str, int]) -> "MatchQueryBuilder":
        return self._set("minimum_should_match", value)

    def with_zero_terms_query(self, value: str) -> "MatchQueryBuilder":
        return self._set("zero_terms_query", value)

    def with_boost(self, boost: float) -> "MatchQueryBuilder":
        return self._set("boost", boost)


class MultiMatchQueryBuilder(ClauseBuilder[MultiMatchQuery]):
    clause_class = MultiMatchQuery

    def with_type(self, match_type: str) -> "MultiMatchQueryBuilder":
        return self._set("match_type", match_type)

    def with_operator(self, operator: str) -> "MultiMatchQueryBuilder":
        return self._set("operator", operator)

    def with_analyzer(self, analyzer: str) -> "MultiMatchQueryBuilder":
        return self._set("analyzer", analyzer)

    def with_tie_breaker(self, tie_breaker: float) -> "MultiMatchQueryBuilder":
        return self._set("tie_breaker", tie_breaker)

    def with_minimum_should_match(self, value: Union[str, int]) -> "MultiMatchQueryBuilder":
        return self._set("minimum_should_match", value)

    def with_boost(self, boost: float) -> "MultiMatchQueryBuilder":
        return self._set("boost", boost)


class QueryStringQueryBuilder(ClauseBuilder[QueryStringQuery]):
    clause_class = QueryStringQuery

    def with_default_field(self, field: str) -> "QueryStringQueryBuilder":
        return self._set("default_field", field)

    def with_fields(self, fields: Sequence[str]) -> "QueryStringQueryBuilder":
        return self._set("fields", tuple(fields))

    def with_default_operator(self, operator: str) -> "QueryStringQueryBuilder":
        return self._set("default_operator", operator)

    def with_analyzer(self, analyzer: str) -> "QueryStringQueryBuilder":
        return self._set("analyzer", analyzer)

    def with_allow_leading_wildcard(self, allow: bool) -> "QueryStringQueryBuilder":
        return self._set("allow_leading_wildcard", allow)

    def with_lenient(self, lenient: bool) -> "QueryStringQueryBuilder":
        return self._set("lenient", lenient)

    def with_minimum_should_match(self, value: Union[str, int]) -> "QueryStringQueryBuilder":
        return self._set("minimum_should_match", value)

    def with_boost(self, boost: float) -> "QueryStringQueryBuilder":
        return self._set("boost", boost)


class TermQueryBuilder(ClauseBuilder[TermQuery]):
    clause_class = TermQuery

    def with_boost(self, boost: float) -> "TermQueryBuilder":
        return self._set("boost", boost)


class TermsQueryBuilder(ClauseBuilder[TermsQuery]):
    clause_class = TermsQuery

    def with_minimum_should_match(self, value: Union[str, int]) -> "TermsQueryBuilder":
        return self._set("minimum_should_match", value)


class RangeQueryBuilder(ClauseBuilder[RangeQuery]):
    clause_class = RangeQuery

    def with_gte(self, value: Bound) -> "RangeQueryBuilder":
        return self._set("gte", value)

    def with_gt(self, value: Bound) -> "RangeQueryBuilder":
        return self._set("gt", value)

    def with_lte(self, value: Bound) -> "RangeQueryBuilder":
        return self._set("lte", value)

    def with_lt(self, value: Bound) -> "RangeQueryBuilder":
        return self._set("lt", value)

    def with_format(self, fmt: str) -> "RangeQueryBuilder":
        return self._set("format", fmt)

    def with_boost(self, boost: float) -> "RangeQueryBuilder":
        return self._set("boost", boost)


class BoolQueryBuilder(ClauseBuilder[BoolQuery]):
    clause_class = BoolQuery

    def with_must(self, queries: Sequence[Query]) -> "BoolQueryBuilder":
        return self._set("must", all_of_family(Query, queries, "bool.must"))

    def with_should(self, queries: Sequence[Query]) -> "BoolQueryBuilder":
        return self._set("should", all_of_family(Query, queries, "bool.should"))

    def with_must_not(self, queries: Sequence[Query]) -> "BoolQueryBuilder":
        return self._set("must_not", all_of_family(Query, queries, "bool.must_not"))

    def with_minimum_should_match(self, value: Union[str, int]) -> "BoolQueryBuilder":
        return self._set("minimum_should_match", value)

    def with_boost(self, boost: float) -> "BoolQueryBuilder":
        return self._set("boost", boost)


class FilteredQueryBuilder(ClauseBuilder[FilteredQuery]):
    clause_class = FilteredQuery

    def with_query(self, query: Query) -> "FilteredQueryBuilder":
        return self._set("query", of_family(Query, query, "filtered.query"))


class ConstantScoreQueryBuilder(ClauseBuilder[ConstantScoreQuery]):
    clause_class = ConstantScoreQuery

    def with_boost(self, boost: float) -> "ConstantScoreQueryBuilder":
        return self._set("boost", boost)
