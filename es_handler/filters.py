"""Filter clauses and their builders.

Filters are the non-scoring half of the DSL. They nest only other
filters; :class:`~es_handler.query.FilteredQuery` and
:class:`~es_handler.query.ConstantScoreQuery` carry them into a query.

Example:
    flt = (Filter.build_bool()
        .with_must([
            Filter.build_term("status", "active").build(),
            Filter.build_range("age").with_gte(18).build(),
        ])
        .build())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Sequence

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


class Filter(Clause):
    """Base of the filter family."""

    family: ClassVar[str] = "filter"
    registry: ClassVar[dict[str, type[Clause]]] = {}

    @staticmethod
    def build_match_all() -> "MatchAllFilterBuilder":
        return MatchAllFilterBuilder()

    @staticmethod
    def build_term(field: str, value: Scalar) -> "TermFilterBuilder":
        return TermFilterBuilder(field=field, value=value)

    @staticmethod
    def build_terms(field: str, values: Sequence[Scalar]) -> "TermsFilterBuilder":
        return TermsFilterBuilder(field=field, values=tuple(values))

    @staticmethod
    def build_range(field: str) -> "RangeFilterBuilder":
        return RangeFilterBuilder(field=field)

    @staticmethod
    def build_exists(field: str) -> "ExistsFilterBuilder":
        return ExistsFilterBuilder(field=field)

    @staticmethod
    def build_missing(field: str) -> "MissingFilterBuilder":
        return MissingFilterBuilder(field=field)

    @staticmethod
    def build_bool() -> "BoolFilterBuilder":
        return BoolFilterBuilder()

    @staticmethod
    def build_not(filter: "Filter") -> "NotFilterBuilder":
        return NotFilterBuilder(filter=of_family(Filter, filter, "not"))


# ============================================================================
# Variants
# ============================================================================


@register
@dataclass(frozen=True)
class MatchAllFilter(Filter):
    kind: ClassVar[str] = "match_all"

    def body(self) -> dict[str, Any]:
        return {}

    @classmethod
    def from_body(cls, body: Any) -> "MatchAllFilter":
        expect_object(body, "match_all")
        return cls()


@register
@dataclass(frozen=True)
class TermFilter(Filter):
    """Exact value on a not-analyzed field."""

    kind: ClassVar[str] = "term"

    field: str
    value: Scalar

    def body(self) -> dict[str, Any]:
        return {self.field: self.value}

    @classmethod
    def from_body(cls, body: Any) -> "TermFilter":
        field, value = field_entry(body, "term")
        return cls(field=field, value=value)


@register
@dataclass(frozen=True)
class TermsFilter(Filter):
    kind: ClassVar[str] = "terms"

    field: str
    values: tuple[Scalar, ...]

    def body(self) -> dict[str, Any]:
        return {self.field: list(self.values)}

    @classmethod
    def from_body(cls, body: Any) -> "TermsFilter":
        field, values = field_entry(body, "terms")
        return cls(field=field, values=tuple(expect_list(values, f"terms.{field}")))


@register
@dataclass(frozen=True)
class RangeFilter(Filter):
    """Bounded range on one field. No bounds at all is allowed."""

    kind: ClassVar[str] = "range"

    field: str
    gte: Optional[Bound] = None
    gt: Optional[Bound] = None
    lte: Optional[Bound] = None
    lt: Optional[Bound] = None

    def body(self) -> dict[str, Any]:
        return {self.field: compact(gte=self.gte, gt=self.gt, lte=self.lte, lt=self.lt)}

    @classmethod
    def from_body(cls, body: Any) -> "RangeFilter":
        field, bounds = field_entry(body, "range")
        bounds = expect_object(bounds, f"range.{field}")
        return cls(
            field=field,
            gte=bounds.get("gte"),
            gt=bounds.get("gt"),
            lte=bounds.get("lte"),
            lt=bounds.get("lt"),
        )


@register
@dataclass(frozen=True)
class ExistsFilter(Filter):
    kind: ClassVar[str] = "exists"

    field: str

    def body(self) -> dict[str, Any]:
        return {"field": self.field}

    @classmethod
    def from_body(cls, body: Any) -> "ExistsFilter":
        body = expect_object(body, "exists")
        return cls(field=required(body, "field", "exists"))


@register
@dataclass(frozen=True)
class MissingFilter(Filter):
    kind: ClassVar[str] = "missing"

    field: str
    existence: Optional[bool] = None
    null_value: Optional[bool] = None

    def body(self) -> dict[str, Any]:
        return compact(field=self.field, existence=self.existence, null_value=self.null_value)

    @classmethod
    def from_body(cls, body: Any) -> "MissingFilter":
        body = expect_object(body, "missing")
        return cls(
            field=required(body, "field", "missing"),
            existence=body.get("existence"),
            null_value=body.get("null_value"),
        )


@register
@dataclass(frozen=True)
class BoolFilter(Filter):
    """Boolean combinator over filters. Child order is preserved."""

    kind: ClassVar[str] = "bool"

    must: Optional[tuple[Filter, ...]] = None
    should: Optional[tuple[Filter, ...]] = None
    must_not: Optional[tuple[Filter, ...]] = None

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.must is not None:
            body["must"] = [f.to_dict() for f in self.must]
        if self.should is not None:
            body["should"] = [f.to_dict() for f in self.should]
        if self.must_not is not None:
            body["must_not"] = [f.to_dict() for f in self.must_not]
        return body

    @classmethod
    def from_body(cls, body: Any) -> "BoolFilter":
        body = expect_object(body, "bool")
        return cls(
            must=children(Filter, body, "must", "bool"),
            should=children(Filter, body, "should", "bool"),
            must_not=children(Filter, body, "must_not", "bool"),
        )


@register
@dataclass(frozen=True)
class NotFilter(Filter):
    kind: ClassVar[str] = "not"

    filter: Filter

    def body(self) -> dict[str, Any]:
        return {"filter": self.filter.to_dict()}

    @classmethod
    def from_body(cls, body: Any) -> "NotFilter":
        body = expect_object(body, "not")
        if "filter" in body:
            return cls(filter=Filter.from_dict(body["filter"]))
        return cls(filter=Filter.from_dict(body))


# ============================================================================
# Builders
# ============================================================================


class MatchAllFilterBuilder(ClauseBuilder[MatchAllFilter]):
    clause_class = MatchAllFilter


class TermFilterBuilder(ClauseBuilder[TermFilter]):
    clause_class = TermFilter


class TermsFilterBuilder(ClauseBuilder[TermsFilter]):
    clause_class = TermsFilter


class RangeFilterBuilder(ClauseBuilder[RangeFilter]):
    clause_class = RangeFilter

    def with_gte(self, value: Bound) -> "RangeFilterBuilder":
        return self._set("gte", value)

    def with_gt(self, value: Bound) -> "RangeFilterBuilder":
        return self._set("gt", value)

    def with_lte(self, value: Bound) -> "RangeFilterBuilder":
        return self._set("lte", value)

    def with_lt(self, value: Bound) -> "RangeFilterBuilder":
        return self._set("lt", value)


class ExistsFilterBuilder(ClauseBuilder[ExistsFilter]):
    clause_class = ExistsFilter


class MissingFilterBuilder(ClauseBuilder[MissingFilter]):
    clause_class = MissingFilter

    def with_existence(self, existence: bool) -> "MissingFilterBuilder":
        return self._set("existence", existence)

    def with_null_value(self, null_value: bool) -> "MissingFilterBuilder":
        return self._set("null_value", null_value)


class BoolFilterBuilder(ClauseBuilder[BoolFilter]):
    clause_class = BoolFilter

    def with_must(self, filters: Sequence[Filter]) -> "BoolFilterBuilder":
        return self._set("must", all_of_family(Filter, filters, "bool.must"))

    def with_should(self, filters: Sequence[Filter]) -> "BoolFilterBuilder":
        return self._set("should", all_of_family(Filter, filters, "bool.should"))

    def with_must_not(self, filters: Sequence[Filter]) -> "BoolFilterBuilder":
        return self._set("must_not", all_of_family(Filter, filters, "bool.must_not"))


class NotFilterBuilder(ClauseBuilder[NotFilter]):
    clause_class = NotFilter
