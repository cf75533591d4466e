"""Shared machinery for the Query and Filter clause families.

A clause family is a base class holding a registry of its variants keyed
by DSL name. Each variant is a frozen dataclass that knows how to render
its own body (``body``) and how to rebuild itself from one
(``from_body``). Builders capture mandatory fields at construction and
collect optional ones until ``build()`` is called, once.
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, TypeVar, Union

from .exceptions import BuilderReuseError, CodecError

Scalar = Union[str, int, float, bool]
Bound = Union[int, float, str]

C = TypeVar("C", bound="Clause")


class Clause:
    """Base of every DSL node."""

    kind: ClassVar[str]
    family: ClassVar[str]
    registry: ClassVar[dict[str, type["Clause"]]]

    def body(self) -> Any:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        """Render as the single-key object the engine expects."""
        return {self.kind: self.body()}

    @classmethod
    def from_body(cls, body: Any) -> "Clause":
        raise NotImplementedError

    @classmethod
    def from_dict(cls, data: Any) -> Any:
        """Rebuild a clause of this family from its JSON object form."""
        if not isinstance(data, dict) or len(data) != 1:
            raise CodecError(
                f"{cls.family} clause must be a single-key object, got {data!r}"
            )
        ((kind, body),) = data.items()
        variant = cls.registry.get(kind)
        if variant is None:
            raise CodecError(f"Unknown {cls.family} kind: {kind!r}")
        return variant.from_body(body)


def register(cls: type[C]) -> type[C]:
    """Class decorator adding a variant to its family registry."""
    cls.registry[cls.kind] = cls
    return cls


def of_family(family: type[Clause], clause: Any, where: str) -> Any:
    """Check that *clause* is a finalized clause of *family*."""
    if not isinstance(clause, family):
        raise TypeError(
            f"{where}: expected a {family.family} clause, got {type(clause).__name__}"
        )
    return clause


def all_of_family(family: type[Clause], clauses: Any, where: str) -> tuple[Any, ...]:
    return tuple(of_family(family, clause, where) for clause in clauses)


class ClauseBuilder(Generic[C]):
    """Two-phase builder: required payload plus an options accumulator."""

    clause_class: type[C]

    def __init__(self, **required: Any) -> None:
        missing = [name for name, value in required.items() if value is None]
        if missing:
            raise ValueError(
                f"{type(self).__name__}: {', '.join(missing)} must not be None"
            )
        self._required = required
        self._options: dict[str, Any] = {}
        self._built = False

    def _set(self, name: str, value: Any) -> Any:
        self._options[name] = value
        return self

    def build(self) -> C:
        """Finalize into an immutable clause. May only be called once."""
        if self._built:
            raise BuilderReuseError(f"{type(self).__name__}.build() called twice")
        self._built = True
        return self.clause_class(**self._required, **self._options)


# ---------------------------------------------------------------------------
# Encoding / decoding helpers shared by the variants
# ---------------------------------------------------------------------------


def compact(**items: Any) -> dict[str, Any]:
    """Drop ``None`` values, keeping keyword order."""
    return {key: value for key, value in items.items() if value is not None}


def expect_object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise CodecError(f"{where}: expected a JSON object, got {value!r}")
    return value


def expect_list(value: Any, where: str) -> list[Any]:
    if not isinstance(value, list):
        raise CodecError(f"{where}: expected a JSON array, got {value!r}")
    return value


def required(body: dict[str, Any], key: str, where: str) -> Any:
    if key not in body:
        raise CodecError(f"{where}: missing required key {key!r}")
    return body[key]


def field_entry(
    body: Any,
    where: str,
    reserved: frozenset[str] = frozenset(),
) -> tuple[str, Any]:
    """Split ``{"<field>": entry, ...reserved}`` into ``(field, entry)``."""
    body = expect_object(body, where)
    fields = [key for key in body if key not in reserved]
    if len(fields) != 1:
        raise CodecError(f"{where}: expected exactly one field name, got {fields!r}")
    return fields[0], body[fields[0]]


def children(
    family: type[Clause],
    body: dict[str, Any],
    key: str,
    where: str,
) -> Union[tuple[Any, ...], None]:
    """Decode an optional array of same-family clauses."""
    if key not in body:
        return None
    items = expect_list(body[key], f"{where}.{key}")
    return tuple(family.from_dict(item) for item in items)
