"""Shared pieces of the operation builders.

An operation is built in two phases: mandatory parameters go to the
constructor, optional ones are chained ``with_*`` calls. ``send()`` then
makes exactly one transport call and decodes the response. It can only
be called once per operation instance.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar, Union

from .clause import of_family
from .exceptions import BuilderReuseError, TransportError
from .query import Query
from .transport import Transport

logger = logging.getLogger(__name__)

R = TypeVar("R")

OptionValue = Union[str, int, float, bool, Sequence[str]]


def format_option(value: OptionValue) -> str:
    """Render a query-string value the way the engine parses it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class Options:
    """Ordered query-string parameters. Setting a key again replaces it."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def push(self, key: str, value: OptionValue) -> None:
        self._items[key] = format_option(value)

    def items(self) -> list[tuple[str, str]]:
        return list(self._items.items())


def option(name: str) -> Callable[..., Any]:
    """Create a chained setter that stores one query-string parameter."""

    def setter(self: "Operation[Any]", value: OptionValue) -> Any:
        return self._option(name, value)

    setter.__doc__ = f"Set the ``{name}`` request parameter."
    return setter


class QuerySource:
    """Holds at most one of: a query string (``q=``) or a DSL :class:`Query`.

    Setting one replaces whatever was set before, of either kind.
    """

    def __init__(self) -> None:
        self.query_string: Optional[str] = None
        self.query: Optional[Query] = None

    def set_string(self, query_string: str) -> None:
        if self.query is not None:
            logger.debug("Query string replaces previously set DSL query")
        self.query_string = query_string
        self.query = None

    def set_query(self, query: Query) -> None:
        if self.query_string is not None:
            logger.debug("DSL query replaces previously set query string")
        self.query = of_family(Query, query, "delete_by_query.query")
        self.query_string = None

    def body(self) -> Optional[dict[str, Any]]:
        if self.query is None:
            return None
        return {"query": self.query.to_dict()}


class Operation(Generic[R]):
    """Base class: option accumulator plus the one-shot ``send``."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._options = Options()
        self._sent = False

    def _option(self, key: str, value: OptionValue) -> Any:
        self._options.push(key, value)
        return self

    def _request(self) -> tuple[str, str, Optional[Any]]:
        """Return ``(method, path, body)`` for this operation."""
        raise NotImplementedError

    def _decode(self, response: Any) -> R:
        raise NotImplementedError

    def _on_transport_error(self, exc: TransportError) -> R:
        raise exc

    def request(self) -> tuple[str, str, Optional[Any]]:
        """The request ``send()`` would make, without sending it."""
        return self._request()

    def send(self) -> R:
        if self._sent:
            raise BuilderReuseError(f"{type(self).__name__}.send() called twice")
        self._sent = True

        method, path, body = self._request()
        logger.info("%s %s", method, path)
        try:
            response = self._transport.request(method, path, body)
        except TransportError as exc:
            return self._on_transport_error(exc)
        return self._decode(response)
