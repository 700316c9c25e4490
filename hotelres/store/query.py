"""Composable record predicates.

A predicate describes a filter once and can be used two ways: evaluated
against a plain record dict (``matches``) or compiled into a SQLAlchemy
``where`` clause for a mapped model (``to_sql``). Build them with the
helpers at the bottom of this module and combine with ``&``, ``|`` and ``~``::

    where = eq("room_id", 3) & in_("status", ACTIVE_STATUSES) & lt("start_date", end)
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import and_, false, not_, or_, true
from sqlalchemy.sql.elements import ColumnElement


def _plain(value: Any) -> Any:
    """Unwrap enum members so records and SQL both see the stored value."""
    return value.value if isinstance(value, Enum) else value


class Predicate(ABC):
    """Base class for every filter node."""

    @abstractmethod
    def matches(self, record: Mapping[str, Any]) -> bool:
        """Return True if ``record`` satisfies this predicate."""

    @abstractmethod
    def to_sql(self, model: type) -> ColumnElement[bool]:
        """Compile this predicate against the columns of ``model``."""

    def __and__(self, other: Predicate) -> Predicate:
        return And((self, other))

    def __or__(self, other: Predicate) -> Predicate:
        return Or((self, other))

    def __invert__(self) -> Predicate:
        return Not(self)


# Record-side comparators; a missing or NULL value never matches an ordering test
_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "lt": operator.lt,
    "lte": operator.le,
    "gt": operator.gt,
    "gte": operator.ge,
}


@dataclass(frozen=True)
class Comparison(Predicate):
    """``field <op> value`` for one of eq, ne, lt, lte, gt, gte."""

    field: str
    op: str
    value: Any

    def matches(self, record: Mapping[str, Any]) -> bool:
        actual = _plain(record.get(self.field))
        expected = _plain(self.value)
        if self.op in ("eq", "ne"):
            return _COMPARATORS[self.op](actual, expected)
        if actual is None or expected is None:
            return False
        return _COMPARATORS[self.op](actual, expected)

    def to_sql(self, model: type) -> ColumnElement[bool]:
        column = getattr(model, self.field)
        value = _plain(self.value)
        if self.op == "eq":
            return column.is_(None) if value is None else column == value
        if self.op == "ne":
            return column.is_not(None) if value is None else column != value
        return {
            "lt": column < value,
            "lte": column <= value,
            "gt": column > value,
            "gte": column >= value,
        }[self.op]


@dataclass(frozen=True)
class In(Predicate):
    """``field`` is one of ``values``."""

    field: str
    values: tuple[Any, ...]

    def matches(self, record: Mapping[str, Any]) -> bool:
        return _plain(record.get(self.field)) in {_plain(v) for v in self.values}

    def to_sql(self, model: type) -> ColumnElement[bool]:
        if not self.values:
            return false()
        return getattr(model, self.field).in_([_plain(v) for v in self.values])


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive substring match on a text field."""

    field: str
    text: str

    def matches(self, record: Mapping[str, Any]) -> bool:
        actual = record.get(self.field)
        if actual is None:
            return False
        return self.text.casefold() in str(actual).casefold()

    def to_sql(self, model: type) -> ColumnElement[bool]:
        return getattr(model, self.field).icontains(self.text, autoescape=True)


@dataclass(frozen=True)
class And(Predicate):
    parts: tuple[Predicate, ...]

    def matches(self, record: Mapping[str, Any]) -> bool:
        return all(part.matches(record) for part in self.parts)

    def to_sql(self, model: type) -> ColumnElement[bool]:
        if not self.parts:
            return true()
        return and_(*(part.to_sql(model) for part in self.parts))


@dataclass(frozen=True)
class Or(Predicate):
    parts: tuple[Predicate, ...]

    def matches(self, record: Mapping[str, Any]) -> bool:
        return any(part.matches(record) for part in self.parts)

    def to_sql(self, model: type) -> ColumnElement[bool]:
        if not self.parts:
            return false()
        return or_(*(part.to_sql(model) for part in self.parts))


@dataclass(frozen=True)
class Not(Predicate):
    part: Predicate

    def matches(self, record: Mapping[str, Any]) -> bool:
        return not self.part.matches(record)

    def to_sql(self, model: type) -> ColumnElement[bool]:
        return not_(self.part.to_sql(model))


@dataclass(frozen=True)
class Ordering:
    """Sort key for ``Collection.find``."""

    field: str
    descending: bool = False


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def eq(field: str, value: Any) -> Predicate:
    return Comparison(field, "eq", value)


def ne(field: str, value: Any) -> Predicate:
    return Comparison(field, "ne", value)


def lt(field: str, value: Any) -> Predicate:
    return Comparison(field, "lt", value)


def lte(field: str, value: Any) -> Predicate:
    return Comparison(field, "lte", value)


def gt(field: str, value: Any) -> Predicate:
    return Comparison(field, "gt", value)


def gte(field: str, value: Any) -> Predicate:
    return Comparison(field, "gte", value)


def in_(field: str, values: Iterable[Any]) -> Predicate:
    return In(field, tuple(values))


def contains(field: str, text: str) -> Predicate:
    return Contains(field, text)


def all_of(*parts: Predicate | None) -> Predicate:
    """AND together the given predicates, skipping ``None`` placeholders."""
    return And(tuple(p for p in parts if p is not None))


def any_of(*parts: Predicate | None) -> Predicate:
    """OR together the given predicates, skipping ``None`` placeholders."""
    return Or(tuple(p for p in parts if p is not None))


def asc(field: str) -> Ordering:
    return Ordering(field)


def desc(field: str) -> Ordering:
    return Ordering(field, descending=True)
