"""
Constraint builder for collection queries.

Provides a type-safe, Pythonic way to build the backend's `constraints` filter
grammar. Expressions are plain frozen values: building them never touches the
network, and the serializer is deterministic so two equal trees always yield
the same JSON.

Example:
    from fieldsync.constraints import C, serialize

    constraints = (
        C.field("Company").equals(company_id)
        & (C.field("Start Date").greater_than(since) | C.field("Status").equals("In Progress"))
    )
    params = {"constraints": serialize(constraints)}

Wire shape:
    leaf:        {"key": "Status", "constraint_type": "equals", "value": "Done"}
    combinator:  {"and": [...]} / {"or": [...]}
    top level:   always a JSON array (members are implicitly AND-ed)
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Literal


class ConstraintType(str, Enum):
    """Comparison operators understood by the backend."""

    EQUALS = "equals"
    NOT_EQUAL = "not equal"
    CONTAINS = "contains"
    NOT_CONTAINS = "not contains"
    GREATER_THAN = "greater than"
    LESS_THAN = "less than"
    IS_BETWEEN = "is between"
    IN = "in"
    NOT_IN = "not in"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"


# Operators that take no value on the wire.
_UNARY = frozenset({ConstraintType.IS_EMPTY, ConstraintType.IS_NOT_EMPTY})


def format_timestamp(value: datetime | date) -> str:
    """Format a date/datetime the way the backend expects (ISO-8601, UTC `Z`)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
        return text.replace("+00:00", "Z")
    return value.isoformat()


def _normalize_value(value: Any) -> Any:
    """Convert a Python value to its canonical, JSON-native, hashable form."""
    if isinstance(value, Enum):
        return _normalize_value(value.value)
    # datetime before date (datetime is a subclass of date)
    if isinstance(value, (datetime, date)):
        return format_timestamp(value)
    if isinstance(value, (list, tuple)):
        return tuple(_normalize_value(v) for v in value)
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    raise TypeError(f"Unsupported constraint value type: {type(value).__name__}")


def _to_json_value(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_to_json_value(v) for v in value]
    return value


class Constraint(ABC):
    """Base class for constraint expressions."""

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """Return the JSON-compatible representation of this expression."""
        ...

    def __and__(self, other: Constraint) -> Constraint:
        return Combinator.of("and", [self, other])

    def __or__(self, other: Constraint) -> Constraint:
        return Combinator.of("or", [self, other])

    def __str__(self) -> str:
        return serialize(self)


@dataclass(frozen=True, eq=False)
class Leaf(Constraint):
    """
    A single field comparison.

    Equality and hashing follow the wire form, so `equals(True)`, `equals(1)`
    and `equals(1.0)` are three different leaves.
    """

    key: str
    constraint_type: ConstraintType
    value: Any = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Constraint key cannot be empty")
        object.__setattr__(self, "constraint_type", ConstraintType(self.constraint_type))
        if self.constraint_type in _UNARY:
            if self.value is not None:
                raise ValueError(f"'{self.constraint_type.value}' does not take a value")
            return
        if self.value is None:
            raise ValueError(
                f"None is not a valid value for '{self.constraint_type.value}'; "
                "use is_empty()/is_not_empty()."
            )
        object.__setattr__(self, "value", _normalize_value(self.value))

    def _wire_identity(self) -> tuple[str, str, str]:
        return (
            self.key,
            self.constraint_type.value,
            json.dumps(_to_json_value(self.value), separators=(",", ":")),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Leaf):
            return NotImplemented
        return self._wire_identity() == other._wire_identity()

    def __hash__(self) -> int:
        return hash(self._wire_identity())

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"key": self.key, "constraint_type": self.constraint_type.value}
        if self.constraint_type not in _UNARY:
            data["value"] = _to_json_value(self.value)
        return data


@dataclass(frozen=True)
class Combinator(Constraint):
    """AND/OR over one or more child expressions."""

    kind: Literal["and", "or"]
    children: tuple[Constraint, ...]

    def __post_init__(self) -> None:
        if self.kind not in ("and", "or"):
            raise ValueError(f"Unknown combinator kind: {self.kind!r}")
        if not self.children:
            raise ValueError(f"'{self.kind}' requires at least one child constraint")
        object.__setattr__(self, "children", tuple(self.children))

    @classmethod
    def of(cls, kind: Literal["and", "or"], children: Iterable[Constraint]) -> Combinator:
        """Build a combinator, flattening directly nested combinators of the same kind."""
        flat: list[Constraint] = []
        for child in children:
            if isinstance(child, Combinator) and child.kind == kind:
                flat.extend(child.children)
            else:
                flat.append(child)
        return cls(kind, tuple(flat))

    def to_json(self) -> dict[str, Any]:
        return {self.kind: [child.to_json() for child in self.children]}


class FieldBuilder:
    """Builder for leaf constraints on one field."""

    def __init__(self, key: str):
        self._key = key

    def equals(self, value: Any) -> Leaf:
        return Leaf(self._key, ConstraintType.EQUALS, value)

    def not_equal(self, value: Any) -> Leaf:
        return Leaf(self._key, ConstraintType.NOT_EQUAL, value)

    def contains(self, value: Any) -> Leaf:
        """Text contains substring, or list field contains the value."""
        return Leaf(self._key, ConstraintType.CONTAINS, value)

    def not_contains(self, value: Any) -> Leaf:
        return Leaf(self._key, ConstraintType.NOT_CONTAINS, value)

    def in_(self, values: Sequence[Any]) -> Leaf:
        """Field value is one of `values`."""
        if isinstance(values, (str, bytes)) or not values:
            raise ValueError("in_() requires a non-empty sequence of values")
        return Leaf(self._key, ConstraintType.IN, tuple(values))

    def not_in(self, values: Sequence[Any]) -> Leaf:
        if isinstance(values, (str, bytes)) or not values:
            raise ValueError("not_in() requires a non-empty sequence of values")
        return Leaf(self._key, ConstraintType.NOT_IN, tuple(values))

    def greater_than(self, value: int | float | datetime | date) -> Leaf:
        return Leaf(self._key, ConstraintType.GREATER_THAN, value)

    def less_than(self, value: int | float | datetime | date) -> Leaf:
        return Leaf(self._key, ConstraintType.LESS_THAN, value)

    def between(self, low: int | float | datetime | date, high: int | float | datetime | date) -> Leaf:
        """Single `is between` leaf with `[low, high]` as its value."""
        return Leaf(self._key, ConstraintType.IS_BETWEEN, (low, high))

    def is_empty(self) -> Leaf:
        return Leaf(self._key, ConstraintType.IS_EMPTY)

    def is_not_empty(self) -> Leaf:
        return Leaf(self._key, ConstraintType.IS_NOT_EMPTY)


class Constraints:
    """
    Factory for building constraint expressions.

    Example:
        C.field("Company").equals("1699...x123")
        C.and_(C.field("Status").equals("Scheduled"), C.field("Team Members").contains(user_id))
        C.date_range("Start Date", since, until)
    """

    @staticmethod
    def field(key: str) -> FieldBuilder:
        return FieldBuilder(key)

    @staticmethod
    def and_(*constraints: Constraint) -> Constraint:
        if not constraints:
            raise ValueError("and_() requires at least one constraint")
        if len(constraints) == 1:
            return constraints[0]
        return Combinator.of("and", constraints)

    @staticmethod
    def or_(*constraints: Constraint) -> Constraint:
        if not constraints:
            raise ValueError("or_() requires at least one constraint")
        if len(constraints) == 1:
            return constraints[0]
        return Combinator.of("or", constraints)

    @staticmethod
    def date_range(key: str, start: datetime | date, end: datetime | date) -> Constraint:
        """`key` strictly after `start` and strictly before `end`."""
        if start > end:
            raise ValueError("date_range() start must not be after end")
        return Combinator.of(
            "and",
            [FieldBuilder(key).greater_than(start), FieldBuilder(key).less_than(end)],
        )


# Shorthand alias for convenience
C = Constraints


ConstraintInput = Constraint | Sequence[Constraint]


def _as_list(constraints: ConstraintInput) -> list[Constraint]:
    if isinstance(constraints, Constraint):
        return [constraints]
    items = list(constraints)
    for item in items:
        if not isinstance(item, Constraint):
            raise TypeError(f"Expected Constraint, got {type(item).__name__}")
    return items


def to_json(constraints: ConstraintInput) -> list[dict[str, Any]]:
    """Canonical JSON-compatible form: a list of leaf/combinator objects."""
    return [c.to_json() for c in _as_list(constraints)]


def serialize(constraints: ConstraintInput) -> str:
    """Serialize to the compact JSON string sent as the `constraints` query parameter."""
    return json.dumps(to_json(constraints), separators=(",", ":"), ensure_ascii=False)


# =============================================================================
# Parsing (inverse of serialize)
# =============================================================================


def _parse_node(node: Any, path: str) -> Constraint:
    if not isinstance(node, Mapping):
        raise ValueError(f"Expected an object at {path}, got {type(node).__name__}")
    if "key" in node:
        unknown = set(node) - {"key", "constraint_type", "value"}
        if unknown:
            raise ValueError(f"Unexpected keys at {path}: {sorted(unknown)}")
        if "constraint_type" not in node:
            raise ValueError(f"Missing 'constraint_type' at {path}")
        try:
            constraint_type = ConstraintType(node["constraint_type"])
        except ValueError as e:
            raise ValueError(
                f"Unknown constraint_type {node['constraint_type']!r} at {path}"
            ) from e
        return Leaf(str(node["key"]), constraint_type, node.get("value"))

    if len(node) != 1:
        raise ValueError(f"Combinator at {path} must have exactly one of 'and'/'or'")
    kind, children = next(iter(node.items()))
    if kind not in ("and", "or"):
        raise ValueError(f"Unknown combinator {kind!r} at {path}")
    if not isinstance(children, list):
        raise ValueError(f"'{kind}' at {path} must hold a list")
    return Combinator(
        kind,
        tuple(_parse_node(child, f"{path}.{kind}[{i}]") for i, child in enumerate(children)),
    )


def parse(data: str | Sequence[Any] | Mapping[str, Any]) -> list[Constraint]:
    """
    Parse a serialized constraint list back into expression values.

    Accepts the canonical JSON array, a single leaf/combinator object (legacy call
    sites), or the already-decoded equivalents.

    Raises:
        ValueError: If the input is not valid constraint JSON.
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ValueError("Constraints are not valid JSON") from e
    if isinstance(data, Mapping):
        return [_parse_node(data, "$")]
    if not isinstance(data, Sequence):
        raise ValueError("Constraints must be a JSON array or object")
    return [_parse_node(node, f"$[{i}]") for i, node in enumerate(data)]


__all__ = [
    "C",
    "Combinator",
    "Constraint",
    "ConstraintInput",
    "ConstraintType",
    "Constraints",
    "FieldBuilder",
    "Leaf",
    "format_timestamp",
    "parse",
    "serialize",
    "to_json",
]
