from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone

import pytest

from fieldsync.constraints import C, Combinator, ConstraintType, Leaf, parse, serialize, to_json
from fieldsync.models import fields as F


def test_equals_serializes_to_compact_array() -> None:
    text = serialize(C.field("Company").equals("1699x123"))
    assert text == '[{"key":"Company","constraint_type":"equals","value":"1699x123"}]'


def test_unary_operators_omit_value() -> None:
    data = to_json(C.field("Completion").is_empty())
    assert data == [{"key": "Completion", "constraint_type": "is_empty"}]
    assert "value" not in to_json(C.field("Completion").is_not_empty())[0]


def test_unary_operator_rejects_value() -> None:
    with pytest.raises(ValueError):
        Leaf("Completion", ConstraintType.IS_EMPTY, "x")


def test_none_value_is_rejected() -> None:
    with pytest.raises(ValueError, match="is_empty"):
        C.field("Status").equals(None)


def test_empty_key_is_rejected() -> None:
    with pytest.raises(ValueError):
        C.field("").equals("x")


def test_datetime_values_are_utc_iso8601() -> None:
    naive = datetime(2025, 4, 21, 14, 3)
    aware = datetime(2025, 4, 21, 16, 3, tzinfo=timezone(timedelta(hours=2)))
    assert C.field("Start Date").greater_than(naive).value == "2025-04-21T14:03:00.000Z"
    assert C.field("Start Date").greater_than(aware).value == "2025-04-21T14:03:00.000Z"
    assert C.field("Start Date").less_than(date(2025, 4, 21)).value == "2025-04-21"


def test_in_requires_non_empty_sequence() -> None:
    with pytest.raises(ValueError):
        C.field(F.ID).in_([])
    with pytest.raises(ValueError):
        C.field(F.ID).in_("abc")
    leaf = C.field(F.ID).in_(["a", "b"])
    assert leaf.to_json() == {"key": "_id", "constraint_type": "in", "value": ["a", "b"]}


def test_between_is_single_leaf_with_pair() -> None:
    leaf = C.field("quantity").between(1, 5)
    assert leaf.to_json() == {"key": "quantity", "constraint_type": "is between", "value": [1, 5]}


def test_date_range_is_and_of_strict_bounds() -> None:
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    end = datetime(2025, 2, 1, tzinfo=timezone.utc)
    expr = C.date_range("Start Date", start, end)
    assert expr.to_json() == {
        "and": [
            {
                "key": "Start Date",
                "constraint_type": "greater than",
                "value": "2025-01-01T00:00:00.000Z",
            },
            {
                "key": "Start Date",
                "constraint_type": "less than",
                "value": "2025-02-01T00:00:00.000Z",
            },
        ]
    }


def test_date_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        C.date_range("Start Date", date(2025, 2, 1), date(2025, 1, 1))


def test_operators_flatten_same_kind() -> None:
    a = C.field("a").equals(1)
    b = C.field("b").equals(2)
    c = C.field("c").equals(3)

    expr = a & b & c
    assert isinstance(expr, Combinator)
    assert expr.kind == "and"
    assert expr.children == (a, b, c)

    mixed = (a | b) & c
    assert isinstance(mixed, Combinator)
    assert mixed.kind == "and"
    assert isinstance(mixed.children[0], Combinator)
    assert mixed.children[0].kind == "or"


def test_and_or_helpers_unwrap_single_child() -> None:
    leaf = C.field("a").equals(1)
    assert C.and_(leaf) is leaf
    assert C.or_(leaf) is leaf
    with pytest.raises(ValueError):
        C.and_()


def test_parse_round_trips_nested_expression() -> None:
    expr = C.and_(
        C.field("Company").equals("c1"),
        C.or_(
            C.field("Status").in_(["RFQ", "Accepted"]),
            C.field("Team Members").contains("u1"),
        ),
        C.field("Completion").is_empty(),
    )
    text = serialize([expr, C.field("deletedAt").is_empty()])
    parsed = parse(text)
    assert serialize(parsed) == text
    assert parsed[0] == expr


def test_parse_accepts_single_object() -> None:
    parsed = parse({"key": "Company", "constraint_type": "equals", "value": "c1"})
    assert parsed == [C.field("Company").equals("c1")]


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "42",
        '[{"key": "a"}]',
        '[{"key": "a", "constraint_type": "roughly", "value": 1}]',
        '[{"key": "a", "constraint_type": "equals", "value": 1, "extra": true}]',
        '[{"xor": []}]',
        '[{"and": {}}]',
        '[{"and": [], "or": []}]',
    ],
)
def test_parse_rejects_malformed_input(raw: str) -> None:
    with pytest.raises(ValueError):
        parse(raw)


def test_serialize_keeps_non_ascii() -> None:
    text = serialize(C.field("name").equals("Müller"))
    assert "Müller" in text
    assert json.loads(text)[0]["value"] == "Müller"


def test_serialize_rejects_non_constraint_items() -> None:
    with pytest.raises(TypeError):
        serialize([C.field("a").equals(1), "nope"])  # type: ignore[list-item]


@pytest.mark.parametrize(
    ("left", "right"),
    [
        (True, 1),
        (False, 0),
        (1, 1.0),
        ("1", 1),
        ((1, 2), (1.0, 2)),
    ],
)
def test_leaves_with_different_wire_values_differ(left: object, right: object) -> None:
    a = Leaf("Active", ConstraintType.EQUALS, left)
    b = Leaf("Active", ConstraintType.EQUALS, right)
    assert serialize(a) != serialize(b)
    assert a != b
    assert len({a, b}) == 2
    assert C.field("x").equals(True) & a != C.field("x").equals(True) & b


def test_equal_leaves_hash_alike() -> None:
    when = datetime(2025, 3, 1, tzinfo=timezone.utc)
    a = C.field("Start Date").greater_than(when)
    b = C.field("Start Date").greater_than("2025-03-01T00:00:00.000Z")
    assert a == b
    assert hash(a) == hash(b)
    assert serialize(a) == serialize(b)


_WHEN = datetime(2025, 4, 21, 14, 3, tzinfo=timezone.utc)

_VALUES = {
    ConstraintType.EQUALS: "Accepted",
    ConstraintType.NOT_EQUAL: False,
    ConstraintType.CONTAINS: "u1",
    ConstraintType.NOT_CONTAINS: "u2",
    ConstraintType.GREATER_THAN: _WHEN,
    ConstraintType.LESS_THAN: 2.5,
    ConstraintType.IS_BETWEEN: (date(2025, 1, 1), _WHEN),
    ConstraintType.IN: ("a", "b", 3),
    ConstraintType.NOT_IN: (True, 0),
    ConstraintType.IS_EMPTY: None,
    ConstraintType.IS_NOT_EMPTY: None,
}

_LEAVES = {t: Leaf(f"field {t.name.lower()}", t, v) for t, v in _VALUES.items()}


def _trees() -> list[list[object]]:
    leaves = list(_LEAVES.values())
    single_and = Combinator("and", (leaves[0],))
    single_or = Combinator("or", (leaves[4],))
    nested = Combinator(
        "or",
        (
            Combinator("and", (leaves[1], Combinator("or", (leaves[2], leaves[9])))),
            leaves[6],
            Combinator("and", (Combinator("and", (leaves[7],)), leaves[10])),
        ),
    )
    return [
        [leaf] for leaf in leaves
    ] + [
        leaves,
        [single_and],
        [single_or],
        [single_and, single_or],
        [nested],
        [nested, leaves[3], C.date_range("Start Date", date(2025, 1, 1), _WHEN)],
        [C.field("a").equals(1) & (C.field("b").equals(1.0) | C.field("c").equals(True))],
    ]


def test_every_constraint_type_is_exercised() -> None:
    assert set(_LEAVES) == set(ConstraintType)


@pytest.mark.parametrize("tree", _trees())
def test_parse_inverts_serialize(tree: list[object]) -> None:
    text = serialize(tree)  # type: ignore[arg-type]
    parsed = parse(text)
    assert parsed == tree
    assert [hash(c) for c in parsed] == [hash(c) for c in tree]
    assert serialize(parsed) == text
