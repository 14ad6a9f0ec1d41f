"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from fieldgrammar import (
    ArrayField,
    BoolField,
    EnumArrayField,
    EnumField,
    FixedField,
    IntField,
    ObjectField,
    OptionalField,
    PointerField,
    Schema,
    UnionField,
)


@pytest.fixture
def device_schema() -> Schema:
    """Schema using every node kind except pointers."""
    return Schema.create(
        "Device",
        [
            IntField("id", 0, 1023),
            BoolField("online"),
            FixedField("temperature", -40, 125, 0.5),
            EnumField("mode", ["idle", "active", "sleep"]),
            OptionalField("label", IntField("labelCode", 0, 255)),
            ArrayField("readings", 0, 5, IntField("reading", -100, 100)),
            EnumArrayField("tags", 0, 3, ["red", "green", "blue"]),
            ObjectField("offset", [IntField("start", -256, 255), IntField("end", -256, 255)]),
            UnionField(
                "action",
                EnumField("type", ["start", "stop"]),
                {"start": [IntField("delay", 0, 60)], "stop": [BoolField("force")]},
            ),
        ],
    )


@pytest.fixture
def expression_schema() -> Schema:
    """Recursive arithmetic expression tree built with pointers."""
    return Schema.create(
        "Expression",
        [
            UnionField(
                "expr",
                EnumField("type", ["number", "add", "multiply"]),
                {
                    "number": [IntField("value", 0, 1000)],
                    "add": [PointerField("left", "expr"), PointerField("right", "expr")],
                    "multiply": [PointerField("left", "expr"), PointerField("right", "expr")],
                },
            )
        ],
    )
