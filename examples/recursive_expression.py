#!/usr/bin/env python3
"""Recursive schemas with pointers.

An arithmetic expression is either a number or an operation over two
sub-expressions. The operands are pointers back to the ``expr`` union, so
the schema stays finite while the data nests as deep as the pointer
depth limit allows.
"""

from __future__ import annotations

from typing import Any

from fieldgrammar import (
    EnumField,
    IntField,
    PointerField,
    Schema,
    UnionField,
    decode,
    encode,
    encoded_bits,
)
from fieldgrammar.tokens import decode_bitpacked, encode_bitpacked

EXPRESSION = Schema.create(
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


def evaluate(expr: dict[str, Any]) -> int:
    if expr["type"] == "number":
        return expr["value"]
    left, right = evaluate(expr["left"]), evaluate(expr["right"])
    return left + right if expr["type"] == "add" else left * right


def number(value: int) -> dict[str, Any]:
    return {"type": "number", "value": value}


def main() -> None:
    # (2 + 3) * (4 + 5)
    data = {
        "expr": {
            "type": "multiply",
            "left": {"type": "add", "left": number(2), "right": number(3)},
            "right": {"type": "add", "left": number(4), "right": number(5)},
        }
    }

    schema_token = encode_bitpacked(EXPRESSION.name, EXPRESSION.fields)
    print(f"Schema token: {schema_token} ({len(schema_token)} chars)")

    schema = decode_bitpacked(schema_token)
    data_token = encode(schema, data)
    print(f"Data token:   {data_token} ({encoded_bits(schema, data)} bits)")

    decoded = decode(schema, data_token)
    print(f"Value: {evaluate(decoded['expr'])}")


if __name__ == "__main__":
    main()
