#!/usr/bin/env python3
"""Basic usage example for fieldgrammar.

This example demonstrates:
1. Describing a data shape with field constructors
2. Encoding data to a compact URL-safe token
3. Sharing the schema itself as a token in both formats
4. Falling back to default data when a token is damaged
"""

from __future__ import annotations

import asyncio
import json

from fieldgrammar import (
    ArrayField,
    BoolField,
    EnumField,
    FixedField,
    IntField,
    OptionalField,
    Schema,
    TokenFormat,
    UnionField,
    decode,
    decode_or_default,
    decode_token,
    encode,
    encode_token,
    field_sizes,
)

SCHEMA = Schema.create(
    "SensorConfig",
    [
        IntField("sensorId", 0, 1023),
        BoolField("enabled"),
        EnumField("unit", ["celsius", "fahrenheit", "kelvin"]),
        FixedField("offset", -5.0, 5.0, 0.1),
        OptionalField("alarm", IntField("alarmLevel", 0, 100)),
        ArrayField("samples", 0, 8, IntField("sample", -50, 150)),
        UnionField(
            "reporting",
            EnumField("type", ["interval", "onChange"]),
            {
                "interval": [IntField("seconds", 1, 3600)],
                "onChange": [FixedField("delta", 0.0, 10.0, 0.5)],
            },
        ),
    ],
)


async def share_schema() -> None:
    for fmt in TokenFormat:
        token = await encode_token(SCHEMA.name, SCHEMA.fields, fmt)
        received = await decode_token(token)
        status = "✓" if received == SCHEMA else "✗"
        print(f"   {fmt.name.lower():<10} {len(token):>4} chars {status}  {token[:48]}...")


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("fieldgrammar Basic Usage Example")
    print("=" * 60)
    print()

    data = {
        "sensorId": 512,
        "enabled": True,
        "unit": "kelvin",
        "offset": -1.3,
        "alarm": 85,
        "samples": [21, 22, 22, 23],
        "reporting": {"type": "onChange", "delta": 2.5},
    }

    print("1. Analyzing field sizes...")
    sizes = field_sizes(SCHEMA, data)
    for field_name, bits in sizes.items():
        print(f"   {field_name}: {bits} bits")
    print(f"   Total: {sum(sizes.values())} bits")
    print()

    print("2. Encoding data...")
    token = encode(SCHEMA, data)
    print(f"   Token: {token} ({len(token)} chars)")
    print(f"   JSON: {len(json.dumps(data))} chars")
    print()

    print("3. Decoding data...")
    decoded = decode(SCHEMA, token)
    print(f"   {decoded}")
    print(f"   Round trip: {'✓' if decoded == data else '✗'}")
    print()

    print("4. Sharing the schema...")
    asyncio.run(share_schema())
    print()

    print("5. Decoding a damaged token...")
    print(f"   {decode_or_default(SCHEMA, token[:4])}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
