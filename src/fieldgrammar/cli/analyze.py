"""Schema analysis CLI command."""

from __future__ import annotations

import asyncio
from pathlib import Path

from ..defaults import default_data
from ..exceptions import EncodeError
from ..models.nodes import Node
from ..models.schema import Schema, load_schema
from ..models.walk import tree_depth
from ..tokens import bitpacked, compressed
from ..utils.sizing import encoded_size, field_sizes

WIDTH = 54


def analyze_file(file_path: Path) -> None:
    """Analyze the schema in a JSON schema file.

    Args:
        file_path: Path to a JSON schema file
    """
    analyze_schema(load_schema(file_path))


def analyze_schema(schema: Schema) -> None:
    """Print depth, per-field sizes of the default data and token lengths."""
    print(f"{'=' * 19} {schema.name} {'=' * 19}")
    print(f"{len(schema.fields)} field{'s' if len(schema.fields) != 1 else ''}.")
    print("Field sizes are in bits for the default data.")
    print()

    data = default_data(schema)
    try:
        sizes: dict[str, int] | None = field_sizes(schema, data)
    except EncodeError as e:
        # Required pointers have no derivable default
        sizes = None
        print(f"Default data is not encodable: {e}")
        print()

    print(f"{'-' * 28} Body {'-' * 28}")
    for i, field in enumerate(schema.fields, 1):
        _print_field(i, field, sizes)
    if sizes is not None:
        total_bits = sum(sizes.values())
        total_bytes = encoded_size(schema, data)
        print(f"        total{'.' * 33}{total_bits} bits / {total_bytes} bytes")
    print()

    print(f"{'=' * 24} Tokens {'=' * 24}")
    try:
        packed = bitpacked.encode_schema(schema.name, schema.fields)
        print(f"Bit-packed schema token: {len(packed)} chars")
    except EncodeError as e:
        print(f"Bit-packed schema token: unavailable ({e})")
    token = asyncio.run(compressed.encode_schema(schema.name, schema.fields))
    print(f"Compressed schema token: {len(token)} chars")
    print()


def _print_field(index: int, field: Node, sizes: dict[str, int] | None) -> None:
    field_desc = f"{index}. {field.name}"
    field_info = f"({field.type}, depth {tree_depth(field)})"
    size = f"{sizes[field.name]} bits" if sizes is not None else "-"

    dots_needed = WIDTH - len(field_desc) - len(size) - len(field_info) - 1
    dots = "." * max(1, dots_needed)
    print(f"        {field_desc}{dots}{size} {field_info}")
