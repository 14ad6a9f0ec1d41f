"""Bit-width arithmetic for the dense data codec.

Given a node, these helpers answer how many bits its values take and how
fixed-point values map to integers on the wire.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ..exceptions import ConstructionError
from ..models.nodes import FixedNode, Node
from ..models.schema import Schema

# Pointer re-entries allowed while encoding or decoding data
DEFAULT_POINTER_DEPTH = 16


def schema_fields(schema: Schema | Sequence[Node]) -> list[Node]:
    """Accept either a Schema or a bare field list."""
    if isinstance(schema, Schema):
        return list(schema.fields)
    return list(schema)


def bits_for_range(min_val: int, max_val: int) -> int:
    """Calculate bits needed for an integer in ``[min_val, max_val]``.

    A single-value range still takes one bit.

    Raises:
        ConstructionError: If min_val > max_val
    """
    if min_val > max_val:
        raise ConstructionError(f"Invalid bounds: min={min_val} > max={max_val}")
    return max(1, (max_val - min_val).bit_length())


def bits_for_count(count: int) -> int:
    """Calculate bits needed to store an ordinal below ``count``."""
    return bits_for_range(0, count - 1)


def decimal_places(value: float) -> int:
    """Number of decimal places in the shortest repr of ``value``."""
    exponent = Decimal(repr(float(value))).as_tuple().exponent
    return max(0, -exponent) if isinstance(exponent, int) else 0


def _exact(value: float) -> Decimal:
    return Decimal(repr(float(value)))


def fixed_steps(node: FixedNode) -> int:
    """Index of the largest grid point of a fixed-point node.

    The grid never extends past ``max``: a range that is not a whole number
    of steps ends at the last grid point below it.
    """
    return int((_exact(node.max) - _exact(node.min)) // _exact(node.precision))


def fixed_bits(node: FixedNode) -> int:
    return bits_for_range(0, fixed_steps(node))


def quantize(node: FixedNode, value: float) -> int:
    """Map a value onto the node's grid index, clamped to the grid."""
    steps = round((value - node.min) / node.precision)
    return min(max(steps, 0), fixed_steps(node))


def dequantize(node: FixedNode, steps: int) -> float:
    """Map a grid index back to a value, rounded to the node's decimal places."""
    places = max(decimal_places(node.precision), decimal_places(node.min))
    return round(node.min + steps * node.precision, places)
