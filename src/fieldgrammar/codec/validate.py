"""Data validation against a field grammar schema.

validate() walks data alongside the schema and collects every problem it
finds instead of stopping at the first one, so forms can show all errors
at once. The encoder refuses data with any issue.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..exceptions import UnresolvedPointerError
from ..models.nodes import (
    ArrayNode,
    BoolNode,
    EnumArrayNode,
    EnumNode,
    FixedNode,
    IntNode,
    Node,
    ObjectNode,
    OptionalNode,
    PointerNode,
    UnionNode,
)
from ..models.schema import Schema
from ..models.walk import pointer_targets, resolve_pointer
from .schema import DEFAULT_POINTER_DEPTH, schema_fields


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found in data.

    Attributes:
        path: Location of the offending value, e.g. ``network.ports[2]``
        message: What is wrong with it
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def validate(
    schema: Schema | Sequence[Node],
    data: Any,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> list[ValidationIssue]:
    """Check ``data`` against a schema.

    Args:
        schema: Schema or list of top-level fields
        data: Mapping of top-level field names to values
        max_pointer_depth: How many times pointers may be re-entered

    Returns:
        Every issue found; an empty list means the data can be encoded
    """
    fields = schema_fields(schema)
    if not isinstance(data, Mapping):
        return [ValidationIssue("$", f"expected an object, got {type(data).__name__}")]

    validator = _Validator(pointer_targets(fields), max_pointer_depth)
    for field in fields:
        validator.check_member(field, data, field.name)
    return validator.issues


def validate_field(node: Node, value: Any, path: str | None = None) -> list[ValidationIssue]:
    """Check a single value against one node, outside of any schema.

    Pointers inside ``node`` resolve against ``node``'s own subtree.
    """
    validator = _Validator(pointer_targets([node]), DEFAULT_POINTER_DEPTH)
    validator.check(node, value, path or node.name, 0)
    return validator.issues


class _Validator:
    def __init__(self, targets: dict[str, Node], max_pointer_depth: int) -> None:
        self.targets = targets
        self.max_pointer_depth = max_pointer_depth
        self.issues: list[ValidationIssue] = []

    def fail(self, path: str, message: str) -> None:
        self.issues.append(ValidationIssue(path, message))

    def check_member(
        self, node: Node, container: Mapping[str, Any], path: str, depth: int = 0
    ) -> None:
        if node.name not in container:
            self.fail(path, "missing value")
            return
        self.check(node, container[node.name], path, depth)

    def check(self, node: Node, value: Any, path: str, depth: int) -> None:
        if isinstance(node, BoolNode):
            if not isinstance(value, bool):
                self.fail(path, f"expected bool, got {type(value).__name__}")
            return

        if isinstance(node, IntNode):
            if not isinstance(value, int) or isinstance(value, bool):
                self.fail(path, f"expected int, got {type(value).__name__}")
            elif not node.min <= value <= node.max:
                self.fail(path, f"value {value} out of bounds [{node.min}, {node.max}]")
            return

        if isinstance(node, FixedNode):
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                self.fail(path, f"expected number, got {type(value).__name__}")
            elif not math.isfinite(value):
                self.fail(path, f"value {value} is not finite")
            elif not node.min <= value <= node.max:
                self.fail(path, f"value {value} out of bounds [{node.min}, {node.max}]")
            return

        if isinstance(node, EnumNode):
            if value not in node.options:
                self.fail(path, f"{value!r} is not one of {node.options}")
            return

        if isinstance(node, OptionalNode):
            if value is not None:
                self.check(node.inner, value, path, depth)
            return

        if isinstance(node, (ArrayNode, EnumArrayNode)):
            if not isinstance(value, (list, tuple)):
                self.fail(path, f"expected list, got {type(value).__name__}")
                return
            if not node.min_length <= len(value) <= node.max_length:
                self.fail(
                    path,
                    f"length {len(value)} out of bounds [{node.min_length}, {node.max_length}]",
                )
            item = node.item if isinstance(node, ArrayNode) else node.enum
            for index, element in enumerate(value):
                self.check(item, element, f"{path}[{index}]", depth)
            return

        if isinstance(node, ObjectNode):
            if not isinstance(value, Mapping):
                self.fail(path, f"expected object, got {type(value).__name__}")
                return
            for field in node.fields:
                self.check_member(field, value, f"{path}.{field.name}", depth)
            return

        if isinstance(node, UnionNode):
            if not isinstance(value, Mapping):
                self.fail(path, f"expected object, got {type(value).__name__}")
                return
            discriminator = node.discriminator
            choice = value.get(discriminator.name)
            if choice not in discriminator.options:
                self.fail(
                    f"{path}.{discriminator.name}",
                    f"{choice!r} is not one of {discriminator.options}",
                )
                return
            for field in node.variants.get(choice, []):
                self.check_member(field, value, f"{path}.{field.name}", depth)
            return

        if isinstance(node, PointerNode):
            try:
                target = resolve_pointer(self.targets, node)
            except UnresolvedPointerError as err:
                self.fail(path, str(err))
                return
            if depth + 1 > self.max_pointer_depth:
                self.fail(path, f"pointer depth exceeds maximum of {self.max_pointer_depth}")
                return
            self.check(target, value, path, depth + 1)
            return

        raise TypeError(f"Unsupported node kind: {type(node).__name__}")
