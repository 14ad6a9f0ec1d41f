"""Node constructor helpers.

These functions are the checked way to build field grammar nodes: invalid
attributes raise ConstructionError instead of a raw pydantic error.

Example:
    >>> from fieldgrammar.models.fields import EnumField, IntField, UnionField
    >>> action = UnionField(
    ...     "action",
    ...     EnumField("type", ["start", "stop"]),
    ...     {"start": [IntField("delay", 0, 60)]},
    ... )
    >>> action.variants["stop"]
    []
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import ConstructionError
from .nodes import (
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

M = TypeVar("M", bound=BaseModel)


def describe_validation_error(err: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    parts = []
    for error in err.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def build_model(model_class: type[M], **attrs: Any) -> M:
    """Instantiate a model, converting validation failures to ConstructionError."""
    try:
        return model_class(**attrs)
    except ValidationError as err:
        raise ConstructionError(describe_validation_error(err)) from err


def BoolField(name: str) -> BoolNode:
    """Create a boolean field."""
    return build_model(BoolNode, name=name)


def IntField(name: str, min: int, max: int) -> IntNode:
    """Create an integer field bounded by inclusive min and max."""
    return build_model(IntNode, name=name, min=min, max=max)


def FixedField(name: str, min: float, max: float, precision: float) -> FixedNode:
    """Create a fixed-point field.

    Values are stored as ``round((value - min) / precision)``, so the
    number of bits grows with ``(max - min) / precision``.

    Example:
        >>> temperature = FixedField("temperature", -40, 125, 0.1)
    """
    return build_model(FixedNode, name=name, min=min, max=max, precision=precision)


def EnumField(name: str, options: Sequence[str]) -> EnumNode:
    """Create an enumeration field."""
    return build_model(EnumNode, name=name, options=list(options))


def OptionalField(name: str, inner: Node) -> OptionalNode:
    """Create a field that holds either a value of ``inner``'s shape or null."""
    return build_model(OptionalNode, name=name, inner=inner)


def ArrayField(name: str, min_length: int, max_length: int, item: Node) -> ArrayNode:
    """Create a bounded array field."""
    return build_model(
        ArrayNode, name=name, min_length=min_length, max_length=max_length, item=item
    )


def EnumArrayField(
    name: str, min_length: int, max_length: int, enum: EnumNode | Sequence[str]
) -> EnumArrayNode:
    """Create a bounded array of enumeration options.

    ``enum`` may be an EnumNode or a plain option list (named ``item``).
    """
    if not isinstance(enum, EnumNode):
        enum = EnumField("item", enum)
    return build_model(
        EnumArrayNode, name=name, min_length=min_length, max_length=max_length, enum=enum
    )


def ObjectField(name: str, fields: Sequence[Node]) -> ObjectNode:
    """Create an object field from an ordered list of uniquely named fields."""
    return build_model(ObjectNode, name=name, fields=list(fields))


def UnionField(
    name: str,
    discriminator: EnumNode,
    variants: Mapping[str, Sequence[Node]] | None = None,
) -> UnionNode:
    """Create a discriminated union.

    Discriminator options missing from ``variants`` get an empty field list.
    """
    return build_model(
        UnionNode,
        name=name,
        discriminator=discriminator,
        variants={key: list(fields) for key, fields in (variants or {}).items()},
    )


def PointerField(name: str, target_name: str) -> PointerNode:
    """Create a back-reference to the field named ``target_name``.

    The target does not need to exist yet; resolution happens when the
    schema is decoded or used to encode data.
    """
    return build_model(PointerNode, name=name, target_name=target_name)
