"""Field grammar models.

This package defines the node grammar, the schema container, the editable
builder configuration and the helpers that walk node trees.
"""

from __future__ import annotations

from .builder import (
    BuilderDefaults,
    FieldConfig,
    clone_config,
    clone_node,
    new_field_config,
    same_shape,
    to_config,
    to_wire,
    with_defaults,
)
from .fields import (
    ArrayField,
    BoolField,
    EnumArrayField,
    EnumField,
    FixedField,
    IntField,
    ObjectField,
    OptionalField,
    PointerField,
    UnionField,
)
from .nodes import (
    LEAF_KINDS,
    NODE_KINDS,
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
from .schema import Schema, load_schema, save_schema
from .walk import check_pointers, children, iter_nodes, pointer_targets, tree_depth

__all__ = [
    # Nodes
    "Node",
    "NODE_KINDS",
    "LEAF_KINDS",
    "BoolNode",
    "IntNode",
    "FixedNode",
    "EnumNode",
    "OptionalNode",
    "ArrayNode",
    "EnumArrayNode",
    "ObjectNode",
    "UnionNode",
    "PointerNode",
    # Constructors
    "BoolField",
    "IntField",
    "FixedField",
    "EnumField",
    "OptionalField",
    "ArrayField",
    "EnumArrayField",
    "ObjectField",
    "UnionField",
    "PointerField",
    # Schema
    "Schema",
    "load_schema",
    "save_schema",
    # Builder
    "FieldConfig",
    "BuilderDefaults",
    "with_defaults",
    "new_field_config",
    "to_wire",
    "to_config",
    "clone_node",
    "clone_config",
    "same_shape",
    # Walking
    "children",
    "iter_nodes",
    "tree_depth",
    "pointer_targets",
    "check_pointers",
]
