"""fieldgrammar: Field Grammar Schema Codec

A Python library for describing data shapes as a field grammar (booleans,
bounded integers, fixed-point numbers, enums, optionals, bounded arrays,
objects, discriminated unions and named back-references) and for turning
those descriptions, and data that follows them, into compact URL-safe
tokens.

Key Features:
- Pydantic-based node grammar with JSON schema files
- Bounded-field bit packing for data
- Two schema token formats: bit-packed against a meta-schema, or
  zstd-compressed JSON
- Editable builder configuration and default data derivation

Quick Start:
    >>> from fieldgrammar import BoolField, IntField, Schema, encode, decode
    >>>
    >>> schema = Schema.create("Status", [IntField("id", 0, 255), BoolField("active")])
    >>> token = encode(schema, {"id": 42, "active": True})
    >>> decode(schema, token)
    {'id': 42, 'active': True}
    >>>
    >>> from fieldgrammar.tokens import encode_bitpacked, decode_bitpacked
    >>> decode_bitpacked(encode_bitpacked(schema.name, schema.fields)) == schema
    True
"""

from __future__ import annotations

from .codec import decode, decode_or_default, encode, validate, validate_field
from .config import DEFAULT_CONFIG, CodecConfig
from .defaults import default_data, default_value
from .exceptions import (
    CompressionError,
    ConstructionError,
    CorruptTokenError,
    DecodeError,
    DepthExceededError,
    EncodeError,
    FieldGrammarError,
    UnresolvedPointerError,
)
from .models import (
    ArrayField,
    BoolField,
    EnumArrayField,
    EnumField,
    FieldConfig,
    FixedField,
    IntField,
    Node,
    ObjectField,
    OptionalField,
    PointerField,
    Schema,
    UnionField,
    load_schema,
    save_schema,
    to_config,
    to_wire,
)
from .tokens import TokenFormat, decode_token, encode_token
from .utils import encoded_bits, encoded_size, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Grammar
    "Node",
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
    "Schema",
    "load_schema",
    "save_schema",
    # Builder
    "FieldConfig",
    "to_wire",
    "to_config",
    # Data codec
    "encode",
    "decode",
    "decode_or_default",
    "validate",
    "validate_field",
    "default_value",
    "default_data",
    # Schema tokens
    "TokenFormat",
    "encode_token",
    "decode_token",
    # Configuration
    "CodecConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "FieldGrammarError",
    "ConstructionError",
    "UnresolvedPointerError",
    "EncodeError",
    "DepthExceededError",
    "DecodeError",
    "CorruptTokenError",
    "CompressionError",
    # Sizing
    "encoded_size",
    "encoded_bits",
    "field_sizes",
    # Version
    "__version__",
]
