"""Dense data codec.

This package packs data described by a field grammar schema into compact
base64url tokens, and validates data before it is packed.
"""

from __future__ import annotations

from .decoder import decode, decode_bytes, decode_or_default
from .encoder import encode, encode_bytes
from .schema import DEFAULT_POINTER_DEPTH
from .validate import ValidationIssue, validate, validate_field

__all__ = [
    "encode",
    "encode_bytes",
    "decode",
    "decode_bytes",
    "decode_or_default",
    "validate",
    "validate_field",
    "ValidationIssue",
    "DEFAULT_POINTER_DEPTH",
]
