"""Schema tokens.

This package turns whole schemas into URL-safe tokens and back, either
bit-packed against the meta-schema or as compressed JSON.
"""

from __future__ import annotations

from .bitpacked import decode_schema as decode_bitpacked
from .bitpacked import encode_schema as encode_bitpacked
from .compressed import decode_schema as decode_compressed
from .compressed import encode_schema as encode_compressed
from .compressor import (
    COMPRESSION_LEVEL,
    MAX_DECOMPRESSED_SIZE,
    LazyCompressor,
    ZstdCodec,
    get_compressor,
)
from .meta_schema import META_VERSION, build_meta_schema
from .strings import SEPARATOR, StringTable
from .transport import TokenFormat, decode_token, encode_token

__all__ = [
    # Transport
    "TokenFormat",
    "encode_token",
    "decode_token",
    # Bit-packed
    "encode_bitpacked",
    "decode_bitpacked",
    "build_meta_schema",
    "META_VERSION",
    # Compressed
    "encode_compressed",
    "decode_compressed",
    "ZstdCodec",
    "LazyCompressor",
    "get_compressor",
    "COMPRESSION_LEVEL",
    "MAX_DECOMPRESSED_SIZE",
    # String table
    "StringTable",
    "SEPARATOR",
]
