"""Compressed schema codec.

Serializes ``{name, fields}`` to JSON, compresses it with the shared zstd
compressor and renders the result in base64url. Tokens are larger than
bit-packed ones but have no depth bound and no meta-schema version.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..codec import base64url
from ..exceptions import ConstructionError, CorruptTokenError, DecodeError
from ..models.nodes import Node
from ..models.schema import Schema
from ..models.walk import check_pointers
from .compressor import get_compressor

logger = logging.getLogger(__name__)


async def encode_schema(name: str, fields: Sequence[Node]) -> str:
    """Encode a schema to a compressed token.

    Raises:
        ConstructionError: If top-level field names are not unique
        CompressionError: If compression fails
    """
    schema = Schema.create(name, fields)
    text = schema.model_dump_json(by_alias=True, include={"name", "fields"})

    codec = await get_compressor()
    loop = asyncio.get_running_loop()
    compressed = await loop.run_in_executor(None, codec.compress, text.encode("utf-8"))

    token = base64url.encode(compressed)
    logger.debug(
        "Compressed schema %r: %d JSON bytes -> %d token chars", name, len(text), len(token)
    )
    return token


async def decode_schema(token: str) -> Schema:
    """Decode a compressed token back to a schema.

    Raises:
        CorruptTokenError: If the token has characters outside the alphabet,
            declares a payload larger than the compressor accepts or
            decompresses to something that is not a valid schema
        CompressionError: If the bytes are not a zstd frame
        UnresolvedPointerError: If a decoded pointer has no target
    """
    try:
        compressed = base64url.decode(token)
    except DecodeError as err:
        raise CorruptTokenError(token, str(err)) from err

    codec = await get_compressor()
    declared = codec.content_size(compressed)
    if declared > codec.max_output_size:
        raise CorruptTokenError(
            token, f"frame declares {declared} bytes, limit is {codec.max_output_size}"
        )

    loop = asyncio.get_running_loop()
    text = await loop.run_in_executor(None, codec.decompress, compressed)

    try:
        schema = Schema.from_json(text)
    except ConstructionError as err:
        raise CorruptTokenError(token, f"invalid schema JSON: {err}") from err

    check_pointers(schema.fields)
    logger.debug("Decompressed schema %r with %d fields", schema.name, len(schema.fields))
    return schema
