"""One encode/decode pair over both schema codecs.

Tokens start with a one-character marker naming the codec that produced
them, so decode_token() needs no out-of-band format information.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from ..exceptions import CorruptTokenError
from ..models.nodes import Node
from ..models.schema import Schema
from . import bitpacked, compressed


class TokenFormat(str, Enum):
    """Schema token formats, valued by their marker character."""

    BITPACKED = "b"
    COMPRESSED = "z"


async def encode_token(
    name: str, fields: Sequence[Node], fmt: TokenFormat = TokenFormat.COMPRESSED
) -> str:
    """Encode a schema to a marked token.

    Args:
        name: Schema name
        fields: Top-level fields
        fmt: Codec to use

    Returns:
        Marker character followed by the codec's token

    Example:
        ```python
        token = await encode_token("Point", [IntField("x", 0, 9)], TokenFormat.BITPACKED)
        schema = await decode_token(token)
        ```
    """
    fmt = TokenFormat(fmt)
    if fmt is TokenFormat.BITPACKED:
        return fmt.value + bitpacked.encode_schema(name, fields)
    return fmt.value + await compressed.encode_schema(name, fields)


async def decode_token(token: str) -> Schema:
    """Decode a marked token with the codec its marker names.

    Raises:
        CorruptTokenError: If the token is empty, has an unknown marker or
            is rejected by its codec
    """
    if not token:
        raise CorruptTokenError(token, "empty token")

    marker, body = token[0], token[1:]
    try:
        if marker == TokenFormat.BITPACKED.value:
            return bitpacked.decode_schema(body)
        if marker == TokenFormat.COMPRESSED.value:
            return await compressed.decode_schema(body)
    except CorruptTokenError as err:
        # Echo the token as the caller supplied it, marker included
        raise CorruptTokenError(token, err.reason) from err
    raise CorruptTokenError(token, f"unknown format marker {marker!r}")
