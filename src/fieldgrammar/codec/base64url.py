"""URL-safe base64 without padding, via a bit accumulator.

Every token this package produces is drawn from the 64 symbols
``A-Z a-z 0-9 - _``. No ``=`` padding is written or accepted.
"""

from __future__ import annotations

from ..exceptions import DecodeError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"

_SYMBOL_VALUES = {symbol: value for value, symbol in enumerate(ALPHABET)}


def encode(data: bytes) -> str:
    """Encode bytes as an unpadded base64url string.

    Bytes enter the accumulator eight bits at a time; a symbol is emitted for
    every complete group of six. Leftover bits are zero-filled on the right
    into one last symbol.
    """
    symbols = []
    bits = 0
    bit_count = 0

    for byte in data:
        bits = (bits << 8) | byte
        bit_count += 8
        while bit_count >= 6:
            bit_count -= 6
            symbols.append(ALPHABET[(bits >> bit_count) & 0x3F])
        bits &= (1 << bit_count) - 1

    if bit_count > 0:
        symbols.append(ALPHABET[(bits << (6 - bit_count)) & 0x3F])

    return "".join(symbols)


def decode(text: str) -> bytes:
    """Decode an unpadded base64url string.

    Trailing bits that do not complete a byte are discarded.

    Raises:
        DecodeError: If the text contains a character outside the alphabet
    """
    result = bytearray()
    bits = 0
    bit_count = 0

    for position, symbol in enumerate(text):
        value = _SYMBOL_VALUES.get(symbol)
        if value is None:
            raise DecodeError(f"Invalid base64url character {symbol!r} at position {position}")
        bits = (bits << 6) | value
        bit_count += 6
        if bit_count >= 8:
            bit_count -= 8
            result.append((bits >> bit_count) & 0xFF)
            bits &= (1 << bit_count) - 1

    return bytes(result)


def is_token(text: str) -> bool:
    """Return True if every character of ``text`` is in the alphabet."""
    return all(symbol in _SYMBOL_VALUES for symbol in text)
