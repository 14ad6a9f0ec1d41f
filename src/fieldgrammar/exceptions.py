"""Exception hierarchy for fieldgrammar.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from FieldGrammarError for easy catching of any
fieldgrammar-specific error.
"""

from __future__ import annotations

# Longest token prefix echoed back in CorruptTokenError messages
_TOKEN_ECHO_LIMIT = 80


class FieldGrammarError(Exception):
    """Base exception for all fieldgrammar errors."""

    pass


class ConstructionError(FieldGrammarError):
    """Raised when a node or schema is built with invalid attributes.

    Examples:
        - Int or Fixed bounds with min > max
        - Fixed precision <= 0
        - Empty or duplicated enum options
        - Duplicate field names inside one object
    """

    pass


class UnresolvedPointerError(FieldGrammarError):
    """Raised when a Pointer's target name does not resolve within its schema."""

    def __init__(self, target_name: str, message: str | None = None) -> None:
        self.target_name = target_name
        super().__init__(message or f"Pointer target '{target_name}' does not resolve in schema")


class EncodeError(FieldGrammarError):
    """Raised when encoding data or a schema fails.

    Examples:
        - Value out of bounds for a bounded field
        - Unknown enum option
        - Missing object or union member
        - Name containing the string table separator
    """

    pass


class DepthExceededError(EncodeError):
    """Raised when a node tree is deeper than the bit-packed codec supports."""

    def __init__(self, field_name: str, depth: int, max_depth: int) -> None:
        self.field_name = field_name
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Field {field_name}: nesting depth {depth} exceeds the configured "
            f"maximum depth of {max_depth}"
        )


class DecodeError(FieldGrammarError):
    """Raised when decoding a token fails.

    Examples:
        - Truncated data (insufficient bits)
        - Invalid field value (out of bounds, unknown enum ordinal)
        - Characters outside the base64url alphabet
    """

    pass


class CorruptTokenError(DecodeError):
    """Raised when a schema token cannot be turned back into a schema.

    The offending token is kept on the exception and echoed in the message.
    """

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        self.reason = reason
        shown = token if len(token) <= _TOKEN_ECHO_LIMIT else token[:_TOKEN_ECHO_LIMIT] + "..."
        super().__init__(f"Corrupt schema token ({reason}): {shown!r}")


class CompressionError(FieldGrammarError):
    """Raised when the compressor fails to compress or decompress."""

    pass
