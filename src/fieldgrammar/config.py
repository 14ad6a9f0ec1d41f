"""Configuration for the bit-packed schema codec.

The values here fix the shape of the meta-schema. Encoder and decoder must
agree on them: a token produced under one configuration is not readable
under another.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CodecConfig:
    """Bounds of the meta-schema used by the bit-packed schema codec.

    Attributes:
        max_depth: Deepest node tree the meta-schema can carry (default 5).
            A leaf field is depth 1; every container adds one level.

        max_strings: Number of distinct names/options in one string table
            (default 4096, i.e. 12-bit indices).

        max_table_bytes: Size limit of the joined UTF-8 string table
            (default 65535 bytes).

        max_fields: Most fields per object, union variant or schema (default 255).

        max_options: Most options per enum or union discriminator (default 255).

        max_array_length: Largest minLength/maxLength an array node may declare
            (default 65535).

        int_bits: Width of the signed range available to Int bounds
            (default 32, i.e. -2**31 .. 2**31-1).

        max_decimal_scale: Most decimal places a Fixed attribute may carry (default 15).

        decimal_bits: Width of the signed mantissa of a Fixed attribute (default 53).

    Examples:
        ```python
        from fieldgrammar.config import CodecConfig
        from fieldgrammar.tokens import bitpacked

        deep = CodecConfig(max_depth=8)
        token = bitpacked.encode_schema("Tree", fields, config=deep)
        schema = bitpacked.decode_schema(token, config=deep)
        ```
    """

    max_depth: int = 5
    max_strings: int = 4096
    max_table_bytes: int = 65535
    max_fields: int = 255
    max_options: int = 255
    max_array_length: int = 65535
    int_bits: int = 32
    max_decimal_scale: int = 15
    decimal_bits: int = 53

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

        if self.max_strings < 1:
            raise ValueError(f"max_strings must be >= 1, got {self.max_strings}")

        if self.max_table_bytes < 1:
            raise ValueError(f"max_table_bytes must be >= 1, got {self.max_table_bytes}")

        for name in ("max_fields", "max_options", "max_array_length"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")

        if not 2 <= self.int_bits <= 64:
            raise ValueError(f"int_bits must be 2-64, got {self.int_bits}")

        if not 0 <= self.max_decimal_scale <= 30:
            raise ValueError(f"max_decimal_scale must be 0-30, got {self.max_decimal_scale}")

        if not 2 <= self.decimal_bits <= 64:
            raise ValueError(f"decimal_bits must be 2-64, got {self.decimal_bits}")

    @property
    def int_min(self) -> int:
        return -(1 << (self.int_bits - 1))

    @property
    def int_max(self) -> int:
        return (1 << (self.int_bits - 1)) - 1


DEFAULT_CONFIG = CodecConfig()
