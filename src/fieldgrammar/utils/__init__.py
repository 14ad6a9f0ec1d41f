"""Utility functions for fieldgrammar.

This module provides encoded size calculation for data tokens.
"""

from __future__ import annotations

from .sizing import encoded_bits, encoded_size, field_sizes, token_length

__all__ = [
    "encoded_size",
    "encoded_bits",
    "field_sizes",
    "token_length",
]
