"""Unit tests for codec configuration."""

from __future__ import annotations

import pytest

from fieldgrammar import DEFAULT_CONFIG, CodecConfig


class TestCodecConfig:
    """Test CodecConfig validation."""

    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.max_depth == 5
        assert DEFAULT_CONFIG.int_min == -(2**31)
        assert DEFAULT_CONFIG.int_max == 2**31 - 1

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"max_depth": 0}, "max_depth"),
            ({"max_strings": 0}, "max_strings"),
            ({"max_fields": 0}, "max_fields"),
            ({"int_bits": 1}, "int_bits"),
        ],
    )
    def test_invalid(self, kwargs: dict, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            CodecConfig(**kwargs)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.max_depth = 9  # type: ignore[misc]

    def test_hashable(self) -> None:
        """Configurations are usable as cache keys."""
        assert hash(CodecConfig()) == hash(DEFAULT_CONFIG)
