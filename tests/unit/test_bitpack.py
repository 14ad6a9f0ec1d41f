"""Unit tests for bitpacking utilities."""

from __future__ import annotations

import pytest

from fieldgrammar.codec.bitpack import BitPacker, BitUnpacker


class TestBitPacker:
    """Test BitPacker functionality."""

    def test_write_bool(self) -> None:
        """Test writing boolean values."""
        packer = BitPacker()
        packer.write_bool(True)
        packer.write_bool(False)
        packer.write_bool(True)

        assert packer.bit_length() == 3
        assert packer.to_bytes() == b"\xa0"  # 101 00000

    def test_write_uint(self) -> None:
        """Test writing unsigned integers."""
        packer = BitPacker()
        packer.write_uint(15, 4)  # 1111
        packer.write_uint(3, 2)  # 11
        packer.write_uint(0, 2)  # 00

        assert packer.bit_length() == 8
        assert packer.to_bytes() == b"\xfc"  # 11111100

    def test_write_uint_bounds(self) -> None:
        """Test uint bounds checking."""
        packer = BitPacker()

        packer.write_uint(0, 8)
        packer.write_uint(255, 8)

        with pytest.raises(ValueError, match="negative"):
            packer.write_uint(-1, 8)

        with pytest.raises(ValueError, match="more than"):
            packer.write_uint(256, 8)

        with pytest.raises(ValueError, match="num_bits"):
            packer.write_uint(0, 0)

    def test_wide_values(self) -> None:
        """Values wider than 64 bits are packed without loss."""
        packer = BitPacker()
        packer.write_uint(2**70 + 5, 71)

        unpacker = BitUnpacker(packer.to_bytes())
        assert unpacker.read_uint(71) == 2**70 + 5

    def test_empty(self) -> None:
        """An empty packer produces no bytes."""
        assert BitPacker().to_bytes() == b""


class TestBitUnpacker:
    """Test BitUnpacker functionality."""

    def test_read_bool(self) -> None:
        """Test reading boolean values."""
        unpacker = BitUnpacker(b"\xa0")

        assert unpacker.read_bool() is True
        assert unpacker.read_bool() is False
        assert unpacker.read_bool() is True
        assert unpacker.position() == 3
        assert unpacker.bits_remaining() == 5

    def test_read_uint(self) -> None:
        """Test reading unsigned integers."""
        unpacker = BitUnpacker(b"\xfc")

        assert unpacker.read_uint(4) == 15
        assert unpacker.read_uint(2) == 3
        assert unpacker.read_uint(2) == 0

    def test_read_past_end(self) -> None:
        """Reading more bits than available raises IndexError."""
        unpacker = BitUnpacker(b"\xff")
        unpacker.read_uint(6)

        with pytest.raises(IndexError, match="Not enough bits"):
            unpacker.read_uint(3)

    def test_roundtrip_across_bytes(self) -> None:
        """Values that straddle byte boundaries survive a round trip."""
        packer = BitPacker()
        packer.write_uint(5, 3)
        packer.write_uint(1000, 10)
        packer.write_bool(True)
        packer.write_uint(77, 7)

        unpacker = BitUnpacker(packer.to_bytes())
        assert unpacker.read_uint(3) == 5
        assert unpacker.read_uint(10) == 1000
        assert unpacker.read_bool() is True
        assert unpacker.read_uint(7) == 77
        assert unpacker.bits_remaining() == 3  # 21 bits padded to 24
