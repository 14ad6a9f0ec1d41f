"""Bit-level packing and unpacking utilities.

Values are written most significant bit first into a single integer
accumulator and flushed to bytes on demand. The final byte is zero-padded
on the right.
"""

from __future__ import annotations


class BitPacker:
    """Packs unsigned values of arbitrary bit width into a byte buffer.

    Example:
        >>> packer = BitPacker()
        >>> packer.write_bool(True)
        >>> packer.write_uint(42, num_bits=7)
        >>> packer.to_bytes()
        b'\\xaa'
    """

    def __init__(self) -> None:
        self._value = 0
        self._length = 0

    def write_bool(self, value: bool) -> None:
        """Write a boolean as a single bit (True=1, False=0)."""
        self.write_uint(1 if value else 0, 1)

    def write_uint(self, value: int, num_bits: int) -> None:
        """Write an unsigned integer using exactly ``num_bits`` bits.

        Raises:
            ValueError: If value is negative, num_bits < 1, or value doesn't fit
        """
        if value < 0:
            raise ValueError(f"write_uint requires non-negative value, got {value}")
        if num_bits < 1:
            raise ValueError(f"num_bits must be >= 1, got {num_bits}")
        if value >> num_bits:
            raise ValueError(
                f"Value {value} requires more than {num_bits} bits (max: {(1 << num_bits) - 1})"
            )

        self._value = (self._value << num_bits) | value
        self._length += num_bits

    def bit_length(self) -> int:
        """Return the number of bits written so far."""
        return self._length

    def to_bytes(self) -> bytes:
        """Return the packed bits, zero-padded on the right to a whole byte."""
        if not self._length:
            return b""
        padding = -self._length % 8
        return (self._value << padding).to_bytes((self._length + padding) // 8, "big")


class BitUnpacker:
    """Reads unsigned values of arbitrary bit width from a byte buffer.

    Example:
        >>> unpacker = BitUnpacker(b'\\xaa')
        >>> unpacker.read_bool()
        True
        >>> unpacker.read_uint(7)
        42
    """

    def __init__(self, data: bytes) -> None:
        self._value = int.from_bytes(data, "big")
        self._length = len(data) * 8
        self._position = 0

    def read_bool(self) -> bool:
        """Read a single bit as a boolean.

        Raises:
            IndexError: If no more bits are available
        """
        return self.read_uint(1) == 1

    def read_uint(self, num_bits: int) -> int:
        """Read an unsigned integer of ``num_bits`` bits.

        Raises:
            ValueError: If num_bits < 1
            IndexError: If not enough bits are available
        """
        if num_bits < 1:
            raise ValueError(f"num_bits must be >= 1, got {num_bits}")
        if self._position + num_bits > self._length:
            raise IndexError(
                f"Not enough bits: need {num_bits}, have {self._length - self._position}"
            )

        shift = self._length - self._position - num_bits
        self._position += num_bits
        return (self._value >> shift) & ((1 << num_bits) - 1)

    def bits_remaining(self) -> int:
        """Return the number of unread bits."""
        return self._length - self._position

    def position(self) -> int:
        """Return the current read position in bits."""
        return self._position
