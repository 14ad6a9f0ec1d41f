"""String interning table for schema tokens.

Names and option labels go on the wire as indices into a table built fresh
for every encode. The table itself travels as the UTF-8 bytes of its
entries joined with SEPARATOR.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from ..exceptions import EncodeError

SEPARATOR = "|"


class StringTable:
    """An ordered, deduplicated list of strings.

    Insertion order fixes the index; interning a string that is already
    present returns its first index.

    Example:
        >>> table = StringTable()
        >>> table.intern("Device"), table.intern("id"), table.intern("Device")
        (0, 1, 0)
        >>> table.encode()
        b'Device|id'
    """

    def __init__(self, strings: Iterable[str] = ()) -> None:
        self._strings: list[str] = []
        self._indices: dict[str, int] = {}
        for value in strings:
            self._strings.append(value)
            self._indices.setdefault(value, len(self._strings) - 1)

    def intern(self, value: str) -> int:
        """Return the index of ``value``, appending it if it is new."""
        index = self._indices.get(value)
        if index is None:
            index = len(self._strings)
            self._strings.append(value)
            self._indices[value] = index
        return index

    def lookup(self, index: int) -> str:
        """Return the string at ``index``.

        Raises:
            IndexError: If index is outside the table
        """
        if not 0 <= index < len(self._strings):
            raise IndexError(f"String index {index} out of range (table has {len(self)} entries)")
        return self._strings[index]

    def encode(self) -> bytes:
        """Join the table into bytes.

        Raises:
            EncodeError: If an entry contains the separator
        """
        for value in self._strings:
            if SEPARATOR in value:
                raise EncodeError(
                    f"Name {value!r} contains the reserved separator {SEPARATOR!r}"
                )
        return SEPARATOR.join(self._strings).encode("utf-8")

    @classmethod
    def decode(cls, data: bytes) -> StringTable:
        """Rebuild a table from bytes produced by encode().

        Raises:
            UnicodeDecodeError: If data is not valid UTF-8
        """
        return cls(data.decode("utf-8").split(SEPARATOR))

    def __len__(self) -> int:
        return len(self._strings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def __contains__(self, value: object) -> bool:
        return value in self._indices

    def as_list(self) -> list[str]:
        return list(self._strings)
