"""ORDER token: which columns a result set is sorted by."""

from __future__ import annotations

from dataclasses import dataclass, field

from .context import Reader


@dataclass
class TokenOrder:
    """Column indexes the result set is ordered by."""

    column_indexes: list[int] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: Reader) -> TokenOrder:
        """Read the token body (without the token type byte)."""
        count = reader.read_u16_le() // 2
        return cls([reader.read_u16_le() for _ in range(count)])