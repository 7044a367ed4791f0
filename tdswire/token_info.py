"""INFO token: an informational message from the server."""

from __future__ import annotations

from dataclasses import dataclass

from .context import Reader


@dataclass
class TokenInfo:
    """A server message with severity below the error threshold."""

    number: int
    state: int
    class_: int
    message: str
    server: str
    procedure: str
    line: int

    @classmethod
    def decode(cls, reader: Reader) -> TokenInfo:
        """Read the token body (without the token type byte)."""
        reader.read_u16_le()
        number = reader.read_u32_le()
        state = reader.read_u8()
        class_ = reader.read_u8()
        message = reader.read_us_varchar()
        server = reader.read_b_varchar()
        procedure = reader.read_b_varchar()
        line = reader.read_u32_le()
        return cls(number, state, class_, message, server, procedure, line)