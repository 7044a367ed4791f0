"""SSPI token carrying an authentication blob."""

from __future__ import annotations

from dataclasses import dataclass

from .context import Reader


@dataclass
class TokenSspi:
    """Opaque security-package data exchanged during login."""

    data: bytes = b""

    @classmethod
    def decode(cls, reader: Reader) -> TokenSspi:
        """Read the two-byte length and the blob that follows."""
        length = reader.read_u16_le()
        return cls(reader.read_exact(length))

    def encode(self) -> bytes:
        """The blob itself, without any framing."""
        return bytes(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)