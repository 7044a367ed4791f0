"""LOGINACK token: the server's acceptance of a login."""

from __future__ import annotations

from dataclasses import dataclass

from .context import FeatureLevel, ProtocolError, Reader


@dataclass
class TokenLoginAck:
    """Interface, protocol version and server program of an accepted login."""

    interface: int
    tds_version: FeatureLevel
    prog_name: str
    version: int

    @classmethod
    def decode(cls, reader: Reader) -> TokenLoginAck:
        """Read the token body (without the token type byte)."""
        reader.read_u16_le()
        interface = reader.read_u8()
        raw_version = reader.read_u32_be()
        try:
            tds_version = FeatureLevel(raw_version)
        except ValueError:
            raise ProtocolError("Login ACK: Invalid TDS version") from None
        prog_name = reader.read_b_varchar()
        version = reader.read_u32_le()
        return cls(interface, tds_version, prog_name, version)