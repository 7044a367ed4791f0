"""Connection context, protocol errors and a byte reader for token streams."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class TdsError(Exception):
    """Base class for every error raised by this package."""


class ProtocolError(TdsError):
    """The data received does not follow the protocol."""


class EncodingError(TdsError):
    """Text could not be encoded or decoded with the required character set."""


class BulkInputError(TdsError):
    """Rows handed to a bulk load do not match the target columns."""


class FeatureLevel(IntEnum):
    """Protocol versions as announced by the server."""

    SQL_SERVER_V7 = 0x70000000
    SQL_SERVER_2000 = 0x71000000
    SQL_SERVER_2000_SP1 = 0x71000001
    SQL_SERVER_2005 = 0x72090002
    SQL_SERVER_2008 = 0x730A0003
    SQL_SERVER_2008_R2 = 0x730B0003
    SQL_SERVER_N = 0x74000004

    def done_row_count_bytes(self) -> int:
        """Width of the row count field in DONE tokens for this version."""
        return 8 if self >= FeatureLevel.SQL_SERVER_2005 else 4


@dataclass
class Context:
    """State shared between both ends of a connection."""

    version: FeatureLevel = FeatureLevel.SQL_SERVER_N
    packet_size: int = 4096
    transaction_descriptor: bytes = bytes(8)
    last_meta: Any = None
    spn: str = ""
    _packet_id: int = field(default=0, init=False, repr=False)

    def next_packet_id(self) -> int:
        """Return the current packet id and advance it, wrapping after 255."""
        packet_id = self._packet_id
        self._packet_id = (self._packet_id + 1) & 0xFF
        return packet_id

    def set_spn(self, host: str, port: int) -> None:
        """Set the service principal name for the given host and port."""
        self.spn = f"MSSQLSvc/{host}:{port}"


class Reader:
    """Sequential reader over a received byte buffer."""

    def __init__(self, data: bytes, context: Context | None = None) -> None:
        self._data = bytes(data)
        self._pos = 0
        self.context = context if context is not None else Context()

    @property
    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self._pos

    def read_exact(self, n: int) -> bytes:
        """Read exactly ``n`` bytes."""
        if n < 0:
            raise ValueError("cannot read a negative number of bytes")
        end = self._pos + n
        if end > len(self._data):
            raise ProtocolError(
                f"unexpected end of data: wanted {n} bytes, {self.remaining} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def _unpack(self, fmt: str) -> int:
        (value,) = struct.unpack(fmt, self.read_exact(struct.calcsize(fmt)))
        return value

    def read_u8(self) -> int:
        return self._unpack("<B")

    def read_u16_le(self) -> int:
        return self._unpack("<H")

    def read_u32_le(self) -> int:
        return self._unpack("<I")

    def read_u32_be(self) -> int:
        return self._unpack(">I")

    def read_u64_le(self) -> int:
        return self._unpack("<Q")

    def _read_utf16(self, units: int) -> str:
        raw = self.read_exact(units * 2)
        try:
            return raw.decode("utf-16-le")
        except UnicodeDecodeError as exc:
            raise EncodingError(f"invalid UTF-16 data: {exc}") from exc

    def read_b_varchar(self) -> str:
        """Read a string prefixed by a one-byte count of UTF-16 code units."""
        return self._read_utf16(self.read_u8())

    def read_us_varchar(self) -> str:
        """Read a string prefixed by a two-byte count of UTF-16 code units."""
        return self._read_utf16(self.read_u16_le())