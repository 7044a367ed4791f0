"""The PRELOGIN message exchanged before login."""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from .context import ProtocolError

DRIVER_VERSION = (0 << 24) | (12 << 16) | 3

PRELOGIN_VERSION = 0
PRELOGIN_ENCRYPTION = 1
PRELOGIN_INSTOPT = 2
PRELOGIN_THREADID = 3
PRELOGIN_MARS = 4
PRELOGIN_TRACEID = 5
PRELOGIN_FEDAUTHREQUIRED = 6
PRELOGIN_NONCEOPT = 7
PRELOGIN_TERMINATOR = 0xFF


class EncryptionLevel(IntEnum):
    """Encryption choices negotiated in the PRELOGIN exchange."""

    OFF = 0
    ON = 1
    NOT_SUPPORTED = 2
    REQUIRED = 3


@dataclass(frozen=True)
class ActivityId:
    """Client activity id used for tracing."""

    id: uuid.UUID
    sequence: int


def _take(data: bytes, pos: int, n: int) -> bytes:
    if pos + n > len(data):
        raise ProtocolError("prelogin: unexpected end of data")
    return data[pos:pos + n]


@dataclass
class PreloginMessage:
    """Options sent by either side at the start of a connection."""

    version: int = DRIVER_VERSION & 0xFFFFFFFF
    sub_build: int = (DRIVER_VERSION >> 32) & 0xFFFF
    encryption: EncryptionLevel = EncryptionLevel.NOT_SUPPORTED
    instance_name: Optional[str] = None
    thread_id: int = 0
    mars: bool = False
    activity_id: Optional[ActivityId] = None
    fed_auth_required: bool = False
    nonce: Optional[bytes] = field(default=None)

    def negotiated_encryption(self, expected: EncryptionLevel) -> EncryptionLevel:
        """The encryption level to use given what the client asked for."""
        server = self.encryption
        if expected is EncryptionLevel.NOT_SUPPORTED and server is EncryptionLevel.NOT_SUPPORTED:
            return EncryptionLevel.NOT_SUPPORTED
        if expected is EncryptionLevel.OFF and server is EncryptionLevel.OFF:
            return EncryptionLevel.OFF
        if expected is EncryptionLevel.ON and server in (
            EncryptionLevel.OFF,
            EncryptionLevel.NOT_SUPPORTED,
        ):
            raise ProtocolError("Server does not allow the requested encryption level.")
        return EncryptionLevel.ON

    def encode(self) -> bytes:
        """Option table followed by the option data."""
        options = [
            (PRELOGIN_VERSION, struct.pack(">IH", self.version, self.sub_build)),
            (PRELOGIN_ENCRYPTION, bytes([self.encryption])),
            (PRELOGIN_THREADID, struct.pack(">I", self.thread_id)),
            (PRELOGIN_MARS, bytes([int(self.mars)])),
        ]
        if self.fed_auth_required:
            options.append((PRELOGIN_FEDAUTHREQUIRED, b"\x01"))

        offset = len(options) * 5 + 1
        table = bytearray()
        for token, payload in options:
            table += struct.pack(">BHH", token, offset, len(payload))
            offset += len(payload)
        table.append(PRELOGIN_TERMINATOR)
        return bytes(table) + b"".join(payload for _, payload in options)

    @classmethod
    def decode(cls, data: bytes) -> PreloginMessage:
        """Parse a PRELOGIN payload."""
        data = bytes(data)
        message = cls()
        pos = 0
        while True:
            token = _take(data, pos, 1)[0]
            if token == PRELOGIN_TERMINATOR:
                break
            offset, length = struct.unpack(">HH", _take(data, pos + 1, 4))
            pos += 5
            message._apply(token, data, offset, length)
        return message

    def _apply(self, token: int, data: bytes, offset: int, length: int) -> None:
        if token == PRELOGIN_VERSION:
            self.version, self.sub_build = struct.unpack(">IH", _take(data, offset, 6))
        elif token == PRELOGIN_ENCRYPTION:
            raw = _take(data, offset, 1)[0]
            try:
                self.encryption = EncryptionLevel(raw)
            except ValueError:
                raise ProtocolError(f"invalid encryption value: {raw}") from None
        elif token == PRELOGIN_INSTOPT:
            end = data.find(b"\x00", offset)
            if end < 0:
                raise ProtocolError("prelogin: unterminated instance name")
            name = data[offset:end]
            if name:
                self.instance_name = name.decode("utf-8", errors="replace")
        elif token == PRELOGIN_THREADID:
            if length == 0:
                self.thread_id = 0
            elif length == 4:
                (self.thread_id,) = struct.unpack(">I", _take(data, offset, 4))
            else:
                raise ProtocolError(f"prelogin: invalid thread id length {length}")
        elif token == PRELOGIN_MARS:
            self.mars = _take(data, offset, 1)[0] != 0
        elif token == PRELOGIN_TRACEID:
            guid = _take(data, offset, 16)
            (sequence,) = struct.unpack("<I", _take(data, offset + 16, 4))
            self.activity_id = ActivityId(uuid.UUID(bytes_le=guid), sequence)
        elif token == PRELOGIN_FEDAUTHREQUIRED:
            self.fed_auth_required = _take(data, offset, 1)[0] != 0
        elif token == PRELOGIN_NONCEOPT:
            self.nonce = _take(data, offset, 32)
        else:
            raise ProtocolError(f"unsupported prelogin token: {token}")